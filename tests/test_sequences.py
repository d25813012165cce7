from scmkit.sequences import common_prefix_length, filter_items


def test_filter_keeps_matching_in_order():
    result = filter_items([5, 1, 4, 2, 3], lambda n: n > 2)
    assert result == [5, 4, 3]
    assert all(n > 2 for n in result)


def test_filter_nothing_matches():
    assert filter_items(["a", "b"], lambda s: s == "z") == []


def test_filter_accepts_generator():
    assert filter_items((s for s in ["x", "", "y"]), bool) == ["x", "y"]


def test_common_prefix_documented_examples():
    assert common_prefix_length(["a", "b", "c"], ["a", "b", "d"]) == 2
    assert common_prefix_length(["a", "b", "c"], ["b", "a", "c"]) == 0


def test_common_prefix_bounded_by_shorter():
    first = ["a", "b", "c"]
    assert common_prefix_length(first, first) == len(first)
    assert common_prefix_length(first, first[:1]) == 1
    assert common_prefix_length([], first) == 0