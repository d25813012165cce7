import pytest

from scmkit.webhook import ConfigWebhookURLLoader, load_mapping_from_file

REPO = "https://github.com/org/repo"


@pytest.mark.parametrize(
    ("mapping", "expected"),
    [
        ({}, ""),
        (
            {
                "https://github.com/org/repo": "chosenTarget",
                "https://github.com/org/": "otherTarget1",
                "https://github.com/": "otherTarget2",
                "https://gitlab.com/": "otherTarget3",
            },
            "chosenTarget",
        ),
        (
            {
                "https://github.com/org/": "chosenTarget",
                "https://github.com/": "otherTarget1",
                "https://gitlab.com/": "otherTarget2",
            },
            "chosenTarget",
        ),
        ({"": "chosenTarget", "https://gitlab.com/": "otherTarget2"}, "chosenTarget"),
    ],
    ids=["no-match", "exact-match", "longest-prefix", "empty-default"],
)
def test_load(mapping, expected):
    assert ConfigWebhookURLLoader(mapping).load(REPO) == expected


def test_load_mapping_empty_object():
    assert load_mapping_from_file("file", lambda name: b"{}") == {}


def test_load_mapping_non_empty():
    content = b"""
        {
            "a": "1",
            "b": "2"
        }
    """
    assert load_mapping_from_file("file", lambda name: content) == {"a": "1", "b": "2"}


def test_load_mapping_empty_path_skips_reader():
    calls = []

    def reader(name):
        calls.append(name)
        return b""

    assert load_mapping_from_file("", reader) == {}
    assert calls == []


def test_load_mapping_broken_json():
    with pytest.raises(ValueError):
        load_mapping_from_file("file", lambda name: b"abc")


def test_load_mapping_reader_error_propagates():
    def reader(name):
        raise OSError("Random Error")

    with pytest.raises(OSError, match="Random Error"):
        load_mapping_from_file("file", reader)


def test_load_mapping_from_real_file(tmp_path):
    config = tmp_path / "webhooks.json"
    config.write_text('{"https://github.com/": "target"}')
    mapping = load_mapping_from_file(str(config))
    assert ConfigWebhookURLLoader(mapping).load(REPO) == "target"