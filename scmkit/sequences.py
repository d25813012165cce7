"""Small helpers over sequences."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")


def filter_items(items: Iterable[T], predicate: Callable[[T], bool]) -> list[T]:
    """Return the items that satisfy ``predicate``, in order."""
    return [item for item in items if predicate(item)]


def common_prefix_length(first: Sequence[str], second: Sequence[str]) -> int:
    """Count how many leading elements the two sequences share position by position."""
    count = 0
    for a, b in zip(first, second):
        if a != b:
            break
        count += 1
    return count