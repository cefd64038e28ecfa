"""Natural ordering for alphanumeric chapter numbers (1, 1a, 1b, 2, 10)."""

import functools
import re
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

T = TypeVar("T")

# Maximal all-digit or all-non-digit runs
_RUN_PATTERN = re.compile(r"\d+|\D+")


def chunkify(label: str) -> list[int | str]:
    """Split a chapter label into runs.

    Args:
        label: Chapter number, e.g. "12b".

    Returns:
        Digit runs as ints and other runs lower-cased, e.g. [12, "b"].
    """
    return [
        int(run) if run[0].isdecimal() else run.lower() for run in _RUN_PATTERN.findall(label)
    ]


def _label(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, Mapping):
        value = item.get("chapter_number")
    else:
        value = getattr(item, "chapter_number", None)
    return "" if value is None else str(value)


def compare_chapters(a: Any, b: Any) -> int:
    """Three-way comparison of two chapter numbers.

    Accepts strings, or records exposing chapter_number as an attribute or
    mapping key. Numeric runs sort before text runs at the same position.

    Returns:
        Negative if a sorts first, positive if b does, 0 if equal.
    """
    runs_a = chunkify(_label(a))
    runs_b = chunkify(_label(b))

    for part_a, part_b in zip(runs_a, runs_b):
        a_is_num = isinstance(part_a, int)
        b_is_num = isinstance(part_b, int)
        if a_is_num != b_is_num:
            return -1 if a_is_num else 1
        if part_a != part_b:
            return -1 if part_a < part_b else 1  # type: ignore[operator]

    # Equal so far: the label with fewer runs sorts first
    return (len(runs_a) > len(runs_b)) - (len(runs_a) < len(runs_b))


chapter_sort_key = functools.cmp_to_key(compare_chapters)


def sort_chapters(items: Iterable[T]) -> list[T]:
    """Return items in natural chapter order (stable)."""
    return sorted(items, key=chapter_sort_key)
