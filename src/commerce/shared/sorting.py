"""Deterministic, comparator-driven sorting.

A top-down merge sort: O(n log n) comparisons, O(n) scratch space, stable.
The comparator follows the ``cmp(a, b) -> int`` convention (negative when
``a`` ranks first, zero when equal, positive otherwise), so callers decide
the ordering and the sorter never looks at fields itself.
"""

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

T = TypeVar("T")

Comparator = Callable[[T, T], int]


def merge_sort(items: Iterable[T] | None, compare: Comparator) -> list[T]:
    """Return a new, sorted list. ``None`` or empty input gives ``[]``."""
    if items is None:
        return []
    result = list(items)
    if len(result) < 2:
        return result
    scratch = result[:]
    _sort(result, scratch, 0, len(result), compare)
    return result


def _sort(items, scratch, lo, hi, compare):
    if hi - lo < 2:
        return
    mid = (lo + hi) // 2
    _sort(items, scratch, lo, mid, compare)
    _sort(items, scratch, mid, hi, compare)
    _merge(items, scratch, lo, mid, hi, compare)


def _merge(items, scratch, lo, mid, hi, compare):
    scratch[lo:hi] = items[lo:hi]
    left, right = lo, mid
    for k in range(lo, hi):
        if left >= mid:
            items[k] = scratch[right]
            right += 1
        elif right >= hi:
            items[k] = scratch[left]
            left += 1
        # Ties take the left run so equal elements keep their input order
        elif compare(scratch[left], scratch[right]) <= 0:
            items[k] = scratch[left]
            left += 1
        else:
            items[k] = scratch[right]
            right += 1


def by_key(key: Callable[[T], Any], descending: bool = False) -> Comparator:
    """Build a comparator from a key function.

    ``None`` keys rank after every other value in both directions.
    """

    def compare(a, b):
        ka, kb = key(a), key(b)
        if ka is None or kb is None:
            return (ka is None) - (kb is None)
        if ka == kb:
            return 0
        outcome = -1 if ka < kb else 1
        return -outcome if descending else outcome

    return compare

