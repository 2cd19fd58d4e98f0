"""Sorted-set intersection with a merge or galloping strategy."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from graphmine.galloping import galloping_intersection, galloping_intersection_count

# Size ratio beyond which galloping beats a linear merge.
CANDIDATE_SKEW = 50
COUNT_SKEW = 32


def _merge_matches(left: Sequence[int], right: Sequence[int]) -> Iterator[int]:
    if not left or not right:
        return
    if len(left) > len(right):
        left, right = right, left
    li = ri = 0
    lc, rc = len(left), len(right)
    while li < lc and ri < rc:
        a, b = left[li], right[ri]
        if a < b:
            li += 1
        elif a > b:
            ri += 1
        else:
            yield a
            li += 1
            ri += 1


def merge_intersection(left: Sequence[int], right: Sequence[int]) -> list[int]:
    """Common elements of two sorted sequences, found by a linear merge."""
    return list(_merge_matches(left, right))


def merge_intersection_count(left: Sequence[int], right: Sequence[int]) -> int:
    """Number of common elements of two sorted sequences, by a linear merge."""
    return sum(1 for _ in _merge_matches(left, right))


def _is_skewed(left: Sequence[int], right: Sequence[int], ratio: int) -> bool:
    lc, rc = len(left), len(right)
    return lc // ratio > rc or rc // ratio > lc


class SetIntersection:
    """Intersects sorted neighbour lists, optionally choosing the method by size.

    With ``hybrid`` set, strongly unbalanced inputs use galloping search and
    the others a linear merge; the counters record how often each was used
    for candidate computation. Without it, a merge is always used.
    """

    def __init__(self, hybrid: bool = False) -> None:
        self.hybrid = hybrid
        self.galloping_count = 0
        self.merge_count = 0

    def compute_candidates(self, left: Sequence[int], right: Sequence[int]) -> list[int]:
        """The common elements of ``left`` and ``right``."""
        if self.hybrid:
            if _is_skewed(left, right, CANDIDATE_SKEW):
                self.galloping_count += 1
                return galloping_intersection(left, right)
            self.merge_count += 1
        return merge_intersection(left, right)

    def get_num(self, left: Sequence[int], right: Sequence[int]) -> int:
        """The number of common elements of ``left`` and ``right``."""
        if self.hybrid and _is_skewed(left, right, COUNT_SKEW):
            return galloping_intersection_count(left, right)
        return merge_intersection_count(left, right)