"""Galloping (exponential) search and galloping set intersection."""

from __future__ import annotations

from collections.abc import Sequence

_LINEAR_THRESHOLD = 16


def binary_search(array: Sequence[int], begin: int, end: int, target: int) -> int:
    """Index in ``[begin, end)`` of the first element ``>= target``, or ``end``.

    A matching element found while halving is returned directly.
    """
    while end - begin >= _LINEAR_THRESHOLD:
        mid = (begin + end) // 2
        value = array[mid]
        if value == target:
            return mid
        if value < target:
            begin = mid + 1
        else:
            end = mid
    for offset in range(begin, end):
        if array[offset] >= target:
            return offset
    return end


def galloping_search(array: Sequence[int], begin: int, end: int, target: int) -> int:
    """Like ``binary_search`` but probes at doubling distances from ``begin``."""
    if begin >= end or array[end - 1] < target:
        return end
    for offset in range(begin, min(begin + 3, end)):
        if array[offset] >= target:
            return offset
    jump = 4
    while True:
        peek = begin + jump
        if peek >= end:
            return binary_search(array, (jump >> 1) + begin + 1, end, target)
        if array[peek] < target:
            jump <<= 1
        else:
            if array[peek] == target:
                return peek
            return binary_search(array, (jump >> 1) + begin + 1, peek + 1, target)


def _galloping_matches(left: Sequence[int], right: Sequence[int]):
    if not left or not right:
        return
    if len(left) > len(right):
        left, right = right, left
    li = ri = 0
    lc, rc = len(left), len(right)
    while True:
        while left[li] < right[ri]:
            li += 1
            if li >= lc:
                return
        ri = galloping_search(right, ri, rc, left[li])
        if ri >= rc:
            return
        if left[li] == right[ri]:
            yield left[li]
            li += 1
            ri += 1
            if li >= lc or ri >= rc:
                return


def galloping_intersection(left: Sequence[int], right: Sequence[int]) -> list[int]:
    """Common elements of two sorted sequences, searching the longer one."""
    return list(_galloping_matches(left, right))


def galloping_intersection_count(left: Sequence[int], right: Sequence[int]) -> int:
    """Number of common elements of two sorted sequences."""
    return sum(1 for _ in _galloping_matches(left, right))