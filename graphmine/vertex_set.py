"""Sorted vertex sets with merge-based difference and intersection."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class VertexSet:
    """A sorted list of vertex ids belonging to vertex ``vid``.

    ``vid`` is the vertex the set was taken from (for a neighbour list, the
    vertex itself); differences against this set also drop ``vid``.
    """

    def __init__(self, items: Iterable[int] = (), vid: int = -1) -> None:
        self._items = list(items)
        self.vid = vid

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[int]:
        return iter(self._items)

    def __getitem__(self, index):
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, VertexSet):
            return self._items == other._items and self.vid == other.vid
        return NotImplemented

    def __repr__(self) -> str:
        return f"VertexSet({self._items!r}, vid={self.vid})"

    def add(self, item: int) -> None:
        """Append ``item``; callers keep the set sorted."""
        self._items.append(item)

    def _difference_items(self, other: VertexSet, upper: int | None) -> Iterator[int]:
        left_items, right_items = self._items, other._items
        il = ir = 0
        while il < len(left_items) and ir < len(right_items):
            left = left_items[il]
            right = right_items[ir]
            if upper is not None and (left >= upper or right >= upper):
                break
            if left <= right:
                il += 1
            if right <= left:
                ir += 1
            if left < right and left != other.vid:
                yield left
        for left in left_items[il:]:
            if upper is not None and left >= upper:
                break
            if left != other.vid:
                yield left

    def difference(self, other: VertexSet, upper: int | None = None) -> VertexSet:
        """Elements of this set not in ``other`` and not equal to ``other.vid``.

        With ``upper``, only elements below ``upper`` are kept.
        """
        return VertexSet(self._difference_items(other, upper), self.vid)

    def difference_count(self, other: VertexSet, upper: int | None = None) -> int:
        """Size of ``difference(other, upper)`` without building it."""
        return sum(1 for _ in self._difference_items(other, upper))

    def intersect_count(self, other: VertexSet) -> int:
        """Number of elements common to both sorted sets."""
        a, b = self._items, other._items
        ia = ib = count = 0
        while ia < len(a) and ib < len(b):
            x, y = a[ia], b[ib]
            if x <= y:
                ia += 1
            if y <= x:
                ib += 1
            if x == y:
                count += 1
        return count