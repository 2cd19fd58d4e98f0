"""Vertex-label statistics and label-filtered set operations on a graph."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator, Sequence
from typing import NamedTuple, Union

from graphmine.graph import Graph
from graphmine.vertex_set import VertexSet

Source = Union[int, VertexSet, Sequence[int]]


class ReverseIndex(NamedTuple):
    """Vertices grouped by label.

    The vertices with label ``l`` are ``index[offsets[l]:offsets[l + 1]]``.
    """

    index: list[int]
    offsets: list[int]


def _vlabels(graph: Graph) -> list[int]:
    if graph.vlabels is None:
        raise ValueError("graph has no vertex labels")
    return graph.vlabels


def _source_items(graph: Graph, source: Source) -> Sequence[int]:
    if isinstance(source, int):
        return graph.neighbors(source)
    return source


def _source_vid(source: Source) -> int:
    if isinstance(source, int):
        return source
    return getattr(source, "vid", -1)


def labels_frequency(graph: Graph) -> list[int]:
    """Count of vertices per label, indexed ``0..num_vertex_classes``.

    Also records the largest count as ``graph.max_label_frequency``.
    """
    labels = _vlabels(graph)
    classes = graph.num_vertex_classes
    frequency = [0] * (classes + 1)
    for v, label in enumerate(labels):
        if not 0 <= label <= classes:
            raise ValueError(f"vertex {v} has label {label} beyond {classes} classes")
        frequency[label] += 1
    graph.max_label_frequency = max(frequency)
    return frequency


def build_reverse_index(graph: Graph) -> ReverseIndex:
    """Group the vertices of ``graph`` by label, keeping id order within a label."""
    labels = _vlabels(graph)
    frequency = labels_frequency(graph)
    classes = graph.num_vertex_classes
    max_label = max(labels, default=0)
    num_labels = classes + 1 if max_label == classes else classes
    offsets = [0]
    for label in range(num_labels):
        offsets.append(offsets[-1] + frequency[label])
    start = offsets[:-1]
    index = [0] * graph.num_vertices
    for v, label in enumerate(labels):
        if label >= num_labels:
            raise ValueError(f"vertex {v} has label {label} outside the index")
        index[start[label]] = v
        start[label] += 1
    return ReverseIndex(index, offsets)


def build_nlf(graph: Graph) -> list[dict[int, int]]:
    """Neighbourhood label frequency: for each vertex, neighbour count per label."""
    labels = _vlabels(graph)
    return [
        dict(Counter(labels[u] for u in graph.neighbors(v)))
        for v in range(graph.num_vertices)
    ]


def frequent_label_count(frequency: Sequence[int], threshold: int) -> int:
    """Number of labels that occur more than ``threshold`` times."""
    if threshold <= 0:
        raise ValueError("threshold must be positive")
    return sum(1 for count in frequency if count > threshold)


def is_freq_vertex(graph: Graph, frequency: Sequence[int], v: int, threshold: int) -> bool:
    """Whether the label of ``v`` occurs at least ``threshold`` times."""
    if threshold <= 0:
        raise ValueError("threshold must be positive")
    if not 0 <= v < graph.num_vertices:
        raise IndexError(f"vertex {v} out of range")
    label = _vlabels(graph)[v]
    if label > graph.num_vertex_classes:
        raise ValueError(f"vertex {v} has label {label} beyond the classes")
    return frequency[label] >= threshold


def _intersect_labeled(graph: Graph, source: Source, u: int, label: int) -> Iterator[int]:
    labels = _vlabels(graph)
    left = _source_items(graph, source)
    right = graph.neighbors(u)
    il = ir = 0
    while il < len(left) and ir < len(right):
        a, b = left[il], right[ir]
        if a <= b:
            il += 1
        if b <= a:
            ir += 1
        if a == b and labels[a] == label:
            yield a


def _difference_labeled(graph: Graph, source: Source, u: int, label: int) -> Iterator[int]:
    labels = _vlabels(graph)
    left = _source_items(graph, source)
    right = graph.neighbors(u)
    il = ir = 0
    while il < len(left) and ir < len(right):
        a, b = left[il], right[ir]
        if a <= b:
            il += 1
        if b <= a:
            ir += 1
        if a < b and a != u and labels[a] == label:
            yield a
    for a in left[il:]:
        if a != u and labels[a] == label:
            yield a


def _edgeinduced_labeled(graph: Graph, source: Source, u: int, label: int) -> Iterator[int]:
    labels = _vlabels(graph)
    for w in _source_items(graph, source):
        if w != u and labels[w] == label:
            yield w


def intersect_num_labeled(graph: Graph, source: Source, u: int, label: int) -> int:
    """Common neighbours of ``source`` and ``u`` that carry ``label``.

    ``source`` is a vertex (meaning its neighbours) or a sorted vertex set.
    """
    return sum(1 for _ in _intersect_labeled(graph, source, u, label))


def intersect_set_labeled(graph: Graph, source: Source, u: int, label: int) -> VertexSet:
    """The set counted by ``intersect_num_labeled``."""
    return VertexSet(_intersect_labeled(graph, source, u, label), _source_vid(source))


def difference_num_labeled(graph: Graph, source: Source, u: int, label: int) -> int:
    """Elements of ``source`` with ``label`` that are neither ``u`` nor its neighbours."""
    return sum(1 for _ in _difference_labeled(graph, source, u, label))


def difference_set_labeled(graph: Graph, source: Source, u: int, label: int) -> VertexSet:
    """The set counted by ``difference_num_labeled``."""
    return VertexSet(_difference_labeled(graph, source, u, label), _source_vid(source))


def difference_num_edgeinduced(graph: Graph, source: Source, u: int, label: int) -> int:
    """Elements of ``source`` other than ``u`` that carry ``label``."""
    return sum(1 for _ in _edgeinduced_labeled(graph, source, u, label))


def difference_set_edgeinduced(graph: Graph, source: Source, u: int, label: int) -> VertexSet:
    """The set counted by ``difference_num_edgeinduced``."""
    return VertexSet(_edgeinduced_labeled(graph, source, u, label), _source_vid(source))