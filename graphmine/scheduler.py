"""Splitting a graph's edge list into balanced partitions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from graphmine.graph import Graph

MIN_SPLIT_TASKS = 8192
DEFAULT_STRIDE = 1024


@dataclass
class Partition:
    """One share of the edge list: parallel source and destination lists."""

    src: list[int] = field(default_factory=list)
    dst: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.src)

    def extend(self, src: Sequence[int], dst: Sequence[int]) -> None:
        self.src.extend(src)
        self.dst.extend(dst)


def hop2_workload(graph: Graph, src: int, dst: int) -> int:
    """Sum of the degrees of the neighbours of both endpoints."""
    return sum(graph.degree(v) for v in graph.neighbors(src)) + sum(
        graph.degree(v) for v in graph.neighbors(dst)
    )


def workload_estimate(graph: Graph, src: int, dst: int) -> int:
    """Work estimate for an edge task: the smaller endpoint degree."""
    return min(graph.degree(src), graph.degree(dst))


def smallest_score_id(scores: Sequence[int]) -> int:
    """Index of the first smallest score."""
    if not scores:
        raise ValueError("no scores given")
    return min(range(len(scores)), key=scores.__getitem__)


def construct_index(num_vertices: int, vertices: Sequence[int]) -> list[int]:
    """How many times each vertex id occurs in ``vertices``."""
    sizes = [0] * num_vertices
    for v in vertices:
        sizes[v] += 1
    return sizes


def _check_args(n: int, stride: int) -> None:
    if n < 1:
        raise ValueError("need at least one partition")
    if stride < 1:
        raise ValueError("stride must be positive")


def _require_large(nnz: int) -> None:
    if nnz <= MIN_SPLIT_TASKS:
        raise ValueError(f"edge list of {nnz} tasks is too small to split")


class Scheduler:
    """Splits ``graph.src_list``/``graph.dst_list`` (from ``init_edgelist``)."""

    def __init__(self) -> None:
        self.num_chunks: list[int] = []

    def round_robin(self, n: int, graph: Graph, stride: int = DEFAULT_STRIDE) -> list[Partition]:
        """Deal chunks of ``stride`` edges to the partitions in turn."""
        _check_args(n, stride)
        nnz = graph.num_tasks
        _require_large(nnz)
        partitions = [Partition() for _ in range(n)]
        chunks = [0] * n
        for chunk, pos in enumerate(range(0, nnz, stride)):
            qid = chunk % n
            partitions[qid].extend(
                graph.src_list[pos:pos + stride], graph.dst_list[pos:pos + stride]
            )
            chunks[qid] += 1
        self.num_chunks = chunks
        return partitions

    def vertex_chunking(
        self, n: int, graph: Graph, stride: int = DEFAULT_STRIDE
    ) -> list[Partition]:
        """Send each edge to partition ``(src // stride) % n``."""
        _check_args(n, stride)
        partitions = [Partition() for _ in range(n)]
        for v, u in zip(graph.src_list[: graph.num_tasks], graph.dst_list[: graph.num_tasks]):
            qid = (v // stride) % n
            partitions[qid].src.append(v)
            partitions[qid].dst.append(u)
        self.num_chunks = []
        return partitions

    def least_first(self, n: int, graph: Graph, stride: int = DEFAULT_STRIDE) -> list[Partition]:
        """Give each chunk to the partition with the least estimated work so far."""
        _check_args(n, stride)
        nnz = graph.num_tasks
        _require_large(nnz)
        if n * stride >= nnz:
            raise ValueError("too few tasks for one chunk per partition")
        src_list, dst_list = graph.src_list, graph.dst_list
        scores = [0] * n
        chunks = [1] * n
        partitions = [Partition() for _ in range(n)]

        def assign(qid: int, begin: int, end: int) -> None:
            partitions[qid].extend(src_list[begin:end], dst_list[begin:end])

        pos = 0
        for i in range(n):
            scores[i] += sum(
                workload_estimate(graph, src_list[j], dst_list[j]) for j in range(pos, pos + stride)
            )
            assign(i, pos, pos + stride)
            pos += stride
        qid = smallest_score_id(scores)
        while pos + stride < nnz:
            scores[qid] += sum(
                workload_estimate(graph, src_list[j], dst_list[j]) for j in range(pos, pos + stride)
            )
            chunks[qid] += 1
            assign(qid, pos, pos + stride)
            pos += stride
            qid = smallest_score_id(scores)
        if pos < nnz:
            chunks[qid] += 1
            assign(qid, pos, nnz)
        self.num_chunks = chunks
        return partitions