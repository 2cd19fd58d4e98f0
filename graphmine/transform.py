"""Whole-graph rewrites: sorting, cleaning, symmetrising, orienting and k-cores."""

from __future__ import annotations

from itertools import accumulate
from pathlib import Path
from typing import NamedTuple

from graphmine.graph import Graph


class CleanStats(NamedTuple):
    """What ``sort_and_clean_neighbors`` removed."""

    selfloops: int
    redundants: int


class CoreTable(NamedTuple):
    """Core number of every vertex and how many vertices lie in a core above 1."""

    cores: list[int]
    core_length: int


def _replace_adjacency(graph: Graph, adjacency: list[list[int]]) -> None:
    rowptr = [0, *accumulate(len(n) for n in adjacency)]
    colidx = [u for neighbours in adjacency for u in neighbours]
    graph._replace_csr(rowptr, colidx)
    if graph.elabels is not None and len(graph.elabels) != graph.num_edges:
        graph.elabels = None


def _write_csr(graph: Graph, outfile_prefix: str | Path) -> None:
    graph.write_to_file(outfile_prefix, vertices=True, edges=True, vlabels=False, elabels=False)


def sort_neighbors(graph: Graph) -> None:
    """Sort every neighbour list of ``graph`` in place."""
    for v in range(graph.num_vertices):
        begin, end = graph.edge_range(v)
        graph.colidx[begin:end] = sorted(graph.colidx[begin:end])


def sort_and_clean_neighbors(graph: Graph, outfile_prefix: str | Path = "") -> CleanStats:
    """Sort neighbour lists and drop self loops and repeated edges.

    With ``outfile_prefix`` the cleaned CSR is also written to
    ``<prefix>.vertex.bin`` and ``<prefix>.edge.bin``.
    """
    sort_neighbors(graph)
    nv = graph.num_vertices
    selfloops = redundants = 0
    cleaned: list[list[int]] = []
    for v in range(nv):
        kept: list[int] = []
        previous: int | None = None
        for u in graph.neighbors(v):
            if u == v:
                selfloops += 1
            elif previous is not None and u == previous:
                redundants += 1
            else:
                if not 0 <= u < nv:
                    raise ValueError(f"vertex {v} has neighbour {u} out of range")
                kept.append(u)
            previous = u
        cleaned.append(kept)
    _replace_adjacency(graph, cleaned)
    if outfile_prefix:
        _write_csr(graph, outfile_prefix)
    return CleanStats(selfloops, redundants)


def symmetrize(graph: Graph) -> int:
    """Add every missing reverse edge; return how many edges were added.

    Neighbour lists must be sorted and free of self loops and repeats.
    """
    nv = graph.num_vertices
    additions: list[list[int]] = [[] for _ in range(nv)]
    for v in range(nv):
        neighbours = graph.neighbors(v)
        for i, u in enumerate(neighbours):
            if not 0 <= u < nv:
                raise ValueError(f"vertex {v} has neighbour {u} out of range")
            if u == v:
                raise ValueError(f"vertex {v} has a self loop")
            if i > 0 and u == neighbours[i - 1]:
                raise ValueError(f"vertex {v} has a repeated edge to {u}")
            if graph.binary_search(v, *graph.edge_range(u)):
                continue
            additions[u].append(v)
    added = sum(len(a) for a in additions)
    adjacency = [list(graph.neighbors(v)) + additions[v] for v in range(nv)]
    _replace_adjacency(graph, adjacency)
    sort_neighbors(graph)
    return added


def orientation(graph: Graph, outfile_prefix: str | Path = "") -> int:
    """Turn a symmetric graph into a DAG ordered by (degree, id).

    Returns the number of edges kept; with ``outfile_prefix`` the DAG is
    written to disk as well.
    """
    graph._orient()
    if outfile_prefix:
        _write_csr(graph, outfile_prefix)
    return graph.num_edges


def compute_kcore(graph: Graph) -> list[int]:
    """Core number of each vertex, by the bin-sort peeling algorithm."""
    nv = graph.num_vertices
    degrees = [graph.degree(v) for v in range(nv)]
    md = max(degrees, default=0)
    core = list(degrees)
    degree_bin = [0] * (md + 1)
    for d in degrees:
        degree_bin[d] += 1
    offset = [0, *accumulate(degree_bin)][: md + 1]
    position = [0] * nv
    order = [0] * nv
    for v, d in enumerate(degrees):
        position[v] = offset[d]
        order[position[v]] = v
        offset[d] += 1
    for i in range(md, 0, -1):
        offset[i] = offset[i - 1]
    if offset:
        offset[0] = 0
    for i in range(nv):
        v = order[i]
        for u in graph.neighbors(v):
            if core[u] > core[v]:
                cur = core[u]
                position_u = position[u]
                position_w = offset[cur]
                w = order[position_w]
                if u != w:
                    position[u] = position_w
                    position[w] = position_u
                    order[position_u] = w
                    order[position_w] = u
                offset[cur] += 1
                core[u] -= 1
    return core


def build_core_table(graph: Graph) -> CoreTable:
    """Core numbers together with the count of vertices whose core exceeds 1."""
    cores = compute_kcore(graph)
    return CoreTable(cores, sum(1 for c in cores if c > 1))