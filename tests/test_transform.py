import struct
from itertools import combinations

import pytest

from graphmine.graph import Graph
from graphmine.transform import (
    build_core_table,
    compute_kcore,
    orientation,
    sort_and_clean_neighbors,
    sort_neighbors,
    symmetrize,
)


def _read_u64(path):
    data = path.read_bytes()
    return list(struct.unpack(f"<{len(data) // 8}Q", data))


def _read_u32(path):
    data = path.read_bytes()
    return list(struct.unpack(f"<{len(data) // 4}I", data))


def _messy_graph():
    # vertex 0: [2, 0, 1, 1] has a self loop and a repeated edge
    return Graph([0, 4, 5, 6], [2, 0, 1, 1, 0, 0])


def test_sort_neighbors_sorts_each_list():
    graph = Graph([0, 3, 5], [1, 0, 1, 1, 0], directed=True)
    sort_neighbors(graph)
    for v in range(graph.num_vertices):
        neighbours = list(graph.neighbors(v))
        assert neighbours == sorted(neighbours)
    assert sorted(graph.colidx) == [0, 0, 1, 1, 1]


def test_sort_and_clean_removes_loops_and_repeats():
    graph = _messy_graph()
    stats = sort_and_clean_neighbors(graph)
    assert stats == (1, 1)
    expected = Graph.from_edges(3, [(0, 1), (0, 2)])
    assert graph.rowptr == expected.rowptr
    assert graph.colidx == expected.colidx


def test_sort_and_clean_writes_files(tmp_path):
    graph = _messy_graph()
    prefix = tmp_path / "clean"
    sort_and_clean_neighbors(graph, str(prefix))
    assert _read_u64(tmp_path / "clean.vertex.bin") == graph.rowptr
    assert _read_u32(tmp_path / "clean.edge.bin") == graph.colidx


def test_sort_and_clean_clean_graph_unchanged():
    graph = Graph.from_edges(4, [(0, 1), (1, 2), (2, 3)])
    before = list(graph.colidx)
    stats = sort_and_clean_neighbors(graph)
    assert stats.selfloops == 0 and stats.redundants == 0
    assert graph.colidx == before


def test_symmetrize_adds_missing_reverse_edges():
    graph = Graph([0, 1, 1, 2], [1, 0], directed=True)
    original = graph.num_edges
    added = symmetrize(graph)
    expected = Graph.from_edges(3, [(0, 1), (0, 2)])
    assert graph.rowptr == expected.rowptr
    assert graph.colidx == expected.colidx
    assert added == graph.num_edges - original


def test_symmetrize_result_is_symmetric():
    graph = Graph.from_edges(5, [(0, 3), (3, 1), (4, 2), (1, 0)], directed=True)
    symmetrize(graph)
    for v in range(graph.num_vertices):
        for u in graph.neighbors(v):
            assert graph.is_connected(u, v)
            assert v in list(graph.neighbors(u))


def test_symmetrize_rejects_self_loop():
    graph = Graph([0, 1, 1], [0], directed=True)
    with pytest.raises(ValueError):
        symmetrize(graph)


def test_symmetrize_rejects_repeated_edge():
    graph = Graph([0, 2, 2], [1, 1], directed=True)
    with pytest.raises(ValueError):
        symmetrize(graph)


def test_orientation_keeps_each_edge_once():
    pairs = list(combinations(range(4), 2))
    graph = Graph.from_edges(4, pairs)
    original = graph.num_edges
    kept = orientation(graph)
    assert kept == original // 2
    assert graph.num_edges == kept
    for a, b in pairs:
        forward = b in list(graph.neighbors(a))
        backward = a in list(graph.neighbors(b))
        assert forward != backward
    assert graph.max_degree == max(graph.degree(v) for v in range(4))


def test_orientation_writes_files(tmp_path):
    graph = Graph.from_edges(3, [(0, 1), (1, 2), (0, 2)])
    prefix = tmp_path / "dag"
    orientation(graph, str(prefix))
    assert _read_u64(tmp_path / "dag.vertex.bin") == graph.rowptr
    assert _read_u32(tmp_path / "dag.edge.bin") == graph.colidx


def test_orientation_rejects_asymmetric_graph():
    graph = Graph([0, 1, 1], [1])
    with pytest.raises(ValueError):
        orientation(graph)


def test_kcore_of_clique():
    n = 5
    graph = Graph.from_edges(n, list(combinations(range(n), 2)))
    assert compute_kcore(graph) == [n - 1] * n


def test_kcore_of_path_is_one():
    graph = Graph.from_edges(4, [(0, 1), (1, 2), (2, 3)])
    assert compute_kcore(graph) == [1] * 4
    assert build_core_table(graph).core_length == 0


def test_kcore_triangle_with_tail():
    graph = Graph.from_edges(4, [(0, 1), (1, 2), (0, 2), (0, 3)])
    table = build_core_table(graph)
    assert table.cores == [2, 2, 2, 1]
    assert table.core_length == sum(1 for c in table.cores if c > 1)


def test_kcore_never_exceeds_degree():
    graph = Graph.from_edges(6, [(0, 1), (1, 2), (2, 0), (2, 3), (3, 4), (4, 5), (5, 3)])
    cores = compute_kcore(graph)
    for v, c in enumerate(cores):
        assert 0 <= c <= graph.degree(v)