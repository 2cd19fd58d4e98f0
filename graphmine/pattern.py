"""Small query patterns read from adjacency files, and their matching plans."""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum
from itertools import accumulate
from pathlib import Path

WILDCARD_LABELS = (-1, 255)


class SetOperator(IntEnum):
    SET_INTERSECTION = 0
    SET_DIFFERENCE = 1


class Pattern:
    """An undirected pattern graph kept as an adjacency map."""

    def __init__(self) -> None:
        self.n_vertices = 0
        self.n_edges = 0
        self.max_degree = 0
        self.num_vertex_classes = 0
        self.num_edge_classes = 0
        self.vlabels: list[int] | None = None
        self.adj_list: dict[int, list[int]] = {}
        self.name = ""
        self.rowptr: list[int] = []
        self.colidx: list[int] = []
        self.num_operators: list[int] = []
        self.set_operators: list[list[SetOperator]] = []
        self.set_operands: list[list[int]] = []

    @property
    def has_elabel(self) -> bool:
        return self.num_edge_classes > 0

    @classmethod
    def parse(cls, text: str) -> Pattern:
        """Read a pattern: a header ``nv ne max_degree vclasses eclasses``,
        then one line per vertex: ``vertex label neighbour...``."""
        lines = text.splitlines()
        header: list[str] = []
        body: list[str] = []
        for index, line in enumerate(lines):
            tokens = line.split()
            need = 5 - len(header)
            header.extend(tokens[:need])
            if len(header) == 5:
                rest = tokens[need:]
                body = ([" ".join(rest)] if rest else []) + lines[index + 1:]
                break
        else:
            raise ValueError("pattern header needs five numbers")
        pattern = cls()
        (
            pattern.n_vertices,
            pattern.n_edges,
            pattern.max_degree,
            pattern.num_vertex_classes,
            pattern.num_edge_classes,
        ) = (int(token) for token in header)
        if pattern.num_vertex_classes > 0:
            pattern.vlabels = [0] * pattern.n_vertices
        for line in body:
            values = [int(token) for token in line.split()]
            if not values:
                continue
            if len(values) < 2:
                raise ValueError(f"pattern line {line!r} lacks a vertex label")
            v, label, *neighbours = values
            if pattern.vlabels is not None:
                if not 0 <= v < pattern.n_vertices:
                    raise ValueError(f"vertex {v} out of range")
                pattern.vlabels[v] = label
            pattern.adj_list.setdefault(v, []).extend(neighbours)
        if len(pattern.adj_list) != pattern.n_vertices:
            raise ValueError("number of vertex lines does not match the header")
        if sum(len(n) for n in pattern.adj_list.values()) != pattern.n_edges:
            raise ValueError("number of edges does not match the header")
        degree = max((pattern.degree(v) for v in range(pattern.n_vertices)), default=0)
        if degree != pattern.max_degree:
            raise ValueError("maximum degree does not match the header")
        pattern.generate_csr()
        return pattern

    @classmethod
    def from_file(cls, path: str | Path) -> Pattern:
        return cls.parse(Path(path).read_text())

    def add_edge(self, u: int, v: int) -> None:
        """Add the undirected edge ``u``-``v``."""
        self.adj_list.setdefault(u, []).append(v)
        self.adj_list.setdefault(v, []).append(u)
        self.n_vertices = len(self.adj_list)
        self.n_edges += 2
        self.max_degree = max(self.max_degree, self.degree(u), self.degree(v))

    def degree(self, v: int) -> int:
        return len(self.adj_list.get(v, ()))

    def neighbor(self, v: int, i: int) -> int:
        return self.adj_list[v][i]

    def v_list(self) -> list[int]:
        return sorted(self.adj_list)

    def set_name(self) -> str:
        """Name the pattern by its vertex and edge counts."""
        n = self.n_vertices
        m = self.n_edges // 2
        name = f"{self.num_vertex_classes}labeled-" if self.num_vertex_classes > 0 else ""
        if n == 3:
            name += "wedge" if m == 2 else "triangle"
        elif n == 4:
            if m == 3:
                name = name + "3-star" if self.max_degree == 3 else "4-path"
            elif m == 4:
                name += "tailed_triangle" if self.max_degree == 3 else "square"
            elif m == 5:
                name += "diamond"
            elif m == 6:
                name += "4-clique"
            else:
                raise ValueError(f"a 4-vertex pattern cannot have {m} edges")
        else:
            name += "unknown"
        self.name = name
        return name

    def _edges(self):
        for u, neighbours in sorted(self.adj_list.items()):
            for v in neighbours:
                if u <= v:
                    yield u, v

    def to_string(self, given_labels: Sequence[int] | None = None) -> str:
        """Render the pattern's edges, optionally with the given vertex labels."""
        if given_labels is not None and self.num_vertex_classes > 0:
            if len(given_labels) < self.n_vertices:
                raise ValueError("a label is needed for every pattern vertex")

            def label(x: int) -> str:
                return "*" if given_labels[x] in WILDCARD_LABELS else str(given_labels[x])

            return "".join(f"[{u},{label(u)}-{v},{label(v)}]" for u, v in self._edges())
        if self.num_vertex_classes > 0:
            labels = self.vlabels or []
            return "".join(chr(labels[v]) for v in range(self.n_vertices))
        return "".join(f"[{u}-{v}]" for u, v in self._edges())

    def generate_csr(self) -> None:
        adjacency = [self.adj_list.get(v, []) for v in range(self.n_vertices)]
        self.rowptr = [0, *accumulate(len(n) for n in adjacency)]
        self.colidx = [u for neighbours in adjacency for u in neighbours]

    def analyze(self) -> None:
        """Choose the set operators and operands for each matching level."""
        n = self.n_vertices
        m = self.n_edges // 2
        if n <= 2:
            raise ValueError("a pattern needs at least three vertices")
        inter, diff = SetOperator.SET_INTERSECTION, SetOperator.SET_DIFFERENCE
        self.num_operators = [i + 1 for i in range(n - 2)]
        self.set_operators = [[inter] * k for k in self.num_operators]
        self.set_operands = [list(range(k + 1)) for k in self.num_operators]
        ops, operands = self.set_operators, self.set_operands
        if n == 3:
            if m == 2:
                ops[0][0] = diff
        elif n == 4:
            if m == 3:
                ops[0][0] = diff
                ops[1][0] = diff
                ops[1][1] = diff
                if self.max_degree != 3:
                    operands[1][:3] = [2, 0, 1]
            elif m == 4:
                if self.max_degree == 3:
                    ops[1][0] = diff
                    ops[1][1] = diff
                else:
                    ops[0][0] = diff
                    ops[1][1] = diff
                    operands[1][:3] = [1, 2, 0]
            elif m == 5:
                ops[1][1] = diff

    def is_connected(self, u: int, v: int) -> bool:
        """Binary search for ``u`` in the sorted neighbours of the lower-degree end."""
        if self.degree(u) < self.degree(v):
            u, v = v, u
        begin, end = 0, self.degree(v) - 1
        while begin <= end:
            mid = begin + ((end - begin) >> 1)
            w = self.neighbor(v, mid)
            if w == u:
                return True
            if w > u:
                end = mid - 1
            else:
                begin = mid + 1
        return False