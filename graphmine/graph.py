"""Compressed sparse row graphs stored in the binary ``.meta.txt``/``.bin`` layout."""

from __future__ import annotations

import random
import sys
from array import array
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from itertools import accumulate
from pathlib import Path

from graphmine.vertex_set import VertexSet

VID_SIZE = 4
EID_SIZE = 8
VLABEL_SIZE = 1
MAX_VERTEX_CLASSES = 255

_VID_CODE = "I"
_EID_CODE = "Q"
_VLABEL_CODE = "B"
_ELABEL_CODES = {1: "B", 2: "H", 4: "I", 8: "Q"}


def _read_array(path: str | Path, typecode: str, count: int) -> list[int]:
    """Read ``count`` little-endian items of ``typecode`` from a binary file."""
    raw = Path(path).read_bytes()
    values = array(typecode)
    needed = count * values.itemsize
    if len(raw) < needed:
        raise ValueError(f"{path}: expected {needed} bytes, found {len(raw)}")
    values.frombytes(raw[:needed])
    if sys.byteorder == "big":
        values.byteswap()
    return values.tolist()


def _write_array(path: str | Path, typecode: str, values: Iterable[int]) -> None:
    data = array(typecode, values)
    if sys.byteorder == "big":
        data.byteswap()
    Path(path).write_bytes(data.tobytes())


@dataclass
class GraphMeta:
    """Contents of a graph's ``.meta.txt`` file."""

    num_vertices: int
    num_edges: int
    vid_size: int
    eid_size: int
    vlabel_size: int
    elabel_size: int
    max_degree: int
    feat_len: int
    num_vertex_classes: int
    num_edge_classes: int
    n_vert0: int = 0
    n_vert1: int = 0


def read_meta(prefix: str | Path, bipartite: bool = False) -> GraphMeta:
    """Parse ``<prefix>.meta.txt`` and check that its type sizes are supported."""
    tokens = Path(f"{prefix}.meta.txt").read_text().split()
    needed = 11 if bipartite else 10
    if len(tokens) < needed:
        raise ValueError(f"meta file of {prefix} holds {len(tokens)} fields, needs {needed}")
    values = [int(token) for token in tokens[:needed]]
    n_vert0 = n_vert1 = 0
    if bipartite:
        n_vert0, n_vert1, *rest = values
        num_vertices = n_vert0 + n_vert1
    else:
        num_vertices, *rest = values
    meta = GraphMeta(num_vertices, *rest, n_vert0=n_vert0, n_vert1=n_vert1)
    if meta.vid_size != VID_SIZE:
        raise ValueError(f"unsupported vertex id size {meta.vid_size}")
    if meta.eid_size != EID_SIZE:
        raise ValueError(f"unsupported edge id size {meta.eid_size}")
    if meta.vlabel_size != VLABEL_SIZE:
        raise ValueError(f"unsupported vertex label size {meta.vlabel_size}")
    if meta.num_vertices <= 0 or meta.num_edges <= 0:
        raise ValueError("graph must have vertices and edges")
    if meta.num_vertices >= 2**32 - 1:
        raise ValueError("too many vertices for 32-bit vertex ids")
    return meta


class Graph:
    """A graph in CSR form: ``rowptr`` offsets into the ``colidx`` neighbour array."""

    def __init__(
        self,
        rowptr: Sequence[int],
        colidx: Sequence[int],
        directed: bool = False,
        vlabels: Sequence[int] | None = None,
        elabels: Sequence[int] | None = None,
        num_vertex_classes: int = 0,
        num_edge_classes: int = 0,
    ) -> None:
        rowptr = list(rowptr)
        colidx = list(colidx)
        self._check_csr(rowptr, colidx)
        self.rowptr = rowptr
        self.colidx = colidx
        self.directed = directed
        self.vlabels = list(vlabels) if vlabels is not None else None
        self.elabels = list(elabels) if elabels is not None else None
        if self.vlabels is not None and len(self.vlabels) != self.num_vertices:
            raise ValueError("one vertex label is needed per vertex")
        if self.elabels is not None and len(self.elabels) != self.num_edges:
            raise ValueError("one edge label is needed per edge")
        self.num_vertex_classes = num_vertex_classes
        self.num_edge_classes = num_edge_classes
        self.name = ""
        self.feat_len = 0
        self.elabel_size = 4
        self.max_label_frequency: int | None = None
        self.meta: GraphMeta | None = None
        self.reverse_rowptr: list[int] | None = None
        self.reverse_colidx: list[int] | None = None
        self.src_list: list[int] = []
        self.dst_list: list[int] = []
        self.sizes: list[int] = []
        self.num_tasks = 0
        self.max_degree = 0
        self._link_reverse()
        self.compute_max_degree()

    @staticmethod
    def _check_csr(rowptr: list[int], colidx: list[int]) -> None:
        if not rowptr or rowptr[0] != 0:
            raise ValueError("row pointers must start at 0")
        if any(b < a for a, b in zip(rowptr, rowptr[1:])):
            raise ValueError("row pointers must not decrease")
        if rowptr[-1] != len(colidx):
            raise ValueError("last row pointer must equal the number of edges")

    def _link_reverse(self) -> None:
        if self.directed:
            self.reverse_rowptr = None
            self.reverse_colidx = None
        else:
            self.reverse_rowptr = self.rowptr
            self.reverse_colidx = self.colidx

    def _replace_csr(self, rowptr: list[int], colidx: list[int]) -> None:
        self._check_csr(rowptr, colidx)
        self.rowptr = rowptr
        self.colidx = colidx
        self._link_reverse()
        self.src_list, self.dst_list, self.sizes, self.num_tasks = [], [], [], 0

    @classmethod
    def from_edges(
        cls, num_vertices: int, edges: Iterable[tuple[int, int]], directed: bool = False
    ) -> Graph:
        """Build a graph with sorted neighbour lists from ``(src, dst)`` pairs.

        An undirected graph stores every pair in both directions.
        """
        adjacency: list[list[int]] = [[] for _ in range(num_vertices)]
        for src, dst in edges:
            if not (0 <= src < num_vertices and 0 <= dst < num_vertices):
                raise ValueError(f"edge ({src}, {dst}) names a missing vertex")
            adjacency[src].append(dst)
            if not directed:
                adjacency[dst].append(src)
        for neighbours in adjacency:
            neighbours.sort()
        rowptr = [0, *accumulate(len(n) for n in adjacency)]
        colidx = [u for neighbours in adjacency for u in neighbours]
        return cls(rowptr, colidx, directed)

    @classmethod
    def load(
        cls,
        prefix: str | Path,
        use_dag: bool = False,
        directed: bool = False,
        use_vlabel: bool = False,
        use_elabel: bool = False,
        need_reverse: bool = False,
        bipartite: bool = False,
        partitioned: bool = False,
    ) -> Graph:
        """Load a graph from ``<prefix>.meta.txt``, ``.vertex.bin`` and ``.edge.bin``.

        A partitioned graph only has its meta data read; its CSR stays empty.
        """
        meta = read_meta(prefix, bipartite)
        if partitioned:
            graph = cls([0], [], directed)
            graph.meta = meta
            graph.max_degree = meta.max_degree
            graph.num_vertex_classes = meta.num_vertex_classes
            graph.num_edge_classes = meta.num_edge_classes
            return graph
        nv, ne = meta.num_vertices, meta.num_edges
        rowptr = _read_array(f"{prefix}.vertex.bin", _EID_CODE, nv + 1)
        colidx = _read_array(f"{prefix}.edge.bin", _VID_CODE, ne)
        graph = cls(
            rowptr,
            colidx,
            directed,
            num_vertex_classes=meta.num_vertex_classes,
            num_edge_classes=meta.num_edge_classes,
        )
        graph.meta = meta
        graph.name = Path(str(prefix)).parent.name
        graph.feat_len = meta.feat_len
        graph.elabel_size = meta.elabel_size
        if directed and need_reverse:
            graph.build_reverse_graph()
        if meta.max_degree:
            graph.max_degree = meta.max_degree
        if not 0 < graph.max_degree < nv:
            raise ValueError(f"maximum degree {graph.max_degree} out of range")
        if use_vlabel:
            graph._load_vlabels(prefix)
        if use_elabel:
            graph._load_elabels(prefix)
        if use_dag:
            if directed:
                raise ValueError("only an undirected graph can be oriented")
            graph._orient()
        return graph

    def _load_vlabels(self, prefix: str | Path) -> None:
        classes = self.num_vertex_classes
        if not 0 < classes < MAX_VERTEX_CLASSES:
            raise ValueError(f"number of vertex classes {classes} out of range")
        path = Path(f"{prefix}.vlabel.bin")
        if path.exists():
            self.vlabels = _read_array(path, _VLABEL_CODE, self.num_vertices)
            distinct = len(set(self.vlabels))
            if distinct != classes:
                raise ValueError(f"found {distinct} vertex labels, meta says {classes}")
        else:
            self.vlabels = [random.randrange(classes) + 1 for _ in range(self.num_vertices)]

    def _load_elabels(self, prefix: str | Path) -> None:
        path = Path(f"{prefix}.elabel.bin")
        if path.exists():
            if self.num_edge_classes <= 0:
                raise ValueError("edge labels present but meta gives no edge classes")
            code = _ELABEL_CODES.get(self.elabel_size)
            if code is None:
                raise ValueError(f"unsupported edge label size {self.elabel_size}")
            self.elabels = _read_array(path, code, self.num_edges)
            distinct = len(set(self.elabels))
            if distinct > self.num_edge_classes:
                raise ValueError(
                    f"found {distinct} edge labels, meta allows {self.num_edge_classes}"
                )
        elif self.num_edge_classes < 1:
            self.num_edge_classes = 1
            self.elabels = [1] * self.num_edges
        else:
            classes = self.num_edge_classes
            self.elabels = [random.randrange(classes) + 1 for _ in range(self.num_edges)]

    def _orient(self) -> None:
        """Keep each undirected edge once, pointing to the higher-ranked endpoint."""
        degrees = [self.degree(v) for v in range(self.num_vertices)]
        adjacency = [
            [
                dst
                for dst in self.neighbors(src)
                if degrees[dst] > degrees[src] or (degrees[dst] == degrees[src] and dst > src)
            ]
            for src in range(self.num_vertices)
        ]
        kept = sum(len(n) for n in adjacency)
        if self.num_edges != 2 * kept:
            raise ValueError("orientation needs a symmetric graph without duplicates")
        rowptr = [0, *accumulate(len(n) for n in adjacency)]
        self._replace_csr(rowptr, [u for n in adjacency for u in n])
        self.max_degree = max((len(n) for n in adjacency), default=0)

    def write_to_file(
        self,
        prefix: str | Path,
        vertices: bool = True,
        edges: bool = True,
        vlabels: bool = True,
        elabels: bool = True,
    ) -> None:
        """Write the chosen arrays as ``<prefix>.vertex.bin`` and the like."""
        if vertices:
            _write_array(f"{prefix}.vertex.bin", _EID_CODE, self.rowptr)
        if edges:
            _write_array(f"{prefix}.edge.bin", _VID_CODE, self.colidx)
        if vlabels and self.vlabels:
            _write_array(f"{prefix}.vlabel.bin", _VLABEL_CODE, self.vlabels)
        if elabels and self.elabels:
            code = _ELABEL_CODES.get(self.elabel_size)
            if code is None:
                raise ValueError(f"unsupported edge label size {self.elabel_size}")
            _write_array(f"{prefix}.elabel.bin", code, self.elabels)

    @property
    def num_vertices(self) -> int:
        return len(self.rowptr) - 1

    @property
    def num_edges(self) -> int:
        return len(self.colidx)

    @property
    def has_reverse(self) -> bool:
        return self.reverse_rowptr is not None

    def edge_range(self, v: int) -> tuple[int, int]:
        """The ``[begin, end)`` slice of ``colidx`` holding the neighbours of ``v``."""
        if not 0 <= v < self.num_vertices:
            raise IndexError(f"vertex {v} out of range")
        begin, end = self.rowptr[v], self.rowptr[v + 1]
        if begin > end or end > self.num_edges:
            raise ValueError(f"vertex {v} bounds error: [{begin}, {end})")
        return begin, end

    def degree(self, v: int) -> int:
        begin, end = self.edge_range(v)
        return end - begin

    def neighbors(self, v: int) -> VertexSet:
        begin, end = self.edge_range(v)
        return VertexSet(self.colidx[begin:end], v)

    def out_neigh(self, v: int, offset: int = 0) -> VertexSet:
        """Outgoing neighbours of ``v``, skipping the first ``offset`` of them."""
        begin, end = self.edge_range(v)
        return VertexSet(self.colidx[min(begin + offset, end):end], v)

    def in_neigh(self, v: int) -> VertexSet:
        """Incoming neighbours of ``v``; needs the reverse graph."""
        if self.reverse_rowptr is None or self.reverse_colidx is None:
            raise ValueError("graph keeps no incoming edges; build the reverse graph")
        if not 0 <= v < self.num_vertices:
            raise IndexError(f"vertex {v} out of range")
        begin, end = self.reverse_rowptr[v], self.reverse_rowptr[v + 1]
        if begin > end or end > self.num_edges:
            raise ValueError(f"vertex {v} bounds error: [{begin}, {end})")
        return VertexSet(self.reverse_colidx[begin:end], v)

    def binary_search(self, key: int, begin: int, end: int) -> bool:
        """Whether ``key`` occurs in the sorted slice ``colidx[begin:end]``."""
        low, high = begin, end - 1
        while high >= low:
            mid = low + (high - low) // 2
            value = self.colidx[mid]
            if value == key:
                return True
            if value < key:
                low = mid + 1
            else:
                high = mid - 1
        return False

    def is_connected(self, v: int, u: int) -> bool:
        """Whether ``v`` and ``u`` are adjacent, searching the shorter list."""
        if self.degree(v) < self.degree(u):
            return self.binary_search(u, *self.edge_range(v))
        return self.binary_search(v, *self.edge_range(u))

    def intersect_num(self, v: int, u: int) -> int:
        """Number of common neighbours of ``v`` and ``u``."""
        return self.neighbors(v).intersect_count(self.neighbors(u))

    def build_reverse_graph(self) -> None:
        """Build the CSR of incoming edges."""
        incoming: list[list[int]] = [[] for _ in range(self.num_vertices)]
        for v in range(self.num_vertices):
            for u in self.neighbors(v):
                incoming[u].append(v)
        self.reverse_rowptr = [0, *accumulate(len(n) for n in incoming)]
        self.reverse_colidx = [v for n in incoming for v in n]

    def compute_max_degree(self) -> int:
        self.max_degree = max((self.degree(v) for v in range(self.num_vertices)), default=0)
        return self.max_degree

    def init_edgelist(self, sym_break: bool = False, ascend: bool = False) -> int:
        """Fill ``src_list``/``dst_list`` with the edges and return their number.

        Self loops are skipped. With ``sym_break`` each undirected edge is kept
        once: as ``(high, low)``, or as ``(low, high)`` when ``ascend`` is set.
        An edge list built earlier is kept.
        """
        if self.num_tasks:
            return self.num_tasks
        sources: list[int] = []
        targets: list[int] = []
        sizes = [0] * self.num_vertices
        for v in range(self.num_vertices):
            for u in self.neighbors(v):
                if u == v:
                    continue
                if sym_break:
                    if ascend:
                        if v > u:
                            continue
                    elif v < u:
                        break
                sources.append(v)
                targets.append(u)
                sizes[v] += 1
        self.src_list, self.dst_list, self.sizes = sources, targets, sizes
        self.num_tasks = len(sources)
        return self.num_tasks

    def degree_histogram(self, bin_width: int) -> list[int]:
        """Vertex counts per degree bin of width ``bin_width``."""
        if not 0 < bin_width < self.max_degree:
            raise ValueError("bin width must be positive and below the maximum degree")
        counts = [0] * (self.max_degree // bin_width + 1)
        for v in range(self.num_vertices):
            counts[self.degree(v) // bin_width] += 1
        return counts

    def meta_summary(self) -> str:
        lines = [
            f"|V|: {self.num_vertices}, |E|: {self.num_edges}, Max Degree: {self.max_degree}"
        ]
        if self.num_vertex_classes > 0:
            line = f"vertex-|\u03a3|: {self.num_vertex_classes}"
            if self.max_label_frequency is not None:
                line += f", Max Label Frequency: {self.max_label_frequency}"
            lines.append(line)
        if self.num_edge_classes > 0:
            lines.append(f"edge-|\u03a3|: {self.num_edge_classes}")
        if self.feat_len > 0:
            lines.append(f"Vertex feature vector length: {self.feat_len}")
        return "\n".join(lines) + "\n"

    def _format_neighbors(self, v: int) -> str:
        begin, end = self.rowptr[v], self.rowptr[v + 1]
        parts = ["[ "]
        for e in range(begin, end):
            if self.elabels is not None:
                parts.append(f"<{self.colidx[e]} {self.elabels[e]}> ")
            else:
                parts.append(f"{self.colidx[e]} ")
        parts.append("]")
        return "".join(parts)

    def format_graph(self) -> str:
        lines = ["Printing the graph: "]
        for v in range(self.num_vertices):
            begin, end = self.rowptr[v], self.rowptr[v + 1]
            lines.append(
                f"vertex {v}: degree = {self.degree(v)} edge range: [{begin}, {end})"
                f" edgelist = {self._format_neighbors(v)}"
            )
        return "\n".join(lines) + "\n"