# graphmine

Building blocks for graph analytics and graph pattern mining, written in
plain Python with no third-party dependencies.

## Modules

- `graphmine.graph`: `Graph`, a compressed sparse row (CSR) graph with
  optional vertex and edge labels. `Graph.from_edges` builds one from
  `(src, dst)` pairs; `Graph.load` reads the binary on-disk layout
  (`<prefix>.meta.txt`, `<prefix>.vertex.bin`, `<prefix>.edge.bin`, and
  optionally `<prefix>.vlabel.bin` / `<prefix>.elabel.bin`), and
  `Graph.write_to_file` writes it. `read_meta` parses the meta file into a
  `GraphMeta`. Graphs answer neighbour, degree, adjacency and
  common-neighbour queries, build their reverse graph, fill an edge list
  with `init_edgelist`, and report a degree histogram, `meta_summary` and
  `format_graph`.
- `graphmine.vertex_set`: `VertexSet`, a sorted vertex list with
  `difference`, `difference_count` and `intersect_count`.
- `graphmine.intersect`: `merge_intersection`, `merge_intersection_count`
  and `SetIntersection`, which picks galloping search for strongly
  unbalanced inputs when `hybrid=True`.
- `graphmine.galloping`: `binary_search`, `galloping_search`,
  `galloping_intersection` and `galloping_intersection_count`.
- `graphmine.pattern`: `Pattern`, small query patterns (wedge, triangle,
  4-path, 3-star, square, tailed triangle, diamond, 4-clique) with
  `set_name`, `to_string`, `generate_csr`, `is_connected` and `analyze`,
  which chooses the `SetOperator` plan for each matching level.
- `graphmine.transform`: `sort_neighbors`, `sort_and_clean_neighbors`
  (returns the removed self loops and repeated edges), `symmetrize`,
  `orientation` into a degree-ordered DAG, `compute_kcore` and
  `build_core_table`.
- `graphmine.scheduler`: `Scheduler` with `round_robin`,
  `vertex_chunking` and `least_first`, splitting the edge list filled by
  `Graph.init_edgelist` into `Partition`s; also `workload_estimate`,
  `hop2_workload`, `smallest_score_id` and `construct_index`.
  `round_robin` and `least_first` refuse edge lists of 8192 tasks or fewer.
- `graphmine.labels`: label frequencies, a reverse index by label,
  neighbourhood label frequencies, and label-filtered intersection and
  difference counts and sets.
- `graphmine.sliding_queue`: `SlidingQueue` and `QueueBuffer`, a
  double-buffered frontier queue whose appends become visible only after
  `slide_window`.

## Installation

```
pip install .
```

Install with the test extra to run the test suite:

```
pip install ".[test]"
pytest
```

## Library use

```python
from graphmine.graph import Graph

graph = Graph.from_edges(6, [(0, 1), (1, 2), (3, 4)], directed=False)
print(graph.degree(1))            # 2
print(list(graph.neighbors(1)))   # [0, 2]
print(graph.is_connected(0, 1))   # True
```

Set intersection on sorted vertex lists:

```python
from graphmine.intersect import merge_intersection, SetIntersection
from graphmine.galloping import galloping_intersection_count

print(merge_intersection([1, 3, 5, 7], [3, 4, 5]))               # [3, 5]
print(galloping_intersection_count([2, 9], list(range(100))))    # 2
print(SetIntersection(hybrid=True).get_num([1, 2, 3], [2, 3, 4]))  # 2
```

Describing a pattern:

```python
from graphmine.pattern import Pattern

triangle = Pattern()
triangle.add_edge(0, 1)
triangle.add_edge(1, 2)
triangle.add_edge(0, 2)
print(triangle.set_name())  # triangle
```

Patterns can also be read from the plain-text adjacency format with
`Pattern.parse` or `Pattern.from_file`: a header line
`num_vertices num_edges max_degree vertex_classes edge_classes`, then one
line per vertex holding `vertex label neighbour...`.

## What it does not do

The package has no connected-components solver and no command-line tool;
it is used as a library only. Graphs are held fully in memory as Python
lists: nothing is memory-mapped, and compressed edge formats are not read.