"""CSR graphs, sorted-set intersection, patterns, graph transforms and edge-list partitioning."""

__version__ = "0.1.0"