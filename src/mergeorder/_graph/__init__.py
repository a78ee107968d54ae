"""Graph module providing dependency graph abstractions.

This module contains:
- DependencyGraph[T]: A generic, immutable graph of import relations
- topological_sort: Deterministic ordering of nodes before their successors
- find_cycle: Locating one cycle for error reporting
"""

from ._algorithms import SupportsOrdering, find_cycle, topological_sort
from ._dependency_graph import DependencyGraph

__all__ = ["DependencyGraph", "SupportsOrdering", "find_cycle", "topological_sort"]
