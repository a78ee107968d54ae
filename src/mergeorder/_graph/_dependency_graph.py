"""Import graph between library units."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass, field

from ._algorithms import SupportsOrdering, find_cycle, topological_sort


@dataclass(frozen=True, slots=True)
class DependencyGraph[T: SupportsOrdering]:
    """A directed graph of import relations between units.

    This is a pure, immutable data structure with query methods.
    It is generic over the node type T (e.g., str, UnitId).

    The graph represents "imports" relationships:
    - imports[b] = {a} means "b imports a", so a must be processed before b
    - importers[a] = {b} means "a is imported by b"

    Every edge endpoint is a node. Self-imports are kept and make the graph
    cyclic.

    Attributes:
        _imports: Mapping from node to the nodes it directly imports.
        _importers: Mapping from node to the nodes directly importing it.

    """

    _imports: dict[T, frozenset[T]] = field(default_factory=dict)
    _importers: dict[T, frozenset[T]] = field(default_factory=dict)

    @classmethod
    def from_catalog(cls, catalog: Mapping[T, Collection[T]]) -> DependencyGraph[T]:
        """Build a graph with one node per catalog key.

        An entry ``catalog[u] = {d}`` adds the edge "u imports d". Imported
        units that are not catalog keys are dropped.

        Args:
            catalog: Mapping from each unit to the units it imports.

        Returns:
            A new DependencyGraph instance.

        Example:
            >>> graph = DependencyGraph.from_catalog({"a": [], "b": ["a", "x"]})
            >>> graph.imports("b")
            frozenset({'a'})

        """
        imports = {node: frozenset(d for d in deps if d in catalog) for node, deps in catalog.items()}
        importers: dict[T, set[T]] = {node: set() for node in catalog}
        for node, deps in imports.items():
            for dep in deps:
                importers[dep].add(node)

        return cls(
            _imports=imports,
            _importers={k: frozenset(v) for k, v in importers.items()},
        )

    @property
    def nodes(self) -> frozenset[T]:
        """All nodes in the graph."""
        return frozenset(self._imports)

    def edges(self) -> list[tuple[T, T]]:
        """All (importer, imported) edges, sorted."""
        return sorted((node, dep) for node, deps in self._imports.items() for dep in deps)

    def imports(self, node: T) -> frozenset[T]:
        """Get the units a node directly imports."""
        return self._imports.get(node, frozenset())

    def importers(self, node: T) -> frozenset[T]:
        """Get the units directly importing a node."""
        return self._importers.get(node, frozenset())

    def transitive_imports(self, node: T) -> frozenset[T]:
        """Get all units a node imports directly or indirectly.

        Args:
            node: The node to query.

        Returns:
            Set of all nodes reachable through import edges. Contains the
            node itself only if it lies on a cycle.

        """
        visited: set[T] = set()
        stack = list(self.imports(node))
        while stack:
            current = stack.pop()
            if current not in visited:
                visited.add(current)
                stack.extend(self.imports(current))
        return frozenset(visited)

    def topological_order(self) -> list[T]:
        """Return nodes so that every node comes before the units it imports.

        Ties are broken by taking the greatest ready node first.

        Raises:
            CycleError: If the graph contains a cycle.

        """
        return topological_sort(self._imports)

    def find_cycle(self) -> list[T] | None:
        """Return one import cycle ``[u1, ..., uk]`` (``uk`` imports ``u1``), or None."""
        return find_cycle(self._imports)

    def has_cycle(self) -> bool:
        """Check if the graph contains a cycle."""
        return self.find_cycle() is not None

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._imports)

    def __contains__(self, node: object) -> bool:
        """Check if a node is in the graph."""
        return node in self._imports
