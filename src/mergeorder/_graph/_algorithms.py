"""Graph algorithms for dependency graph operations."""

from bisect import insort
from collections import defaultdict
from collections.abc import Collection, Mapping
from typing import Any, Protocol

from mergeorder._errors import CycleError


class SupportsOrdering(Protocol):
    """Hashable values with a total order, used for deterministic tie-breaking."""

    def __lt__(self, other: Any, /) -> bool: ...  # noqa: ANN401

    def __hash__(self) -> int: ...


def topological_sort[T: SupportsOrdering](successors: Mapping[T, Collection[T]]) -> list[T]:
    """Sort a graph topologically, breaking ties by taking the greatest node.

    Given a graph represented as a mapping from nodes to their successors,
    return nodes in an order where each node appears before all of its
    successors. Whenever several nodes are ready, the greatest one is taken
    first, so the result is fully determined by the graph and the node order.

    Args:
        successors: Mapping from node to collection of successor nodes.
            Successors that are not keys of the mapping are ignored.

    Returns:
        List of nodes in topological order.

    Raises:
        CycleError: If the graph contains a cycle; carries one such cycle.

    Example:
        >>> topological_sort({"a": ["b"], "b": ["c"], "c": []})
        ['a', 'b', 'c']
        >>> topological_sort({"a": [], "b": []})
        ['b', 'a']

    """
    indegree: defaultdict[T, int] = defaultdict(int)
    for node, succs in successors.items():
        indegree[node] = indegree.get(node, 0)
        for succ in set(succs):
            if succ in successors:
                indegree[succ] += 1

    # Kept sorted ascending; pop() takes the greatest ready node
    ready = sorted(node for node, deg in indegree.items() if deg == 0)
    order: list[T] = []

    while ready:
        node = ready.pop()
        order.append(node)
        for succ in set(successors[node]):
            if succ not in successors:
                continue
            indegree[succ] -= 1
            if indegree[succ] == 0:
                insort(ready, succ)

    if len(order) != len(indegree):
        cycle = find_cycle(successors)
        if cycle is None:  # pragma: no cover
            msg = "Topological sort stalled on an acyclic graph"
            raise RuntimeError(msg)
        raise CycleError(cycle)

    return order


def find_cycle[T: SupportsOrdering](successors: Mapping[T, Collection[T]]) -> list[T] | None:
    """Find one cycle in a graph using depth-first search.

    Nodes and their successors are visited in ascending order, so the same
    graph always yields the same cycle.

    Args:
        successors: Mapping from node to collection of successor nodes.
            Successors that are not keys of the mapping are ignored.

    Returns:
        Nodes ``[n1, ..., nk]`` where each node has an edge to the next and
        ``nk`` has an edge to ``n1``, or None if the graph is acyclic.

    Example:
        >>> find_cycle({"a": ["b"], "b": ["c"], "c": ["a"]})
        ['a', 'b', 'c']
        >>> find_cycle({"a": ["a"]})
        ['a']

    """
    done: set[T] = set()

    for start in sorted(successors):
        if start in done:
            continue
        # Current DFS path with an iterator over each node's remaining successors
        path: list[T] = [start]
        on_path: dict[T, int] = {start: 0}
        iterators = [iter(_sorted_successors(successors, start))]

        while path:
            succ = next(iterators[-1], None)
            if succ is None:
                node = path.pop()
                iterators.pop()
                del on_path[node]
                done.add(node)
            elif succ in on_path:
                return path[on_path[succ] :]
            elif succ not in done:
                on_path[succ] = len(path)
                path.append(succ)
                iterators.append(iter(_sorted_successors(successors, succ)))

    return None


def _sorted_successors[T: SupportsOrdering](successors: Mapping[T, Collection[T]], node: T) -> list[T]:
    return sorted(succ for succ in set(successors[node]) if succ in successors)
