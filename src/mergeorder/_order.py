"""Order library units so every unit follows the units it imports."""

from collections.abc import Collection, Iterable, Mapping

from ._catalog import (
    AsyncImportResolver,
    ImportResolver,
    build_catalog,
    build_catalog_async,
    library_units,
    library_units_async,
)
from ._graph import DependencyGraph, SupportsOrdering
from ._unit import Normalizer, SchemeFilter, UnitId, default_scheme_filter, resolve_import


def order[T: SupportsOrdering](catalog: Mapping[T, Collection[T]]) -> list[T]:
    """Order catalog keys so that imported units precede their importers.

    The graph is sorted with importers first, always taking the greatest
    ready unit, and the result is reversed. Units with no import relation
    between them therefore come out in ascending order where the import
    constraints allow it. Imported units that are not catalog keys are
    ignored.

    Args:
        catalog: Mapping from each unit to the units it imports.

    Returns:
        Every catalog key exactly once; for each edge "u imports d",
        d comes before u.

    Raises:
        CycleError: If the imports form a cycle. No partial order is returned.

    Example:
        >>> order({"a": [], "b": ["a"], "c": ["a", "b"]})
        ['a', 'b', 'c']
        >>> order({"a": [], "b": []})
        ['a', 'b']

    """
    graph = DependencyGraph.from_catalog(catalog)
    return graph.topological_order()[::-1]


def ordered_units(
    discovered: Iterable[UnitId],
    resolver: ImportResolver,
    *,
    sort: bool = True,
    normalize: Normalizer = resolve_import,
    include_scheme: SchemeFilter = default_scheme_filter,
) -> list[UnitId]:
    """Return the discovered library units in a safe merge order.

    Fragments are skipped. With ``sort=False`` imports are not inspected and
    the library units are returned in ascending order.

    Raises:
        ResolutionError: If a unit cannot be read.
        CycleError: If the library units import each other in a cycle.

    """
    units = library_units(discovered, resolver)
    if not sort:
        return units
    catalog = build_catalog(units, resolver, normalize=normalize, include_scheme=include_scheme)
    return order(catalog)


async def ordered_units_async(
    discovered: Iterable[UnitId],
    resolver: AsyncImportResolver,
    *,
    sort: bool = True,
    normalize: Normalizer = resolve_import,
    include_scheme: SchemeFilter = default_scheme_filter,
) -> list[UnitId]:
    """Asynchronous counterpart of ordered_units.

    Ordering starts only after the whole catalog has been resolved.
    """
    units = await library_units_async(discovered, resolver)
    if not sort:
        return units
    catalog = await build_catalog_async(units, resolver, normalize=normalize, include_scheme=include_scheme)
    return order(catalog)
