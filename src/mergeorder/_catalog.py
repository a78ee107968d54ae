"""Build the catalog of in-set import edges for a set of library units."""

import asyncio
import logging
from collections.abc import Coroutine, Iterable, Sequence
from typing import Any, Protocol

from ._unit import Normalizer, SchemeFilter, UnitId, default_scheme_filter, resolve_import, uri_scheme

logger = logging.getLogger(__name__)

type Catalog = dict[UnitId, frozenset[UnitId]]


class ImportResolver(Protocol):
    """Reads library units and reports their import directives."""

    def is_library(self, unit: UnitId) -> bool:
        """Return False if the unit is a fragment (part) of another unit."""
        ...

    def imports(self, unit: UnitId) -> Sequence[str]:
        """Return the raw import targets of a unit.

        Raises:
            ResolutionError: If the unit cannot be read or parsed.

        """
        ...


class AsyncImportResolver(Protocol):
    """Asynchronous counterpart of ImportResolver."""

    async def is_library(self, unit: UnitId) -> bool: ...

    async def imports(self, unit: UnitId) -> Sequence[str]: ...


def library_units(candidates: Iterable[UnitId], resolver: ImportResolver) -> list[UnitId]:
    """Keep only full compilation units, skipping fragments. Sorted ascending."""
    return sorted(unit for unit in set(candidates) if resolver.is_library(unit))


async def library_units_async(candidates: Iterable[UnitId], resolver: AsyncImportResolver) -> list[UnitId]:
    """Asynchronous counterpart of library_units; checks all candidates concurrently."""
    units = sorted(set(candidates))
    flags = await _gather_all([resolver.is_library(unit) for unit in units])
    return [unit for unit, is_library in zip(units, flags, strict=True) if is_library]


def filter_imports(
    unit: UnitId,
    targets: Iterable[str],
    units: frozenset[UnitId],
    *,
    normalize: Normalizer = resolve_import,
    include_scheme: SchemeFilter = default_scheme_filter,
) -> frozenset[UnitId]:
    """Normalize the raw import targets of a unit and keep the in-set ones.

    Targets are dropped silently if their scheme is rejected by
    ``include_scheme``, if ``normalize`` cannot resolve them, or if the
    resolved unit is not a member of ``units``.

    Args:
        unit: The importing unit.
        targets: Raw import targets as written in the unit.
        units: The set of units being ordered.
        normalize: Maps a raw target and the importer to a UnitId or None.
        include_scheme: Predicate on the target's URI scheme.

    Returns:
        The set of imported units that belong to ``units``.

    """
    kept: set[UnitId] = set()
    for target in targets:
        if not include_scheme(uri_scheme(target)):
            logger.debug("Skipping import %r in %s (scheme not included)", target, unit)
            continue
        resolved = normalize(target, unit)
        if resolved is None:
            logger.debug("Skipping unresolvable import %r in %s", target, unit)
            continue
        if resolved not in units:
            logger.debug("Skipping import %s in %s (not an input unit)", resolved, unit)
            continue
        kept.add(resolved)
    return frozenset(kept)


def build_catalog(
    units: Iterable[UnitId],
    resolver: ImportResolver,
    *,
    normalize: Normalizer = resolve_import,
    include_scheme: SchemeFilter = default_scheme_filter,
) -> Catalog:
    """Map each unit to the units it imports, restricted to the input set.

    Args:
        units: The library units to catalog.
        resolver: Provides the raw import targets of each unit.
        normalize: Maps a raw target and the importer to a UnitId or None.
        include_scheme: Predicate on the target's URI scheme.

    Returns:
        Mapping from every unit to the in-set units it imports.

    Raises:
        ResolutionError: If the resolver cannot read a unit.

    """
    unit_set = frozenset(units)
    catalog: Catalog = {}
    for unit in sorted(unit_set):
        targets = resolver.imports(unit)
        catalog[unit] = filter_imports(unit, targets, unit_set, normalize=normalize, include_scheme=include_scheme)
    logger.debug("Built catalog of %d units", len(catalog))
    return catalog


async def build_catalog_async(
    units: Iterable[UnitId],
    resolver: AsyncImportResolver,
    *,
    normalize: Normalizer = resolve_import,
    include_scheme: SchemeFilter = default_scheme_filter,
) -> Catalog:
    """Asynchronous counterpart of build_catalog.

    All units are resolved concurrently. The catalog is assembled only once
    every resolution has finished; if one fails, the others are cancelled
    and its ResolutionError is raised.
    """
    unit_set = frozenset(units)
    ordered = sorted(unit_set)
    results = await _gather_all([resolver.imports(unit) for unit in ordered])

    catalog: Catalog = {
        unit: filter_imports(unit, targets, unit_set, normalize=normalize, include_scheme=include_scheme)
        for unit, targets in zip(ordered, results, strict=True)
    }
    logger.debug("Built catalog of %d units", len(catalog))
    return catalog


async def _gather_all[R](coros: list[Coroutine[Any, Any, R]]) -> list[R]:
    """Run coroutines concurrently, cancelling the rest when one fails.

    The first failure is re-raised as itself rather than as an ExceptionGroup.
    """
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(coro) for coro in coros]
    except ExceptionGroup as group:
        raise group.exceptions[0] from None
    return [task.result() for task in tasks]
