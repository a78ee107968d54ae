"""Dependency ordering of library units for merging code generators."""

__all__ = [
    "DEFAULT_SCHEMES",
    "AsyncImportResolver",
    "Catalog",
    "CycleError",
    "DependencyGraph",
    "FileSystemResolver",
    "ImportResolver",
    "ResolutionError",
    "ThreadedResolver",
    "UnitId",
    "arrange_content",
    "build_catalog",
    "build_catalog_async",
    "default_scheme_filter",
    "discover_units",
    "filter_imports",
    "find_cycle",
    "library_units",
    "library_units_async",
    "merge_units",
    "order",
    "ordered_units",
    "ordered_units_async",
    "resolve_import",
    "scheme_filter",
    "topological_sort",
    "uri_scheme",
]

from ._catalog import (
    AsyncImportResolver,
    Catalog,
    ImportResolver,
    build_catalog,
    build_catalog_async,
    filter_imports,
    library_units,
    library_units_async,
)
from ._errors import CycleError, ResolutionError
from ._graph import DependencyGraph, find_cycle, topological_sort
from ._merge import arrange_content, merge_units
from ._order import order, ordered_units, ordered_units_async
from ._resolver import FileSystemResolver, ThreadedResolver, discover_units
from ._unit import DEFAULT_SCHEMES, UnitId, default_scheme_filter, resolve_import, scheme_filter, uri_scheme
