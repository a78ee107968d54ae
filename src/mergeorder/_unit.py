"""Library unit identifiers and import-target normalization."""

import posixpath
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Self

type SchemeFilter = Callable[[str], bool]
"""Predicate deciding whether imports with a given URI scheme are graph edges."""

type Normalizer = Callable[[str, UnitId], UnitId | None]
"""Map a raw import target and the importing unit to a UnitId (or None)."""

DEFAULT_SCHEMES: frozenset[str] = frozenset({"package", "asset", ""})

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")

_LIB_DIR = "lib/"


@dataclass(frozen=True, slots=True, order=True)
class UnitId:
    """Identifier of a library unit: a package name plus a path inside it.

    Units are ordered by package first and path second, which is the order
    used for tie-breaking when several processing orders are valid.

    Attributes:
        package: Name of the package the unit belongs to.
        path: POSIX path of the unit relative to the package root.

    """

    package: str
    path: str

    def __post_init__(self) -> None:
        if not self.package:
            msg = "UnitId package must not be empty"
            raise ValueError(msg)
        if not self.path or self.path.startswith("/"):
            msg = f"UnitId path must be a non-empty relative path, got {self.path!r}"
            raise ValueError(msg)

    @property
    def uri(self) -> str:
        """Canonical URI of the unit (``package:`` for lib/ paths, else ``asset:``)."""
        if self.path.startswith(_LIB_DIR):
            return f"package:{self.package}/{self.path.removeprefix(_LIB_DIR)}"
        return f"asset:{self.package}/{self.path}"

    @classmethod
    def parse(cls, uri: str) -> Self:
        """Parse a ``package:`` or ``asset:`` URI back into a UnitId.

        Dot segments are collapsed, so ``package:demo/src/../a.dart`` and
        ``package:demo/a.dart`` name the same unit.

        Raises:
            ValueError: If the URI has another scheme, no path, or a path
                escaping the package (or its lib/ directory).

        """
        scheme = uri_scheme(uri)
        rest = uri[len(scheme) + 1 :]
        package, _, raw_path = rest.partition("/")
        path = _normalize_path(raw_path)
        if scheme not in ("package", "asset") or not package or path is None:
            msg = f"Cannot parse unit URI {uri!r}"
            raise ValueError(msg)
        if scheme == "package":
            path = _LIB_DIR + path
        return cls(package, path)

    def __str__(self) -> str:
        return f"{self.package}|{self.path}"


def _normalize_path(path: str) -> str | None:
    """Collapse dot segments of a relative path; None if empty, absolute or escaping."""
    if not path or path.startswith("/"):
        return None
    normalized = posixpath.normpath(path)
    if normalized in (".", "..") or normalized.startswith("../"):
        return None
    return normalized


def uri_scheme(target: str) -> str:
    """Return the URI scheme of an import target, or ``""`` for relative paths.

    Example:
        >>> uri_scheme("package:foo/foo.dart")
        'package'
        >>> uri_scheme("../src/a.dart")
        ''

    """
    match = _SCHEME_RE.match(target)
    return match.group(1) if match else ""


def default_scheme_filter(scheme: str) -> bool:
    """Accept ``package``, ``asset`` and relative (empty scheme) imports."""
    return scheme in DEFAULT_SCHEMES


def scheme_filter(schemes: Iterable[str]) -> SchemeFilter:
    """Build a scheme predicate accepting exactly the given schemes."""
    accepted = frozenset(schemes)
    return accepted.__contains__


def resolve_import(target: str, importer: UnitId) -> UnitId | None:
    """Normalize a raw import target relative to the importing unit.

    ``package:pkg/x`` maps to ``lib/x`` in ``pkg``, ``asset:pkg/x`` maps to
    ``x`` in ``pkg``, and relative targets are resolved against the
    directory of the importer. Anything else, or a relative path escaping
    the package root, is unresolvable.

    Args:
        target: Import target as written in the directive.
        importer: The unit containing the directive.

    Returns:
        The normalized UnitId, or None if the target cannot be resolved.

    """
    scheme = uri_scheme(target)
    if scheme in ("package", "asset"):
        try:
            return UnitId.parse(target)
        except ValueError:
            return None
    if scheme:
        return None

    if not target or target.startswith("/"):
        return None
    path = _normalize_path(posixpath.join(posixpath.dirname(importer.path), target))
    if path is None:
        return None
    return UnitId(importer.package, path)
