"""File-system discovery and import resolution for library units."""

import asyncio
import logging
import re
from collections.abc import Sequence
from pathlib import Path, PurePosixPath

from ._catalog import ImportResolver
from ._errors import ResolutionError
from ._unit import UnitId

logger = logging.getLogger(__name__)

IMPORT_DIRECTIVE = re.compile(r"""^[ \t]*(?:import|export)\s+(['"])(?P<target>[^'"]+)\1""", re.MULTILINE)
"""Matches ``import 'x';`` and ``export "x";`` directives at the start of a line."""

PART_OF_DIRECTIVE = re.compile(r"^[ \t]*part\s+of\b", re.MULTILINE)
"""Matches the ``part of`` directive that marks a fragment of another unit."""

SKIPPED_SPAN = re.compile(r"/\*.*?\*/|'''.*?'''|\"\"\".*?\"\"\"", re.DOTALL)
"""Matches block comments and multi-line strings, whose contents are not directives."""


def discover_units(root: Path, pattern: str, package: str) -> list[UnitId]:
    """Find the files under ``root`` matching a glob pattern.

    Args:
        root: Package root directory.
        pattern: Glob relative to ``root`` (e.g. ``lib/*.dart`` or ``lib/**/*.dart``).
        package: Package name given to the discovered units.

    Returns:
        UnitIds of the matching files, sorted.

    Raises:
        ValueError: If the pattern is absolute or reaches outside ``root``.

    """
    pure = PurePosixPath(pattern)
    if pure.is_absolute() or Path(pattern).is_absolute() or ".." in pure.parts:
        msg = f"Input pattern must be relative to the package root: {pattern!r}"
        raise ValueError(msg)
    units = sorted(
        UnitId(package, path.relative_to(root).as_posix()) for path in root.glob(pattern) if path.is_file()
    )
    logger.debug("Discovered %d files matching %r in %s", len(units), pattern, root)
    return units


class FileSystemResolver:
    """Resolve units by scanning the directives of files under a package root.

    Only line-leading directives are recognised; the source is not parsed.
    Block comments and triple-quoted strings are blanked out before scanning,
    keeping their line breaks. Nested block comments are not understood.

    Attributes:
        root: Package root directory; a unit's path is relative to it.
        import_directive: Pattern with a ``target`` group for import targets.
        fragment_directive: Pattern whose presence marks a unit as a fragment.

    """

    def __init__(
        self,
        root: Path,
        *,
        import_directive: re.Pattern[str] = IMPORT_DIRECTIVE,
        fragment_directive: re.Pattern[str] = PART_OF_DIRECTIVE,
        encoding: str = "utf-8",
    ) -> None:
        self.root = root
        self.import_directive = import_directive
        self.fragment_directive = fragment_directive
        self.encoding = encoding

    def path_of(self, unit: UnitId) -> Path:
        return self.root / unit.path

    def read(self, unit: UnitId) -> str:
        """Return the source of a unit.

        Raises:
            ResolutionError: If the file cannot be read or decoded.

        """
        path = self.path_of(unit)
        try:
            return path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ResolutionError(unit, str(e)) from e

    def directives(self, unit: UnitId) -> str:
        """Return the source of a unit with comments and multi-line strings blanked out."""
        return SKIPPED_SPAN.sub(lambda match: "\n" * match.group().count("\n"), self.read(unit))

    def is_library(self, unit: UnitId) -> bool:
        is_fragment = self.fragment_directive.search(self.directives(unit)) is not None
        if is_fragment:
            logger.debug("Skipping fragment %s", unit)
        return not is_fragment

    def imports(self, unit: UnitId) -> list[str]:
        return [match.group("target") for match in self.import_directive.finditer(self.directives(unit))]


class ThreadedResolver:
    """Adapt a blocking ImportResolver to the asynchronous protocol.

    Each call runs in a worker thread, so several units can be read at once.
    """

    def __init__(self, resolver: ImportResolver) -> None:
        self.resolver = resolver

    async def is_library(self, unit: UnitId) -> bool:
        return await asyncio.to_thread(self.resolver.is_library, unit)

    async def imports(self, unit: UnitId) -> Sequence[str]:
        return await asyncio.to_thread(self.resolver.imports, unit)
