"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import cast

from mergeorder._unit import DEFAULT_SCHEMES


class ConfigError(Exception):
    """Error in mergeorder configuration."""


@dataclass(slots=True, frozen=True)
class MergeorderConfig:
    """Configuration loaded from pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    input: str | None = None
    package: str | None = None
    output: Path | None = None
    header: str = ""
    footer: str = ""
    sort: bool = True
    schemes: frozenset[str] = DEFAULT_SCHEMES
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _get_str(section: dict[str, object], key: str) -> str | None:
    if key not in section:
        return None
    value = section[key]
    if not isinstance(value, str):
        msg = f"Invalid [tool.mergeorder].{key}: expected string"
        raise ConfigError(msg)
    return value


def _parse_schemes(value: object) -> frozenset[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        msg = 'Invalid [tool.mergeorder].schemes: expected list of strings (use "" for relative imports)'
        raise ConfigError(msg)
    return frozenset(cast("list[str]", value))


def load_config(pyproject_path: Path) -> MergeorderConfig:
    """Load and validate [tool.mergeorder] config from pyproject.toml.

    The package name defaults to ``[project].name``.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed MergeorderConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    project_name = data.get("project", {}).get("name")
    if not isinstance(project_name, str):
        project_name = None

    section = cast("dict[str, object]", data.get("tool", {}).get("mergeorder", {}))
    if not section:
        # No [tool.mergeorder] section - return empty config
        return MergeorderConfig(package=project_name, project_root=project_root)

    output: Path | None = None
    output_value = _get_str(section, "output")
    if output_value is not None:
        output = Path(output_value)
        if not output.is_absolute():
            output = project_root / output

    sort = section.get("sort", True)
    if not isinstance(sort, bool):
        msg = "Invalid [tool.mergeorder].sort: expected boolean"
        raise ConfigError(msg)

    schemes = _parse_schemes(section["schemes"]) if "schemes" in section else DEFAULT_SCHEMES

    return MergeorderConfig(
        input=_get_str(section, "input"),
        package=_get_str(section, "package") or project_name,
        output=output,
        header=_get_str(section, "header") or "",
        footer=_get_str(section, "footer") or "",
        sort=sort,
        schemes=schemes,
        project_root=project_root,
    )


def get_config(start_dir: Path | None = None) -> MergeorderConfig:
    """Get config from pyproject.toml in start_dir (default: cwd) or its parents.

    Returns:
        MergeorderConfig (may be empty if no pyproject.toml or no [tool.mergeorder] section)

    """
    pyproject_path = find_pyproject_toml(start_dir)
    if pyproject_path is None:
        return MergeorderConfig()
    return load_config(pyproject_path)
