"""Tests for the configuration module."""

from pathlib import Path

import pytest

from mergeorder._cli.config import (
    ConfigError,
    MergeorderConfig,
    find_pyproject_toml,
    get_config,
    load_config,
)
from mergeorder._unit import DEFAULT_SCHEMES


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml function."""

    def test_finds_in_current_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in current directory."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        result = find_pyproject_toml(tmp_path)

        assert result == pyproject

    def test_finds_in_parent_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in parent directory."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        subdir = tmp_path / "lib" / "src"
        subdir.mkdir(parents=True)

        result = find_pyproject_toml(subdir)

        assert result == pyproject

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        """Should return None when no pyproject.toml is found."""
        result = find_pyproject_toml(tmp_path)

        assert result is None


class TestLoadConfig:
    """Tests for loading [tool.mergeorder]."""

    def test_full_section(self, tmp_path: Path) -> None:
        """Should parse every supported key."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[project]
name = "demo"

[tool.mergeorder]
input = "lib/*.dart"
output = "lib/generated/merged.dart"
header = "// header"
footer = "// footer"
sort = false
schemes = ["package", ""]
""",
        )

        config = load_config(pyproject)

        assert config == MergeorderConfig(
            input="lib/*.dart",
            package="demo",
            output=tmp_path / "lib/generated/merged.dart",
            header="// header",
            footer="// footer",
            sort=False,
            schemes=frozenset({"package", ""}),
            project_root=tmp_path,
        )

    def test_missing_section_uses_defaults(self, tmp_path: Path) -> None:
        """Should return defaults with the project name as package."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'demo'\n")

        config = load_config(pyproject)

        assert config.package == "demo"
        assert config.input is None
        assert config.sort is True
        assert config.schemes == DEFAULT_SCHEMES
        assert config.project_root == tmp_path

    def test_package_overrides_project_name(self, tmp_path: Path) -> None:
        """Should prefer [tool.mergeorder].package over [project].name."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'demo'\n\n[tool.mergeorder]\npackage = 'other'\n")

        assert load_config(pyproject).package == "other"

    def test_absolute_output_kept(self, tmp_path: Path) -> None:
        """Should not rebase absolute output paths."""
        output = tmp_path / "elsewhere" / "out.dart"
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(f"[tool.mergeorder]\noutput = '{output.as_posix()}'\n")

        assert load_config(pyproject).output == output

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Should raise ConfigError for malformed TOML."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.mergeorder\n")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(pyproject)

    @pytest.mark.parametrize(
        ("body", "match"),
        [
            ("input = 3", r"\.input: expected string"),
            ("output = ['a']", r"\.output: expected string"),
            ("sort = 'yes'", r"\.sort: expected boolean"),
            ("schemes = 'package'", r"\.schemes: expected list of strings"),
            ("schemes = ['package', 1]", r"\.schemes: expected list of strings"),
        ],
    )
    def test_invalid_values(self, tmp_path: Path, body: str, match: str) -> None:
        """Should raise ConfigError for values of the wrong type."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(f"[tool.mergeorder]\n{body}\n")

        with pytest.raises(ConfigError, match=match):
            load_config(pyproject)


class TestGetConfig:
    """Tests for get_config."""

    def test_no_pyproject(self, tmp_path: Path) -> None:
        """Should return an empty config when no pyproject.toml exists."""
        assert get_config(tmp_path) == MergeorderConfig()

    def test_from_subdirectory(self, tmp_path: Path) -> None:
        """Should load the nearest pyproject.toml above the start directory."""
        (tmp_path / "pyproject.toml").write_text("[tool.mergeorder]\ninput = 'lib/*.dart'\n")
        subdir = tmp_path / "lib"
        subdir.mkdir()

        assert get_config(subdir).input == "lib/*.dart"
