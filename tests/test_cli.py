"""Tests for the mergeorder command-line interface."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from mergeorder._cli.main import app, out_console
from mergeorder._merge import GENERATED_MARKER

runner = CliRunner()


def write(root: Path, relative: str, text: str) -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    write(tmp_path, "lib/a.dart", "import 'c.dart';\n\nint a = c;\n")
    write(tmp_path, "lib/b.dart", "int b = 2;\n")
    write(tmp_path, "lib/c.dart", "import 'dart:core';\n\nint c = 3;\n")
    write(tmp_path, "lib/c_part.dart", "part of 'c.dart';\n")
    return tmp_path


@pytest.fixture
def cyclic_project(tmp_path: Path) -> Path:
    write(tmp_path, "lib/a.dart", "import 'b.dart';\n")
    write(tmp_path, "lib/b.dart", "import 'a.dart';\n")
    return tmp_path


class TestOrderCommand:
    """Tests for `mergeorder order`."""

    def test_prints_units_in_merge_order(self, project: Path) -> None:
        result = runner.invoke(app, ["order", "lib/*.dart", "--root", str(project), "--package", "demo"])

        assert result.exit_code == 0, result.output
        c = result.output.index("package:demo/c.dart")
        a = result.output.index("package:demo/a.dart")
        b = result.output.index("package:demo/b.dart")
        assert c < a < b
        assert "c_part.dart" not in result.output

    def test_json_report(self, project: Path) -> None:
        result = runner.invoke(app, ["order", "lib/*.dart", "--root", str(project), "--package", "demo", "--json"])

        assert result.exit_code == 0, result.output
        report = json.loads(result.stdout)
        assert report == {
            "package": "demo",
            "pattern": "lib/*.dart",
            "sort": True,
            "units": ["package:demo/c.dart", "package:demo/a.dart", "package:demo/b.dart"],
        }

    def test_no_sort(self, project: Path) -> None:
        args = ["order", "lib/*.dart", "--root", str(project), "--package", "demo", "--no-sort", "--json"]
        result = runner.invoke(app, args)

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["units"] == [
            "package:demo/a.dart",
            "package:demo/b.dart",
            "package:demo/c.dart",
        ]

    def test_cycle_exits_with_error(self, cyclic_project: Path) -> None:
        result = runner.invoke(app, ["order", "lib/*.dart", "--root", str(cyclic_project), "--package", "demo"])

        assert result.exit_code == 1
        assert "Circular dependency detected." in result.output

    def test_missing_pattern(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["order", "--root", str(tmp_path)])

        assert result.exit_code == 2

    def test_pattern_and_package_from_config(self, project: Path) -> None:
        (project / "pyproject.toml").write_text(
            "[project]\nname = 'demo'\n\n[tool.mergeorder]\ninput = 'lib/*.dart'\n",
        )

        result = runner.invoke(app, ["order", "--root", str(project), "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["units"][0] == "package:demo/c.dart"

    def test_invalid_config(self, project: Path) -> None:
        (project / "pyproject.toml").write_text("[tool.mergeorder]\nsort = 'maybe'\n")

        result = runner.invoke(app, ["order", "--root", str(project)])

        assert result.exit_code == 2
        assert "Configuration error" in result.output

    @pytest.mark.parametrize("pattern", ["/lib/*.dart", "../*.dart"])
    def test_pattern_outside_root(self, project: Path, pattern: str) -> None:
        result = runner.invoke(app, ["order", pattern, "--root", str(project), "--package", "demo"])

        assert result.exit_code == 2
        assert "relative to the package root" in result.output


class TestMergeCommand:
    """Tests for `mergeorder merge`."""

    def test_merge_writes_ordered_content(self, project: Path) -> None:
        output = project / "out" / "merged.dart"
        args = ["merge", "lib/*.dart", "--root", str(project), "--package", "demo", "-o", str(output)]
        result = runner.invoke(app, [*args, "--header", "// header", "--footer", "// footer"])

        assert result.exit_code == 0, result.output
        content = output.read_text()
        assert content.startswith("// GENERATED CODE. DO NOT MODIFY. mergeorder\n\n// header\n")
        assert content.index("int c = 3;") < content.index("int a = c;") < content.index("int b = 2;")
        assert content.endswith("// footer\n")

    def test_merge_from_config(self, project: Path) -> None:
        (project / "pyproject.toml").write_text(
            """
[project]
name = "demo"

[tool.mergeorder]
input = "lib/*.dart"
output = "gen/merged.dart"
header = "// from config"
""",
        )

        result = runner.invoke(app, ["merge", "--root", str(project)])

        assert result.exit_code == 0, result.output
        content = (project / "gen" / "merged.dart").read_text()
        assert "// from config" in content
        assert content.index("int c = 3;") < content.index("int a = c;")

    def test_merge_requires_output(self, project: Path) -> None:
        result = runner.invoke(app, ["merge", "lib/*.dart", "--root", str(project)])

        assert result.exit_code == 2

    def test_merge_cycle_writes_nothing(self, cyclic_project: Path) -> None:
        output = cyclic_project / "merged.dart"
        args = ["merge", "lib/*.dart", "--root", str(cyclic_project), "--package", "demo", "-o", str(output)]
        result = runner.invoke(app, args)

        assert result.exit_code == 1
        assert not output.exists()

    def test_merge_into_input_directory_is_stable(self, project: Path) -> None:
        output = project / "lib" / "merged.dart"
        args = ["merge", "lib/*.dart", "--root", str(project), "--package", "demo", "-o", str(output)]

        first = runner.invoke(app, args)
        assert first.exit_code == 0, first.output
        content = output.read_text()
        second = runner.invoke(app, args)

        assert second.exit_code == 0, second.output
        assert output.read_text() == content
        assert content.count(GENERATED_MARKER) == 1


class TestGraphCommand:
    """Tests for `mergeorder graph`."""

    def test_graph_succeeds_on_acyclic_input(self, project: Path) -> None:
        result = runner.invoke(app, ["graph", "lib/*.dart", "--root", str(project), "--package", "demo"])

        assert result.exit_code == 0, result.output
        assert "Package: demo" in result.output

    def test_graph_reports_cycle(self, cyclic_project: Path) -> None:
        result = runner.invoke(app, ["graph", "lib/*.dart", "--root", str(cyclic_project), "--package", "demo"])

        assert result.exit_code == 1
        assert "imports" in result.output

    def test_graph_shows_transitive_imports(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        write(tmp_path, "lib/a.dart", "import 'b.dart';\n")
        write(tmp_path, "lib/b.dart", "import 'c.dart';\n")
        write(tmp_path, "lib/c.dart", "int c = 3;\n")
        monkeypatch.setattr(out_console, "width", 200)

        result = runner.invoke(app, ["graph", "lib/*.dart", "--root", str(tmp_path), "--package", "demo"])

        assert result.exit_code == 0, result.output
        assert "All imports" in result.output
        assert "package:demo/b.dart, package:demo/c.dart" in result.output

    def test_graph_pattern_outside_root(self, project: Path) -> None:
        result = runner.invoke(app, ["graph", "../*.dart", "--root", str(project), "--package", "demo"])

        assert result.exit_code == 2
