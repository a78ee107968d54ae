import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from mergeorder._catalog import build_catalog, library_units
from mergeorder._errors import CycleError, ResolutionError
from mergeorder._graph import DependencyGraph
from mergeorder._merge import arrange_content, merge_units
from mergeorder._order import ordered_units
from mergeorder._resolver import FileSystemResolver, discover_units
from mergeorder._unit import UnitId, scheme_filter

from .config import ConfigError, MergeorderConfig, get_config

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

GENERATED_BY = "mergeorder"


class OrderReport(BaseModel):
    """Machine-readable result of the ``order`` command."""

    package: str
    pattern: str
    sort: bool
    units: list[str]


@dataclass(slots=True, frozen=True)
class _Settings:
    root: Path
    pattern: str
    package: str
    sort: bool
    config: MergeorderConfig


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Order and merge library units by their imports."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _settings(
    pattern: str | None,
    root: Path | None,
    package: str | None,
    sort: bool | None,
) -> _Settings:
    """Merge command-line options with [tool.mergeorder] config; options win."""
    try:
        config = get_config(root)
    except ConfigError as e:
        err_console.print(f"[red]✗ Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(code=2) from e

    resolved_root = root or config.project_root or Path.cwd()
    resolved_pattern = pattern or config.input
    if resolved_pattern is None:
        err_console.print("[red]✗ No input pattern given and no \\[tool.mergeorder].input configured[/red]")
        raise typer.Exit(code=2)

    return _Settings(
        root=resolved_root,
        pattern=resolved_pattern,
        package=package or config.package or resolved_root.resolve().name,
        sort=config.sort if sort is None else sort,
        config=config,
    )


def _discover(settings: _Settings, exclude: Path | None = None) -> list[UnitId]:
    """Discover the input units, leaving out ``exclude`` (a generated file)."""
    try:
        discovered = discover_units(settings.root, settings.pattern, settings.package)
    except ValueError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=2) from e
    if exclude is None:
        return discovered
    excluded = exclude.resolve()
    return [unit for unit in discovered if (settings.root / unit.path).resolve() != excluded]


def _order_units(settings: _Settings, resolver: FileSystemResolver, exclude: Path | None = None) -> list[UnitId]:
    """Discover and order units, reporting failures and exiting non-zero."""
    discovered = _discover(settings, exclude)
    try:
        return ordered_units(
            discovered,
            resolver,
            sort=settings.sort,
            include_scheme=scheme_filter(settings.config.schemes),
        )
    except CycleError as e:
        err_console.print(
            Panel(
                f"{escape(e.expected_state)}\n\n[bold]{escape(e.invalid_state)}[/bold]",
                title=f"[bold red]{e.message}[/bold red]",
                border_style="red",
            ),
        )
        raise typer.Exit(code=1) from e
    except ResolutionError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


PatternArgument = Annotated[
    str | None,
    typer.Argument(help="Glob of input files relative to the root (e.g. 'lib/*.dart')"),
]
RootOption = Annotated[
    Path | None,
    typer.Option("--root", help="Package root directory (default: directory of pyproject.toml)"),
]
PackageOption = Annotated[
    str | None,
    typer.Option("--package", help="Package name of the input units (default: project name from pyproject.toml)"),
]
SortOption = Annotated[
    bool | None,
    typer.Option("--sort/--no-sort", help="Order units by their imports"),
]


@app.command("order")
def order_command(
    pattern: PatternArgument = None,
    *,
    root: RootOption = None,
    package: PackageOption = None,
    sort: SortOption = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print a JSON report instead of one unit per line"),
    ] = False,
) -> None:
    """Print the input units in merge order (imported units first)."""
    settings = _settings(pattern, root, package, sort)
    resolver = FileSystemResolver(settings.root)
    units = _order_units(settings, resolver)

    if json_output:
        report = OrderReport(
            package=settings.package,
            pattern=settings.pattern,
            sort=settings.sort,
            units=[unit.uri for unit in units],
        )
        typer.echo(report.model_dump_json(indent=2))
        return

    for unit in units:
        typer.echo(unit.uri)
    err_console.print(f"[green]✓ Ordered {len(units)} unit(s)[/green]")


@app.command()
def graph(
    pattern: PatternArgument = None,
    *,
    root: RootOption = None,
    package: PackageOption = None,
) -> None:
    """Show the in-set imports of each input unit."""
    settings = _settings(pattern, root, package, sort=True)
    resolver = FileSystemResolver(settings.root)
    discovered = _discover(settings)
    try:
        units = library_units(discovered, resolver)
        catalog = build_catalog(units, resolver, include_scheme=scheme_filter(settings.config.schemes))
    except ResolutionError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    dependency_graph = DependencyGraph.from_catalog(catalog)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Unit", style="bold")
    table.add_column("Imports")
    table.add_column("All imports")
    table.add_column("Imported by", style="dim")
    for unit in sorted(dependency_graph.nodes):
        table.add_row(
            escape(unit.uri),
            escape(", ".join(u.uri for u in sorted(dependency_graph.imports(unit)))),
            escape(", ".join(u.uri for u in sorted(dependency_graph.transitive_imports(unit)))),
            escape(", ".join(u.uri for u in sorted(dependency_graph.importers(unit)))),
        )
    out_console.print(
        Panel(
            table,
            title=f"[bold]Package: {escape(settings.package)}[/bold]",
            subtitle=f"[dim]{len(dependency_graph)} units[/dim]",
            border_style="cyan",
        ),
    )

    cycle = dependency_graph.find_cycle()
    if cycle is not None:
        err_console.print(f"[red]✗ {escape(CycleError(cycle).invalid_state)}[/red]")
        raise typer.Exit(code=1)


@app.command()
def merge(
    pattern: PatternArgument = None,
    *,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path of the generated file (default: output from pyproject.toml)"),
    ] = None,
    root: RootOption = None,
    package: PackageOption = None,
    sort: SortOption = None,
    header: Annotated[str | None, typer.Option("--header", help="Text inserted below the generated-code marker")] = None,
    footer: Annotated[str | None, typer.Option("--footer", help="Text appended at the end")] = None,
) -> None:
    """Merge the input units into a single generated file."""
    settings = _settings(pattern, root, package, sort)
    output_path = output or settings.config.output
    if output_path is None:
        err_console.print("[red]✗ No output given and no \\[tool.mergeorder].output configured[/red]")
        raise typer.Exit(code=2)

    resolver = FileSystemResolver(settings.root)
    units = _order_units(settings, resolver, exclude=output_path)
    logger.debug("Merging %d units into %s", len(units), output_path)

    try:
        source = merge_units(units, resolver.read)
    except ResolutionError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    content = arrange_content(
        source,
        header=settings.config.header if header is None else header,
        footer=settings.config.footer if footer is None else footer,
        generated_by=GENERATED_BY,
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    err_console.print(f"[green]✓ Merged {len(units)} unit(s) into[/green] {output_path}")


if __name__ == "__main__":
    app()
