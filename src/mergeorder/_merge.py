"""Merge the sources of ordered units into one generated file."""

from collections.abc import Callable, Iterable

from ._unit import UnitId

type Formatter = Callable[[str], str]

GENERATED_MARKER = "// GENERATED CODE. DO NOT MODIFY."


def merge_units(units: Iterable[UnitId], read: Callable[[UnitId], str]) -> str:
    """Concatenate the stripped sources of units in the given order."""
    return "\n\n".join(read(unit).strip() for unit in units)


def arrange_content(
    source: str,
    *,
    header: str = "",
    footer: str = "",
    generated_by: str = "",
    formatter: Formatter | None = None,
) -> str:
    """Wrap merged source with the generated-code marker, header and footer.

    Args:
        source: Merged source code.
        header: Text inserted below the marker line.
        footer: Text appended at the very bottom.
        generated_by: Appended to the marker line (e.g. the generator's name).
        formatter: Applied to the final text; identity if None.

    Returns:
        The arranged (and formatted) content.

    Example:
        >>> print(arrange_content("int a = 1;", header="// h", generated_by="mergeorder"), end="")
        // GENERATED CODE. DO NOT MODIFY. mergeorder
        <BLANKLINE>
        // h
        int a = 1;
        <BLANKLINE>
        <BLANKLINE>

    """
    marker = f"{GENERATED_MARKER} {generated_by}".rstrip()
    parts = [f"{marker}\n\n{header}\n", f"{source.strip()}\n", "\n", f"{footer}\n"]
    content = "".join(parts)
    if formatter is None:
        return content
    return formatter(content)
