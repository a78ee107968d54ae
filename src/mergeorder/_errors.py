"""Errors raised while ordering library units."""

from collections.abc import Hashable, Sequence


class ResolutionError(Exception):
    """A library unit could not be read or parsed by the resolver."""

    def __init__(self, unit: Hashable, reason: str) -> None:
        self.unit = unit
        self.reason = reason
        super().__init__(f"Could not resolve {unit}: {reason}")


class CycleError(ValueError):
    """The import graph contains a cycle, so no processing order exists.

    Attributes:
        cycle: Units forming the cycle; each unit imports the next one and
            the last unit imports the first.
        message: Short description of the failure.
        expected_state: What the inputs must satisfy.
        invalid_state: The offending import chain.

    """

    message = "Circular dependency detected."
    expected_state = "Input files must not include each other. Alternatively, disable sorting (sort = false)."

    def __init__(self, cycle: Sequence[Hashable]) -> None:
        if not cycle:
            msg = "A cycle must contain at least one unit"
            raise ValueError(msg)
        self.cycle = tuple(cycle)
        super().__init__(f"{self.message} {self.expected_state} {self.invalid_state}")

    @property
    def chain(self) -> tuple[Hashable, ...]:
        """The cycle closed back onto its first unit."""
        return (*self.cycle, self.cycle[0])

    @property
    def invalid_state(self) -> str:
        return "File " + " imports ".join(str(unit) for unit in self.chain) + "."
