"""Structured remote call expressions.

A call is built from a remote function name and an ordered list of typed
arguments. Rendering to the evaluator's textual syntax lives in
``dsspatial.dispatch.serializer`` so the argument shape of every operation
can be asserted without touching strings.
"""

from dataclasses import dataclass, field

LiteralValue = str | int | float | bool | None


@dataclass(frozen=True)
class Symbol:
    """Reference to an object in the remote workspace, passed unquoted."""

    name: str


@dataclass(frozen=True)
class Literal:
    """Scalar value passed by value (string, number, boolean or NULL)."""

    value: LiteralValue


@dataclass(frozen=True)
class StringVector:
    """Character vector literal, e.g. a list of column names."""

    values: tuple[str, ...]


Argument = Symbol | Literal | StringVector


@dataclass(frozen=True)
class CallExpression:
    """Remote function invocation: ``function(arg1, arg2, ...)``."""

    function: str
    args: tuple[Argument, ...] = field(default_factory=tuple)

    @property
    def symbols(self) -> list[str]:
        """Names of the remote objects this call reads."""
        return [arg.name for arg in self.args if isinstance(arg, Symbol)]
