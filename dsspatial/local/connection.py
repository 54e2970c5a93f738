"""In-process connection backed by an emulated workspace.

LocalConnection parses each call expression it receives and evaluates it
against SERVER_FUNCTIONS, so the client can be exercised end to end without
a study server.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from dsspatial.dispatch.errors import RemoteEvaluationFailure
from dsspatial.local.functions import (
    AGGREGATE_FUNCTIONS,
    SERVER_FUNCTIONS,
    class_tag,
    column_names,
)
from dsspatial.local.parser import parse_call
from dsspatial.models.call import Argument, CallExpression, Literal, StringVector, Symbol

logger = logging.getLogger(__name__)


class LocalConnection:
    """Connection to an in-memory workspace of named objects."""

    def __init__(
        self,
        name: str,
        workspace: Mapping[str, Any] | None = None,
        functions: Mapping[str, Callable[..., Any]] | None = None,
    ):
        self.name = name
        self.workspace: dict[str, Any] = dict(workspace or {})
        self.functions = dict(SERVER_FUNCTIONS if functions is None else functions)
        self.calls: list[tuple[str, str]] = []

    def put(self, symbol: str, value: Any) -> None:
        """Place a value directly in the workspace (as a table login would)."""
        self.workspace[symbol] = value

    def get(self, symbol: str) -> Any:
        return self._lookup(symbol)

    def exists(self, symbol: str) -> bool:
        self.calls.append(("exists", symbol))
        return symbol in self.workspace

    def class_of(self, symbol: str) -> str:
        self.calls.append(("class", symbol))
        return class_tag(self._lookup(symbol))

    def column_names(self, symbol: str) -> list[str]:
        self.calls.append(("colnames", symbol))
        try:
            return column_names(self._lookup(symbol))
        except TypeError as e:
            raise RemoteEvaluationFailure(self.name, str(e)) from e

    def assign(self, symbol: str, expression: str) -> None:
        self.calls.append(("assign", f"{symbol} <- {expression}"))
        try:
            call = parse_call(expression)
        except ValueError as e:
            raise RemoteEvaluationFailure(self.name, f"Cannot parse expression: {e}") from e
        self.workspace[symbol] = self.evaluate(call)
        logger.debug(f"Assigned '{symbol}' ({class_tag(self.workspace[symbol])}) on {self.name}")

    def evaluate(self, call: CallExpression) -> Any:
        """Evaluate a structured call against the workspace.

        Raises:
            RemoteEvaluationFailure: If the function is unknown, an object
                it reads is missing, or the function raises
        """
        function = self.functions.get(call.function)
        if function is None:
            raise RemoteEvaluationFailure(
                self.name, f"could not find function \"{call.function}\""
            )

        missing = [
            name
            for name in call.symbols
            if name not in self.workspace and name not in AGGREGATE_FUNCTIONS
        ]
        if missing:
            raise RemoteEvaluationFailure(self.name, f"object '{missing[0]}' not found")

        args = [self._resolve(arg) for arg in call.args]
        try:
            return function(*args)
        except Exception as e:
            raise RemoteEvaluationFailure(self.name, f"Error in {call.function}: {e}") from e

    def close(self) -> None:
        logger.debug(f"Closing local connection {self.name}")

    def _lookup(self, symbol: str) -> Any:
        if symbol not in self.workspace:
            raise RemoteEvaluationFailure(self.name, f"object '{symbol}' not found")
        return self.workspace[symbol]

    def _resolve(self, arg: Argument) -> Any:
        if isinstance(arg, Symbol):
            # Function names (e.g. the aggregation passed to overDS) are not workspace objects
            if arg.name not in self.workspace and arg.name in AGGREGATE_FUNCTIONS:
                return arg.name
            return self._lookup(arg.name)
        if isinstance(arg, StringVector):
            return list(arg.values)
        if isinstance(arg, Literal):
            return arg.value
        msg = f"Unknown argument type {type(arg).__name__}"
        raise TypeError(msg)
