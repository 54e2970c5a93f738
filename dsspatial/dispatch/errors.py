"""Error taxonomy for federated dispatch.

Local validation errors (MissingArgument, InvalidArgument) are raised before
any connection is touched. Precondition errors are raised after the
read-only introspection round-trip and before any assignment.
RemoteEvaluationFailure is the transport's error surface; the dispatcher
records it per connection instead of aborting the loop.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dsspatial.models.results import DispatchReport


class DispatchError(Exception):
    """Base class for every error raised by this package."""


class MissingArgument(DispatchError, ValueError):
    """A required parameter was not supplied."""

    def __init__(self, parameter: str, message: str | None = None):
        self.parameter = parameter
        super().__init__(message or f"Missing required argument '{parameter}'")


class InvalidArgument(DispatchError, ValueError):
    """A supplied parameter fails its type or syntax check."""

    def __init__(self, parameter: str, message: str):
        self.parameter = parameter
        super().__init__(f"Invalid argument '{parameter}': {message}")


class UnsupportedRemoteType(DispatchError):
    """A remote object's class is outside the operation's accepted set."""

    def __init__(
        self,
        symbol: str,
        remote_class: str,
        accepted: frozenset[str] | set[str],
        connection: str | None = None,
        message: str | None = None,
    ):
        self.symbol = symbol
        self.remote_class = remote_class
        self.accepted = frozenset(accepted)
        self.connection = connection
        if message is None:
            where = f" on '{connection}'" if connection else ""
            expected = ", ".join(sorted(self.accepted))
            message = (
                f"Object '{symbol}' has class '{remote_class}'{where}; "
                f"expected one of: {expected}"
            )
        super().__init__(message)


class InconsistentRemoteType(UnsupportedRemoteType):
    """A remote object does not have the same class on every connection."""

    def __init__(self, symbol: str, classes: dict[str, str], accepted: frozenset[str] | set[str]):
        self.classes = dict(classes)
        described = ", ".join(f"{name}={cls}" for name, cls in classes.items())
        super().__init__(
            symbol,
            described,
            accepted,
            message=f"Object '{symbol}' is not of the same class on all connections: {described}",
        )


class ObjectNotDefined(DispatchError):
    """A remote object is missing on one or more connections."""

    def __init__(self, symbol: str, connections: list[str]):
        self.symbol = symbol
        self.connections = list(connections)
        super().__init__(
            f"Object '{symbol}' is not defined on: {', '.join(self.connections)}"
        )


class MissingRemoteColumns(DispatchError):
    """Columns requested from a remote frame are not present."""

    def __init__(self, symbol: str, columns: list[str], connection: str):
        self.symbol = symbol
        self.columns = list(columns)
        self.connection = connection
        super().__init__(
            f"Columns {self.columns} not found in '{symbol}' on '{connection}'"
        )


class RemoteEvaluationFailure(DispatchError):
    """A remote call failed on the server or in transport."""

    def __init__(self, connection: str, message: str):
        self.connection = connection
        super().__init__(f"[{connection}] {message}")


class PartialDispatchFailure(DispatchError):
    """One or more connections did not receive the output object."""

    def __init__(self, report: "DispatchReport"):
        self.report = report
        failed = ", ".join(report.failed_connections)
        super().__init__(
            f"Operation '{report.operation}' failed on {len(report.failed_connections)} "
            f"of {len(report.results)} connection(s): {failed}"
        )
