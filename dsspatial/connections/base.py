"""Connection protocol.

A connection is an open handle to one remote analysis server holding a
private workspace of named objects. Connections are opened by the session
layer and outlive any single operation.
"""

from typing import Protocol


class Connection(Protocol):
    """Protocol for remote workspace transports.

    Implementations raise RemoteEvaluationFailure for any server-side or
    transport error.
    """

    name: str

    def exists(self, symbol: str) -> bool:
        """Return True if an object named symbol exists in the workspace."""
        ...

    def class_of(self, symbol: str) -> str:
        """Return the class tag of the object named symbol."""
        ...

    def column_names(self, symbol: str) -> list[str]:
        """Return the column names of the frame named symbol."""
        ...

    def assign(self, symbol: str, expression: str) -> None:
        """Evaluate expression remotely and bind the result to symbol."""
        ...

    def close(self) -> None:
        """Release the remote session."""
        ...
