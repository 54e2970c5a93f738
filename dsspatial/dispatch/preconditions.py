"""Remote precondition checks.

Each check makes one read-only introspection call per connection and raises
before any assignment is attempted.
"""

import logging
from collections.abc import Iterable, Sequence

from dsspatial.connections.base import Connection
from dsspatial.dispatch.errors import (
    InconsistentRemoteType,
    MissingRemoteColumns,
    ObjectNotDefined,
    UnsupportedRemoteType,
)

logger = logging.getLogger(__name__)


def check_defined(connections: Sequence[Connection], symbol: str) -> None:
    """Check an object exists on every connection.

    Raises:
        ObjectNotDefined: Listing every connection that lacks the object
    """
    missing = [conn.name for conn in connections if not conn.exists(symbol)]
    if missing:
        raise ObjectNotDefined(symbol, missing)


def remote_classes(connections: Sequence[Connection], symbol: str) -> dict[str, str]:
    """Return the class tag of an object on each connection, keyed by connection name."""
    classes = {conn.name: conn.class_of(symbol) for conn in connections}
    logger.debug(f"Remote classes of '{symbol}': {classes}")
    return classes


def check_class(
    connections: Sequence[Connection],
    symbol: str,
    accepted: Iterable[str] | None = None,
) -> str:
    """Check an object has the same accepted class on every connection.

    Every connection is queried. The classes must agree, and the class must
    be in the accepted set.

    Args:
        connections: Connections to query, in order
        symbol: Remote object name
        accepted: Accepted class tags (None accepts any class)

    Returns:
        The class tag shared by all connections

    Raises:
        InconsistentRemoteType: If connections report different classes
        UnsupportedRemoteType: If the shared class is not accepted
    """
    accepted_set = frozenset(accepted) if accepted is not None else None
    classes = remote_classes(connections, symbol)

    distinct = set(classes.values())
    if len(distinct) > 1:
        raise InconsistentRemoteType(symbol, classes, accepted_set or frozenset())

    if accepted_set is not None:
        for name, remote_class in classes.items():
            if remote_class not in accepted_set:
                raise UnsupportedRemoteType(symbol, remote_class, accepted_set, connection=name)

    return next(iter(distinct))


def check_columns(
    connections: Sequence[Connection], symbol: str, columns: Iterable[str]
) -> None:
    """Check a remote frame has every requested column on every connection.

    Raises:
        MissingRemoteColumns: On the first connection lacking any column
    """
    wanted = list(columns)
    for conn in connections:
        present = set(conn.column_names(symbol))
        missing = [column for column in wanted if column not in present]
        if missing:
            raise MissingRemoteColumns(symbol, missing, conn.name)
