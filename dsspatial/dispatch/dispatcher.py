"""Federated call dispatch.

Every operation follows the same procedure once its arguments are
validated and its remote preconditions checked: derive the output name,
serialize the call once, then assign it on each connection in order.

A failure on one connection is recorded and does not stop the remaining
connections. The returned DispatchReport states which connections hold the
output object afterwards.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from dsspatial.common.tracing import connection_context, operation_context
from dsspatial.connections.base import Connection
from dsspatial.dispatch.errors import MissingArgument, RemoteEvaluationFailure
from dsspatial.dispatch.serializer import serialize
from dsspatial.models.call import CallExpression
from dsspatial.models.results import ConnectionResult, DispatchReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteOperation:
    """Static description of one catalog operation.

    Attributes:
        name: Client-side operation name (used in logs and reports)
        function: Remote function the call expression invokes
        suffix: Suffix appended to the primary input name for the default output
        progress: Progress message logged per connection
    """

    name: str
    function: str
    suffix: str
    progress: str

    def call(self, *args) -> CallExpression:
        return CallExpression(self.function, tuple(args))


def default_output_name(primary: str, suffix: str) -> str:
    """Derive the output name ``<primary>.<suffix>``."""
    return f"{primary}.{suffix.lstrip('.')}"


def require_connections(connections: Sequence[Connection] | None) -> list[Connection]:
    """Check an explicit, non-empty connection set was supplied."""
    if connections is None or len(connections) == 0:
        msg = "At least one connection is required"
        raise MissingArgument("connections", msg)
    return list(connections)


def dispatch(
    operation: RemoteOperation,
    connections: Sequence[Connection],
    call: CallExpression,
    output: str,
) -> DispatchReport:
    """Assign the result of a call to output on every connection.

    Args:
        operation: Operation being dispatched
        connections: Connections to dispatch to, in order
        call: Structured call expression (identical for every connection)
        output: Name to bind the result to on each connection

    Returns:
        DispatchReport with one ConnectionResult per connection
    """
    expression = serialize(call)
    report = DispatchReport(operation=operation.name, output=output)

    with operation_context(operation.name):
        for conn in connections:
            with connection_context(conn.name):
                report.results.append(_dispatch_one(operation, conn, expression, output))

        if report.ok:
            logger.info(
                f"{operation.name}: '{output}' created on {len(report.results)} connection(s)"
            )
        else:
            logger.error(
                f"{operation.name}: '{output}' missing on "
                f"{', '.join(report.failed_connections)}"
            )

    return report


def _dispatch_one(
    operation: RemoteOperation, conn: Connection, expression: str, output: str
) -> ConnectionResult:
    logger.info(f"--{operation.progress} on {conn.name}...")
    logger.debug(f"{output} <- {expression}")

    try:
        conn.assign(output, expression)
    except RemoteEvaluationFailure as e:
        logger.error(f"Assignment of '{output}' failed on {conn.name}: {e}")
        return ConnectionResult(
            connection=conn.name,
            output=output,
            expression=expression,
            assigned=False,
            error=str(e),
        )

    # Existence confirmation is informational; it never stops the loop
    try:
        exists = conn.exists(output)
    except RemoteEvaluationFailure as e:
        logger.warning(f"Could not confirm '{output}' on {conn.name}: {e}")
        return ConnectionResult(
            connection=conn.name,
            output=output,
            expression=expression,
            assigned=True,
            error=str(e),
        )

    if not exists:
        logger.warning(f"Output object '{output}' was not generated on {conn.name}")

    return ConnectionResult(
        connection=conn.name,
        output=output,
        expression=expression,
        assigned=True,
        exists=exists,
    )
