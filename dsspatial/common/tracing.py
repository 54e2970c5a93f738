"""Context variables for dispatch-scoped logging.

The dispatcher sets the operation name for the duration of an operation and
the connection name for the duration of each per-connection call, so loggers
anywhere below it can attach both to their records.
"""

import contextvars
from collections.abc import Iterator
from contextlib import contextmanager

ctx_operation: contextvars.ContextVar[str] = contextvars.ContextVar("operation", default="")
ctx_connection: contextvars.ContextVar[str] = contextvars.ContextVar("connection", default="")


@contextmanager
def operation_context(operation: str) -> Iterator[None]:
    token = ctx_operation.set(operation)
    try:
        yield
    finally:
        ctx_operation.reset(token)


@contextmanager
def connection_context(connection: str) -> Iterator[None]:
    token = ctx_connection.set(connection)
    try:
        yield
    finally:
        ctx_connection.reset(token)
