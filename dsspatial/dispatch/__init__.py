"""Federated call dispatcher.

This package provides the validate-then-dispatch procedure shared by every
operation:
- validation: local argument checks (no network)
- preconditions: remote existence, class and column checks
- serializer: call expression rendering
- dispatcher: per-connection assignment loop and result reporting
- errors: error taxonomy
"""

from dsspatial.dispatch.dispatcher import (
    RemoteOperation,
    default_output_name,
    dispatch,
    require_connections,
)
from dsspatial.dispatch.errors import (
    DispatchError,
    InconsistentRemoteType,
    InvalidArgument,
    MissingArgument,
    MissingRemoteColumns,
    ObjectNotDefined,
    PartialDispatchFailure,
    RemoteEvaluationFailure,
    UnsupportedRemoteType,
)
from dsspatial.dispatch.serializer import serialize

__all__ = [
    "RemoteOperation",
    "default_output_name",
    "dispatch",
    "require_connections",
    "serialize",
    "DispatchError",
    "MissingArgument",
    "InvalidArgument",
    "UnsupportedRemoteType",
    "InconsistentRemoteType",
    "ObjectNotDefined",
    "MissingRemoteColumns",
    "RemoteEvaluationFailure",
    "PartialDispatchFailure",
]
