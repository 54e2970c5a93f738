"""Client for spatial analysis on DataSHIELD study servers.

Every operation validates its arguments locally, checks the named remote
objects on each connection, and dispatches one server-side call per
connection, assigning the result to a named object.

Commonly used exports:
- coordinates, proj4string, sp_transform, coords_to_lines, g_buffer,
  over, over_match, commute, spatial_lines_data_frame: the operations
- open_connections: log in to the servers of a login file
- DispatchReport: per-connection outcome of an operation
"""

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
from dsspatial.models.results import ConnectionResult, DispatchReport
from dsspatial.operations import (
    commute,
    coordinates,
    coords_to_lines,
    g_buffer,
    over,
    over_match,
    proj4string,
    sp_transform,
    spatial_lines_data_frame,
)
from dsspatial.session import open_connections

__all__ = [
    "coordinates",
    "proj4string",
    "sp_transform",
    "coords_to_lines",
    "g_buffer",
    "over",
    "over_match",
    "commute",
    "spatial_lines_data_frame",
    "open_connections",
    "ConnectionResult",
    "DispatchReport",
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
