"""Spatial operations dispatched to remote study servers.

Each operation validates its arguments locally, checks that the named input
objects exist with an accepted class on every connection, and assigns the
result of one server-side function call to a new object on each connection.

All operations take an explicit ``connections`` sequence; resolving the
currently open connections is the session layer's job (see
``dsspatial.session.open_connections``). Each returns a DispatchReport.
"""

from collections.abc import Sequence

from dsspatial.connections.base import Connection
from dsspatial.dispatch.dispatcher import (
    RemoteOperation,
    default_output_name,
    dispatch,
    require_connections,
)
from dsspatial.dispatch.preconditions import check_class, check_columns, check_defined
from dsspatial.dispatch.validation import (
    require_bool,
    require_number,
    require_string,
    require_string_list,
    require_symbol_name,
)
from dsspatial.models.call import Literal, StringVector, Symbol
from dsspatial.models.enums import (
    ATTRIBUTED_SPATIAL_CLASSES,
    POINT_CLASSES,
    SPATIAL_CLASSES,
    SpatialClass,
)
from dsspatial.models.results import DispatchReport

COORDINATES = RemoteOperation(
    name="coordinates",
    function="coordinatesDS",
    suffix="coords",
    progress="Converting data frame to coordinates object",
)
PROJ4STRING = RemoteOperation(
    name="proj4string",
    function="proj4stringDS",
    suffix="proj",
    progress="Assigning coordinate system to spatial object",
)
SP_TRANSFORM = RemoteOperation(
    name="sp_transform",
    function="spTransformDS",
    suffix="trans",
    progress="Transforming coordinate system",
)
COORDS_TO_LINES = RemoteOperation(
    name="coords_to_lines",
    function="coordsToLinesDS",
    suffix="lines",
    progress="Converting points to lines",
)
G_BUFFER = RemoteOperation(
    name="g_buffer",
    function="gBufferDS",
    suffix="buff",
    progress="Creating buffer on geometry",
)
OVER = RemoteOperation(
    name="over",
    function="overDS",
    suffix="over",
    progress="Overlaying geometries",
)
OVER_MATCH = RemoteOperation(
    name="over_match",
    function="overMatchDS",
    suffix="overM",
    progress="Matching overlay",
)
COMMUTE = RemoteOperation(
    name="commute",
    function="commuteDS",
    suffix="comm",
    progress="Calculating commutes",
)
SPATIAL_LINES_DATA_FRAME = RemoteOperation(
    name="spatial_lines_data_frame",
    function="SpatialLinesDataFrameDS",
    suffix="df",
    progress="Attaching data frame to lines",
)

OPERATIONS: dict[str, RemoteOperation] = {
    op.name: op
    for op in (
        COORDINATES,
        PROJ4STRING,
        SP_TRANSFORM,
        COORDS_TO_LINES,
        G_BUFFER,
        OVER,
        OVER_MATCH,
        COMMUTE,
        SPATIAL_LINES_DATA_FRAME,
    )
}

# Accepted remote classes of the primary input of each operation
ACCEPTED_CLASSES: dict[str, frozenset[str]] = {
    COORDINATES.name: frozenset({SpatialClass.DATA_FRAME}),
    PROJ4STRING.name: SPATIAL_CLASSES,
    SP_TRANSFORM.name: POINT_CLASSES,
    COORDS_TO_LINES.name: POINT_CLASSES,
    G_BUFFER.name: SPATIAL_CLASSES,
    OVER.name: SPATIAL_CLASSES,
    OVER_MATCH.name: ATTRIBUTED_SPATIAL_CLASSES,
    COMMUTE.name: frozenset({SpatialClass.POINTS_DF, SpatialClass.DATA_FRAME}),
    SPATIAL_LINES_DATA_FRAME.name: frozenset({SpatialClass.LINES}),
}

OVERLAY_RESULT_CLASSES = frozenset({SpatialClass.LIST, SpatialClass.DATA_FRAME})


def _output_name(newobj: str | None, primary: str, operation: RemoteOperation) -> str:
    if newobj is None:
        return default_output_name(primary, operation.suffix)
    return require_symbol_name(newobj, "newobj")


def coordinates(
    x: str | None = None,
    coords: Sequence[str] | None = None,
    newobj: str | None = None,
    connections: Sequence[Connection] | None = None,
) -> DispatchReport:
    """Convert a remote data frame into a point set using coordinate columns.

    Args:
        x: Name of a data frame on the servers
        coords: Names of the coordinate columns (e.g. ["Lon", "Lat"])
        newobj: Output name (default: "<x>.coords")
        connections: Connections to dispatch to

    Returns:
        DispatchReport for the assignment of newobj on each connection

    Raises:
        MissingArgument: If x, coords or connections is not supplied
        InvalidArgument: If coords is not a list of strings
        ObjectNotDefined: If x is missing on any connection
        UnsupportedRemoteType: If x is not a data frame
        MissingRemoteColumns: If a coordinate column is missing on any connection
    """
    x = require_symbol_name(x, "x", "Please provide the name of a data frame")
    coords = require_string_list(
        coords, "coords", "Please provide a list of coordinate column names"
    )
    newobj = _output_name(newobj, x, COORDINATES)
    connections = require_connections(connections)

    check_defined(connections, x)
    check_class(connections, x, ACCEPTED_CLASSES[COORDINATES.name])
    check_columns(connections, x, coords)

    call = COORDINATES.call(Symbol(x), StringVector(coords))
    return dispatch(COORDINATES, connections, call, newobj)


def proj4string(
    x: str | None = None,
    proj_str: int | float | None = None,
    newobj: str | None = None,
    connections: Sequence[Connection] | None = None,
) -> DispatchReport:
    """Assign an EPSG coordinate system to a remote spatial object.

    Args:
        x: Name of a spatial object on the servers
        proj_str: EPSG identifier, e.g. 29902 for Ireland
        newobj: Output name (default: "<x>.proj")
        connections: Connections to dispatch to
    """
    x = require_symbol_name(x, "x", "Please provide the name of a spatial object")
    proj_str = require_number(
        proj_str, "proj_str", "Please provide a valid EPSG coordinate system identifier"
    )
    newobj = _output_name(newobj, x, PROJ4STRING)
    connections = require_connections(connections)

    check_defined(connections, x)
    check_class(connections, x, ACCEPTED_CLASSES[PROJ4STRING.name])

    call = PROJ4STRING.call(Symbol(x), Literal(proj_str))
    return dispatch(PROJ4STRING, connections, call, newobj)


def sp_transform(
    x: str | None = None,
    proj_str: int | float | None = None,
    newobj: str | None = None,
    connections: Sequence[Connection] | None = None,
) -> DispatchReport:
    """Reproject a remote point set to another EPSG coordinate system.

    Args:
        x: Name of a SpatialPoints or SpatialPointsDataFrame object
        proj_str: Target EPSG identifier
        newobj: Output name (default: "<x>.trans")
        connections: Connections to dispatch to
    """
    x = require_symbol_name(x, "x", "Please provide the name of a spatial points object")
    proj_str = require_number(
        proj_str, "proj_str", "Please provide a valid EPSG coordinate system identifier"
    )
    newobj = _output_name(newobj, x, SP_TRANSFORM)
    connections = require_connections(connections)

    check_defined(connections, x)
    check_class(connections, x, ACCEPTED_CLASSES[SP_TRANSFORM.name])

    call = SP_TRANSFORM.call(Symbol(x), Literal(proj_str))
    return dispatch(SP_TRANSFORM, connections, call, newobj)


def coords_to_lines(
    coords: str | None = None,
    group: str | None = None,
    newobj: str | None = None,
    connections: Sequence[Connection] | None = None,
) -> DispatchReport:
    """Join remote points into one line per distinct value of a grouping column.

    Args:
        coords: Name of a point set on the servers
        group: Column whose values identify each line
        newobj: Output name (default: "<coords>.lines")
        connections: Connections to dispatch to
    """
    coords = require_symbol_name(
        coords, "coords", "Please provide the name of a spatial points data frame"
    )
    group = require_string(group, "group", "Please provide a valid column name to group by")
    newobj = _output_name(newobj, coords, COORDS_TO_LINES)
    connections = require_connections(connections)

    check_defined(connections, coords)
    check_class(connections, coords, ACCEPTED_CLASSES[COORDS_TO_LINES.name])

    call = COORDS_TO_LINES.call(Symbol(coords), Literal(group))
    return dispatch(COORDS_TO_LINES, connections, call, newobj)


def g_buffer(
    input: str | None = None,
    by_id: bool = False,
    ip_width: int | float | None = None,
    newobj: str | None = None,
    connections: Sequence[Connection] | None = None,
) -> DispatchReport:
    """Buffer a remote spatial object.

    Args:
        input: Name of a point, line or polygon set on the servers
        by_id: Buffer each geometry separately (True) or dissolve the result (False)
        ip_width: Buffer width in the object's units; negative values shrink polygons
        newobj: Output name (default: "<input>.buff")
        connections: Connections to dispatch to
    """
    input = require_symbol_name(
        input, "input", "Please provide the name of a spatial object"
    )
    by_id = require_bool(by_id, "by_id")
    ip_width = require_number(ip_width, "ip_width", "Please provide a valid width for the buffer")
    newobj = _output_name(newobj, input, G_BUFFER)
    connections = require_connections(connections)

    check_defined(connections, input)
    check_class(connections, input, ACCEPTED_CLASSES[G_BUFFER.name])

    call = G_BUFFER.call(Symbol(input), Literal(by_id), Literal(ip_width))
    return dispatch(G_BUFFER, connections, call, newobj)


def over(
    x: str | None = None,
    y: str | None = None,
    fn: str | None = None,
    return_list: bool = False,
    newobj: str | None = None,
    connections: Sequence[Connection] | None = None,
) -> DispatchReport:
    """Spatial overlay: query the geometries of y at the geometries of x.

    Args:
        x: Name of the spatial object giving the query geometries
        y: Name of the spatial object whose attributes or indices are returned
        fn: Optional name of a remote aggregation function (e.g. "mean") applied
            to the attributes of y matching each geometry of x
        return_list: Return every match per geometry (True) or the first (False)
        newobj: Output name (default: "<x>.over")
        connections: Connections to dispatch to
    """
    x = require_symbol_name(
        x, "x", "Please provide the name of a spatial object for the query geometry"
    )
    y = require_symbol_name(
        y, "y", "Please provide the name of a spatial object for the queried layer"
    )
    if fn is not None:
        fn = require_symbol_name(fn, "fn")
    return_list = require_bool(return_list, "return_list")
    newobj = _output_name(newobj, x, OVER)
    connections = require_connections(connections)

    check_defined(connections, x)
    check_defined(connections, y)
    check_class(connections, x, ACCEPTED_CLASSES[OVER.name])
    check_class(connections, y, ACCEPTED_CLASSES[OVER.name])

    fn_arg = Symbol(fn) if fn is not None else Literal(None)
    call = OVER.call(Symbol(x), Symbol(y), Literal(return_list), fn_arg)
    return dispatch(OVER, connections, call, newobj)


def over_match(
    x: str | None = None,
    x_id: str | None = None,
    over_out: str | None = None,
    y_id: str | None = None,
    newobj: str | None = None,
    connections: Sequence[Connection] | None = None,
) -> DispatchReport:
    """Match an overlay result back to the identifiers of its query object.

    Args:
        x: Name of the spatial object the overlay was queried with
        x_id: Identifying column in the data of x
        over_out: Name of the overlay result produced from x and another object y
        y_id: Identifying column of y carried in the overlay result
        newobj: Output name (default: "<x>.overM")
        connections: Connections to dispatch to
    """
    x = require_symbol_name(
        x, "x", "Please provide the name of the spatial object x to match the overlay to"
    )
    x_id = require_string(
        x_id, "x_id", "Please provide the name of the identifying column of x"
    )
    over_out = require_symbol_name(
        over_out, "over_out", "Please provide the name of the overlay result"
    )
    y_id = require_string(
        y_id, "y_id", "Please provide the name of the identifying column of y"
    )
    newobj = _output_name(newobj, x, OVER_MATCH)
    connections = require_connections(connections)

    check_defined(connections, x)
    check_defined(connections, over_out)
    check_class(connections, x, ACCEPTED_CLASSES[OVER_MATCH.name])
    check_class(connections, over_out, OVERLAY_RESULT_CLASSES)

    call = OVER_MATCH.call(Symbol(x), Literal(x_id), Symbol(over_out), Literal(y_id))
    return dispatch(OVER_MATCH, connections, call, newobj)


def commute(
    input: str | None = None,
    id_col: str | None = None,
    loc1_col: str | None = None,
    loc2_col: str | None = None,
    newobj: str | None = None,
    connections: Sequence[Connection] | None = None,
) -> DispatchReport:
    """Flag commutes between two locations in individuals' ordered journeys.

    Args:
        input: Name of a frame (or point set with data) of journeys
        id_col: Column identifying individuals
        loc1_col: 0/1 column flagging the first location (e.g. home)
        loc2_col: 0/1 column flagging the second location (e.g. work)
        newobj: Output name (default: "<input>.comm")
        connections: Connections to dispatch to
    """
    input = require_symbol_name(
        input, "input", "Please provide the name of an object that contains the journeys"
    )
    id_col = require_string(
        id_col, "id_col", "Please provide the name of the column that identifies individuals"
    )
    loc1_col = require_string(
        loc1_col, "loc1_col", "Please provide the name of the first location column"
    )
    loc2_col = require_string(
        loc2_col, "loc2_col", "Please provide the name of the second location column"
    )
    newobj = _output_name(newobj, input, COMMUTE)
    connections = require_connections(connections)

    check_defined(connections, input)
    check_class(connections, input, ACCEPTED_CLASSES[COMMUTE.name])

    call = COMMUTE.call(Symbol(input), Literal(id_col), Literal(loc1_col), Literal(loc2_col))
    return dispatch(COMMUTE, connections, call, newobj)


def spatial_lines_data_frame(
    lines: str | None = None,
    data: str | None = None,
    newobj: str | None = None,
    connections: Sequence[Connection] | None = None,
) -> DispatchReport:
    """Attach a remote data frame to a remote line set.

    Args:
        lines: Name of a SpatialLines object
        data: Name of a data frame with one row per line
        newobj: Output name (default: "<lines>.df")
        connections: Connections to dispatch to
    """
    lines = require_symbol_name(
        lines, "lines", "Please provide the name of a spatialLines object"
    )
    data = require_symbol_name(data, "data", "Please provide a valid data frame")
    newobj = _output_name(newobj, lines, SPATIAL_LINES_DATA_FRAME)
    connections = require_connections(connections)

    check_defined(connections, lines)
    check_defined(connections, data)
    check_class(connections, lines, ACCEPTED_CLASSES[SPATIAL_LINES_DATA_FRAME.name])
    check_class(connections, data, {SpatialClass.DATA_FRAME})

    call = SPATIAL_LINES_DATA_FRAME.call(Symbol(lines), Symbol(data))
    return dispatch(SPATIAL_LINES_DATA_FRAME, connections, call, newobj)
