"""Remote class tags understood by the client.

The client never inspects remote values. It only compares the class tag a
server reports for a named object against the set an operation accepts.
"""

from enum import StrEnum


class SpatialClass(StrEnum):
    """Class tags reported by the remote ``classDS`` introspection call."""

    POINTS = "SpatialPoints"
    POINTS_DF = "SpatialPointsDataFrame"
    LINES = "SpatialLines"
    LINES_DF = "SpatialLinesDataFrame"
    POLYGONS = "SpatialPolygons"
    POLYGONS_DF = "SpatialPolygonsDataFrame"
    DATA_FRAME = "data.frame"
    LIST = "list"


POINT_CLASSES = frozenset({SpatialClass.POINTS, SpatialClass.POINTS_DF})
LINE_CLASSES = frozenset({SpatialClass.LINES, SpatialClass.LINES_DF})
POLYGON_CLASSES = frozenset({SpatialClass.POLYGONS, SpatialClass.POLYGONS_DF})

SPATIAL_CLASSES = POINT_CLASSES | LINE_CLASSES | POLYGON_CLASSES

ATTRIBUTED_SPATIAL_CLASSES = frozenset(
    {SpatialClass.POINTS_DF, SpatialClass.LINES_DF, SpatialClass.POLYGONS_DF}
)
