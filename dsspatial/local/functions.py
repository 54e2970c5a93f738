"""Emulated server-side functions for the local workspace.

These mirror the behaviour of the remote spatial functions closely enough to
exercise the client end to end without a study server. Spatial objects are
held as GeoDataFrames (objects with attributes) or GeoSeries (bare
geometries), frames as DataFrames.
"""

import logging
from collections.abc import Callable
from typing import Any

import geopandas as gpd
import numpy as np
import pandas as pd
from shapely.geometry import LineString
from shapely.ops import unary_union

from dsspatial.models.enums import SpatialClass

logger = logging.getLogger(__name__)

_GEOMETRY_KINDS = {
    "Point": "Points",
    "MultiPoint": "Points",
    "LineString": "Lines",
    "MultiLineString": "Lines",
    "Polygon": "Polygons",
    "MultiPolygon": "Polygons",
}

# Aggregation functions overDS accepts by name; length counts the matches
AGGREGATE_FUNCTIONS = frozenset({"mean", "sum", "min", "max", "median", "count", "length"})


def _geometry_kind(geometries: gpd.GeoSeries) -> str | None:
    kinds = {_GEOMETRY_KINDS.get(t) for t in geometries.dropna().geom_type.unique()}
    if len(kinds) != 1:
        return None
    return kinds.pop()


def class_tag(value: Any) -> str:
    """Map a workspace value to the class tag the server would report."""
    if isinstance(value, gpd.GeoDataFrame):
        kind = _geometry_kind(value.geometry)
        return f"Spatial{kind}DataFrame" if kind else "Spatial"
    if isinstance(value, gpd.GeoSeries):
        kind = _geometry_kind(value)
        return f"Spatial{kind}" if kind else "Spatial"
    if isinstance(value, pd.DataFrame):
        return SpatialClass.DATA_FRAME.value
    if isinstance(value, list):
        return SpatialClass.LIST.value
    if isinstance(value, pd.Series):
        if pd.api.types.is_bool_dtype(value):
            return "logical"
        if pd.api.types.is_integer_dtype(value):
            return "integer"
        if pd.api.types.is_numeric_dtype(value):
            return "numeric"
        return "character"
    return type(value).__name__


def column_names(value: Any) -> list[str]:
    """Column names of a frame, excluding the geometry column."""
    if isinstance(value, gpd.GeoDataFrame):
        return [col for col in value.columns if col != value.geometry.name]
    if isinstance(value, pd.DataFrame):
        return list(value.columns)
    msg = f"Object of class '{class_tag(value)}' has no columns"
    raise TypeError(msg)


def _attributes(value: gpd.GeoDataFrame | gpd.GeoSeries) -> pd.DataFrame | None:
    if isinstance(value, gpd.GeoDataFrame):
        return pd.DataFrame(value.drop(columns=value.geometry.name))
    return None


def _geometries(value: Any) -> gpd.GeoSeries:
    if isinstance(value, gpd.GeoDataFrame):
        return value.geometry
    if isinstance(value, gpd.GeoSeries):
        return value
    msg = f"Expected a spatial object, got '{class_tag(value)}'"
    raise TypeError(msg)


def coordinates_ds(x: pd.DataFrame, coords: list[str]) -> gpd.GeoDataFrame:
    """Promote a frame to a point set using 2 or 3 coordinate columns."""
    if isinstance(x, gpd.GeoDataFrame) or not isinstance(x, pd.DataFrame):
        msg = "coordinatesDS expects a data.frame"
        raise TypeError(msg)
    if len(coords) not in (2, 3):
        msg = f"coordinatesDS expects 2 or 3 coordinate columns, got {len(coords)}"
        raise ValueError(msg)

    z = x[coords[2]] if len(coords) == 3 else None
    points = gpd.points_from_xy(x[coords[0]], x[coords[1]], z)
    return gpd.GeoDataFrame(x.drop(columns=list(coords)), geometry=points)


def proj4string_ds(x: Any, proj_str: int) -> gpd.GeoDataFrame | gpd.GeoSeries:
    """Assign (without transforming) an EPSG coordinate system."""
    _geometries(x)
    return x.set_crs(epsg=int(proj_str), allow_override=True)


def sp_transform_ds(x: Any, proj_str: int) -> gpd.GeoDataFrame | gpd.GeoSeries:
    """Transform coordinates to another EPSG coordinate system."""
    if _geometries(x).crs is None:
        msg = "Cannot transform an object with no coordinate system; assign one first"
        raise ValueError(msg)
    return x.to_crs(epsg=int(proj_str))


def coords_to_lines_ds(coords: gpd.GeoDataFrame, group: str) -> gpd.GeoSeries:
    """Join points into one line per distinct group value, in row order.

    Groups with fewer than two points cannot form a line and are dropped.
    """
    if not isinstance(coords, gpd.GeoDataFrame) or group not in coords.columns:
        msg = f"coordsToLinesDS: grouping column '{group}' not found"
        raise ValueError(msg)

    lines = {}
    for key, members in coords.groupby(group, sort=False):
        points = [(geom.x, geom.y) for geom in members.geometry]
        if len(points) < 2:
            logger.warning(f"coordsToLinesDS: group {key!r} has a single point, dropped")
            continue
        lines[key] = LineString(points)

    return gpd.GeoSeries(
        list(lines.values()),
        index=pd.Index(list(lines.keys()), name=group),
        crs=coords.crs,
    )


def g_buffer_ds(input: Any, by_id: bool, width: float) -> gpd.GeoSeries:
    """Buffer geometries, either one polygon per geometry or dissolved into one."""
    geometries = _geometries(input)
    buffered = geometries.buffer(width)
    if by_id:
        return gpd.GeoSeries(buffered, crs=geometries.crs)
    return gpd.GeoSeries([unary_union(list(buffered))], crs=geometries.crs)


def over_ds(x: Any, y: Any, return_list: bool, fn: str | None) -> Any:
    """Query y at the geometries of x.

    Returns:
        With attributes on y: a frame with the first matching row of y per
        geometry of x, a list of frames of all matches (return_list), or a
        frame of matches aggregated with fn.
        Without attributes: a series of the first matching index of y, or a
        list of index lists (return_list). An aggregation function is
        rejected here since there is nothing to aggregate.
    """
    if fn is not None and fn not in AGGREGATE_FUNCTIONS:
        msg = f"overDS: unsupported aggregation function '{fn}'"
        raise ValueError(msg)

    x_geoms = _geometries(x)
    y_geoms = _geometries(y)
    if x_geoms.crs != y_geoms.crs:
        msg = "overDS: x and y have different coordinate systems"
        raise ValueError(msg)

    attributes = _attributes(y)
    matches = [list(y_geoms.index[y_geoms.intersects(geom).to_numpy()]) for geom in x_geoms]

    if attributes is None:
        if fn is not None:
            msg = "overDS: an aggregation function needs attributes on y"
            raise ValueError(msg)
        if return_list:
            return matches
        first = [found[0] if found else np.nan for found in matches]
        return pd.Series(first, index=x_geoms.index)

    if fn == "length":
        counts = [len(found) for found in matches]
        return pd.DataFrame(
            {column: counts for column in attributes.columns}, index=x_geoms.index
        )

    if fn is not None:
        numeric = attributes.select_dtypes(include="number")
        rows = [numeric.loc[found].agg(fn) for found in matches]
        return pd.DataFrame(rows, index=x_geoms.index, columns=numeric.columns)

    if return_list:
        return [attributes.loc[found] for found in matches]

    rows = [
        attributes.loc[found[0]] if found else pd.Series(index=attributes.columns, dtype=object)
        for found in matches
    ]
    result = pd.DataFrame(rows, columns=attributes.columns)
    result.index = x_geoms.index
    return result


def over_match_ds(
    x: gpd.GeoDataFrame, x_id: str, over_out: list | pd.DataFrame, y_id: str
) -> pd.DataFrame:
    """Pair each identifier of x with the identifiers of y it overlaps.

    over_out is the result of overDS(x, y, ...): a list of frames (one per
    geometry of x) or a frame with one row per geometry of x.
    """
    if not isinstance(x, gpd.GeoDataFrame) or x_id not in x.columns:
        msg = f"overMatchDS: column '{x_id}' not found in x"
        raise ValueError(msg)

    x_ids = list(x[x_id])
    if isinstance(over_out, pd.DataFrame):
        over_out = [over_out.iloc[[i]].dropna(subset=[y_id]) for i in range(len(over_out))]
    if len(over_out) != len(x_ids):
        msg = f"overMatchDS: overlay has {len(over_out)} entries but x has {len(x_ids)} rows"
        raise ValueError(msg)

    x_col, y_col = (f"{x_id}.x", f"{y_id}.y") if x_id == y_id else (x_id, y_id)
    pairs = [
        (x_value, y_value)
        for x_value, matched in zip(x_ids, over_out, strict=True)
        for y_value in matched[y_id]
    ]
    return pd.DataFrame(pairs, columns=[x_col, y_col])


def commute_ds(input: pd.DataFrame, id_col: str, loc1_col: str, loc2_col: str) -> pd.Series:
    """Flag travel between the two locations within each individual's rows.

    Rows are taken in their stored order and a journey never spans two
    contiguous runs of the same individual. A row is 1 when the individual
    is travelling from one location to the other: the rows at neither
    location between leaving one and arriving at the other, and the arrival
    row itself. Every other row is 0, including a trip that returns to the
    location it left or that never arrives anywhere.
    """
    for column in (id_col, loc1_col, loc2_col):
        if column not in input.columns:
            msg = f"commuteDS: column '{column}' not found"
            raise ValueError(msg)

    ids = input[id_col].reset_index(drop=True)
    loc1 = input[loc1_col].reset_index(drop=True).fillna(0).astype(int)
    loc2 = input[loc2_col].reset_index(drop=True).fillna(0).astype(int)

    # 1 at the first location, 2 at the second, NaN while travelling
    location = pd.Series(np.select([loc1 == 1, loc2 == 1], [1.0, 2.0], default=np.nan))

    # A new run starts wherever the individual changes
    runs = (ids != ids.shift()).cumsum()
    departed = location.groupby(runs).ffill().groupby(runs).shift()
    arriving = location.groupby(runs).bfill()

    travelling = departed.notna() & arriving.notna() & (departed != arriving)
    return travelling.astype(int)


def spatial_lines_data_frame_ds(lines: gpd.GeoSeries, data: pd.DataFrame) -> gpd.GeoDataFrame:
    """Attach a frame to a line set row by row."""
    if not isinstance(lines, gpd.GeoSeries):
        msg = "SpatialLinesDataFrameDS expects SpatialLines"
        raise TypeError(msg)
    if len(lines) != len(data):
        msg = f"SpatialLinesDataFrameDS: {len(lines)} lines but {len(data)} data rows"
        raise ValueError(msg)
    return gpd.GeoDataFrame(
        data.reset_index(drop=True),
        geometry=lines.reset_index(drop=True),
        crs=lines.crs,
    )


def _colnames_ds(x: Any) -> list[str]:
    return column_names(x)


def _class_ds(x: Any) -> str:
    return class_tag(x)


SERVER_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "coordinatesDS": coordinates_ds,
    "proj4stringDS": proj4string_ds,
    "spTransformDS": sp_transform_ds,
    "coordsToLinesDS": coords_to_lines_ds,
    "gBufferDS": g_buffer_ds,
    "overDS": over_ds,
    "overMatchDS": over_match_ds,
    "commuteDS": commute_ds,
    "SpatialLinesDataFrameDS": spatial_lines_data_frame_ds,
    "classDS": _class_ds,
    "colnamesDS": _colnames_ds,
}
