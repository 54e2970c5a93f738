"""Typed models shared by the dispatcher, connections and operations."""

from dsspatial.models.call import CallExpression, Literal, StringVector, Symbol
from dsspatial.models.enums import (
    ATTRIBUTED_SPATIAL_CLASSES,
    LINE_CLASSES,
    POINT_CLASSES,
    POLYGON_CLASSES,
    SPATIAL_CLASSES,
    SpatialClass,
)
from dsspatial.models.results import ConnectionResult, DispatchReport

__all__ = [
    "CallExpression",
    "Literal",
    "StringVector",
    "Symbol",
    "SpatialClass",
    "POINT_CLASSES",
    "LINE_CLASSES",
    "POLYGON_CLASSES",
    "SPATIAL_CLASSES",
    "ATTRIBUTED_SPATIAL_CLASSES",
    "ConnectionResult",
    "DispatchReport",
]
