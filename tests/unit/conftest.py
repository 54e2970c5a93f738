"""Shared fixtures for unit tests."""

from unittest.mock import Mock

import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import LineString, Point

from dsspatial.local.connection import LocalConnection


def make_stub_connection(
    name: str,
    classes: dict[str, str] | None = None,
    columns: list[str] | None = None,
) -> Mock:
    """Create a connection stub that reports the given classes and accepts any assignment."""
    classes = classes or {}
    conn = Mock()
    conn.name = name
    conn.exists.side_effect = lambda symbol: True
    conn.class_of.side_effect = lambda symbol: classes[symbol]
    conn.column_names.return_value = list(columns or [])
    return conn


@pytest.fixture
def stub_connection():
    """Factory for connection stubs."""
    return make_stub_connection


@pytest.fixture
def frame():
    """Tabular frame with coordinate columns and a grouping column."""
    return pd.DataFrame(
        {
            "id": [1, 1, 2, 2],
            "Lon": [0.0, 1.0, 5.0, 6.0],
            "Lat": [0.0, 1.0, 5.0, 5.0],
        }
    )


@pytest.fixture
def points():
    """Point set with attributes."""
    return gpd.GeoDataFrame(
        {"id": [1, 1, 2, 2]},
        geometry=[Point(0, 0), Point(1, 1), Point(5, 5), Point(6, 5)],
    )


@pytest.fixture
def studies(frame, points):
    """Two local study workspaces holding the same objects."""
    lines = gpd.GeoSeries([LineString([(0, 0), (1, 1)]), LineString([(5, 5), (6, 5)])])
    return [
        LocalConnection(
            name,
            {"D": frame.copy(), "P": points.copy(), "L": lines.copy()},
        )
        for name in ("study1", "study2")
    ]
