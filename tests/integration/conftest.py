"""Integration test fixtures: two emulated study servers."""

import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import box

from dsspatial.local.connection import LocalConnection


@pytest.fixture
def study_frames() -> dict[str, pd.DataFrame]:
    """Journey tables as they are assigned at login, one per study."""
    return {
        "study1": pd.DataFrame(
            {
                "id": [1, 1, 1, 2, 2],
                "Lon": [0.0, 1.0, 2.0, 10.0, 11.0],
                "Lat": [0.0, 0.0, 1.0, 10.0, 10.0],
                "home": [1, 0, 1, 1, 0],
                "work": [0, 1, 0, 0, 1],
            }
        ),
        "study2": pd.DataFrame(
            {
                "id": [3, 3, 4, 4],
                "Lon": [0.5, 1.5, 20.0, 21.0],
                "Lat": [0.5, 0.5, 20.0, 20.0],
                "home": [1, 1, 0, 1],
                "work": [0, 0, 1, 0],
            }
        ),
    }


@pytest.fixture
def zones() -> gpd.GeoDataFrame:
    """Two zones in web mercator metres."""
    return gpd.GeoDataFrame(
        {"zone_id": ["A", "B"]},
        geometry=[box(-1000, -1000, 250_000, 200_000), box(5e6, 5e6, 6e6, 6e6)],
        crs="EPSG:3857",
    )


@pytest.fixture
def studies(study_frames, zones) -> list[LocalConnection]:
    """Connections to two studies with table D and zones Z assigned."""
    connections = []
    for name, frame in study_frames.items():
        conn = LocalConnection(name)
        conn.put("D", frame)
        conn.put("Z", zones.copy())
        conn.put("T", pd.DataFrame({"trip": [f"{name}-a", f"{name}-b"]}))
        connections.append(conn)
    return connections
