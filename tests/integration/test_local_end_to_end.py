"""End-to-end dispatch against emulated study servers."""

import pytest

from dsspatial import operations
from dsspatial.dispatch.errors import ObjectNotDefined, PartialDispatchFailure

pytestmark = pytest.mark.integration


def test_coordinates_creates_points_on_every_study(studies):
    report = operations.coordinates("D", ["Lon", "Lat"], connections=studies)

    assert report.ok
    assert report.output == "D.coords"
    for study in studies:
        assert study.exists("D.coords")
        assert study.class_of("D.coords") == "SpatialPointsDataFrame"


def test_coords_to_lines_one_line_per_individual(studies):
    operations.coordinates("D", ["Lon", "Lat"], connections=studies)

    report = operations.coords_to_lines("D.coords", "id", connections=studies)

    assert report.ok
    study1, study2 = (study.get("D.coords.lines") for study in studies)
    assert study1.index.tolist() == [1, 2]
    assert study2.index.tolist() == [3, 4]
    assert list(study1.loc[1].coords) == [(0.0, 0.0), (1.0, 0.0), (2.0, 1.0)]


def test_commute_flags_moves_between_home_and_work(studies):
    report = operations.commute("D", "id", "home", "work", connections=studies)

    assert report.ok
    assert studies[0].get("D.comm").tolist() == [0, 1, 1, 0, 1]
    assert studies[1].get("D.comm").tolist() == [0, 0, 0, 1]


def test_full_pipeline(studies):
    """Points are projected, joined into lines, annotated, buffered and overlaid."""
    operations.coordinates("D", ["Lon", "Lat"], connections=studies).raise_for_failures()
    operations.proj4string("D.coords", 4326, connections=studies).raise_for_failures()
    operations.sp_transform("D.coords.proj", 3857, newobj="P", connections=studies)
    operations.coords_to_lines("P", "id", newobj="lines", connections=studies)

    report = operations.spatial_lines_data_frame("lines", "T", connections=studies)
    assert report.ok
    assert studies[0].class_of("lines.df") == "SpatialLinesDataFrame"

    report = operations.g_buffer("lines.df", by_id=True, ip_width=100, connections=studies)
    assert report.ok
    assert studies[0].class_of("lines.df.buff") == "SpatialPolygons"

    report = operations.over("P", "Z", return_list=True, connections=studies)
    assert report.ok
    assert studies[0].class_of("P.over") == "list"

    report = operations.over_match("P", "id", "P.over", "zone_id", connections=studies)
    assert report.ok

    matched = studies[0].get("P.overM")
    assert list(matched.itertuples(index=False, name=None)) == [(1, "A"), (1, "A"), (1, "A")]
    matched = studies[1].get("P.overM")
    assert list(matched.itertuples(index=False, name=None)) == [(3, "A"), (3, "A")]


def test_missing_object_on_one_study_stops_before_assignment(studies):
    studies[1].workspace.pop("D")

    with pytest.raises(ObjectNotDefined) as exc_info:
        operations.coordinates("D", ["Lon", "Lat"], connections=studies)

    assert exc_info.value.connections == ["study2"]
    assert not studies[0].exists("D.coords")


def test_failure_on_one_study_is_reported(studies):
    operations.coordinates("D", ["Lon", "Lat"], connections=studies)
    studies[0].functions.pop("proj4stringDS")

    report = operations.proj4string("D.coords", 4326, connections=studies)

    assert report.succeeded_connections == ["study2"]
    with pytest.raises(PartialDispatchFailure):
        report.raise_for_failures()
