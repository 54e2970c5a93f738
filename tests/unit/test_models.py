"""Unit tests for dispatch result models."""

import pytest

from dsspatial.dispatch.errors import PartialDispatchFailure
from dsspatial.models.results import ConnectionResult, DispatchReport


def _result(connection, **kwargs):
    fields = {
        "connection": connection,
        "output": "D.coords",
        "expression": "coordinatesDS(D,c('Lon','Lat'))",
        "assigned": True,
        "exists": True,
    }
    fields.update(kwargs)
    return ConnectionResult(**fields)


class TestConnectionResult:
    """Tests for ConnectionResult.ok."""

    def test_assigned_and_exists(self):
        assert _result("s1").ok

    def test_assignment_failed(self):
        assert not _result("s1", assigned=False, exists=None, error="boom").ok

    def test_output_missing(self):
        assert not _result("s1", exists=False).ok

    def test_existence_unknown(self):
        """An unconfirmed assignment still counts as successful."""
        assert _result("s1", exists=None, error="timeout").ok


class TestDispatchReport:
    """Tests for DispatchReport."""

    def test_all_succeeded(self):
        report = DispatchReport(
            operation="coordinates", output="D.coords", results=[_result("s1"), _result("s2")]
        )

        assert report.ok
        assert report.succeeded_connections == ["s1", "s2"]
        assert report.failed_connections == []
        assert report.raise_for_failures() is report

    def test_partial_failure(self):
        report = DispatchReport(
            operation="coordinates",
            output="D.coords",
            results=[_result("s1"), _result("s2", assigned=False, exists=None, error="boom")],
        )

        assert not report.ok
        assert report.failed_connections == ["s2"]

        with pytest.raises(PartialDispatchFailure, match="1 of 2 connection") as exc_info:
            report.raise_for_failures()

        assert exc_info.value.report is report
