"""Unit tests for the federated dispatch loop."""

import logging

import pytest

from dsspatial.dispatch.dispatcher import (
    RemoteOperation,
    default_output_name,
    dispatch,
    require_connections,
)
from dsspatial.dispatch.errors import MissingArgument, RemoteEvaluationFailure
from dsspatial.models.call import CallExpression, StringVector, Symbol

OPERATION = RemoteOperation(
    name="coordinates",
    function="coordinatesDS",
    suffix="coords",
    progress="Converting data frame to coordinates object",
)
CALL = CallExpression("coordinatesDS", (Symbol("D"), StringVector(("Lon", "Lat"))))
EXPRESSION = "coordinatesDS(D,c('Lon','Lat'))"


@pytest.mark.parametrize(
    ("primary", "suffix", "expected"),
    [
        ("D", "coords", "D.coords"),
        ("D.coords", "lines", "D.coords.lines"),
        ("x", ".overM", "x.overM"),
    ],
)
def test_default_output_name(primary, suffix, expected):
    assert default_output_name(primary, suffix) == expected


@pytest.mark.parametrize("connections", [None, []])
def test_require_connections_rejects_empty(connections):
    with pytest.raises(MissingArgument) as exc_info:
        require_connections(connections)

    assert exc_info.value.parameter == "connections"


def test_remote_operation_builds_call():
    call = OPERATION.call(Symbol("D"), StringVector(("Lon", "Lat")))

    assert call == CALL


def test_dispatch_assigns_in_connection_order(stub_connection):
    """The same expression is assigned on each connection, in the order given."""
    order = []
    connections = []
    for name in ("s1", "s2", "s3"):
        conn = stub_connection(name)
        conn.assign.side_effect = lambda symbol, expr, n=name: order.append((n, symbol, expr))
        connections.append(conn)

    report = dispatch(OPERATION, connections, CALL, "D.coords")

    assert order == [
        ("s1", "D.coords", EXPRESSION),
        ("s2", "D.coords", EXPRESSION),
        ("s3", "D.coords", EXPRESSION),
    ]
    assert [result.connection for result in report.results] == ["s1", "s2", "s3"]
    assert report.ok
    assert report.operation == "coordinates"
    assert report.output == "D.coords"


def test_dispatch_confirms_output_exists(stub_connection):
    conn = stub_connection("s1")

    report = dispatch(OPERATION, [conn], CALL, "D.coords")

    conn.exists.assert_called_once_with("D.coords")
    assert report.results[0].exists is True
    assert report.results[0].expression == EXPRESSION


def test_dispatch_continues_after_failure(stub_connection):
    """A failure on one connection is recorded and the remaining ones are still called."""
    s1, s2, s3 = (stub_connection(name) for name in ("s1", "s2", "s3"))
    s2.assign.side_effect = RemoteEvaluationFailure("s2", "could not find function")

    report = dispatch(OPERATION, [s1, s2, s3], CALL, "D.coords")

    s3.assign.assert_called_once_with("D.coords", EXPRESSION)
    s2.exists.assert_not_called()
    assert not report.ok
    assert report.failed_connections == ["s2"]
    assert report.succeeded_connections == ["s1", "s3"]
    assert report.results[1].assigned is False
    assert "could not find function" in report.results[1].error


def test_dispatch_reports_missing_output(stub_connection, caplog):
    """An assignment that returns but leaves no object is a failed connection."""
    conn = stub_connection("s1")
    conn.exists.side_effect = lambda symbol: False

    with caplog.at_level(logging.WARNING, logger="dsspatial"):
        report = dispatch(OPERATION, [conn], CALL, "D.coords")

    assert report.results[0].assigned is True
    assert report.results[0].exists is False
    assert report.failed_connections == ["s1"]
    assert "was not generated on s1" in caplog.text


def test_dispatch_existence_check_failure_does_not_fail_connection(stub_connection):
    conn = stub_connection("s1")
    conn.exists.side_effect = RemoteEvaluationFailure("s1", "timeout")

    report = dispatch(OPERATION, [conn], CALL, "D.coords")

    result = report.results[0]
    assert result.assigned is True
    assert result.exists is None
    assert "timeout" in result.error
    assert result.ok


def test_dispatch_is_repeatable(stub_connection):
    """Dispatching twice issues identical calls and yields identical reports."""
    conn = stub_connection("s1")

    first = dispatch(OPERATION, [conn], CALL, "D.coords")
    second = dispatch(OPERATION, [conn], CALL, "D.coords")

    assert first == second
    assert conn.assign.call_count == 2
    assert conn.assign.call_args_list[0] == conn.assign.call_args_list[1]


def test_dispatch_logs_progress_per_connection(stub_connection, caplog):
    connections = [stub_connection("s1"), stub_connection("s2")]

    with caplog.at_level(logging.INFO, logger="dsspatial"):
        dispatch(OPERATION, connections, CALL, "D.coords")

    messages = [record.getMessage() for record in caplog.records]
    assert "--Converting data frame to coordinates object on s1..." in messages
    assert "--Converting data frame to coordinates object on s2..." in messages
