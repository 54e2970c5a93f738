"""Unit tests for opening and closing connection sets."""

from unittest.mock import MagicMock

import pytest

from dsspatial.config import ClientSettings, LoginConfig
from dsspatial.dispatch.errors import RemoteEvaluationFailure
from dsspatial.session import connect, open_connections


def _login(*names):
    return LoginConfig(
        servers=[
            {
                "name": name,
                "url": f"https://{name}.example.org",
                "user": "analyst",
                "password": "secret",
                "table": "SPATIAL.trips",
            }
            for name in names
        ]
    )


@pytest.fixture
def opal_class(mocker):
    """Patch OpalConnection so each construction returns a named mock."""
    created = []

    def build(name, **kwargs):
        conn = MagicMock()
        conn.name = name
        conn.kwargs = kwargs
        conn.open.return_value = conn
        created.append(conn)
        return conn

    mock_class = mocker.patch("dsspatial.session.OpalConnection", side_effect=build)
    mock_class.created = created
    return mock_class


def test_connect_opens_and_assigns_table(opal_class):
    server = _login("s1").servers[0]

    conn = connect(server, ClientSettings(request_timeout_seconds=30, verify_tls=False))

    conn.open.assert_called_once_with()
    conn.assign_table.assert_called_once_with("D", "SPATIAL.trips")
    assert conn.kwargs["password"] == "secret"
    assert conn.kwargs["timeout"] == 30
    assert conn.kwargs["verify"] is False


def test_connect_closes_on_failure(opal_class):
    server = _login("s1").servers[0]
    opal_class.side_effect = None
    failing = MagicMock()
    failing.open.side_effect = RemoteEvaluationFailure("s1", "401 Unauthorized")
    opal_class.return_value = failing

    with pytest.raises(RemoteEvaluationFailure):
        connect(server, ClientSettings())

    failing.close.assert_called_once_with()


def test_open_connections_in_login_order_and_closes_all(opal_class):
    with open_connections(_login("s1", "s2"), ClientSettings()) as connections:
        assert [conn.name for conn in connections] == ["s1", "s2"]
        for conn in connections:
            conn.close.assert_not_called()

    for conn in opal_class.created:
        conn.close.assert_called_once_with()


def test_open_connections_closes_opened_when_later_server_fails(opal_class):
    build = opal_class.side_effect

    def build_failing_second(name, **kwargs):
        conn = build(name, **kwargs)
        if name == "s2":
            conn.open.side_effect = RemoteEvaluationFailure("s2", "timeout")
        return conn

    opal_class.side_effect = build_failing_second

    with pytest.raises(RemoteEvaluationFailure):
        with open_connections(_login("s1", "s2"), ClientSettings()):
            pytest.fail("connections should not be yielded")

    first, second = opal_class.created
    first.close.assert_called_once_with()
    second.close.assert_called_once_with()
