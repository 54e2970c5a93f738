"""Session layer: resolve the open connections once and hand them to operations.

This is the only place that knows which servers are "currently connected".
Operations always receive their connections explicitly.
"""

import logging
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager

from dsspatial.config import ClientSettings, LoginConfig, ServerConfig
from dsspatial.connections.opal import OpalConnection

logger = logging.getLogger(__name__)


def connect(server: ServerConfig, settings: ClientSettings) -> OpalConnection:
    """Open a session on one server and assign its table, if configured."""
    conn = OpalConnection(
        name=server.name,
        url=server.url,
        user=server.user,
        password=server.password.get_secret_value(),
        timeout=settings.request_timeout_seconds,
        verify=settings.verify_tls,
        profile=server.profile,
    )
    try:
        conn.open()
        if server.table:
            conn.assign_table(server.symbol, server.table)
    except Exception:
        conn.close()
        raise
    return conn


@contextmanager
def open_connections(
    login: LoginConfig, settings: ClientSettings | None = None
) -> Iterator[list[OpalConnection]]:
    """Log in to every server in the login file, in order.

    Yields:
        Connections in login file order

    Every opened connection is closed on exit, including when a later
    server fails to open.
    """
    settings = settings or ClientSettings()
    with ExitStack() as stack:
        connections = []
        for server in login.servers:
            logger.info(f"Logging in to {server.name} ({server.url})")
            conn = connect(server, settings)
            stack.callback(conn.close)
            connections.append(conn)
        logger.info(f"Logged in to {len(connections)} server(s)")
        yield connections
