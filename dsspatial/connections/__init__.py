"""Connections to remote study workspaces.

- Connection: protocol every transport implements
- OpalConnection: DataSHIELD session on an Opal server (HTTP)
"""

from dsspatial.connections.base import Connection
from dsspatial.connections.opal import OpalConnection

__all__ = [
    "Connection",
    "OpalConnection",
]
