"""Emulated server side for development and end-to-end tests.

- parse_call: parser for serialized call expressions
- LocalConnection: connection backed by an in-memory workspace
- SERVER_FUNCTIONS: emulated remote spatial functions
"""

from dsspatial.local.connection import LocalConnection
from dsspatial.local.functions import SERVER_FUNCTIONS, class_tag
from dsspatial.local.parser import parse_call

__all__ = [
    "LocalConnection",
    "SERVER_FUNCTIONS",
    "class_tag",
    "parse_call",
]
