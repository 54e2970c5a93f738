"""Local argument checks run before any connection is touched.

Every check raises MissingArgument when the value is absent and
InvalidArgument when it has the wrong primitive type, naming the parameter
in both cases.
"""

import math
import re
from collections.abc import Sequence
from typing import Any

from dsspatial.dispatch.errors import InvalidArgument, MissingArgument

# R syntactic names: letters, digits, '.' and '_', not starting with a digit
# or underscore, and not '.' followed by a digit.
_SYMBOL_PATTERN = re.compile(r"^(?:[A-Za-z]|\.(?![0-9]))[A-Za-z0-9._]*$")

_RESERVED_WORDS = frozenset(
    {
        "if",
        "else",
        "repeat",
        "while",
        "function",
        "for",
        "next",
        "break",
        "TRUE",
        "FALSE",
        "NULL",
        "Inf",
        "NaN",
        "NA",
        "in",
    }
)

_FORBIDDEN_STRING_CHARS = ("'", '"', "\\", "\n", "\r")


def require(value: Any, parameter: str, message: str | None = None) -> Any:
    """Fail with MissingArgument if value is None."""
    if value is None:
        raise MissingArgument(parameter, message)
    return value


def require_symbol_name(value: Any, parameter: str, message: str | None = None) -> str:
    """Check that value names a remote object.

    Object names are interpolated unquoted into the call expression, so
    anything other than a plain identifier is rejected.
    """
    require(value, parameter, message)
    if not isinstance(value, str):
        raise InvalidArgument(parameter, f"expected an object name, got {type(value).__name__}")
    if not _SYMBOL_PATTERN.match(value) or value in _RESERVED_WORDS:
        raise InvalidArgument(parameter, f"'{value}' is not a valid object name")
    return value


def require_string(value: Any, parameter: str, message: str | None = None) -> str:
    """Check that value is a non-empty string safe to embed as a quoted literal."""
    require(value, parameter, message)
    if not isinstance(value, str):
        raise InvalidArgument(parameter, f"expected a string, got {type(value).__name__}")
    if not value:
        raise InvalidArgument(parameter, "must not be empty")
    if any(char in value for char in _FORBIDDEN_STRING_CHARS):
        raise InvalidArgument(parameter, "must not contain quotes, backslashes or newlines")
    return value


def require_string_list(
    value: Any, parameter: str, message: str | None = None
) -> tuple[str, ...]:
    """Check that value is a non-empty sequence of strings.

    A single string is accepted and treated as a one-element list.
    """
    require(value, parameter, message)
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, Sequence) or not value:
        raise InvalidArgument(parameter, "expected a non-empty list of strings")
    return tuple(require_string(item, parameter) for item in value)


def require_number(value: Any, parameter: str, message: str | None = None) -> int | float:
    """Check that value is a finite int or float (bool is rejected)."""
    require(value, parameter, message)
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise InvalidArgument(parameter, f"expected a number, got {type(value).__name__}")
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidArgument(parameter, "must be finite")
    return value


def require_bool(value: Any, parameter: str, message: str | None = None) -> bool:
    """Check that value is a bool."""
    require(value, parameter, message)
    if not isinstance(value, bool):
        raise InvalidArgument(parameter, f"expected a boolean, got {type(value).__name__}")
    return value
