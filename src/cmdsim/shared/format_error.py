"""Turn anything raised by a collaborator into a display string."""

import json
from typing import Any

UNKNOWN_ERROR = "Unknown error"


def format_error(value: Any) -> str:
    """Format an error value for display.

    Exceptions give their message, strings are returned as-is, anything else
    is JSON-encoded. Values that cannot be encoded (cycles, arbitrary
    objects) fall back to ``UNKNOWN_ERROR``. An exception raised with a
    single non-string payload is formatted as that payload.
    """
    seen: set[int] = set()
    while (
        isinstance(value, BaseException)
        and len(value.args) == 1
        and not isinstance(value.args[0], str)
    ):
        # An exception whose payload leads back to itself
        if id(value) in seen:
            return UNKNOWN_ERROR
        seen.add(id(value))
        value = value.args[0]

    if isinstance(value, BaseException):
        message = str(value)
        return message or type(value).__name__

    if isinstance(value, str):
        return value or UNKNOWN_ERROR

    try:
        encoded = json.dumps(value)
    except (TypeError, ValueError, RecursionError):
        return UNKNOWN_ERROR

    return encoded or UNKNOWN_ERROR
