"""Small helpers shared by the services and the CLI."""

from .filters import visible_commands
from .format_error import UNKNOWN_ERROR, format_error
from .params import InvalidParamsError, parse_params_text, validate_params_text

__all__ = [
    "InvalidParamsError",
    "UNKNOWN_ERROR",
    "format_error",
    "parse_params_text",
    "validate_params_text",
    "visible_commands",
]
