"""Free-text JSON params for scheduled commands."""

import json

from pydantic import JsonValue


class InvalidParamsError(ValueError):
    """Params text is not valid JSON."""


def validate_params_text(raw: str) -> bool:
    """Empty text or valid JSON is accepted."""
    try:
        parse_params_text(raw)
    except InvalidParamsError:
        return False
    return True


def parse_params_text(raw: str) -> JsonValue:
    """Parse params text; blank text means an empty object."""
    if not raw or raw.strip() == "":
        return {}

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidParamsError(f"Params must be valid JSON: {e.msg}") from e
