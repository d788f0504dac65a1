"""Tests for error formatting, params parsing and command filtering."""

from datetime import timedelta

import pytest

from cmdsim.core.clock import ms_to_datetime
from cmdsim.models.command import Command, CommandStatus, CommandType
from cmdsim.models.view import StatusFilter
from cmdsim.shared import (
    UNKNOWN_ERROR,
    InvalidParamsError,
    format_error,
    parse_params_text,
    validate_params_text,
    visible_commands,
)

from conftest import T0_MS


class TestFormatError:
    def test_exception_message(self):
        assert format_error(RuntimeError("boom")) == "boom"

    def test_exception_without_message(self):
        assert format_error(TimeoutError()) == "TimeoutError"

    def test_plain_string(self):
        assert format_error("nope") == "nope"

    def test_structured_value(self):
        assert format_error({"code": 503}) == '{"code": 503}'

    def test_exception_with_structured_payload(self):
        assert format_error(RuntimeError({"code": 503})) == '{"code": 503}'

    def test_cyclic_value(self):
        cyclic: dict = {"a": 1}
        cyclic["self"] = cyclic

        assert format_error(cyclic) == UNKNOWN_ERROR

    def test_unserialisable_object(self):
        assert format_error(object()) == UNKNOWN_ERROR

    def test_empty_string(self):
        assert format_error("") == UNKNOWN_ERROR

    def test_exception_carrying_itself(self):
        error = RuntimeError()
        error.args = (error,)

        assert format_error(error) == UNKNOWN_ERROR

    def test_exceptions_carrying_each_other(self):
        outer = RuntimeError()
        inner = ValueError(outer)
        outer.args = (inner,)

        assert format_error(outer) == UNKNOWN_ERROR

    def test_nested_exception_payload(self):
        assert format_error(RuntimeError(ValueError("disk full"))) == "disk full"


class TestParams:
    @pytest.mark.parametrize("raw", ["", "   ", '{"a": 1}', "[1, 2]", "null", "3"])
    def test_valid(self, raw):
        assert validate_params_text(raw) is True

    @pytest.mark.parametrize("raw", ["{", "{a: 1}", "nope"])
    def test_invalid(self, raw):
        assert validate_params_text(raw) is False

    def test_blank_parses_to_empty_object(self):
        assert parse_params_text("  \n") == {}

    def test_nested_value(self):
        assert parse_params_text('{"window": "last_5m", "tags": [1, null]}') == {
            "window": "last_5m",
            "tags": [1, None],
        }

    def test_invalid_raises(self):
        with pytest.raises(InvalidParamsError):
            parse_params_text("{oops")


def make_command(command_id: str, status: CommandStatus, age_s: int) -> Command:
    return Command(
        command_id=command_id,
        device_id="d_001",
        type=CommandType.PING,
        params={},
        status=status,
        created_at=ms_to_datetime(T0_MS) - timedelta(seconds=age_s),
    )


class TestVisibleCommands:
    @pytest.fixture
    def commands(self):
        return [
            make_command("old_ok", CommandStatus.SUCCEEDED, 90),
            make_command("new_pending", CommandStatus.PENDING, 0),
            make_command("mid_leased", CommandStatus.LEASED, 3),
            make_command("old_failed", CommandStatus.FAILED, 60),
        ]

    def test_all_sorted_newest_first(self, commands):
        ids = [c.command_id for c in visible_commands(commands)]
        assert ids == ["new_pending", "mid_leased", "old_failed", "old_ok"]

    def test_pending(self, commands):
        result = visible_commands(commands, StatusFilter.PENDING)
        assert [c.command_id for c in result] == ["new_pending"]

    def test_leased(self, commands):
        result = visible_commands(commands, StatusFilter.LEASED)
        assert [c.command_id for c in result] == ["mid_leased"]

    def test_terminal(self, commands):
        result = visible_commands(commands, StatusFilter.TERMINAL)
        assert [c.command_id for c in result] == ["old_failed", "old_ok"]

    def test_does_not_reorder_input(self, commands):
        visible_commands(commands)
        assert commands[0].command_id == "old_ok"
