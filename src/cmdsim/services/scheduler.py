"""Schedule commands from free-text input."""

from typing import Awaitable, Callable, Optional, Union

import structlog

from cmdsim.models.command import Command, CommandCreate, CommandType
from cmdsim.services.mock_api import MockApi
from cmdsim.shared.format_error import format_error
from cmdsim.shared.params import InvalidParamsError, parse_params_text

logger = structlog.get_logger()

NO_DEVICE_ERROR = "Select a device first."


class CommandScheduler:
    """Validates a schedule request and submits it through the API.

    ``on_scheduled`` runs after every successful submit; wire it to
    ``CommandPoller.refresh`` so the new command shows up without waiting
    for the next tick.
    """

    def __init__(
        self,
        api: MockApi,
        on_scheduled: Optional[Callable[[Command], Union[None, Awaitable[None]]]] = None,
    ):
        self.api = api
        self.on_scheduled = on_scheduled

        self.submitting = False
        self.error: Optional[str] = None

    async def submit(
        self,
        device_id: Optional[str],
        command_type: CommandType,
        raw_params: str = "",
    ) -> Optional[Command]:
        """Schedule a command. Returns it, or ``None`` with ``error`` set."""
        self.error = None

        if not device_id:
            self.error = NO_DEVICE_ERROR
            return None

        try:
            params = parse_params_text(raw_params)
        except InvalidParamsError as e:
            self.error = str(e)
            return None

        self.submitting = True
        try:
            command = await self.api.create_command(
                device_id, CommandCreate(type=command_type, params=params)
            )
        except Exception as e:
            self.error = format_error(e)
            logger.warning("schedule_failed", device_id=device_id, error=self.error)
            return None
        finally:
            self.submitting = False

        logger.info(
            "command_scheduled",
            device_id=device_id,
            command_id=command.command_id,
            type=command_type.value,
        )

        if self.on_scheduled:
            result = self.on_scheduled(command)
            if result is not None:
                await result

        return command
