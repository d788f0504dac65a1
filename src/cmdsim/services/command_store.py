"""In-memory device and command store."""

import random
from collections import Counter
from typing import Iterable, Optional

import structlog
from pydantic import JsonValue

from cmdsim.core.clock import Clock, SystemClock, ms_to_datetime
from cmdsim.models.command import (
    Command,
    CommandRuntimeInfo,
    CommandStatus,
    CommandType,
)
from cmdsim.models.device import Device
from cmdsim.services.lifecycle import advance

logger = structlog.get_logger()

DEFAULT_DEVICES = ("d_001", "d_002", "d_003")
DEFAULT_ID_START = 120
DEFAULT_FAILURE_PROBABILITY = 0.15

# (type, params, age in ms at seed time). Ages put the seeds in different
# lifecycle stages on first read.
SEED_COMMANDS: tuple[tuple[CommandType, dict, int], ...] = (
    (CommandType.PING, {"seeded": True}, 90_000),
    (CommandType.COLLECT_LOGS, {"window": "last_5m"}, 25_000),
    (CommandType.REBOOT, {"reason": "seeded_demo"}, 2_000),
)


class CommandStore:
    """Owns devices, commands and per-command runtime info.

    Every value handed out is a deep copy, so callers can never alias the
    store's internal state.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
        failure_probability: float = DEFAULT_FAILURE_PROBABILITY,
        id_start: int = DEFAULT_ID_START,
        devices: Iterable[str] = DEFAULT_DEVICES,
    ):
        self.clock = clock or SystemClock()
        self.rng = rng or random.Random()
        self.failure_probability = failure_probability
        self.id_start = id_start

        self._devices: list[Device] = [Device(device_id=d) for d in devices]
        self._commands: dict[str, list[Command]] = {}
        self._runtime_info: dict[str, CommandRuntimeInfo] = {}
        self._next_number = id_start

        self._seed()

    def list_devices(self) -> list[Device]:
        """Get the full device catalog."""
        return [d.model_copy(deep=True) for d in self._devices]

    def list_commands(self, device_id: str) -> list[Command]:
        """Advance a device's commands to now and return them in storage order."""
        commands = self._commands.get(device_id, [])
        now_ms = self.clock.now_ms()

        for command in commands:
            info = self._runtime_info.get(command.command_id)
            if info is None:
                continue
            advance(command, info, now_ms)

        return [c.model_copy(deep=True) for c in commands]

    def create_command(
        self,
        device_id: str,
        command_type: CommandType,
        params: JsonValue = None,
        created_at_ms: Optional[int] = None,
    ) -> Command:
        """Create a new pending command."""
        command = self._create(
            device_id=device_id,
            command_type=command_type,
            params=params,
            created_at_ms=self.clock.now_ms() if created_at_ms is None else created_at_ms,
        )
        logger.info(
            "command_created",
            command_id=command.command_id,
            device_id=device_id,
            type=command_type.value,
        )
        return command.model_copy(deep=True)

    def reset(self) -> None:
        """Drop all commands and re-seed from scratch."""
        self._commands.clear()
        self._runtime_info.clear()
        self._next_number = self.id_start
        self._seed()
        logger.info("store_reset", devices=len(self._devices))

    def get_stats(self) -> dict:
        """Get command counts by stored status."""
        counts = Counter(
            c.status for commands in self._commands.values() for c in commands
        )
        stats = {"total_commands": sum(counts.values())}
        for status in CommandStatus:
            stats[status.value.lower()] = counts.get(status, 0)
        return stats

    def _seed(self) -> None:
        now_ms = self.clock.now_ms()
        for device in self._devices:
            for command_type, params, age_ms in SEED_COMMANDS:
                self._create(
                    device_id=device.device_id,
                    command_type=command_type,
                    params=params,
                    created_at_ms=now_ms - age_ms,
                )

    def _allocate_id(self) -> str:
        self._next_number += 1
        return f"c_{self._next_number}"

    def _create(
        self,
        device_id: str,
        command_type: CommandType,
        params: JsonValue,
        created_at_ms: int,
    ) -> Command:
        command = Command(
            command_id=self._allocate_id(),
            device_id=device_id,
            type=command_type,
            params={} if params is None else params,
            status=CommandStatus.PENDING,
            created_at=ms_to_datetime(created_at_ms),
        )
        # Stored params never share containers with the caller
        command = command.model_copy(deep=True)

        self._commands.setdefault(device_id, []).append(command)
        self._runtime_info[command.command_id] = CommandRuntimeInfo(
            created_at_ms=created_at_ms,
            will_fail=self.rng.random() < self.failure_probability,
        )
        return command
