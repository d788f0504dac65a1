"""Command-related models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, JsonValue


class CommandType(str, Enum):
    """Type of command a device can be asked to run."""

    PING = "PING"
    REBOOT = "REBOOT"
    COLLECT_LOGS = "COLLECT_LOGS"


class CommandStatus(str, Enum):
    """Lifecycle status of a command."""

    PENDING = "PENDING"
    LEASED = "LEASED"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (CommandStatus.SUCCEEDED, CommandStatus.FAILED)


class CommandCreate(BaseModel):
    """Request to schedule a new command."""

    type: CommandType
    params: Optional[JsonValue] = None  # None is stored as {}


class Command(BaseModel):
    """A command issued to a device."""

    command_id: str
    device_id: str
    type: CommandType
    params: JsonValue = None
    status: CommandStatus = CommandStatus.PENDING

    # Timestamps
    created_at: datetime
    lease_expires_at: Optional[datetime] = None  # Set once leased, never cleared
    completed_at: Optional[datetime] = None


@dataclass(frozen=True)
class CommandRuntimeInfo:
    """Store-internal facts about a command that callers never see."""

    created_at_ms: int
    will_fail: bool
