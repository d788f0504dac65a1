"""View-state models shared by the polling coordinator and the CLI."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from .command import Command


class LoadState(str, Enum):
    """Externally observed load state of a view."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class StatusFilter(str, Enum):
    """Which commands a view shows."""

    ALL = "ALL"
    PENDING = "PENDING"
    LEASED = "LEASED"
    TERMINAL = "TERMINAL"


@dataclass(frozen=True)
class CommandsView:
    """Point-in-time snapshot of a command view."""

    device_id: Optional[str]
    state: LoadState
    commands: tuple[Command, ...] = field(default_factory=tuple)
    error: Optional[str] = None
    refreshing: bool = False
    last_updated_at: Optional[datetime] = None
