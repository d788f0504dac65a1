"""Status filtering and ordering for displayed commands."""

from typing import Iterable

from cmdsim.models.command import Command, CommandStatus
from cmdsim.models.view import StatusFilter


def visible_commands(
    commands: Iterable[Command],
    status_filter: StatusFilter = StatusFilter.ALL,
) -> list[Command]:
    """Newest first, restricted to ``status_filter``."""
    ordered = sorted(commands, key=lambda c: c.created_at, reverse=True)

    if status_filter == StatusFilter.PENDING:
        return [c for c in ordered if c.status == CommandStatus.PENDING]
    if status_filter == StatusFilter.LEASED:
        return [c for c in ordered if c.status == CommandStatus.LEASED]
    if status_filter == StatusFilter.TERMINAL:
        return [c for c in ordered if c.status.is_terminal]
    return ordered
