"""Time-indexed command lifecycle.

A command's status is a pure function of its creation time, its pre-drawn
failure outcome and the current instant. Nothing runs in the background:
the store calls ``advance`` on read, and every threshold is checked on every
call so a command that has not been read for a long time lands directly on
the state a continuous timeline would have reached.
"""

import structlog

from cmdsim.core.clock import ms_to_datetime
from cmdsim.models.command import Command, CommandRuntimeInfo, CommandStatus

logger = structlog.get_logger()

LEASE_AFTER_MS = 2_000
COMPLETE_AFTER_LEASE_MS = 3_000
LEASE_DURATION_MS = 60_000


def lease_at_ms(info: CommandRuntimeInfo) -> int:
    """Instant at which a pending command gets leased."""
    return info.created_at_ms + LEASE_AFTER_MS


def complete_at_ms(info: CommandRuntimeInfo) -> int:
    """Instant at which a leased command reaches its terminal status."""
    return info.created_at_ms + LEASE_AFTER_MS + COMPLETE_AFTER_LEASE_MS


def advance(command: Command, info: CommandRuntimeInfo, now_ms: int) -> Command:
    """Bring ``command`` up to date with ``now_ms``.

    Mutates and returns ``command``. Transitions only move forward; terminal
    commands are left untouched.
    """
    leased_at = lease_at_ms(info)
    completes_at = complete_at_ms(info)

    if command.status == CommandStatus.PENDING and now_ms >= leased_at:
        command.status = CommandStatus.LEASED
        command.lease_expires_at = ms_to_datetime(leased_at + LEASE_DURATION_MS)
        logger.debug("command_leased", command_id=command.command_id)

    # Re-checked independently so a long gap goes PENDING -> terminal in one call
    if command.status == CommandStatus.LEASED and now_ms >= completes_at:
        command.status = CommandStatus.FAILED if info.will_fail else CommandStatus.SUCCEEDED
        command.completed_at = ms_to_datetime(completes_at)
        logger.debug(
            "command_completed",
            command_id=command.command_id,
            status=command.status.value,
        )

    return command
