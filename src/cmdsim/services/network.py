"""Simulated network: artificial latency and forced-failure injection."""

import asyncio
import math
from typing import Callable, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")

SIMULATED_ERROR_MESSAGE = "Mock API error (simulated)"


class SimulatedNetworkError(Exception):
    """Raised for every call while forced errors are switched on."""

    def __init__(self, message: str = SIMULATED_ERROR_MESSAGE):
        super().__init__(message)


def normalize_latency(value: float) -> int:
    """Clamp to zero and floor to whole milliseconds."""
    if not math.isfinite(value):
        raise ValueError(f"Latency must be a finite number of milliseconds, got {value!r}")
    return max(0, math.floor(value))


class NetworkSimulator:
    """The single chokepoint every store-facing call goes through."""

    def __init__(self, latency_ms: float = 200, force_error: bool = False):
        self._latency_ms = normalize_latency(latency_ms)
        self._force_error = force_error

    @property
    def latency_ms(self) -> int:
        return self._latency_ms

    @property
    def force_error(self) -> bool:
        return self._force_error

    def set_latency_ms(self, value: float) -> None:
        """Set artificial latency; takes effect on the next call."""
        self._latency_ms = normalize_latency(value)
        logger.info("latency_configured", latency_ms=self._latency_ms)

    def set_force_error(self, force: bool) -> None:
        """Make every subsequent call fail (or stop failing)."""
        self._force_error = force
        logger.info("force_error_configured", force_error=force)

    async def simulate(self, operation: Callable[[], T]) -> T:
        """Run ``operation`` now and deliver its result after the latency.

        With forced errors on, ``operation`` is never called and
        ``SimulatedNetworkError`` is delivered after the same delay.
        """
        delay = self._latency_ms / 1000

        if self._force_error:
            await asyncio.sleep(delay)
            logger.warning("simulated_network_error", latency_ms=self._latency_ms)
            raise SimulatedNetworkError()

        result = operation()
        await asyncio.sleep(delay)
        logger.debug("simulated_call_completed", latency_ms=self._latency_ms)
        return result
