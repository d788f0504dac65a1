"""Live views over the simulated API.

``CommandPoller`` keeps one selected device's commands fresh: a timer fires
immediately and then every ``interval`` seconds, ``refresh()`` fires on
demand, and at most one fetch per loop is in flight (triggers that arrive
while busy are dropped, not queued). Every loop has a generation number;
selecting another device bumps it and cancels the old loop's tasks, and any
fetch that still completes for an old generation is discarded.
"""

import asyncio
from datetime import datetime
from typing import Callable, Optional

import structlog

from cmdsim.core.clock import Clock, SystemClock, ms_to_datetime
from cmdsim.models.command import Command
from cmdsim.models.device import Device
from cmdsim.models.view import CommandsView, LoadState
from cmdsim.services.mock_api import MockApi
from cmdsim.shared.format_error import UNKNOWN_ERROR, format_error

logger = structlog.get_logger()

DEFAULT_POLL_INTERVAL = 5.0


def _describe(formatter: Callable[[object], str], error: Exception) -> str:
    try:
        return formatter(error)
    except Exception:
        logger.warning("error_format_failed", error_type=type(error).__name__, exc_info=True)
        return UNKNOWN_ERROR


class CommandPoller:
    """Polls the commands of the selected device."""

    def __init__(
        self,
        api: MockApi,
        interval: float = DEFAULT_POLL_INTERVAL,
        clock: Optional[Clock] = None,
        on_change: Optional[Callable[[CommandsView], None]] = None,
        formatter: Callable[[object], str] = format_error,
    ):
        self.api = api
        self.interval = interval
        self.clock = clock or SystemClock()
        self.on_change = on_change
        self.formatter = formatter

        # View state
        self.selected_device_id: Optional[str] = None
        self.commands: list[Command] = []
        self.state = LoadState.IDLE
        self.error: Optional[str] = None
        self.refreshing = False
        self.last_updated_at: Optional[datetime] = None

        # Loop state
        self._generation = 0
        self._initial = False
        self._timer_task: Optional[asyncio.Task] = None
        self._fetch_task: Optional[asyncio.Task] = None
        self._retired: set[asyncio.Task] = set()

    async def __aenter__(self) -> "CommandPoller":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def fetch_in_flight(self) -> bool:
        return self._fetch_task is not None

    @property
    def is_polling(self) -> bool:
        return self._timer_task is not None

    def select_device(self, device_id: Optional[str]) -> None:
        """Switch the view to ``device_id`` (``None`` stops polling).

        Must be called from a running event loop.
        """
        self._cancel_loop()

        self.selected_device_id = device_id
        self.commands = []
        self.error = None
        self.refreshing = False
        self.last_updated_at = None

        if not device_id:
            self.state = LoadState.IDLE
            logger.info("polling_stopped")
            self._notify()
            return

        self.state = LoadState.LOADING
        self._initial = True
        generation = self._generation
        logger.info("polling_started", device_id=device_id, generation=generation)

        self._trigger(generation, source="timer")
        self._timer_task = asyncio.create_task(self._timer_loop(generation))
        self._notify()

    def refresh(self) -> None:
        """Fetch now, unless a fetch for the current loop is already running."""
        if not self.is_polling:
            logger.debug("refresh_ignored", reason="not polling")
            return
        self._trigger(self._generation, source="manual")

    async def wait_for_fetch(self) -> None:
        """Wait until the in-flight fetch (if any) has finished."""
        task = self._fetch_task
        if task is not None:
            await asyncio.wait([task])

    async def close(self) -> None:
        """Cancel the active loop and wait for its tasks to wind down."""
        self._cancel_loop()
        if self._retired:
            await asyncio.gather(*self._retired, return_exceptions=True)
        logger.info("poller_closed")

    def snapshot(self) -> CommandsView:
        """Current view state, detached from the poller's own commands."""
        return CommandsView(
            device_id=self.selected_device_id,
            state=self.state,
            commands=tuple(c.model_copy(deep=True) for c in self.commands),
            error=self.error,
            refreshing=self.refreshing,
            last_updated_at=self.last_updated_at,
        )

    def _cancel_loop(self) -> None:
        self._generation += 1

        for task in (self._timer_task, self._fetch_task):
            if task is not None and not task.done():
                task.cancel()
                self._retired.add(task)
                task.add_done_callback(self._retired.discard)

        self._timer_task = None
        self._fetch_task = None
        self._initial = False

    def _trigger(self, generation: int, source: str) -> None:
        if generation != self._generation:
            return

        if self._fetch_task is not None:
            logger.debug(
                "poll_trigger_dropped",
                device_id=self.selected_device_id,
                source=source,
            )
            return

        self.refreshing = not self._initial
        self._fetch_task = asyncio.create_task(
            self._fetch(generation, self.selected_device_id)
        )
        if self.refreshing:
            self._notify()

    async def _timer_loop(self, generation: int) -> None:
        """Fire every ``interval`` seconds until cancelled."""
        while True:
            try:
                await asyncio.sleep(self.interval)
                self._trigger(generation, source="timer")
            except asyncio.CancelledError:
                break

    async def _fetch(self, generation: int, device_id: str) -> None:
        error: Optional[Exception] = None
        commands: list[Command] = []

        try:
            commands = await self.api.list_commands(device_id)
        except Exception as e:
            error = e

        if generation != self._generation:
            logger.debug(
                "stale_poll_result_discarded",
                device_id=device_id,
                generation=generation,
            )
            return

        self._fetch_task = None
        self._initial = False
        self.refreshing = False

        if error is None:
            self.commands = commands
            self.error = None
            self.state = LoadState.READY
            self.last_updated_at = ms_to_datetime(self.clock.now_ms())
            logger.debug("poll_fetch_succeeded", device_id=device_id, count=len(commands))
        else:
            self.error = _describe(self.formatter, error)
            # Keep showing cached commands rather than an error view
            self.state = LoadState.READY if self.commands else LoadState.ERROR
            logger.warning(
                "poll_fetch_failed",
                device_id=device_id,
                error=self.error,
                cached=len(self.commands),
            )

        self._notify()

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self.snapshot())


class DeviceListLoader:
    """One-shot device list load; calling ``load()`` again is a manual reload."""

    def __init__(self, api: MockApi, formatter: Callable[[object], str] = format_error):
        self.api = api
        self.formatter = formatter

        self.devices: list[Device] = []
        self.state = LoadState.IDLE
        self.error: Optional[str] = None

    async def load(self) -> list[Device]:
        self.state = LoadState.LOADING
        self.error = None

        try:
            devices = await self.api.list_devices()
        except Exception as e:
            self.error = _describe(self.formatter, e)
            self.state = LoadState.ERROR
            logger.warning("device_list_failed", error=self.error)
            return self.devices

        self.devices = devices
        self.state = LoadState.READY
        logger.info("device_list_loaded", count=len(devices))
        return devices
