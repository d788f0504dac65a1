"""Simulated device command API."""

import random
from typing import Optional

import structlog

from cmdsim.core.clock import Clock
from cmdsim.core.config import Settings
from cmdsim.models.command import Command, CommandCreate
from cmdsim.models.device import Device
from cmdsim.services.command_store import CommandStore
from cmdsim.services.network import NetworkSimulator

logger = structlog.get_logger()


class MockApi:
    """Async API over the in-memory store, routed through the network simulator.

    Stands in for ``GET /devices``, ``GET /devices/{id}/commands`` and
    ``POST /devices/{id}/commands``.
    """

    def __init__(self, store: CommandStore, network: Optional[NetworkSimulator] = None):
        self.store = store
        self.network = network or NetworkSimulator()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ) -> "MockApi":
        """Build the store and network simulator from configuration."""
        if rng is None:
            rng = random.Random(settings.lifecycle.seed)

        store = CommandStore(
            clock=clock,
            rng=rng,
            failure_probability=settings.lifecycle.failure_probability,
            id_start=settings.lifecycle.id_start,
            devices=settings.devices,
        )
        network = NetworkSimulator(
            latency_ms=settings.network.latency_ms,
            force_error=settings.network.force_error,
        )
        logger.info(
            "mock_api_configured",
            devices=len(settings.devices),
            latency_ms=network.latency_ms,
            force_error=network.force_error,
        )
        return cls(store, network)

    async def list_devices(self) -> list[Device]:
        """List all devices."""
        return await self.network.simulate(self.store.list_devices)

    async def list_commands(self, device_id: str) -> list[Command]:
        """List a device's commands, advanced to the current time."""
        return await self.network.simulate(lambda: self.store.list_commands(device_id))

    async def create_command(self, device_id: str, request: CommandCreate) -> Command:
        """Schedule a command for a device."""
        return await self.network.simulate(
            lambda: self.store.create_command(device_id, request.type, request.params)
        )

    def set_force_error(self, force: bool) -> None:
        self.network.set_force_error(force)

    def set_latency_ms(self, value: float) -> None:
        self.network.set_latency_ms(value)

    def reset(self) -> None:
        """Restore the seeded state."""
        self.store.reset()
