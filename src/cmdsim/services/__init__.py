"""Simulator services - store, lifecycle, network simulation, polling."""

from .command_store import CommandStore
from .mock_api import MockApi
from .network import NetworkSimulator, SimulatedNetworkError
from .polling import CommandPoller, DeviceListLoader
from .scheduler import CommandScheduler

__all__ = [
    "CommandPoller",
    "CommandScheduler",
    "CommandStore",
    "DeviceListLoader",
    "MockApi",
    "NetworkSimulator",
    "SimulatedNetworkError",
]
