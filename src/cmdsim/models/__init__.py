"""Pydantic models for the simulated API and its views."""

from .command import Command, CommandCreate, CommandRuntimeInfo, CommandStatus, CommandType
from .device import Device
from .view import CommandsView, LoadState, StatusFilter

__all__ = [
    "Command",
    "CommandCreate",
    "CommandRuntimeInfo",
    "CommandStatus",
    "CommandType",
    "CommandsView",
    "Device",
    "LoadState",
    "StatusFilter",
]
