"""Shared fixtures."""

import random

import pytest

from cmdsim.core.clock import ManualClock
from cmdsim.services.command_store import CommandStore
from cmdsim.services.mock_api import MockApi
from cmdsim.services.network import NetworkSimulator

# 2026-01-01T00:00:00Z
T0_MS = 1_767_225_600_000


class FixedRandom(random.Random):
    """Random source whose draws always return the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


NEVER_FAIL = 0.5  # >= 0.15, command succeeds
ALWAYS_FAIL = 0.1  # < 0.15, command fails


@pytest.fixture
def clock():
    return ManualClock(T0_MS)


@pytest.fixture
def store(clock):
    return CommandStore(clock=clock, rng=FixedRandom(NEVER_FAIL))


@pytest.fixture
def api(store):
    return MockApi(store, NetworkSimulator(latency_ms=0))
