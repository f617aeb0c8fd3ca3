import asyncio

import pytest

from database import DeviceStore
from models import DeviceCreate


class FakeProber:
    """Answers from a fixed set of reachable addresses and records every call."""

    def __init__(self, reachable=(), gate=None):
        self.reachable = set(reachable)
        self.gate = gate
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def probe(self, address):
        self.calls.append(address)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            else:
                await asyncio.sleep(0)
            return address in self.reachable
        finally:
            self.in_flight -= 1


@pytest.fixture
def store():
    return DeviceStore()


@pytest.fixture
def add_device(store):
    async def _add(name, ip_address, **extra):
        return await store.create_device(DeviceCreate(name=name, ip_address=ip_address, **extra))
    return _add


@pytest.fixture
def make_prober():
    return FakeProber
