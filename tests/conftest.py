from __future__ import annotations

from typing import List, Optional, Tuple

import pytest

from sensehat.board import LocalBoard
from sensehat.resource import BOARD_API, ResourceName


class FakeHandle:
    def __init__(self, bus: "FakeI2C", addr: int):
        self._bus = bus
        self.addr = addr

    def write(self, data: bytes) -> None:
        self._bus.calls.append(("write", self.addr, bytes(data)))
        if self._bus.write_error is not None:
            raise self._bus.write_error

    def close(self) -> None:
        self._bus.calls.append(("close", self.addr, b""))
        if self._bus.close_error is not None:
            raise self._bus.close_error


class FakeI2C:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, int, bytes]] = []
        self.open_error: Optional[Exception] = None
        self.write_error: Optional[Exception] = None
        self.close_error: Optional[Exception] = None

    def open_handle(self, addr: int) -> FakeHandle:
        self.calls.append(("open", addr, b""))
        if self.open_error is not None:
            raise self.open_error
        return FakeHandle(self, addr)


class FakeBoard(LocalBoard):
    def __init__(self, name: str, buses):
        super().__init__(ResourceName(BOARD_API, name))
        self._buses = buses

    def i2c_by_name(self, name: str):
        return self._buses.get(name)


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    sleeps: List[float] = []
    monkeypatch.setattr("sensehat.plugins.lps25h.sleep", sleeps.append)
    return sleeps


@pytest.fixture
def fake_bus() -> FakeI2C:
    return FakeI2C()


@pytest.fixture
def deps(fake_bus):
    board = FakeBoard("pi", {"bus1": fake_bus})
    return {board.name: board}
