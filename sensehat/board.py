"""Board and I2C abstractions.

A driver never talks to smbus2 directly: it asks a LocalBoard for a named I2C
bus and opens a short-lived handle on it for each operation.

Board attributes for PiBoard look like:

    {"i2cs": [{"name": "default", "bus": 1}]}

where `bus` is an adapter number or a /dev/i2c-* path.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Protocol, Union, runtime_checkable

from smbus2 import SMBus, i2c_msg

from .errors import DependencyNotFoundError, I2CError
from .resource import BOARD_API, Dependencies, Resource, ResourceName

logger = logging.getLogger(__name__)

BusId = Union[int, str]


@runtime_checkable
class I2CHandle(Protocol):
    def write(self, data: bytes) -> None:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class I2C(Protocol):
    def open_handle(self, addr: int) -> I2CHandle:
        ...


class Board(Resource):
    pass


class LocalBoard(Board):
    """A board whose peripheral buses live in this process."""

    def i2c_by_name(self, name: str) -> Optional[I2C]:
        return None

    def i2c_names(self) -> list[str]:
        return []


class SMBusHandle:
    def __init__(self, bus: SMBus, addr: int):
        self._bus = bus
        self.addr = addr

    def write(self, data: bytes) -> None:
        try:
            self._bus.i2c_rdwr(i2c_msg.write(self.addr, list(data)))
        except OSError as exc:
            raise I2CError(f"i2c write to 0x{self.addr:02x} failed: {exc}") from exc

    def close(self) -> None:
        try:
            self._bus.close()
        except OSError as exc:
            raise I2CError(f"closing i2c handle 0x{self.addr:02x} failed: {exc}") from exc


class SMBusI2C:
    """An I2C bus on a Linux i2c-dev adapter."""

    def __init__(self, bus: BusId):
        self.bus = bus

    def open_handle(self, addr: int) -> SMBusHandle:
        try:
            return SMBusHandle(SMBus(self.bus), addr)
        except (OSError, ValueError) as exc:
            raise I2CError(f"cannot open i2c bus {self.bus}: {exc}") from exc


def _parse_bus(raw: Any) -> BusId:
    if isinstance(raw, bool):
        raise ValueError(f"invalid i2c bus '{raw}'")
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    if text.isdigit():
        return int(text)
    if not text:
        raise ValueError("i2c bus may not be empty")
    return text


class PiBoard(LocalBoard):
    def __init__(self, name: ResourceName, i2cs: Mapping[str, I2C]):
        super().__init__(name)
        self._i2cs: Dict[str, I2C] = dict(i2cs)

    @classmethod
    def from_attributes(cls, name: ResourceName, attributes: Mapping[str, Any]) -> "PiBoard":
        i2cs: Dict[str, I2C] = {}
        for entry in attributes.get("i2cs") or []:
            bus_name = entry.get("name")
            if not bus_name:
                raise ValueError("each i2cs entry requires a 'name'")
            if entry.get("bus") is None:
                raise ValueError(f"i2cs entry {bus_name!r} requires a 'bus'")
            i2cs[bus_name] = SMBusI2C(_parse_bus(entry["bus"]))
            logger.debug("board %s: i2c bus %s -> %s", name.name, bus_name, i2cs[bus_name].bus)
        return cls(name, i2cs)

    def i2c_by_name(self, name: str) -> Optional[I2C]:
        return self._i2cs.get(name)

    def i2c_names(self) -> list[str]:
        return sorted(self._i2cs)


def board_from_dependencies(deps: Dependencies, name: str) -> Board:
    try:
        board = deps[ResourceName(BOARD_API, name)]
    except KeyError:
        raise DependencyNotFoundError(f"board {name!r} missing from dependencies") from None
    if not isinstance(board, Board):
        raise DependencyNotFoundError(f"dependency {name!r} is not a board")
    return board
