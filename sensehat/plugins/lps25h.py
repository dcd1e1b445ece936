"""ST LPS25H pressure sensor on the Raspberry Pi Sense HAT."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import sleep
from typing import Any, Dict, List, Mapping, Optional

from ..board import I2C, LocalBoard, board_from_dependencies
from ..errors import (
    BoardNotLocalError,
    ConfigValidationError,
    DependencyNotFoundError,
    I2CBusNotFoundError,
    combine_errors,
)
from ..registry import Registration
from ..resource import SENSOR_API, ComponentConfig, Dependencies, Model, Resource, ResourceName

logger = logging.getLogger(__name__)

MODEL = Model("sensehat", "sensor", "lps25h")

DEFAULT_I2C_ADDR = 0x5C
MAX_I2C_ADDR = 0x7F

COMMAND_SOFT_RESET = bytes([0x30, 0xA2])
RESET_SETTLE_SEC = 0.001


@dataclass(frozen=True)
class Config:
    board: str
    i2c_bus: str
    i2c_addr: int = 0

    @staticmethod
    def from_attributes(attributes: Mapping[str, Any], path: str = "") -> "Config":
        board = attributes.get("board")
        if not board:
            raise ConfigValidationError(path, "board")
        if not isinstance(board, str):
            raise ConfigValidationError(path, "board", "must be a string")
        i2c_bus = attributes.get("i2c_bus")
        if not i2c_bus:
            raise ConfigValidationError(path, "i2c_bus")
        if not isinstance(i2c_bus, str):
            raise ConfigValidationError(path, "i2c_bus", "must be a string")
        addr = attributes.get("i2c_addr")
        if addr is None:
            addr = 0
        if isinstance(addr, bool) or not isinstance(addr, int) or not 0 <= addr <= MAX_I2C_ADDR:
            raise ConfigValidationError(path, "i2c_addr", "must be a 7-bit address")
        return Config(board=board, i2c_bus=i2c_bus, i2c_addr=addr)

    @property
    def resolved_addr(self) -> int:
        return self.i2c_addr or DEFAULT_I2C_ADDR


def validate_config(attributes: Mapping[str, Any], path: str) -> List[str]:
    return [Config.from_attributes(attributes, path).board]


def reset(bus: I2C, addr: int) -> None:
    """Soft-reset the chip at `addr`.

    The handle is closed even when the write fails; a write error and a close
    error are raised together.
    """
    try:
        handle = bus.open_handle(addr)
    except Exception as exc:
        logger.error("can't open lps25h i2c handle at 0x%02x: %s", addr, exc)
        raise
    write_err: Optional[BaseException] = None
    try:
        handle.write(COMMAND_SOFT_RESET)
    except Exception as exc:
        write_err = exc
    # wait for the chip reset cycle to complete
    sleep(RESET_SETTLE_SEC)
    close_err: Optional[BaseException] = None
    try:
        handle.close()
    except Exception as exc:
        close_err = exc
    err = combine_errors(write_err, close_err)
    if err is not None:
        raise err


class LPS25H(Resource):
    def __init__(self, name: ResourceName, bus: I2C, addr: int):
        super().__init__(name)
        self._bus = bus
        self._addr = addr

    @property
    def addr(self) -> int:
        return self._addr

    def reset(self) -> None:
        reset(self._bus, self._addr)

    async def readings(self, extra: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        # Placeholder until register decoding exists.
        return {"hello": "world"}


def new_sensor(name: ResourceName, deps: Dependencies, conf: Config) -> LPS25H:
    try:
        board = board_from_dependencies(deps, conf.board)
    except DependencyNotFoundError as exc:
        raise DependencyNotFoundError(f"lps25h init: failed to find board: {exc}") from exc
    if not isinstance(board, LocalBoard):
        raise BoardNotLocalError(f"board {conf.board} is not local")
    bus = board.i2c_by_name(conf.i2c_bus)
    if bus is None:
        raise I2CBusNotFoundError(f"lps25h init: failed to find i2c bus {conf.i2c_bus}")
    if not conf.i2c_addr:
        logger.warning("using default i2c address 0x%02x", DEFAULT_I2C_ADDR)
    sensor = LPS25H(name, bus, conf.resolved_addr)
    sensor.reset()
    return sensor


def construct(config: ComponentConfig, deps: Dependencies) -> LPS25H:
    conf = Config.from_attributes(config.attributes, config.name)
    return new_sensor(config.resource_name(), deps, conf)


def get_plugin() -> Registration:
    return Registration(api=SENSOR_API, model=MODEL, constructor=construct, validator=validate_config)
