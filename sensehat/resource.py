"""Resource naming and the base class every component inherits from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .errors import MustRebuildError


def _split_triplet(value: str, kind: str) -> tuple[str, str, str]:
    parts = value.split(":")
    if len(parts) != 3 or not all(parts):
        raise ValueError(f"{kind} '{value}' must have the form a:b:c")
    return parts[0], parts[1], parts[2]


@dataclass(frozen=True)
class API:
    namespace: str
    type: str
    subtype: str

    @staticmethod
    def from_string(value: str) -> "API":
        return API(*_split_triplet(value, "API"))

    def __str__(self) -> str:
        return f"{self.namespace}:{self.type}:{self.subtype}"


@dataclass(frozen=True)
class Model:
    namespace: str
    family: str
    name: str

    @staticmethod
    def from_string(value: str) -> "Model":
        return Model(*_split_triplet(value, "Model"))

    def __str__(self) -> str:
        return f"{self.namespace}:{self.family}:{self.name}"


SENSOR_API = API("rdk", "component", "sensor")
BOARD_API = API("rdk", "component", "board")


@dataclass(frozen=True)
class ResourceName:
    api: API
    name: str

    def __str__(self) -> str:
        return f"{self.api}/{self.name}"


@dataclass
class ComponentConfig:
    name: str
    api: API
    model: Model
    attributes: Dict[str, Any] = field(default_factory=dict)

    def resource_name(self) -> ResourceName:
        return ResourceName(self.api, self.name)


Dependencies = Mapping[ResourceName, Any]


class Resource:
    """A named component managed by the host.

    The default lifecycle always rebuilds on configuration changes and has
    nothing to release on close.
    """

    def __init__(self, name: ResourceName):
        self.name = name

    def reconfigure(self, config: ComponentConfig, dependencies: Optional[Dependencies] = None) -> None:
        raise MustRebuildError(f"{self.name} must be rebuilt to apply a new config")

    def close(self) -> None:
        pass
