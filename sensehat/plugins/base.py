"""
Sensor driver plugin API.

Plugins are modules that expose a callable `get_plugin()` returning a
`sensehat.registry.Registration` with:

- `api`: the capability the driver implements (e.g. `rdk:component:sensor`)
- `model`: the model triplet the host instantiates it by
- `constructor(config, dependencies) -> Resource`
- optional `validator(attributes, path) -> list[str]` returning the names of
  the dependencies the config needs, raising ConfigValidationError otherwise

Resources built by a sensor plugin implement `SensorResource`:

- async `readings(extra: dict | None) -> dict[str, Any]`
- `reconfigure(config, dependencies)` (raise MustRebuildError to be rebuilt)
- `close()`
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

from ..resource import ComponentConfig, Dependencies, ResourceName


Readings = Dict[str, Any]


@runtime_checkable
class SensorResource(Protocol):
    name: ResourceName

    async def readings(self, extra: Optional[Mapping[str, Any]] = None) -> Readings:
        ...

    def reconfigure(self, config: ComponentConfig, dependencies: Optional[Dependencies] = None) -> None:
        ...

    def close(self) -> None:
        ...
