"""The module process the host runtime talks to.

Module keeps the set of models it serves and the resources the host asked it
to build. The host's transport (socket handshake, RPC) is not part of this
package; `address` is the socket path the host handed us on the command line.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from .errors import MustRebuildError, RegistrationError, ResourceNotFoundError, combine_errors
from .plugins.base import SensorResource
from .registry import ModelRegistry
from .resource import API, ComponentConfig, Dependencies, Model, Resource, ResourceName

logger = logging.getLogger(__name__)


class Module:
    def __init__(self, address: str, registry: ModelRegistry):
        self.address = address
        self.registry = registry
        self._models: Set[Tuple[API, Model]] = set()
        self._resources: Dict[ResourceName, Resource] = {}
        self._started = False
        self._shutdown: Optional[asyncio.Event] = None
        self._shutdown_requested = False

    @property
    def started(self) -> bool:
        return self._started

    def add_model_from_registry(self, api: API, model: Model) -> None:
        if self._started:
            raise RegistrationError("models must be added before the module is started")
        self.registry.lookup(api, model)
        self._models.add((api, model))
        logger.info("serving %s as %s", model, api)

    def models(self) -> List[Tuple[API, Model]]:
        return sorted(self._models, key=lambda pair: (str(pair[0]), str(pair[1])))

    def start(self) -> None:
        if not self._models:
            raise RegistrationError("module has no models to serve")
        self._started = True
        logger.info("module ready at %s", self.address)

    def validate_config(self, config: ComponentConfig) -> List[str]:
        return self._registration(config).validate(config)

    def add_resource(self, config: ComponentConfig, dependencies: Optional[Dependencies] = None) -> Resource:
        name = config.resource_name()
        if name in self._resources:
            raise RegistrationError(f"resource {name} already exists")
        registration = self._registration(config)
        registration.validate(config)
        resource = registration.constructor(config, dependencies or {})
        self._resources[name] = resource
        logger.info("added resource %s (%s)", name, config.model)
        return resource

    def reconfigure_resource(self, config: ComponentConfig, dependencies: Optional[Dependencies] = None) -> Resource:
        name = config.resource_name()
        current = self.get_resource(name)
        try:
            current.reconfigure(config, dependencies)
            return current
        except MustRebuildError:
            logger.debug("rebuilding %s", name)
        current.close()
        del self._resources[name]
        return self.add_resource(config, dependencies)

    def remove_resource(self, name: ResourceName) -> None:
        resource = self.get_resource(name)
        del self._resources[name]
        resource.close()
        logger.info("removed resource %s", name)

    def get_resource(self, name: ResourceName) -> Resource:
        try:
            return self._resources[name]
        except KeyError:
            raise ResourceNotFoundError(f"resource {name} not found") from None

    async def readings(self, name: ResourceName, extra: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        resource = self.get_resource(name)
        if not isinstance(resource, SensorResource):
            raise ResourceNotFoundError(f"resource {name} is not a sensor")
        return await resource.readings(extra)

    def _registration(self, config: ComponentConfig):
        if (config.api, config.model) not in self._models:
            raise RegistrationError(f"module does not serve model {config.model} for {config.api}")
        return self.registry.lookup(config.api, config.model)

    def request_shutdown(self) -> None:
        self._shutdown_requested = True
        if self._shutdown is not None:
            self._shutdown.set()

    async def run_until_shutdown(self) -> None:
        """Block until SIGINT/SIGTERM, request_shutdown() or cancellation."""
        self._shutdown = asyncio.Event()
        if self._shutdown_requested:
            self._shutdown.set()
        loop = asyncio.get_running_loop()
        installed = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self._shutdown.set)
                installed.append(sig)
            except (NotImplementedError, RuntimeError, ValueError):
                pass
        try:
            await self._shutdown.wait()
            logger.info("shutdown requested")
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)

    def close(self) -> None:
        err = None
        for name in list(self._resources):
            resource = self._resources.pop(name)
            try:
                resource.close()
            except Exception as exc:
                logger.error("closing %s failed: %s", name, exc)
                err = combine_errors(err, exc)
        self._started = False
        if err is not None:
            raise err
