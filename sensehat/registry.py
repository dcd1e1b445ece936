"""Explicit model registry.

The entry point creates one ModelRegistry and registers each driver's factory
on it; nothing is registered as a side effect of importing a module.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .errors import RegistrationError
from .resource import API, ComponentConfig, Dependencies, Model, Resource

logger = logging.getLogger(__name__)

Constructor = Callable[[ComponentConfig, Dependencies], Resource]
AttributeValidator = Callable[[Mapping[str, Any], str], List[str]]


@dataclass(frozen=True)
class Registration:
    api: API
    model: Model
    constructor: Constructor
    validator: Optional[AttributeValidator] = None

    def validate(self, config: ComponentConfig, path: str = "") -> List[str]:
        """Return the dependency names a config needs, or raise on bad attributes."""
        if self.validator is None:
            return []
        return self.validator(config.attributes, path or config.name)


class ModelRegistry:
    def __init__(self) -> None:
        self._registrations: Dict[Tuple[API, Model], Registration] = {}

    def register(self, registration: Registration) -> None:
        key = (registration.api, registration.model)
        if key in self._registrations:
            raise RegistrationError(f"model {registration.model} already registered for {registration.api}")
        self._registrations[key] = registration
        logger.debug("registered %s under %s", registration.model, registration.api)

    def lookup(self, api: API, model: Model) -> Registration:
        try:
            return self._registrations[(api, model)]
        except KeyError:
            raise RegistrationError(f"no registration for model {model} in {api}") from None

    def __contains__(self, key: Tuple[API, Model]) -> bool:
        return key in self._registrations

    def __len__(self) -> int:
        return len(self._registrations)
