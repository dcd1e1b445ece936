from __future__ import annotations

import importlib
import logging
import os
import pkgutil
import sys
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from . import plugins as builtin_plugins
from .registry import ModelRegistry, Registration

logger = logging.getLogger(__name__)

PLUGINS_DIR_ENV = "SENSOR_PLUGINS_DIR"
_SKIP = {"__init__", "base"}


def _iter_plugin_modules(plugins_dir: Optional[Path]) -> Iterable[Tuple[str, str]]:
    """Yield (display name, import name) for every candidate plugin module."""
    if plugins_dir is not None:
        logger.info("searching plugins in %s %s", plugins_dir, "(exists)" if plugins_dir.exists() else "(missing)")
        if plugins_dir.exists():
            if str(plugins_dir) not in sys.path:
                sys.path.insert(0, str(plugins_dir))
            for m_info in pkgutil.iter_modules([str(plugins_dir)]):
                if m_info.name not in _SKIP:
                    yield m_info.name, m_info.name
    for m_info in pkgutil.iter_modules(builtin_plugins.__path__):
        if m_info.name not in _SKIP:
            yield m_info.name, f"{builtin_plugins.__name__}.{m_info.name}"


def load_sensor_plugins(plugins_dir: Path | str | None = None) -> Dict[str, Registration]:
    """Load driver plugins from the built-in package and an optional directory.

    If plugins_dir is not given, the SENSOR_PLUGINS_DIR env var is used. The
    external directory is searched first, so its models shadow built-in ones
    with the same model string.
    """
    if plugins_dir is None:
        plugins_dir = os.environ.get(PLUGINS_DIR_ENV) or None
    extra = Path(plugins_dir) if plugins_dir else None
    plugins: Dict[str, Registration] = {}
    for mod_name, import_name in _iter_plugin_modules(extra):
        logger.info("loading module '%s'...", mod_name)
        try:
            module = importlib.import_module(import_name)
        except Exception as exc:
            logger.warning("import failed: %s: %s", mod_name, exc)
            continue
        get_plugin = getattr(module, "get_plugin", None)
        if not callable(get_plugin):
            continue
        try:
            registration = get_plugin()
        except Exception as exc:
            logger.warning("get_plugin failed: %s: %s", mod_name, exc)
            continue
        if not isinstance(registration, Registration):
            logger.warning("plugin %s returned %r, not a Registration", mod_name, registration)
            continue
        key = str(registration.model)
        if key in plugins:
            logger.info("plugin %s already provided, skipping %s", key, mod_name)
            continue
        plugins[key] = registration
        logger.info("plugin registered: %s (%s)", key, registration.api)
    return plugins


def register_plugins(registry: ModelRegistry, plugins: Dict[str, Registration]) -> None:
    for name in sorted(plugins):
        registry.register(plugins[name])
