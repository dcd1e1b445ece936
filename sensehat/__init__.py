"""Sense HAT sensor module package.

Exports:
- Module: the host-facing module process
- ModelRegistry / Registration: explicit model registration
- load_sensor_plugins: driver plugin discovery
"""
from .module import Module
from .plugins_loader import load_sensor_plugins, register_plugins
from .registry import ModelRegistry, Registration

__all__ = ["Module", "ModelRegistry", "Registration", "load_sensor_plugins", "register_plugins"]
