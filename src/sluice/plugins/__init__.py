"""Component capability interface, registration, and built-in components."""

from sluice.plugins.base import BaseComponent
from sluice.plugins.config_base import ComponentConfig, ComponentConfigError
from sluice.plugins.hookspecs import hookimpl
from sluice.plugins.manager import PluginManager
from sluice.plugins.protocols import ComponentProtocol, ComponentResolver

__all__ = [
    "BaseComponent",
    "ComponentConfig",
    "ComponentConfigError",
    "ComponentProtocol",
    "ComponentResolver",
    "PluginManager",
    "hookimpl",
]
