"""Plugin manager for component registration and resolution.

Uses pluggy for hook-based registration. The manager is the component
resolver handed to Graph; there is no process-wide registry.
"""

from typing import Any

import pluggy
import structlog

from sluice.plugins.base import BaseComponent
from sluice.plugins.hookspecs import PROJECT_NAME, SluiceComponentSpec

slog = structlog.get_logger(__name__)


class PluginManager:
    """Manages component registration and lookup.

    Usage:
        manager = PluginManager()
        manager.register_builtin_components()

        graph = Graph(manager)
        component = manager.resolve("text_decorator", {"mode": "uppercase"})
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(SluiceComponentSpec)

        # Cache - map name to component class for duplicate detection
        self._components: dict[str, type[BaseComponent]] = {}

    def register_builtin_components(self) -> None:
        """Register the components shipped with sluice."""
        from sluice.plugins.components import BuiltinComponents

        self.register(BuiltinComponents())

    def register(self, plugin: Any) -> None:
        """Register a plugin.

        Args:
            plugin: Plugin instance implementing hook methods

        Raises:
            ValueError: If a component name is already registered
        """
        self._pm.register(plugin)
        try:
            self._refresh_cache()
        except ValueError:
            # Leave the manager as it was before the conflicting registration
            self._pm.unregister(plugin)
            raise

    def _refresh_cache(self) -> None:
        """Refresh the component cache from hooks.

        Raises:
            ValueError: If two components share a name
        """
        new_components: dict[str, type[BaseComponent]] = {}

        for components in self._pm.hook.sluice_get_components():
            for cls in components:
                name = cls.name
                if name in new_components:
                    raise ValueError(f"Duplicate component name: '{name}'. Already registered by {new_components[name].__name__}")
                new_components[name] = cls

        self._components = new_components

    # === Getters ===

    def get_components(self) -> list[type[BaseComponent]]:
        """Get all registered component classes."""
        return list(self._components.values())

    def get_component_by_name(self, name: str) -> type[BaseComponent] | None:
        """Get component class by name."""
        return self._components.get(name)

    # === Resolution ===

    def resolve(self, node_type: str, settings: Any) -> BaseComponent | None:
        """Instantiate the component registered for node_type.

        Args:
            node_type: Component name
            settings: Node settings, validated against the component's config model

        Returns:
            Component instance, or None if no component has that name

        Raises:
            ComponentConfigError: If settings fail validation
        """
        cls = self._components.get(node_type)
        if cls is None:
            slog.warning("unknown_component_type", node_type=node_type, available=sorted(self._components))
            return None

        config = cls.config_model.from_dict(settings, component=node_type)
        return cls(config)
