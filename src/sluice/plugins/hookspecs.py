"""pluggy hook specifications for sluice components.

Component packages implement these hooks to register themselves.
The plugin manager calls them when building its registry.

Usage (implementing a component package):
    from sluice.plugins.hookspecs import hookimpl

    class MyComponents:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def sluice_get_components(self):
            return [MyComponent]
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from sluice.plugins.base import BaseComponent

# Project name for pluggy
PROJECT_NAME = "sluice"

# Hook specification marker
hookspec = pluggy.HookspecMarker(PROJECT_NAME)

# Hook implementation marker (for component packages to use)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class SluiceComponentSpec:
    """Hook specifications for component packages."""

    @hookspec
    def sluice_get_components(self) -> list[type["BaseComponent"]]:  # type: ignore[empty-body]
        """Return component classes.

        Returns:
            List of component classes (not instances)
        """
