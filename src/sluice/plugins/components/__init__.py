"""Components shipped with sluice."""

from sluice.plugins.base import BaseComponent
from sluice.plugins.components.printer import Printer
from sluice.plugins.components.text_decorator import TextDecorator
from sluice.plugins.hookspecs import hookimpl

BUILTIN_COMPONENTS: list[type[BaseComponent]] = [TextDecorator, Printer]


class BuiltinComponents:
    """Hook implementer registering the built-in components."""

    @hookimpl
    def sluice_get_components(self) -> list[type[BaseComponent]]:
        return list(BUILTIN_COMPONENTS)


__all__ = [
    "BUILTIN_COMPONENTS",
    "BuiltinComponents",
    "Printer",
    "TextDecorator",
]
