"""Base class for components.

Subclasses declare their ports and settings model as class attributes and
implement run(). The plugin manager validates node settings against
``config_model`` and passes the validated model to ``__init__``.

Example:
    class Doubler(BaseComponent):
        name = "doubler"
        inputs = {"number": {"type": "number"}}
        outputs = {"result": {"type": "number"}}

        async def run(self, inputs, settings):
            return {"result": inputs["number"] * 2}
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

from sluice.plugins.config_base import ComponentConfig, EmptyConfig
from sluice.plugins.protocols import RunResult


class BaseComponent(ABC):
    """Base class for node behaviour."""

    name: ClassVar[str]
    config_model: ClassVar[type[ComponentConfig]] = EmptyConfig
    inputs: ClassVar[Mapping[str, Any]] = {}
    outputs: ClassVar[Mapping[str, Any]] = {}

    def __init__(self, config: ComponentConfig) -> None:
        self.config = config

    @abstractmethod
    def run(self, inputs: dict[str, Any], settings: Any) -> RunResult:
        """Process one complete input vector."""
        ...
