# src/sluice/plugins/config_base.py
"""Base class for typed component configurations.

Components declare their settings as a Pydantic model so that bad node
settings are rejected when the node is added, not when it first fires.

Example usage:
    class TextDecoratorConfig(ComponentConfig):
        mode: Literal["uppercase", "lowercase"]

    cfg = TextDecoratorConfig.from_dict(settings)
"""

from typing import Any, Self

from pydantic import BaseModel, ValidationError

from sluice.contracts.errors import ComponentResolutionError


class ComponentConfigError(ComponentResolutionError):
    """Raised when component settings are invalid."""


class ComponentConfig(BaseModel):
    """Base class for typed component configurations."""

    model_config = {"extra": "forbid", "frozen": True}  # Reject unknown fields

    @classmethod
    def from_dict(cls, config: Any, *, component: str | None = None) -> Self:
        """Create config from node settings with a clear error on failure.

        Args:
            config: Node settings; None is treated as an empty mapping.
            component: Component name for error messages.

        Returns:
            Validated configuration instance.

        Raises:
            ComponentConfigError: If configuration is invalid.
        """
        name = component or cls.__name__
        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ComponentConfigError(name, f"settings must be a mapping, got {type(config).__name__}")

        try:
            return cls.model_validate(config)
        except ValidationError as e:
            problems = "; ".join(f"{'.'.join(str(p) for p in err['loc']) or '<settings>'}: {err['msg']}" for err in e.errors())
            raise ComponentConfigError(name, f"invalid settings ({problems})") from e


class EmptyConfig(ComponentConfig):
    """Configuration for components that take no settings."""
