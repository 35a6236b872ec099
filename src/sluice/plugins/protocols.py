"""Protocols defining the contracts between the engine and node behaviour.

These protocols are used for type checking; the engine only relies on the
attributes named here.

- ComponentProtocol: a resolved node behaviour (ports + run)
- ComponentResolver: anything that turns (type, settings) into a component
"""

from collections.abc import Awaitable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sluice.contracts.schema import Schema

# What run() may return: a result map, nothing, or an awaitable of either
type RunResult = Mapping[str, Any] | None | Awaitable[Mapping[str, Any] | None]


@runtime_checkable
class ComponentProtocol(Protocol):
    """Protocol for node behaviour.

    A component declares typed input and output ports and a run() callable.
    It is invoked once per complete input cycle with exactly the merged
    input vector and the node's settings.

    Port schemas may be Schema objects or JSON-Schema-style dicts; the
    engine normalizes them with as_schema().

    Example:
        class Doubler:
            name = "doubler"
            inputs = {"number": {"type": "number"}}
            outputs = {"result": {"type": "number"}}

            async def run(self, inputs, settings):
                return {"result": inputs["number"] * 2}
    """

    inputs: Mapping[str, "Schema | Mapping[str, Any]"]
    outputs: Mapping[str, "Schema | Mapping[str, Any]"]

    def run(self, inputs: dict[str, Any], settings: Any) -> RunResult:
        """Process one complete input vector.

        Args:
            inputs: Port name -> value for the cycle being fired
            settings: The node's opaque settings

        Returns:
            Output port name -> value (or None / empty for no output),
            optionally wrapped in an awaitable.
        """
        ...


@runtime_checkable
class ComponentResolver(Protocol):
    """Protocol for resolving a node type to a component instance."""

    def resolve(self, node_type: str, settings: Any) -> ComponentProtocol | None:
        """Return a component for node_type, or None if the type is unknown.

        Raises:
            ComponentResolutionError: If the type is known but cannot be
                instantiated with these settings
        """
        ...
