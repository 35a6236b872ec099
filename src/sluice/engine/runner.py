"""NodeRunner: ties a node's input gate to its component and fan-out.

Each delivery goes through the gate. The delivery that completes a cycle
fires the component with the merged inputs, fans every result key out to
the sinks registered for it, waits for all of them, then releases the
gate. Every other delivery waits for the cycle it landed in to be
released, so when ``input()`` returns the value has been consumed, not
merely queued.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any

import structlog

from sluice.contracts.errors import ErrorDetail, InvalidNodeSettingsError
from sluice.contracts.schema import Schema, as_schema
from sluice.engine.gate import InputGate

if TYPE_CHECKING:
    from sluice.plugins.protocols import ComponentProtocol

slog = structlog.get_logger(__name__)

# A sink receives one output value and delivers it downstream
type Sink = Callable[[Any], Awaitable[None]]

# Output port name -> sinks, owned by the graph and shared with the runner
type FanOutTable = dict[str, list[Sink]]


class NodeRunner:
    """Runs one node of the graph.

    The fan-out table is owned by the graph: connections added or removed
    after construction are seen by the runner on its next firing.

    Example:
        outputs: FanOutTable = {}
        runner = NodeRunner("upper", component, settings={"mode": "uppercase"}, outputs=outputs)
        outputs["text"] = [downstream_sink]

        await runner.input("text", "hello")
    """

    def __init__(
        self,
        node_id: str,
        component: ComponentProtocol,
        *,
        settings: Any = None,
        outputs: FanOutTable | None = None,
    ) -> None:
        """Initialize runner.

        Args:
            node_id: Node identifier (used in errors and log events)
            component: Resolved node behaviour
            settings: Opaque settings passed to every run()
            outputs: Fan-out table for this node's output ports

        Raises:
            InvalidNodeSettingsError: If the component declares no input ports
        """
        input_schemas = {port: as_schema(schema) for port, schema in component.inputs.items()}
        if not input_schemas:
            raise InvalidNodeSettingsError(node_id, details=[ErrorDetail("inputs", [])])

        self._node_id = node_id
        self._component = component
        self._settings = settings
        self._inputs: Mapping[str, Schema] = input_schemas
        self._outputs: Mapping[str, Schema] = {port: as_schema(schema) for port, schema in (component.outputs or {}).items()}
        self._fan_out: FanOutTable = outputs if outputs is not None else {}
        self._gate = InputGate(input_schemas, owner=node_id)

    @property
    def node_id(self) -> str:
        return self._node_id

    @property
    def inputs(self) -> Mapping[str, Schema]:
        """Declared input port schemas."""
        return self._inputs

    @property
    def outputs(self) -> Mapping[str, Schema]:
        """Declared output port schemas."""
        return self._outputs

    @property
    def settings(self) -> Any:
        return self._settings

    @property
    def gate(self) -> InputGate:
        return self._gate

    async def input(self, port: str, value: Any) -> None:
        """Deliver a value to an input port.

        Returns once the cycle that consumed this value has fully drained,
        including everything the fan-out triggered downstream.

        Raises:
            Exception: Whatever the component's run() raises. The gate is
                left unreleased in that case.
        """
        if await self._gate.set(port, value):
            await self._fire()
        else:
            await self._gate.wait_released()

    async def _fire(self) -> None:
        inputs = self._gate.values()
        slog.debug("node_fired", node_id=self._node_id, generation=self._gate.generation, ports=sorted(inputs))

        result = self._component.run(inputs, self._settings)
        if inspect.isawaitable(result):
            result = await result

        await self._emit(result or {})
        self._gate.release()

    async def _emit(self, results: Mapping[str, Any]) -> None:
        deliveries: list[Awaitable[None]] = []
        for key, value in results.items():
            sinks = self._fan_out.get(key)
            if not sinks:
                slog.warning("unhandled_node_output", node_id=self._node_id, output=key)
                continue
            # Snapshot: a connection removed mid-firing still receives this value
            deliveries.extend(sink(value) for sink in list(sinks))

        if deliveries:
            await asyncio.gather(*deliveries)

    def __repr__(self) -> str:
        return f"NodeRunner(node_id={self._node_id!r}, inputs={list(self._inputs)!r}, outputs={list(self._outputs)!r})"
