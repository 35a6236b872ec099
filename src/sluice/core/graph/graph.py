# src/sluice/core/graph/graph.py
"""Graph class - node/connection registries, wiring validation, and delivery.

Bulk construction from a definition document lives in builder.py; the
from_definition() classmethod is a thin facade that delegates to
builder.build_graph().
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import networkx as nx
import structlog
from networkx import MultiDiGraph

from sluice.contracts.compatibility import check_compatibility
from sluice.contracts.errors import (
    ComponentResolutionError,
    DuplicateNodeIdError,
    ErrorDetail,
    IncompatibleConnectorsError,
    InvalidConnectionSettingsError,
    InvalidNodeSettingsError,
)
from sluice.contracts.schema import SchemaDefinitionError
from sluice.core.graph.models import (
    ConnectionRecord,
    NodePorts,
    connection_endpoints,
    node_type_and_settings,
)
from sluice.engine.runner import FanOutTable, NodeRunner

if TYPE_CHECKING:
    from collections.abc import Callable

    from sluice.contracts.document import ConnectionDefinition, DocumentValidationResult, NodeDefinition
    from sluice.plugins.protocols import ComponentResolver

slog = structlog.get_logger(__name__)


class Graph:
    """Dataflow graph of node runners wired by typed connections.

    The graph owns every NodeRunner and, per node, the fan-out table the
    runner reads on each firing. Adding a connection validates both
    endpoints and schema compatibility, then registers a sink that forwards
    values into the destination runner.

    Topology is mirrored in a NetworkX MultiDiGraph (connection id as edge
    key) for introspection only; delivery never consults it.

    Example:
        graph = Graph(plugin_manager)
        graph.add_node("upper", {"type": "text_decorator", "settings": {"mode": "uppercase"}})
        graph.add_node("out", {"type": "printer"})
        graph.add_connection("c1", {"from": {"node": "upper", "connector": "text"},
                                    "to": {"node": "out", "connector": "data"}})

        await graph.input("upper", "text", "hello")
    """

    def __init__(self, resolver: ComponentResolver) -> None:
        self._resolver = resolver
        self._nodes: dict[str, NodeRunner] = {}
        self._fan_out: dict[str, FanOutTable] = {}
        self._connections: dict[str, ConnectionRecord] = {}
        self._graph: MultiDiGraph[str] = nx.MultiDiGraph()

    @classmethod
    def from_definition(
        cls,
        resolver: ComponentResolver,
        document: Any,
        validator: Callable[[Any], DocumentValidationResult] | None = None,
    ) -> Graph:
        """Build a graph from a definition document.

        Thin facade - delegates to builder.build_graph().
        """
        from sluice.core.graph.builder import build_graph

        return build_graph(resolver, document, validator=validator)

    # === Introspection ===

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    @property
    def node_ids(self) -> list[str]:
        """Node ids in insertion order."""
        return list(self._nodes)

    @property
    def connection_ids(self) -> list[str]:
        """Connection ids in insertion order."""
        return list(self._connections)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> NodeRunner | None:
        """Get the runner for a node, or None if it doesn't exist."""
        return self._nodes.get(node_id)

    def get_port_schemas(self, node_id: str) -> NodePorts:
        """Get the declared port schemas of a node.

        Raises:
            KeyError: If node doesn't exist
        """
        runner = self._require_node(node_id)
        return NodePorts(inputs=runner.inputs, outputs=runner.outputs)

    def get_connection(self, connection_id: str) -> ConnectionRecord | None:
        return self._connections.get(connection_id)

    def entry_nodes(self) -> list[str]:
        """Nodes with no incoming connection, in insertion order."""
        return [node_id for node_id in self._nodes if self._graph.in_degree(node_id) == 0]

    def is_acyclic(self) -> bool:
        """Check if the wiring contains no cycles.

        Cycles are accepted at wiring time, but a value that travels around
        one back to a node still mid-firing blocks: the loop-back sink waits
        for a release that only follows the fan-out it belongs to.
        """
        return nx.is_directed_acyclic_graph(self._graph)

    def get_nx_graph(self) -> MultiDiGraph[str]:
        """Return a frozen copy of the underlying NetworkX graph.

        Mutation attempts raise nx.NetworkXError.
        """
        return nx.freeze(self._graph.copy())  # type: ignore[no-any-return]

    # === Construction ===

    def add_node(self, node_id: str, definition: NodeDefinition | Mapping[str, Any]) -> None:
        """Resolve a node's component and register a runner for it.

        Args:
            node_id: Unique node identifier
            definition: NodeDefinition or raw {"type", "settings"} dict

        Raises:
            DuplicateNodeIdError: If node_id already exists
            InvalidNodeSettingsError: If the component can't be resolved,
                declares no input ports, or declares a malformed port schema
        """
        if node_id in self._nodes:
            raise DuplicateNodeIdError(node_id)

        node_type, settings = node_type_and_settings(definition)
        try:
            component = self._resolver.resolve(node_type, settings)
        except ComponentResolutionError as e:
            raise InvalidNodeSettingsError(
                node_id,
                details=[ErrorDetail("type", node_type)],
                errors=[e.reason],
            ) from e
        if component is None:
            raise InvalidNodeSettingsError(node_id, details=[ErrorDetail("type", node_type)])

        fan_out: FanOutTable = {}
        try:
            runner = NodeRunner(node_id, component, settings=settings, outputs=fan_out)
        except SchemaDefinitionError as e:
            raise InvalidNodeSettingsError(
                node_id,
                details=[ErrorDetail("type", node_type)],
                errors=[str(e)],
            ) from e

        # Register only after the runner constructed cleanly
        self._nodes[node_id] = runner
        self._fan_out[node_id] = fan_out
        self._graph.add_node(node_id, type=node_type)
        slog.debug("node_added", node_id=node_id, node_type=node_type)

    def add_connection(self, connection_id: str, connection: ConnectionDefinition | Mapping[str, Any]) -> None:
        """Validate and register a connection.

        Structural problems are accumulated and reported together; schema
        compatibility is only checked once the structure is valid. On any
        failure the graph is left unchanged.

        Args:
            connection_id: Unique connection identifier
            connection: ConnectionDefinition or raw {"from": ..., "to": ...} dict

        Raises:
            InvalidConnectionSettingsError: If a node or port is missing, or
                the connection id is already in use
            IncompatibleConnectorsError: If the port schemas are incompatible
        """
        ends = connection_endpoints(connection)

        if connection_id in self._connections:
            raise InvalidConnectionSettingsError(connection_id, details=[ErrorDetail("id", connection_id)])

        details: list[ErrorDetail] = []
        source = self._nodes.get(ends.from_node) if ends.from_node is not None else None
        destination = self._nodes.get(ends.to_node) if ends.to_node is not None else None

        if source is None:
            details.append(ErrorDetail("from.node", ends.from_node))
        if destination is None:
            details.append(ErrorDetail("to.node", ends.to_node))
        if source is not None and ends.from_connector not in source.outputs:
            details.append(ErrorDetail("from.connector", ends.from_connector))
        if destination is not None and ends.to_connector not in destination.inputs:
            details.append(ErrorDetail("to.connector", ends.to_connector))

        if details:
            raise InvalidConnectionSettingsError(connection_id, details=details)

        # Structure validated above - all four fields are present
        assert source is not None and destination is not None
        assert ends.from_node is not None and ends.to_node is not None
        assert ends.from_connector is not None and ends.to_connector is not None

        result = check_compatibility(source.outputs[ends.from_connector], destination.inputs[ends.to_connector])
        if not result.compatible:
            origin = f"{ends.from_node}.outputs[{ends.from_connector}]"
            raise IncompatibleConnectorsError(
                connection_id,
                errors=[f"{origin}{issue.locator}: {issue.message}" for issue in result.errors],
            )

        port = ends.to_connector

        async def sink(value: Any) -> None:
            await destination.input(port, value)

        self._fan_out[ends.from_node].setdefault(ends.from_connector, []).append(sink)
        self._connections[connection_id] = ConnectionRecord(
            connection_id=connection_id,
            from_node=ends.from_node,
            from_connector=ends.from_connector,
            to_node=ends.to_node,
            to_connector=ends.to_connector,
            sink=sink,
        )
        self._graph.add_edge(
            ends.from_node,
            ends.to_node,
            key=connection_id,
            from_connector=ends.from_connector,
            to_connector=ends.to_connector,
        )
        slog.debug(
            "connection_added",
            connection_id=connection_id,
            source=f"{ends.from_node}.{ends.from_connector}",
            destination=f"{ends.to_node}.{ends.to_connector}",
        )

    def remove_connection(self, connection_id: str) -> None:
        """Unregister a connection's sink. No-op if the id is unknown.

        Values already handed to the sink are not retracted.
        """
        record = self._connections.pop(connection_id, None)
        if record is None:
            return

        table = self._fan_out[record.from_node]
        sinks = table[record.from_connector]
        # Identity match: equal-looking closures for other connections must stay
        table[record.from_connector] = [s for s in sinks if s is not record.sink]
        if not table[record.from_connector]:
            del table[record.from_connector]

        self._graph.remove_edge(record.from_node, record.to_node, key=connection_id)
        slog.debug("connection_removed", connection_id=connection_id)

    # === Delivery ===

    async def input(self, node_id: str, port: str, value: Any) -> None:
        """Deliver a value to a node's input port.

        Returns once the value has been consumed by a firing of the node and
        that firing's fan-out has settled.

        Raises:
            KeyError: If node doesn't exist
        """
        await self._require_node(node_id).input(port, value)

    async def seed(self, value: Any) -> None:
        """Deliver value to the first input port of every entry node, concurrently."""
        deliveries = []
        for node_id in self.entry_nodes():
            runner = self._nodes[node_id]
            first_port = next(iter(runner.inputs))
            slog.info("entry_node_seeded", node_id=node_id, port=first_port)
            deliveries.append(runner.input(first_port, value))
        await asyncio.gather(*deliveries)

    def _require_node(self, node_id: str) -> NodeRunner:
        runner = self._nodes.get(node_id)
        if runner is None:
            raise KeyError(f"Node not found: {node_id}")
        return runner
