# src/sluice/core/graph/models.py
"""Types and helpers for graph operations.

Leaf module - no intra-package imports beyond contracts (prevents import cycles).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sluice.contracts.document import ConnectionDefinition, NodeDefinition

if TYPE_CHECKING:
    from sluice.contracts.schema import Schema
    from sluice.engine.runner import Sink


@dataclass(frozen=True, slots=True)
class NodePorts:
    """Declared port schemas of a node.

    Used by callers that seed entry nodes and by tooling that renders a
    graph's interface.
    """

    inputs: Mapping[str, Schema]
    outputs: Mapping[str, Schema]


@dataclass(frozen=True, slots=True)
class Endpoints:
    """Raw connection endpoints; any field may be missing (None)."""

    from_node: str | None
    from_connector: str | None
    to_node: str | None
    to_connector: str | None


@dataclass(frozen=True, slots=True)
class ConnectionRecord:
    """A registered connection and the sink it added to the fan-out table."""

    connection_id: str
    from_node: str
    from_connector: str
    to_node: str
    to_connector: str
    sink: Sink


def node_type_and_settings(definition: NodeDefinition | Mapping[str, Any]) -> tuple[Any, Any]:
    """Extract (type, settings) from a node definition model or raw dict."""
    if isinstance(definition, NodeDefinition):
        return definition.type, definition.settings
    return definition.get("type"), definition.get("settings")


def connection_endpoints(connection: ConnectionDefinition | Mapping[str, Any]) -> Endpoints:
    """Extract endpoints from a connection model or raw ``{from, to}`` dict."""
    if isinstance(connection, ConnectionDefinition):
        return Endpoints(
            from_node=connection.from_.node,
            from_connector=connection.from_.connector,
            to_node=connection.to.node,
            to_connector=connection.to.connector,
        )

    source = connection.get("from")
    destination = connection.get("to")
    if not isinstance(source, Mapping):
        source = {}
    if not isinstance(destination, Mapping):
        destination = {}
    return Endpoints(
        from_node=source.get("node"),
        from_connector=source.get("connector"),
        to_node=destination.get("node"),
        to_connector=destination.get("connector"),
    )
