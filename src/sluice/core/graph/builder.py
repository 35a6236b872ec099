# src/sluice/core/graph/builder.py
"""Graph construction from a definition document.

Extracts bulk construction out of Graph.from_definition() into a
module-level function. The classmethod facade on Graph delegates here via
lazy import to avoid circular dependencies.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog

from sluice.contracts.document import DocumentValidationResult, validate_document
from sluice.contracts.errors import InvalidFlowchartSchemaError

if TYPE_CHECKING:
    from sluice.core.graph.graph import Graph
    from sluice.plugins.protocols import ComponentResolver

slog = structlog.get_logger(__name__)


def build_graph(
    resolver: ComponentResolver,
    document: Any,
    *,
    validator: Callable[[Any], DocumentValidationResult] | None = None,
) -> Graph:
    """Validate a definition document and build the graph it describes.

    The whole document is validated first; if that fails nothing is
    constructed. Then every node is added (document order), then every
    connection (document order), so connections may reference nodes
    declared after them.

    Args:
        resolver: Component resolver handed to the graph
        document: Parsed definition document
        validator: Document validator (defaults to validate_document)

    Returns:
        The constructed Graph

    Raises:
        InvalidFlowchartSchemaError: If the document fails validation
        FlowchartError: Any node or connection error from the graph
    """
    from sluice.core.graph.graph import Graph

    check = validator if validator is not None else validate_document
    result = check(document)
    if not result.valid:
        raise InvalidFlowchartSchemaError(None, errors=result.errors)

    graph = Graph(resolver)

    for node_id, definition in document["nodes"].items():
        graph.add_node(node_id, definition)

    for connection_id, connection in document["connections"].items():
        graph.add_connection(connection_id, connection)

    slog.info(
        "graph_built",
        node_count=graph.node_count,
        connection_count=graph.connection_count,
        entry_nodes=graph.entry_nodes(),
    )
    return graph
