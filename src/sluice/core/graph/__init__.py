"""Graph assembly: node/connection registries and bulk construction."""

from sluice.core.graph.builder import build_graph
from sluice.core.graph.graph import Graph
from sluice.core.graph.models import ConnectionRecord, NodePorts

__all__ = [
    "ConnectionRecord",
    "Graph",
    "NodePorts",
    "build_graph",
]
