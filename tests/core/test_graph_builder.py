"""Tests for building graphs from definition documents."""

from typing import Any

import pytest
from structlog.testing import capture_logs

from sluice.contracts.document import DocumentValidationResult
from sluice.contracts.errors import (
    IncompatibleConnectorsError,
    InvalidFlowchartSchemaError,
    InvalidNodeSettingsError,
)
from sluice.core.graph import Graph, build_graph
from sluice.plugins import BaseComponent, PluginManager, hookimpl


class Doubler(BaseComponent):
    name = "doubler"
    inputs = {"number": {"type": "number"}}
    outputs = {"result": {"type": "number"}}

    async def run(self, inputs: dict[str, Any], settings: Any) -> dict[str, Any]:
        return {"result": inputs["number"] * 2}


class MathComponents:
    @hookimpl
    def sluice_get_components(self) -> list[type[BaseComponent]]:
        return [Doubler]


@pytest.fixture
def manager(plugin_manager: PluginManager) -> PluginManager:
    plugin_manager.register(MathComponents())
    return plugin_manager


DOUBLER_DOCUMENT: dict[str, Any] = {
    "nodes": {
        "doubler": {"type": "doubler"},
        "printer": {"type": "printer", "settings": {"prefix": "Result:"}},
    },
    "connections": {
        "c1": {"from": {"node": "doubler", "connector": "result"}, "to": {"node": "printer", "connector": "data"}},
    },
}


class TestFromDefinition:
    @pytest.mark.asyncio
    async def test_doubler_to_printer(self, manager: PluginManager, capsys: pytest.CaptureFixture[str]) -> None:
        graph = Graph.from_definition(manager, DOUBLER_DOCUMENT)

        await graph.input("doubler", "number", 21)

        assert capsys.readouterr().out == "Result: 42\n"

    def test_build_graph_equivalent_to_facade(self, manager: PluginManager) -> None:
        graph = build_graph(manager, DOUBLER_DOCUMENT)

        assert graph.node_ids == ["doubler", "printer"]
        assert graph.connection_ids == ["c1"]
        assert graph.entry_nodes() == ["doubler"]

    def test_connections_may_reference_later_nodes(self, manager: PluginManager) -> None:
        document = {
            "nodes": {"printer": {"type": "printer"}, "doubler": {"type": "doubler"}},
            "connections": DOUBLER_DOCUMENT["connections"],
        }

        graph = Graph.from_definition(manager, document)

        assert graph.connection_count == 1

    def test_empty_document(self, manager: PluginManager) -> None:
        graph = Graph.from_definition(manager, {"nodes": {}, "connections": {}})

        assert graph.node_count == 0
        assert graph.entry_nodes() == []

    def test_logs_graph_built(self, manager: PluginManager) -> None:
        with capture_logs() as logs:
            Graph.from_definition(manager, DOUBLER_DOCUMENT)

        built = [log for log in logs if log["event"] == "graph_built"]
        assert built == [
            {
                "event": "graph_built",
                "log_level": "info",
                "node_count": 2,
                "connection_count": 1,
                "entry_nodes": ["doubler"],
            }
        ]


class TestInvalidDocuments:
    def test_missing_connections_constructs_nothing(self, make_resolver: Any) -> None:
        resolver = make_resolver()

        with pytest.raises(InvalidFlowchartSchemaError) as exc_info:
            Graph.from_definition(resolver, {"nodes": {"a": {"type": "doubler"}}})

        assert exc_info.value.id is None
        assert any("connections" in e.message for e in exc_info.value.errors)
        assert resolver.calls == []

    def test_custom_validator_is_used(self, manager: PluginManager) -> None:
        def reject_everything(document: Any) -> DocumentValidationResult:
            return DocumentValidationResult(valid=False, errors=["rejected"])

        with pytest.raises(InvalidFlowchartSchemaError) as exc_info:
            Graph.from_definition(manager, DOUBLER_DOCUMENT, validator=reject_everything)

        assert [e.message for e in exc_info.value.errors] == ["rejected"]

    def test_unknown_component_type(self, manager: PluginManager) -> None:
        document = {"nodes": {"a": {"type": "nope"}}, "connections": {}}

        with pytest.raises(InvalidNodeSettingsError) as exc_info:
            Graph.from_definition(manager, document)

        assert exc_info.value.id == "a"

    def test_bad_component_settings(self, manager: PluginManager) -> None:
        document = {"nodes": {"a": {"type": "text_decorator", "settings": {"mode": "sideways"}}}, "connections": {}}

        with pytest.raises(InvalidNodeSettingsError) as exc_info:
            Graph.from_definition(manager, document)

        assert exc_info.value.details[0].value == "text_decorator"
        assert "mode" in exc_info.value.errors[0].message

    def test_incompatible_connection(self, manager: PluginManager) -> None:
        document = {
            "nodes": {
                "upper": {"type": "text_decorator", "settings": {"mode": "uppercase"}},
                "doubler": {"type": "doubler"},
            },
            "connections": {
                "c1": {"from": {"node": "upper", "connector": "text"}, "to": {"node": "doubler", "connector": "number"}},
            },
        }

        with pytest.raises(IncompatibleConnectorsError) as exc_info:
            Graph.from_definition(manager, document)

        assert exc_info.value.id == "c1"
