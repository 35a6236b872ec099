"""Construction-time errors raised while assembling a graph.

Every error carries its code, the id of the offending node or connection,
and structured payloads:

- details: one ErrorDetail per failing field (property path + offending value)
- errors: free-form messages (compatibility problems, document validation)

Runtime anomalies (unknown output key, input for an undeclared port) are
NOT errors - they are logged as warnings and skipped.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, ClassVar

from sluice.contracts.enums import FlowchartErrorCode


@dataclass(frozen=True, slots=True)
class ErrorDetail:
    """A single failing field.

    Attributes:
        property: Dotted path of the field (e.g. "to.node", "type")
        value: The value that failed
    """

    property: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {"property": self.property, "value": self.value}


@dataclass(frozen=True, slots=True)
class ErrorMessage:
    """A free-form error message."""

    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


class FlowchartError(Exception):
    """Base class for graph construction errors.

    Subclasses pin ``code``; callers can branch on the class or the code.
    """

    code: ClassVar[FlowchartErrorCode]

    def __init__(
        self,
        id: str | None,
        *,
        details: Iterable[ErrorDetail] = (),
        errors: Iterable[ErrorMessage | str] = (),
    ) -> None:
        self.id = id
        self.details: tuple[ErrorDetail, ...] = tuple(details)
        self.errors: tuple[ErrorMessage, ...] = tuple(e if isinstance(e, ErrorMessage) else ErrorMessage(e) for e in errors)
        super().__init__(self._summary())

    def _summary(self) -> str:
        parts = [str(self.code)]
        if self.id is not None:
            parts.append(f"'{self.id}'")
        summary = " ".join(parts)
        notes = [f"{d.property}={d.value!r}" for d in self.details] + [e.message for e in self.errors]
        if notes:
            summary += ": " + "; ".join(notes)
        return summary

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict; empty collections are omitted."""
        result: dict[str, Any] = {"code": str(self.code)}
        if self.id is not None:
            result["id"] = self.id
        if self.details:
            result["details"] = [d.to_dict() for d in self.details]
        if self.errors:
            result["errors"] = [e.to_dict() for e in self.errors]
        return result


class DuplicateNodeIdError(FlowchartError):
    """A node with this id already exists in the graph."""

    code = FlowchartErrorCode.DUPLICATE_NODE_ID


class InvalidNodeSettingsError(FlowchartError):
    """The node's component could not be resolved or is unusable."""

    code = FlowchartErrorCode.INVALID_NODE_SETTINGS


class InvalidConnectionSettingsError(FlowchartError):
    """A connection references a missing node or port."""

    code = FlowchartErrorCode.INVALID_CONNECTION_SETTINGS


class IncompatibleConnectorsError(FlowchartError):
    """The source port's schema cannot feed the destination port's schema."""

    code = FlowchartErrorCode.INCOMPATIBLE_CONNECTORS


class InvalidFlowchartSchemaError(FlowchartError):
    """The definition document failed validation; nothing was constructed."""

    code = FlowchartErrorCode.INVALID_FLOWCHART_SCHEMA


class ComponentResolutionError(Exception):
    """Raised by a component resolver when a known type cannot be instantiated.

    The graph converts this into InvalidNodeSettingsError for the node being
    added.
    """

    def __init__(self, node_type: str, reason: str) -> None:
        self.node_type = node_type
        self.reason = reason
        super().__init__(f"Cannot resolve component '{node_type}': {reason}")
