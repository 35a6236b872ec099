"""Status codes, tags, and states used across subsystem boundaries."""

from enum import StrEnum


class SchemaType(StrEnum):
    """Type tag of a port schema.

    Compatibility compares these tags before looking at structure.
    """

    ANY = "any"
    AUTO = "auto"
    STRING = "string"
    BOOLEAN = "boolean"
    NULL = "null"
    INTEGER = "integer"
    NUMBER = "number"
    ARRAY = "array"
    TUPLE = "tuple"
    ENUM = "enum"
    OBJECT = "object"


PRIMITIVE_TYPES: frozenset[SchemaType] = frozenset(
    {
        SchemaType.STRING,
        SchemaType.BOOLEAN,
        SchemaType.NULL,
        SchemaType.INTEGER,
        SchemaType.NUMBER,
    }
)


class FlowchartErrorCode(StrEnum):
    """Construction-time error codes raised by the graph."""

    DUPLICATE_NODE_ID = "DUPLICATE_NODE_ID"
    INVALID_NODE_SETTINGS = "INVALID_NODE_SETTINGS"
    INVALID_CONNECTION_SETTINGS = "INVALID_CONNECTION_SETTINGS"
    INCOMPATIBLE_CONNECTORS = "INCOMPATIBLE_CONNECTORS"
    INVALID_FLOWCHART_SCHEMA = "INVALID_FLOWCHART_SCHEMA"


class GateState(StrEnum):
    """State of a node's input gate.

    ACCUMULATING: still waiting for at least one declared input.
    AWAITING_RELEASE: every declared input is present; the cycle is firing.
    """

    ACCUMULATING = "accumulating"
    AWAITING_RELEASE = "awaiting_release"
