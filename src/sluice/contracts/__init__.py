"""Shared contracts for cross-boundary data types.

This package is a LEAF MODULE with no outbound dependencies to core/engine.

Import patterns:
    from sluice.contracts import Schema, parse_schema, check_compatibility
    from sluice.contracts import FlowchartError, InvalidConnectionSettingsError
"""

from sluice.contracts.compatibility import (
    CompatibilityIssue,
    CompatibilityResult,
    check_compatibility,
)
from sluice.contracts.document import (
    ConnectionDefinition,
    Connector,
    DocumentValidationResult,
    FlowchartDocument,
    NodeDefinition,
    load_document,
    validate_document,
)
from sluice.contracts.enums import FlowchartErrorCode, GateState, SchemaType
from sluice.contracts.errors import (
    ComponentResolutionError,
    DuplicateNodeIdError,
    ErrorDetail,
    ErrorMessage,
    FlowchartError,
    IncompatibleConnectorsError,
    InvalidConnectionSettingsError,
    InvalidFlowchartSchemaError,
    InvalidNodeSettingsError,
)
from sluice.contracts.schema import (
    AnySchema,
    ArraySchema,
    AutoSchema,
    EnumSchema,
    ObjectSchema,
    PrimitiveSchema,
    Schema,
    SchemaDefinitionError,
    TupleSchema,
    as_schema,
    parse_schema,
)

__all__ = [
    "AnySchema",
    "ArraySchema",
    "AutoSchema",
    "CompatibilityIssue",
    "CompatibilityResult",
    "ComponentResolutionError",
    "ConnectionDefinition",
    "Connector",
    "DocumentValidationResult",
    "DuplicateNodeIdError",
    "EnumSchema",
    "ErrorDetail",
    "ErrorMessage",
    "FlowchartDocument",
    "FlowchartError",
    "FlowchartErrorCode",
    "GateState",
    "IncompatibleConnectorsError",
    "InvalidConnectionSettingsError",
    "InvalidFlowchartSchemaError",
    "InvalidNodeSettingsError",
    "NodeDefinition",
    "ObjectSchema",
    "PrimitiveSchema",
    "Schema",
    "SchemaDefinitionError",
    "SchemaType",
    "TupleSchema",
    "as_schema",
    "check_compatibility",
    "load_document",
    "parse_schema",
    "validate_document",
]
