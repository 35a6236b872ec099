"""Port schema types.

Ports are typed with a closed subset of JSON Schema:

1. any: accepts every value (destination-side wildcard)
2. auto: adopts the type of whatever it is connected to
3. primitives: string, boolean, null, integer, number
4. containers: array (homogeneous), tuple (positional), object
5. enum: a finite set of string values

Example (component declaration):
    inputs = {
        "record": {
            "type": "object",
            "properties": {"id": {"type": "integer"}, "tags": {"type": "array", "items": {"type": "string"}}},
            "required": ["id"],
            "additionalProperties": False,
        }
    }
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from sluice.contracts.enums import PRIMITIVE_TYPES, SchemaType


class SchemaDefinitionError(ValueError):
    """Raised when a schema dict cannot be parsed."""

    def __init__(self, locator: str, message: str) -> None:
        self.locator = locator
        self.message = message
        super().__init__(f"{locator or '<root>'}: {message}")


@dataclass(frozen=True, slots=True)
class AnySchema:
    """Accepts any value."""

    @property
    def type(self) -> SchemaType:
        return SchemaType.ANY

    def to_dict(self) -> dict[str, Any]:
        return {"type": "any"}


@dataclass(frozen=True, slots=True)
class AutoSchema:
    """Takes the type of the connected peer port."""

    @property
    def type(self) -> SchemaType:
        return SchemaType.AUTO

    def to_dict(self) -> dict[str, Any]:
        return {"type": "auto"}


@dataclass(frozen=True, slots=True)
class PrimitiveSchema:
    """Scalar JSON type."""

    kind: SchemaType

    def __post_init__(self) -> None:
        if self.kind not in PRIMITIVE_TYPES:
            raise SchemaDefinitionError("", f"'{self.kind}' is not a primitive type")
        # Accept plain strings ("string") as well as SchemaType members
        object.__setattr__(self, "kind", SchemaType(self.kind))

    @property
    def type(self) -> SchemaType:
        return self.kind

    def to_dict(self) -> dict[str, Any]:
        return {"type": str(self.kind)}


@dataclass(frozen=True, slots=True)
class ArraySchema:
    """Homogeneous array; every element satisfies `items`."""

    items: Schema

    @property
    def type(self) -> SchemaType:
        return SchemaType.ARRAY

    def to_dict(self) -> dict[str, Any]:
        return {"type": "array", "items": self.items.to_dict()}


@dataclass(frozen=True, slots=True)
class TupleSchema:
    """Fixed-length array with a schema per position."""

    items: tuple[Schema, ...]

    @property
    def type(self) -> SchemaType:
        return SchemaType.TUPLE

    def to_dict(self) -> dict[str, Any]:
        return {"type": "tuple", "items": [item.to_dict() for item in self.items]}


@dataclass(frozen=True, slots=True)
class EnumSchema:
    """One of a finite set of string values."""

    values: frozenset[str]

    @property
    def type(self) -> SchemaType:
        return SchemaType.ENUM

    def to_dict(self) -> dict[str, Any]:
        return {"type": "enum", "enum": sorted(self.values)}


@dataclass(frozen=True, slots=True)
class ObjectSchema:
    """Object with named properties.

    Attributes:
        properties: Property schemas, or None when the declaration omits
            ``properties`` entirely (distinct from an empty mapping)
        required: Names that must be present
        closed: True when ``additionalProperties`` is false
    """

    properties: Mapping[str, Schema] | None = None
    required: frozenset[str] = field(default_factory=frozenset)
    closed: bool = False

    @property
    def type(self) -> SchemaType:
        return SchemaType.OBJECT

    @property
    def property_names(self) -> frozenset[str]:
        if self.properties is None:
            return frozenset()
        return frozenset(self.properties)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": "object"}
        if self.properties is not None:
            result["properties"] = {name: schema.to_dict() for name, schema in self.properties.items()}
        if self.required:
            result["required"] = sorted(self.required)
        if self.closed:
            result["additionalProperties"] = False
        return result


type Schema = AnySchema | AutoSchema | PrimitiveSchema | ArraySchema | TupleSchema | EnumSchema | ObjectSchema

_SCHEMA_CLASSES = (AnySchema, AutoSchema, PrimitiveSchema, ArraySchema, TupleSchema, EnumSchema, ObjectSchema)


def is_schema(value: Any) -> bool:
    """Check if value is one of the schema variants."""
    return isinstance(value, _SCHEMA_CLASSES)


def as_schema(value: Schema | Mapping[str, Any]) -> Schema:
    """Return value unchanged if it is a Schema, otherwise parse it.

    Raises:
        SchemaDefinitionError: If value is neither a Schema nor a valid dict
    """
    if is_schema(value):
        return value  # type: ignore[return-value]
    if isinstance(value, Mapping):
        return parse_schema(value)
    raise SchemaDefinitionError("", f"expected a schema or mapping, got {type(value).__name__}")


def parse_schema(definition: Mapping[str, Any], locator: str = "") -> Schema:
    """Parse a JSON-Schema-style dict into a Schema.

    Args:
        definition: Schema dict, e.g. {"type": "array", "items": {"type": "string"}}
        locator: Path of this node inside the enclosing schema (for errors)

    Returns:
        The parsed Schema

    Raises:
        SchemaDefinitionError: If the dict is malformed or names an unknown type
    """
    if not isinstance(definition, Mapping):
        raise SchemaDefinitionError(locator, f"schema must be a mapping, got {type(definition).__name__}")

    raw_type = definition.get("type")

    # Bare {"enum": [...]} is the plain JSON Schema spelling
    if "enum" in definition and raw_type in (None, "enum", "string"):
        return _parse_enum(definition["enum"], locator)

    if raw_type is None:
        raise SchemaDefinitionError(locator, "schema is missing 'type'")
    try:
        schema_type = SchemaType(raw_type)
    except ValueError:
        supported = ", ".join(t.value for t in SchemaType)
        raise SchemaDefinitionError(locator, f"unknown schema type '{raw_type}'. Supported types: {supported}") from None

    if schema_type == SchemaType.ANY:
        return AnySchema()
    if schema_type == SchemaType.AUTO:
        return AutoSchema()
    if schema_type in PRIMITIVE_TYPES:
        return PrimitiveSchema(schema_type)
    if schema_type == SchemaType.ENUM:
        raise SchemaDefinitionError(locator, "enum schema is missing 'enum'")
    if schema_type == SchemaType.TUPLE:
        return _parse_tuple(definition.get("items"), locator)
    if schema_type == SchemaType.ARRAY:
        if "prefixItems" in definition:
            return _parse_tuple(definition["prefixItems"], locator)
        items = definition.get("items")
        if isinstance(items, list):
            return _parse_tuple(items, locator)
        if items is None:
            raise SchemaDefinitionError(locator, "array schema is missing 'items'")
        return ArraySchema(parse_schema(items, f"{locator}.items"))
    return _parse_object(definition, locator)


def _parse_enum(values: Any, locator: str) -> EnumSchema:
    if not isinstance(values, list | tuple | set | frozenset):
        raise SchemaDefinitionError(locator, f"'enum' must be a list, got {type(values).__name__}")
    for value in values:
        if not isinstance(value, str):
            raise SchemaDefinitionError(locator, f"enum values must be strings, got {value!r}")
    return EnumSchema(frozenset(values))


def _parse_tuple(items: Any, locator: str) -> TupleSchema:
    if not isinstance(items, list | tuple):
        raise SchemaDefinitionError(locator, "tuple schema 'items' must be a list of schemas")
    return TupleSchema(tuple(parse_schema(item, f"{locator}[{i}]") for i, item in enumerate(items)))


def _parse_object(definition: Mapping[str, Any], locator: str) -> ObjectSchema:
    raw_properties = definition.get("properties")
    properties: Mapping[str, Schema] | None = None
    if raw_properties is not None:
        if not isinstance(raw_properties, Mapping):
            raise SchemaDefinitionError(locator, "'properties' must be a mapping")
        properties = MappingProxyType(
            {name: parse_schema(prop, f"{locator}.{name}") for name, prop in raw_properties.items()}
        )

    raw_required = definition.get("required", [])
    if not isinstance(raw_required, list | tuple) or not all(isinstance(name, str) for name in raw_required):
        raise SchemaDefinitionError(locator, "'required' must be a list of property names")

    additional = definition.get("additionalProperties", True)
    if not isinstance(additional, bool):
        # Schema-valued additionalProperties is outside the supported subset
        raise SchemaDefinitionError(locator, "'additionalProperties' must be a boolean")

    return ObjectSchema(
        properties=properties,
        required=frozenset(raw_required),
        closed=not additional,
    )
