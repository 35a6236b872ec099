"""Schema compatibility between a producer port and a consumer port.

Compatibility is directional: ``check_compatibility(source, destination)``
asks whether every value satisfying ``source`` also satisfies
``destination``. It is not symmetric - an object producer that guarantees
more required properties can feed a consumer that needs fewer, but not the
other way round.

Within object checks every independent violation is reported, so a single
call returns the full list of problems for a connection.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from sluice.contracts.enums import SchemaType
from sluice.contracts.schema import (
    ArraySchema,
    EnumSchema,
    ObjectSchema,
    Schema,
    TupleSchema,
)

slog = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CompatibilityIssue:
    """One violation found while comparing two schemas.

    Attributes:
        locator: Path inside the schema ("" for the root, ".items", ".name", "[0]")
        message: Human-readable description
    """

    locator: str
    message: str

    def __str__(self) -> str:
        if not self.locator:
            return self.message
        return f"{self.locator}: {self.message}"


@dataclass
class CompatibilityResult:
    """Result of a schema compatibility check."""

    compatible: bool
    errors: list[CompatibilityIssue] = field(default_factory=list)

    def messages(self) -> list[str]:
        """Render every issue as "<locator>: <message>"."""
        return [str(issue) for issue in self.errors]


def check_compatibility(source: Schema, destination: Schema) -> CompatibilityResult:
    """Check if a value produced under ``source`` can be consumed under ``destination``.

    Rules, in order:
    - destination ``any`` accepts everything
    - ``auto`` on both ends is ambiguous; on one end it adopts its peer
    - differing type tags are incompatible
    - arrays recurse into their item schema
    - tuples need equal length and positionally compatible items
    - enums need the source values to be a subset of the destination values
    - objects check requiredness, shared properties, and closed-ness

    Args:
        source: Schema of the producing output port
        destination: Schema of the consuming input port

    Returns:
        CompatibilityResult with every issue found
    """
    errors = _check(source, destination, "")
    return CompatibilityResult(compatible=not errors, errors=errors)


def _check(source: Schema, destination: Schema, locator: str) -> list[CompatibilityIssue]:
    if destination.type == SchemaType.ANY:
        return []

    if source.type == SchemaType.AUTO and destination.type == SchemaType.AUTO:
        return [CompatibilityIssue(locator, "Ambiguous connection: both ends are 'auto'")]
    if SchemaType.AUTO in (source.type, destination.type):
        return []

    if source.type != destination.type:
        return [CompatibilityIssue(locator, f"Schema of type '{source.type}' cannot be assigned to '{destination.type}'")]

    if isinstance(source, ArraySchema) and isinstance(destination, ArraySchema):
        return _check(source.items, destination.items, f"{locator}.items")

    if isinstance(source, TupleSchema) and isinstance(destination, TupleSchema):
        return _check_tuple(source, destination, locator)

    if isinstance(source, EnumSchema) and isinstance(destination, EnumSchema):
        unknown = source.values - destination.values
        if unknown:
            return [CompatibilityIssue(locator, f"Enum values not accepted by the destination schema: {sorted(unknown)}")]
        return []

    if isinstance(source, ObjectSchema) and isinstance(destination, ObjectSchema):
        return _check_object(source, destination, locator)

    # Primitives: equal type tags are sufficient
    return []


def _check_tuple(source: TupleSchema, destination: TupleSchema, locator: str) -> list[CompatibilityIssue]:
    if len(source.items) != len(destination.items):
        return [
            CompatibilityIssue(
                locator,
                f"Tuple length mismatch: source has {len(source.items)} items, destination expects {len(destination.items)}",
            )
        ]
    errors: list[CompatibilityIssue] = []
    for index, (src_item, dst_item) in enumerate(zip(source.items, destination.items, strict=True)):
        errors.extend(_check(src_item, dst_item, f"{locator}[{index}]"))
    return errors


def _check_object(source: ObjectSchema, destination: ObjectSchema, locator: str) -> list[CompatibilityIssue]:
    errors: list[CompatibilityIssue] = []

    # Contravariant requiredness: the producer must guarantee what the consumer needs
    for name in sorted(destination.required - source.required):
        errors.append(CompatibilityIssue(locator, f"Required property '{name}' is missing in the source schema"))

    if destination.properties is None and not destination.closed:
        slog.warning(
            "destination_schema_without_properties",
            locator=locator or "<root>",
            source_properties=sorted(source.property_names),
        )

    if destination.properties is not None and source.properties is not None:
        for name, dst_property in destination.properties.items():
            if name not in source.properties:
                continue
            errors.extend(_check(source.properties[name], dst_property, f"{locator}.{name}"))

    if destination.closed:
        extra = source.property_names - destination.property_names
        if extra and not destination.property_names:
            errors.append(
                CompatibilityIssue(
                    locator,
                    f"Destination schema is closed and declares no properties, but source declares: {sorted(extra)}",
                )
            )
        elif extra:
            errors.append(
                CompatibilityIssue(
                    locator,
                    f"Source schema has additional properties not defined in a strict destination schema: {sorted(extra)}",
                )
            )

    return errors
