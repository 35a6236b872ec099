"""Flowchart definition document.

The persisted format is the one bit-exact boundary of the engine:

    {
      "nodes": {"<id>": {"type": "<component>", "settings": <opaque>}},
      "connections": {
        "<id>": {"from": {"node": "<id>", "connector": "<output>"},
                 "to":   {"node": "<id>", "connector": "<input>"}}
      }
    }

Both top-level maps are required (they may be empty). Unknown keys are
rejected at every level.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class Connector(BaseModel):
    """One end of a connection: a node id and one of its port names."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    node: str
    connector: str


class ConnectionDefinition(BaseModel):
    """A directed connection from an output port to an input port."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    from_: Connector = Field(alias="from")
    to: Connector


class NodeDefinition(BaseModel):
    """A node: the component type to resolve and its opaque settings."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: str = Field(min_length=1)
    settings: Any = None


class FlowchartDocument(BaseModel):
    """Top-level definition document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    nodes: dict[str, NodeDefinition]
    connections: dict[str, ConnectionDefinition]


@dataclass
class DocumentValidationResult:
    """Outcome of validating a definition document."""

    valid: bool
    errors: list[str] = field(default_factory=list)


def validate_document(document: Any) -> DocumentValidationResult:
    """Validate a raw document against the flowchart document model.

    Args:
        document: Parsed JSON/YAML value (normally a dict)

    Returns:
        DocumentValidationResult; errors are "<location>: <message>" strings
    """
    try:
        FlowchartDocument.model_validate(document)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(part) for part in error["loc"]) or "<document>"
            errors.append(f"{loc}: {error['msg']}")
        return DocumentValidationResult(valid=False, errors=errors)
    return DocumentValidationResult(valid=True)


def load_document(path: Path) -> Any:
    """Read a definition document from a JSON or YAML file.

    The result is NOT validated; pass it to Graph.from_definition().

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the extension is not .json, .yaml or .yml
    """
    if not path.exists():
        raise FileNotFoundError(f"Flowchart file not found: {path}")

    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".json":
        return json.loads(text)
    if suffix in (".yaml", ".yml"):
        return yaml.safe_load(text)
    raise ValueError(f"Unsupported flowchart file extension '{path.suffix}' (expected .json, .yaml or .yml)")
