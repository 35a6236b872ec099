# tests/property/test_compatibility_properties.py
"""Property-based tests for schema compatibility.

COMPATIBILITY INVARIANTS:
1. Every concrete schema is compatible with itself
2. An 'any' destination accepts every source
3. 'auto' on exactly one end is always compatible
4. Different type tags are never compatible (unless the destination is 'any')
5. Parsing the rendered declaration gives back an equivalent schema
"""

from __future__ import annotations

from typing import Any

from hypothesis import given
from hypothesis import strategies as st

from sluice.contracts.compatibility import check_compatibility
from sluice.contracts.schema import parse_schema

names = st.text(alphabet="abcdefgh", min_size=1, max_size=3)

primitives = st.sampled_from(["string", "boolean", "null", "integer", "number"]).map(lambda t: {"type": t})
enums = st.lists(names, min_size=1, max_size=4, unique=True).map(lambda values: {"enum": values})


def _containers(children: st.SearchStrategy[dict[str, Any]]) -> st.SearchStrategy[dict[str, Any]]:
    arrays = children.map(lambda items: {"type": "array", "items": items})
    tuples = st.lists(children, min_size=0, max_size=3).map(lambda items: {"type": "tuple", "items": items})
    objects = st.tuples(st.dictionaries(names, children, max_size=3), st.booleans()).flatmap(_object_from)
    return st.one_of(arrays, tuples, objects)


def _object_from(parts: tuple[dict[str, Any], bool]) -> st.SearchStrategy[dict[str, Any]]:
    properties, closed = parts
    required = st.lists(st.sampled_from(sorted(properties)), unique=True) if properties else st.just([])
    return required.map(
        lambda names_: {
            "type": "object",
            "properties": properties,
            "required": names_,
            "additionalProperties": not closed,
        }
    )


concrete_schemas = st.recursive(st.one_of(primitives, enums), _containers, max_leaves=8)


@given(definition=concrete_schemas)
def test_concrete_schema_is_self_compatible(definition: dict[str, Any]) -> None:
    schema = parse_schema(definition)

    result = check_compatibility(schema, schema)

    assert result.compatible, result.messages()


@given(definition=concrete_schemas)
def test_any_destination_accepts_everything(definition: dict[str, Any]) -> None:
    result = check_compatibility(parse_schema(definition), parse_schema({"type": "any"}))

    assert result.compatible


@given(definition=concrete_schemas)
def test_single_auto_end_is_compatible(definition: dict[str, Any]) -> None:
    schema = parse_schema(definition)
    auto = parse_schema({"type": "auto"})

    assert check_compatibility(auto, schema).compatible
    assert check_compatibility(schema, auto).compatible


@given(source=concrete_schemas, destination=concrete_schemas)
def test_different_type_tags_never_compatible(source: dict[str, Any], destination: dict[str, Any]) -> None:
    src = parse_schema(source)
    dst = parse_schema(destination)

    if src.type != dst.type:
        assert not check_compatibility(src, dst).compatible


@given(definition=concrete_schemas)
def test_rendered_declaration_parses_to_same_schema(definition: dict[str, Any]) -> None:
    schema = parse_schema(definition)

    assert parse_schema(schema.to_dict()) == schema
