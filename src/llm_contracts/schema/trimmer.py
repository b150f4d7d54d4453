"""Reduce generated JSON schemas to the minimal shape sent over the wire.

Pydantic's generator emits metadata that the chat protocol does not need:
``title`` on every model and field, a ``$defs`` table for nested models and
``$ref`` pointers into it. The trimmer inlines the references, strips the
metadata and keeps only ``type``, ``properties``, ``required`` and
``description`` at the top level.
"""

from typing import Any, TypedDict

from pydantic import PydanticUserError, TypeAdapter

from llm_contracts.exceptions import SchemaError

_DEFINITION_KEYS = ("$defs", "definitions")
_SCHEMA_LIST_KEYS = ("anyOf", "oneOf", "allOf", "prefixItems")
_SCHEMA_KEYS = ("items", "not", "additionalProperties")


class TrimmedJsonSchema(TypedDict, total=False):
    """Minimal JSON schema: always has ``type``; object keys only for objects."""

    type: str
    properties: dict[str, Any]
    required: list[str]
    description: str


def generate_json_schema(tp: Any) -> dict[str, Any]:
    """Generate a full JSON schema for a Python type with pydantic.

    Args:
        tp: Any type pydantic can validate (model, dataclass, TypedDict,
            builtin or generic alias)

    Returns:
        The generated JSON schema, metadata included

    Raises:
        SchemaError: If pydantic cannot describe the type
    """
    try:
        return TypeAdapter(tp).json_schema()
    except PydanticUserError as e:
        raise SchemaError(f"Cannot generate a JSON schema for {tp!r}: {e}") from e


def trim_generated_json_schema(schema: dict[str, Any]) -> TrimmedJsonSchema:
    """Normalize a generated JSON schema to its minimal wire shape.

    Args:
        schema: Schema produced by a generic generator

    Returns:
        A new schema holding only ``type``, ``properties``, ``required`` and
        ``description``

    Raises:
        SchemaError: If the schema has no resolvable ``type``
    """
    definitions: dict[str, Any] = {}
    for key in _DEFINITION_KEYS:
        definitions.update(schema.get(key) or {})

    rest = {
        key: value
        for key, value in schema.items()
        if key != "$schema" and key not in _DEFINITION_KEYS
    }
    rest = _strip_metadata(_resolve_refs(rest, definitions, ()))

    if not isinstance(rest.get("type"), str):
        raise SchemaError(
            "The provided type must be convertible to a JSON schema with a "
            "single 'type'",
            schema=schema,
        )

    trimmed: TrimmedJsonSchema = {"type": rest["type"]}
    if rest["type"] == "object" and "properties" in rest:
        trimmed["properties"] = rest["properties"]
        if "required" in rest:
            trimmed["required"] = list(rest["required"])
    if rest.get("description"):
        trimmed["description"] = rest["description"]
    return trimmed


def trimmed_schema_for(tp: Any) -> TrimmedJsonSchema:
    """Generate and trim the schema for a type in one step."""
    return trim_generated_json_schema(generate_json_schema(tp))


def is_object_schema(schema: dict[str, Any]) -> bool:
    """Check whether a schema describes a structured object with named fields."""
    return schema.get("type") == "object" and "properties" in schema


def _ref_name(ref: str) -> str:
    for key in _DEFINITION_KEYS:
        prefix = f"#/{key}/"
        if ref.startswith(prefix):
            return ref[len(prefix) :]
    raise SchemaError(f"Unsupported schema reference '{ref}'")


def _resolve_refs(node: Any, definitions: dict[str, Any], seen: tuple[str, ...]) -> Any:
    """Return a copy of ``node`` with every local ``$ref`` replaced by its target."""
    if isinstance(node, list):
        return [_resolve_refs(item, definitions, seen) for item in node]
    if not isinstance(node, dict):
        return node

    if "$ref" in node:
        name = _ref_name(node["$ref"])
        if name in seen:
            raise SchemaError(f"Recursive type '{name}' cannot be inlined")
        if name not in definitions:
            raise SchemaError(f"Schema reference '{node['$ref']}' has no definition")
        target = _resolve_refs(definitions[name], definitions, (*seen, name))
        # Siblings of $ref (e.g. a field description) override the target.
        siblings = {k: v for k, v in node.items() if k != "$ref"}
        return {**target, **_resolve_refs(siblings, definitions, seen)}

    return {key: _resolve_refs(value, definitions, seen) for key, value in node.items()}


def _strip_metadata(node: dict[str, Any]) -> dict[str, Any]:
    """Drop ``title`` from a schema and every nested sub-schema."""
    cleaned = {key: value for key, value in node.items() if key != "title"}

    properties = cleaned.get("properties")
    if isinstance(properties, dict):
        cleaned["properties"] = {
            name: _strip_metadata(sub) if isinstance(sub, dict) else sub
            for name, sub in properties.items()
        }

    for key in _SCHEMA_KEYS:
        if isinstance(cleaned.get(key), dict):
            cleaned[key] = _strip_metadata(cleaned[key])

    for key in _SCHEMA_LIST_KEYS:
        if isinstance(cleaned.get(key), list):
            cleaned[key] = [
                _strip_metadata(sub) if isinstance(sub, dict) else sub
                for sub in cleaned[key]
            ]

    return cleaned
