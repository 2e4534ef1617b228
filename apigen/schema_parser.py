"""Map OpenAPI schemas to TypeScript type expressions.

Handles:
- $ref (dangling references still yield the referenced type name)
- oneOf/anyOf unions and allOf intersections with merged inline properties
- string/number/integer/boolean primitives and enums
- arrays, parenthesizing union/intersection item types
- inline objects, additionalProperties maps and free-form objects
- usage tracking: which named types a schema or rendered text refers to

The resolver never raises. Input it cannot make sense of degrades to the
broadest applicable type.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from enum import StrEnum
from typing import Any

from .loader import ref_name
from .naming import property_key, to_type_name

UNION = " | "
INTERSECTION = " & "

_COMBINATORS = ("allOf", "oneOf", "anyOf")

# A capitalized identifier followed by a type-grammar delimiter or end of text
_TYPE_TOKEN = re.compile(r"(?<![\w$])([A-Z_][A-Za-z0-9_]*)(?=[\s\[\]<>{}();,?:|&]|$)")
# A capitalized identifier right after a property-type colon
_PROPERTY_TYPE = re.compile(r":\s*([A-Z_][A-Za-z0-9_]*)")
_STRING_LITERAL = re.compile(r"'(?:[^'\\\n]|\\.)*'|\"(?:[^\"\\\n]|\\.)*\"")


class DynamicType(StrEnum):
    """Type expressions used where a schema carries no usable structure."""

    UNKNOWN = "unknown"
    ANY = "any"
    RECORD = "Record<string, any>"


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _string_literal(value: Any) -> str:
    if isinstance(value, bool):
        value = "true" if value else "false"
    text = (
        str(value)
        .replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{text}'"


def _plain_literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return repr(value)
    return _string_literal(value)


def _indent(text: str) -> str:
    return text.replace("\n", "\n  ")


def render_object(
    properties: Mapping[str, Any],
    required: Iterable[Any],
    definitions: dict[str, Any],
    _resolving: frozenset[int] = frozenset(),
) -> str:
    """Render an object literal with one line per property.

    Properties missing from ``required`` are marked optional.
    """
    required_set = {name for name in required if isinstance(name, str)}
    lines = []
    for name, prop_schema in properties.items():
        prop_type = resolve_schema_type(prop_schema, definitions, _resolving)
        marker = "" if name in required_set else "?"
        lines.append(f"  {property_key(str(name))}{marker}: {_indent(prop_type)};")
    return "{\n" + "\n".join(lines) + "\n}"


def _resolve_enum(values: list[Any], schema_type: Any) -> str:
    if schema_type in (None, "string"):
        # null marks a nullable enum, it is never a quoted value
        return UNION.join("null" if v is None else _string_literal(v) for v in values)
    return UNION.join(_plain_literal(v) for v in values)


def _resolve_all_of(
    branches: list[Any],
    definitions: dict[str, Any],
    resolving: frozenset[int],
) -> str | None:
    base_types: list[str] = []
    merged_props: dict[str, Any] = {}
    merged_required: list[Any] = []

    for sub in branches:
        if not isinstance(sub, dict):
            continue
        if "$ref" in sub:
            name = ref_name(sub["$ref"])
            if name:
                base_types.append(to_type_name(name))
        elif isinstance(sub.get("properties"), dict):
            merged_props.update(sub["properties"])
            merged_required.extend(_as_list(sub.get("required")))

    if base_types and merged_props:
        literal = render_object(merged_props, merged_required, definitions, resolving)
        return INTERSECTION.join(base_types) + INTERSECTION + literal
    if base_types:
        return INTERSECTION.join(base_types)
    if merged_props:
        return render_object(merged_props, merged_required, definitions, resolving)
    return None


def _resolve_map(schema: dict[str, Any], definitions: dict[str, Any], resolving: frozenset[int]) -> str:
    extra = schema.get("additionalProperties")
    if isinstance(extra, dict) and extra:
        return f"Record<string, {resolve_schema_type(extra, definitions, resolving)}>"
    return DynamicType.RECORD


def resolve_schema_type(
    schema: Any,
    definitions: dict[str, Any],
    _resolving: frozenset[int] = frozenset(),
) -> str:
    """Resolve an OpenAPI schema to a TypeScript type expression.

    ``definitions`` is the named-schema table; it is only read. References
    are never expanded, so named cycles terminate; ``_resolving`` holds the
    nodes currently on the resolution stack and stops in-memory cycles
    (e.g. YAML anchors pointing at an ancestor).
    """
    if schema is None:
        return DynamicType.UNKNOWN
    if not isinstance(schema, dict):
        return DynamicType.ANY
    if id(schema) in _resolving:
        return DynamicType.ANY
    resolving = _resolving | {id(schema)}

    if "$ref" in schema:
        name = ref_name(schema["$ref"])
        return to_type_name(name) if name else DynamicType.ANY

    for key in ("oneOf", "anyOf"):
        branches = _as_list(schema.get(key))
        if branches:
            return UNION.join(resolve_schema_type(sub, definitions, resolving) for sub in branches)

    all_of = _as_list(schema.get("allOf"))
    if all_of:
        intersection = _resolve_all_of(all_of, definitions, resolving)
        if intersection is not None:
            return intersection

    schema_type = schema.get("type")
    enum_values = _as_list(schema.get("enum"))

    if schema_type == "string":
        if enum_values:
            return _resolve_enum(enum_values, schema_type)
        return "string"

    if schema_type in ("number", "integer"):
        return "number"

    if schema_type == "boolean":
        return "boolean"

    if schema_type == "array":
        item_type = resolve_schema_type(schema.get("items"), definitions, resolving)
        if UNION in item_type or INTERSECTION in item_type:
            return f"({item_type})[]"
        return f"{item_type}[]"

    if enum_values:
        return _resolve_enum(enum_values, schema_type)

    properties = schema.get("properties")
    if schema_type == "object" or isinstance(properties, dict):
        if isinstance(properties, dict) and properties:
            return render_object(properties, _as_list(schema.get("required")), definitions, resolving)
        return _resolve_map(schema, definitions, resolving)

    return DynamicType.ANY


def defined_type_names(definitions: dict[str, Any]) -> set[str]:
    """Normalized type names of every entry in the definitions table."""
    return {to_type_name(name) for name in definitions}


def _walk_refs(schema: Any, seen: set[int]) -> Iterable[str]:
    if not isinstance(schema, dict) or id(schema) in seen:
        return
    seen.add(id(schema))

    if "$ref" in schema:
        name = ref_name(schema["$ref"])
        if name:
            yield to_type_name(name)
        return

    if "items" in schema:
        yield from _walk_refs(schema["items"], seen)
    for prop_schema in _as_dict(schema.get("properties")).values():
        yield from _walk_refs(prop_schema, seen)
    yield from _walk_refs(schema.get("additionalProperties"), seen)
    for key in _COMBINATORS:
        for sub in _as_list(schema.get(key)):
            yield from _walk_refs(sub, seen)


def extract_types_from_schema(schema: Any) -> set[str]:
    """Collect the named types a schema refers to, directly or nested.

    Dangling references are included; the caller separates them from the
    importable names.
    """
    return set(_walk_refs(schema, set()))


def extract_types_from_text(text: str, definitions: dict[str, Any]) -> set[str]:
    """Find named types used in rendered TypeScript.

    Catches types that the generator introduces by string construction
    (signatures, return types). Quoted string literals are ignored, and only
    names present in ``definitions`` are returned, so a mis-captured token
    can at worst add a redundant import of an existing type.
    """
    known = defined_type_names(definitions)
    code = _STRING_LITERAL.sub("''", text)
    found = set(_TYPE_TOKEN.findall(code))
    found.update(_PROPERTY_TYPE.findall(code))
    return found & known
