"""Emit one TypeScript interface per named schema."""

from __future__ import annotations

from typing import Any

from .naming import property_key, to_type_name
from .schema_parser import resolve_schema_type


def doc_comment(text: Any, indent: str = "") -> str:
    """Render a JSDoc block, or an empty string when there is nothing to say."""
    if not isinstance(text, str) or not text.strip():
        return ""
    lines = [line.rstrip().replace("*/", "*\\/") for line in text.strip().splitlines()]
    if len(lines) == 1:
        return f"{indent}/** {lines[0]} */\n"
    body = "\n".join(f"{indent} * {line}".rstrip() for line in lines)
    return f"{indent}/**\n{body}\n{indent} */\n"


def generate_interface(name: str, schema: Any, definitions: dict[str, Any]) -> str:
    """Render ``export interface Name { ... }`` for one definitions entry.

    A schema with no declared properties becomes an open string-keyed record
    rather than an empty object.
    """
    interface_name = to_type_name(name)
    schema = schema if isinstance(schema, dict) else {}
    properties = schema.get("properties")
    doc = doc_comment(schema.get("description"))

    if not isinstance(properties, dict) or not properties:
        return f"{doc}export interface {interface_name} {{\n  [key: string]: any;\n}}"

    required = schema.get("required")
    required_set = {r for r in required if isinstance(r, str)} if isinstance(required, list) else set()
    lines = []
    for prop_name, prop_schema in properties.items():
        prop_type = resolve_schema_type(prop_schema, definitions)
        marker = "" if prop_name in required_set else "?"
        prop_doc = doc_comment(
            prop_schema.get("description") if isinstance(prop_schema, dict) else None,
            indent="  ",
        )
        prop_type = prop_type.replace("\n", "\n  ")
        lines.append(f"{prop_doc}  {property_key(str(prop_name))}{marker}: {prop_type};")

    body = "\n".join(lines)
    return f"{doc}export interface {interface_name} {{\n{body}\n}}"


def generate_interfaces(definitions: dict[str, Any]) -> list[str]:
    """Render every definitions entry, in the table's own order."""
    return [generate_interface(name, schema, definitions) for name, schema in definitions.items()]
