"""Build the Jinja2 template context from a parsed OpenAPI document.

Runs the interface and operation synthesizers over the whole document,
merges the named types each function uses, and splits them into the valid
import list and the names that resolve to no definition.
"""

from __future__ import annotations

import logging
from typing import Any

from .interfaces import doc_comment, generate_interfaces
from .loader import get_definitions, get_paths
from .naming import to_type_name
from .operations import build_operation, iter_operations, render_function
from .schema_parser import extract_types_from_text

logger = logging.getLogger(__name__)


def _deduplicate_function_names(functions: list[dict[str, Any]]) -> None:
    """Ensure all function names are unique by appending the method, then a counter."""
    seen: dict[str, int] = {}
    for fn in functions:
        name = fn["name"]
        if name in seen:
            seen[name] += 1
            fn["name"] = f"{name}{fn['method'].capitalize()}"
        else:
            seen[name] = 1

    final_seen: dict[str, int] = {}
    for fn in functions:
        name = fn["name"]
        if name in final_seen:
            final_seen[name] += 1
            fn["name"] = f"{name}{final_seen[name]}"
        else:
            final_seen[name] = 1


def build_functions(spec: dict[str, Any], definitions: dict[str, Any]) -> list[dict[str, Any]]:
    """Build and render one function per supported (path, method) pair."""
    functions = [
        build_operation(spec, path, method, path_item, operation, definitions)
        for path, method, path_item, operation in iter_operations(get_paths(spec))
    ]
    _deduplicate_function_names(functions)

    for fn in functions:
        code = render_function(fn)
        fn["used_types"] = fn["used_types"] | extract_types_from_text(code, definitions)
        fn["code"] = doc_comment(fn["summary"]) + code
    return functions


def build_context(spec: dict[str, Any], source: str = "") -> dict[str, Any]:
    """Build the full template context for the three generated files."""
    definitions = get_definitions(spec)
    interfaces = generate_interfaces(definitions)
    functions = build_functions(spec, definitions)

    used: set[str] = set()
    for fn in functions:
        used |= fn["used_types"]

    # Definitions order keeps the import list stable between runs
    defined = list(dict.fromkeys(to_type_name(name) for name in definitions))
    used_types = [name for name in defined if name in used]
    skipped_types = sorted(used - set(defined))

    logger.debug("Built %d interfaces and %d functions", len(interfaces), len(functions))
    if skipped_types:
        logger.warning(
            "Skipped %d undefined types: %s", len(skipped_types), ", ".join(skipped_types)
        )

    return {
        "source": source,
        "interfaces": interfaces,
        "functions": functions,
        "used_types": used_types,
        "skipped_types": skipped_types,
        "interface_count": len(interfaces),
        "function_count": len(functions),
    }
