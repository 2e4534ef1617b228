"""Turn OpenAPI operations into typed TypeScript request functions.

Each (path, method) pair becomes one ``export async function``:
- name from operationId, else method + path
- path parameters first, then query parameters, then an optional ``data`` body
- return type from the first 200/201/204 response's JSON schema
- ``{token}`` path segments interpolated, query string built at call time

Malformed operations degrade to permissive defaults instead of being skipped.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Any

from .loader import ref_name
from .naming import safe_identifier, sanitize_param_name, to_function_name, to_type_name
from .schema_parser import DynamicType, extract_types_from_schema, resolve_schema_type

SUPPORTED_METHODS = ("get", "post", "put", "delete", "patch")

# Methods whose axios helper takes a config object, not a payload, second
_CONFIG_BODY_METHODS = {"get", "delete"}

_SUCCESS_STATUSES = ("200", "201", "204")
_JSON_CONTENT_TYPE = "application/json"
_PATH_TOKEN = re.compile(r"\{([^{}]+)\}")
_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")
_DIRECT_ENCODE_TYPES = {"string", "number", "boolean"}
_LOCAL_NAMES = {"axios", "data", "response"}


def resolve_ref(spec: dict[str, Any], ref: Any) -> dict[str, Any]:
    """Resolve a local ``#/...`` pointer; anything unresolvable gives ``{}``."""
    if not isinstance(ref, str) or not ref.startswith("#/"):
        return {}
    node: Any = spec
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if not isinstance(node, dict) or part not in node:
            return {}
        node = node[part]
    return node if isinstance(node, dict) else {}


def _deref(spec: dict[str, Any], node: Any) -> dict[str, Any]:
    if not isinstance(node, dict):
        return {}
    if "$ref" in node:
        return resolve_ref(spec, node["$ref"])
    return node


def operation_name(method: str, path: str, operation: dict[str, Any]) -> str:
    """Function name for an operation: its operationId, else method + path."""
    op_id = operation.get("operationId")
    if not isinstance(op_id, str) or not op_id.strip():
        op_id = f"{method.lower()}{_NON_ALPHANUMERIC.sub('_', path)}"
    return _binding_name(to_function_name(op_id))


def _js_string(text: str) -> str:
    """Escape text for use inside a single-quoted JavaScript string."""
    return text.replace("\\", "\\\\").replace("'", "\\'")


def _binding_name(name: str) -> str:
    name = safe_identifier(name)
    # Names the generated module binds itself
    if name in _LOCAL_NAMES:
        return f"{name}_"
    return name


def _param_ident(name: str) -> str:
    return _binding_name(sanitize_param_name(name))


def _param_schema(param: dict[str, Any]) -> dict[str, Any]:
    schema = param.get("schema")
    if isinstance(schema, dict):
        return schema
    # Swagger 2 puts type information on the parameter itself
    legacy = {key: param[key] for key in ("type", "items", "enum", "format") if key in param}
    legacy.setdefault("type", "string")
    return legacy


def _merge_parameters(spec: dict[str, Any], path_item: dict[str, Any], operation: dict[str, Any]) -> list[dict[str, Any]]:
    """Path-level parameters, overridden by operation-level ones on (name, in)."""
    merged: dict[tuple[Any, Any], dict[str, Any]] = {}
    for source in (path_item.get("parameters"), operation.get("parameters")):
        if not isinstance(source, list):
            continue
        for raw in source:
            param = _deref(spec, raw)
            if isinstance(param.get("name"), str):
                merged[(param["name"], param.get("in"))] = param
    return list(merged.values())


def _build_param(param: dict[str, Any], definitions: dict[str, Any]) -> dict[str, Any]:
    schema = _param_schema(param)
    name = param["name"]
    return {
        "name": name,
        "ident": _param_ident(name),
        "location": param.get("in"),
        "required": bool(param.get("required", False)),
        "type": resolve_schema_type(schema, definitions),
        "is_array": schema.get("type") == "array" or "[]" in name,
        "is_string": schema.get("type") == "string" or ("enum" in schema and schema.get("type") is None),
    }


def _deduplicate_param_idents(params: list[dict[str, Any]]) -> None:
    """Ensure parameter identifiers are unique by appending the location, then a counter.

    Earlier parameters keep their identifier. ``data`` is never produced here,
    so the body parameter cannot collide.
    """
    seen: set[str] = set()
    for param in params:
        ident = param["ident"]
        if ident in seen:
            ident = f"{ident}{str(param['location']).capitalize()}"
        base, counter = ident, 2
        while ident in seen:
            ident = f"{base}{counter}"
            counter += 1
        param["ident"] = ident
        seen.add(ident)


def _request_body_schema(
    spec: dict[str, Any],
    operation: dict[str, Any],
    parameters: list[dict[str, Any]],
) -> Any:
    body = _deref(spec, operation.get("requestBody"))
    content = body.get("content")
    if isinstance(content, dict):
        media = content.get(_JSON_CONTENT_TYPE)
        if isinstance(media, dict) and media.get("schema") is not None:
            return media["schema"]
    for param in parameters:
        if param.get("in") == "body" and param.get("schema") is not None:
            return param["schema"]
    return None


def _response_schema(spec: dict[str, Any], operation: dict[str, Any]) -> Any:
    responses = operation.get("responses")
    if not isinstance(responses, dict):
        return None
    by_status = {str(code): resp for code, resp in responses.items()}
    for status in _SUCCESS_STATUSES:
        if status in by_status:
            response = _deref(spec, by_status[status])
            content = response.get("content")
            if isinstance(content, dict):
                media = content.get(_JSON_CONTENT_TYPE)
                return media.get("schema") if isinstance(media, dict) else None
            return response.get("schema")
    return None


def build_url(path: str, params: list[dict[str, Any]]) -> str:
    """Template-literal body for the path with every ``{token}`` interpolated."""
    idents = {p["name"]: p["ident"] for p in params if p["location"] == "path"}
    parts = []
    position = 0
    for match in _PATH_TOKEN.finditer(path):
        literal = path[position:match.start()]
        parts.append(literal.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${"))
        token = match.group(1)
        ident = idents.get(token) or _param_ident(token)
        parts.append(f"${{{ident}}}")
        position = match.end()
    tail = path[position:]
    parts.append(tail.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${"))
    return "".join(parts)


def _presence_check(param: dict[str, Any]) -> str:
    ident = param["ident"]
    if param["is_array"]:
        return f"{ident} && {ident}.length > 0"
    # Empty strings count as absent; 0 and false do not
    if param["is_string"]:
        return ident
    return f"{ident} !== undefined && {ident} !== null"


def _encoded_value(param: dict[str, Any]) -> str:
    ident = param["ident"]
    if param["is_string"] or param["type"] in _DIRECT_ENCODE_TYPES:
        return f"encodeURIComponent({ident})"
    return f"encodeURIComponent(String({ident}))"


def _query_fragment(param: dict[str, Any]) -> str:
    key = _js_string(param["name"])
    ident = param["ident"]
    if param["is_array"]:
        value = f"'{key}=' + {ident}.map(String).map(encodeURIComponent).join('&{key}=')"
    else:
        value = f"'{key}=' + {_encoded_value(param)}"
    if param["required"]:
        return value
    return f"{_presence_check(param)} ? {value} : null"


def build_query_string(query_params: list[dict[str, Any]]) -> str:
    """Template-literal code that appends the query string at call time.

    No parameters give no suffix. A single optional scalar parameter is a
    single conditional. Anything else collects fragments, drops absent ones
    and joins the rest with ``&``.
    """
    if not query_params:
        return ""

    if len(query_params) == 1 and not query_params[0]["required"] and not query_params[0]["is_array"]:
        param = query_params[0]
        key = _js_string(param["name"])
        return f"${{{_presence_check(param)} ? '?{key}=' + {_encoded_value(param)} : ''}}"

    fragments = ", ".join(_query_fragment(p) for p in query_params)
    return (
        f"${{(() => {{ const parts = [{fragments}].filter(Boolean); "
        f"return parts.length > 0 ? '?' + parts.join('&') : ''; }})()}}"
    )


def build_operation(
    spec: dict[str, Any],
    path: str,
    method: str,
    path_item: dict[str, Any],
    operation: Any,
    definitions: dict[str, Any],
) -> dict[str, Any]:
    """Collect everything needed to render one request function.

    ``used_types`` holds the named types found by walking the request body
    and response schemas; text-based scanning happens after rendering.
    """
    method = method.lower()
    operation = operation if isinstance(operation, dict) else {}
    raw_params = _merge_parameters(spec, path_item, operation)
    used_types: set[str] = set()

    params = [_build_param(p, definitions) for p in raw_params if p.get("in") == "path"]
    declared = {p["name"] for p in params}
    for token in _PATH_TOKEN.findall(path):
        if token not in declared:
            declared.add(token)
            params.append({
                "name": token,
                "ident": _param_ident(token),
                "location": "path",
                "required": True,
                "type": "string",
                "is_array": False,
                "is_string": True,
            })
    query_params = [_build_param(p, definitions) for p in raw_params if p.get("in") == "query"]
    params.extend(query_params)
    _deduplicate_param_idents(params)

    body_type = None
    body_schema = _request_body_schema(spec, operation, raw_params)
    if isinstance(body_schema, dict) and "$ref" in body_schema and ref_name(body_schema["$ref"]):
        body_type = to_type_name(ref_name(body_schema["$ref"]))
        used_types.add(body_type)
    elif body_schema is not None:
        body_type = resolve_schema_type(body_schema, definitions)

    return_type: str = DynamicType.ANY
    response_schema = _response_schema(spec, operation)
    if response_schema is not None:
        return_type = resolve_schema_type(response_schema, definitions)
        used_types |= extract_types_from_schema(response_schema)

    summary = operation.get("summary") or operation.get("description")

    return {
        "name": operation_name(method, path, operation),
        "method": method,
        "path": path,
        "params": params,
        "query_params": query_params,
        "body_type": body_type,
        "return_type": return_type,
        "url": build_url(path, params) + build_query_string(query_params),
        "used_types": used_types,
        "summary": summary if isinstance(summary, str) else None,
    }


def _render_params(op: dict[str, Any]) -> str:
    entries = [(p["ident"], p["type"], p["required"]) for p in op["params"]]
    if op["body_type"] is not None:
        entries.append(("data", op["body_type"], True))

    # An optional parameter may not precede a required one
    last_required = max((i for i, (_, _, req) in enumerate(entries) if req), default=-1)
    rendered = []
    for index, (ident, type_expr, required) in enumerate(entries):
        if required:
            rendered.append(f"{ident}: {type_expr}")
        elif index < last_required:
            rendered.append(f"{ident}: {type_expr} | undefined")
        else:
            rendered.append(f"{ident}?: {type_expr}")
    return ", ".join(rendered)


def render_function(op: dict[str, Any]) -> str:
    """Render the ``export async function`` text for a built operation."""
    body_arg = ""
    if op["body_type"] is not None:
        body_arg = ", { data }" if op["method"] in _CONFIG_BODY_METHODS else ", data"
    return (
        f"export async function {op['name']}({_render_params(op)}): Promise<{op['return_type']}> {{\n"
        f"  const response = await axios.{op['method']}(`{op['url']}`{body_arg});\n"
        f"  return response.data;\n"
        f"}}"
    )


def iter_operations(paths: dict[str, Any]) -> Iterator[tuple[str, str, dict[str, Any], Any]]:
    """Yield ``(path, method, path_item, operation)`` for supported verbs, in document order."""
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            if isinstance(method, str) and method.lower() in SUPPORTED_METHODS:
                yield str(path), method, path_item, operation
