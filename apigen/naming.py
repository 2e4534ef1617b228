"""Convert OpenAPI identifiers to TypeScript names.

Type names are PascalCase, function names camelCase, parameter names are
sanitized into identifiers that can be interpolated into a URL template.

Examples:
  user_profile        -> UserProfile        (type)
  getUserProfile      -> GetUserProfile     (type)
  get_players_id      -> getPlayersId       (function)
  HTTPServer          -> Httpserver         (type; no boundary between capitals)
  filter.name         -> filterName         (parameter)
  ids[]               -> ids                (parameter)
  page-size           -> pageSize           (parameter)
"""

from __future__ import annotations

import re

_LOWER_UPPER = re.compile(r"([a-z])([A-Z])")
_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")
_ARRAY_SUFFIX = re.compile(r"\[\]")
_NON_IDENTIFIER = re.compile(r"[^a-zA-Z0-9_]")
_EDGE_UNDERSCORES = re.compile(r"^_+|_+$")
_UNDERSCORE_LOWER = re.compile(r"_([a-z])")
_VALID_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Words that cannot name a function or parameter in strict-mode TypeScript
_RESERVED_WORDS = frozenset({
    "arguments", "await", "break", "case", "catch", "class", "const",
    "continue", "debugger", "default", "delete", "do", "else", "enum",
    "eval", "export", "extends", "false", "finally", "for", "function", "if",
    "implements", "import", "in", "instanceof", "interface", "let", "new",
    "null", "package", "private", "protected", "public", "return", "static",
    "super", "switch", "this", "throw", "true", "try", "typeof", "var",
    "void", "while", "with", "yield",
})

# Fallbacks for input with no alphanumeric characters at all
_EMPTY_TYPE_NAME = "Unnamed"
_EMPTY_PARAM_NAME = "param"


def _words(value: str) -> list[str]:
    """Split an identifier into words on case transitions and punctuation."""
    value = _LOWER_UPPER.sub(r"\1_\2", value)
    value = _NON_ALPHANUMERIC.sub("_", value)
    return [word for word in value.split("_") if word]


def _guard_leading_digit(name: str) -> str:
    return f"_{name}" if name[:1].isdigit() else name


def to_type_name(value: str) -> str:
    """Return the PascalCase type name for a schema or operation identifier.

    Idempotent: ``to_type_name(to_type_name(s)) == to_type_name(s)``.
    Joining can erase a word boundary (``a_b`` -> ``AB``), so the conversion
    is repeated until the name no longer changes; every pass merges words, so
    it always stops.
    """
    name = _pascal(value or "")
    while (again := _pascal(name)) != name:
        name = again
    return name


def _pascal(value: str) -> str:
    words = _words(value)
    if not words:
        return _EMPTY_TYPE_NAME
    name = "".join(word[0].upper() + word[1:].lower() for word in words)
    return _guard_leading_digit(name)


def to_function_name(value: str) -> str:
    """Return the camelCase function name for an operation identifier."""
    pascal = to_type_name(value)
    return pascal[0].lower() + pascal[1:]


def sanitize_param_name(name: str) -> str:
    """Turn a raw parameter name into a camelCase identifier.

    Strips ``[]`` suffixes, replaces dots, dashes and other punctuation, and
    contracts ``_x`` pairs into ``X``.
    """
    value = _ARRAY_SUFFIX.sub("", name or "")
    value = _NON_IDENTIFIER.sub("_", value)
    value = _EDGE_UNDERSCORES.sub("", value)
    value = _UNDERSCORE_LOWER.sub(lambda m: m.group(1).upper(), value)
    if not value:
        return _EMPTY_PARAM_NAME
    return _guard_leading_digit(value)


def safe_identifier(name: str) -> str:
    """Suffix reserved words so a name can be used as a binding."""
    return f"{name}_" if name in _RESERVED_WORDS else name


def is_identifier(name: str) -> bool:
    """Check whether a name can be used unquoted as a TypeScript property key."""
    return bool(_VALID_IDENTIFIER.match(name))


def property_key(name: str) -> str:
    """Render a property key, quoting it when it is not a plain identifier."""
    if is_identifier(name):
        return name
    escaped = name.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"
