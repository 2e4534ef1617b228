"""
OpenAPI to TypeScript client generator.

Translates an OpenAPI / Swagger document into interface declarations for its
named schemas and one typed request function per operation.
"""

__version__ = "1.0.0"

from .context_builder import build_context
from .errors import GenerationError
from .schema_parser import extract_types_from_schema, extract_types_from_text, resolve_schema_type

__all__ = [
    "GenerationError",
    "build_context",
    "extract_types_from_schema",
    "extract_types_from_text",
    "resolve_schema_type",
]
