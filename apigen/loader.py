"""Load an OpenAPI / Swagger document and extract its paths and definitions.

The document comes either from a local file (JSON or YAML) or over HTTP.
Both Swagger 2 (``definitions``) and OpenAPI 3 (``components.schemas``)
dialects are normalized into one definitions table.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import yaml

from .errors import SpecFetchError, SpecLoadError

_YAML_SUFFIXES = (".yaml", ".yml")


def _decode(text: str, *, as_yaml: bool) -> Any:
    if as_yaml:
        return yaml.safe_load(text)
    return json.loads(text)


def _ensure_document(doc: Any, source: str) -> dict[str, Any]:
    if not isinstance(doc, dict):
        raise SpecLoadError(f"{source} does not contain an OpenAPI object")
    return doc


def load_spec(path: Path | str) -> dict[str, Any]:
    """Load an OpenAPI document from disk."""
    spec_file = Path(path)
    try:
        text = spec_file.read_text(encoding="utf-8")
        doc = _decode(text, as_yaml=spec_file.suffix.lower() in _YAML_SUFFIXES)
    except OSError as e:
        raise SpecLoadError(f"Cannot read {spec_file}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SpecLoadError(f"Invalid document in {spec_file}: {e}") from e
    return _ensure_document(doc, str(spec_file))


def fetch_spec(
    url: str,
    client: httpx.Client | None = None,
    timeout: float = 30.0,
) -> dict[str, Any]:
    """Fetch an OpenAPI document over HTTP.

    A caller-supplied client is used as-is and left open; otherwise a
    short-lived client is created for the single request.
    """
    try:
        if client is not None:
            response = client.get(url)
        else:
            with httpx.Client(timeout=timeout, follow_redirects=True) as owned:
                response = owned.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise SpecFetchError(
            f"Fetching {url} returned HTTP {e.response.status_code}"
        ) from e
    except httpx.HTTPError as e:
        raise SpecFetchError(f"Fetching {url} failed: {e}") from e

    content_type = response.headers.get("content-type", "")
    as_yaml = "yaml" in content_type or url.lower().endswith(_YAML_SUFFIXES)
    try:
        doc = _decode(response.text, as_yaml=as_yaml)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SpecFetchError(f"Invalid document at {url}: {e}") from e
    if not isinstance(doc, dict):
        raise SpecFetchError(f"{url} does not contain an OpenAPI object")
    return doc


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Return the document's path items."""
    paths = spec.get("paths")
    return paths if isinstance(paths, dict) else {}


def get_definitions(spec: dict[str, Any]) -> dict[str, Any]:
    """Return the merged named-schema table.

    Swagger 2 ``definitions`` come first; OpenAPI 3 ``components.schemas``
    entries override them on a name collision. The result is a new dict, so
    callers never mutate the document.
    """
    merged: dict[str, Any] = {}
    legacy = spec.get("definitions")
    if isinstance(legacy, dict):
        merged.update(legacy)
    components = spec.get("components")
    if isinstance(components, dict):
        schemas = components.get("schemas")
        if isinstance(schemas, dict):
            merged.update(schemas)
    return merged


def ref_name(ref: Any) -> str:
    """Return the schema name a ``$ref`` points at.

    ``#/components/schemas/Player`` and ``#/definitions/Player`` both give
    ``Player``.
    """
    if not isinstance(ref, str):
        return ""
    return ref.rstrip("/").split("/")[-1]
