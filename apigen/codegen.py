"""Render templates and write generated output.

Takes the context from context_builder and produces interfaces.ts, api.ts
and index.ts in the configured output directory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import jinja2

from .config import GeneratorConfig
from .errors import OutputWriteError
from .formatter import Formatter, get_formatter

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

INTERFACES_MODULE = "interfaces"
API_MODULE = "api"
INDEX_MODULE = "index"

# Output module -> template rendering it
_TEMPLATES: dict[str, str] = {
    INTERFACES_MODULE: "interfaces.ts.j2",
    API_MODULE: "api.ts.j2",
    INDEX_MODULE: "index.ts.j2",
}


def comment_text(value: object) -> str:
    """Escape text placed inside a block comment."""
    return str(value).replace("*/", "*\\/")


def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["comment_text"] = comment_text
    return env


def render_files(
    context: dict[str, Any],
    config: GeneratorConfig,
    formatter: Formatter | None = None,
) -> dict[Path, str]:
    """Render every output file, keyed by its destination path."""
    formatter = formatter or get_formatter(config.use_prettier)
    env = _environment()
    values = {
        **context,
        "http_client_import": config.http_client_import,
        "types_import": config.types_import,
        "interfaces_module": INTERFACES_MODULE,
        "api_module": API_MODULE,
    }

    files: dict[Path, str] = {}
    for module, template_name in _TEMPLATES.items():
        output = env.get_template(template_name).render(**values)
        path = Path(config.output_dir) / f"{module}.ts"
        files[path] = formatter(output)
        logger.debug("Rendered %s", path)
    return files


def write_files_to_disk(files: dict[Path, str]) -> None:
    """Write generated files, creating parent directories as needed."""
    for path, content in files.items():
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise OutputWriteError(f"Cannot write {path}: {e}") from e


def generate(context: dict[str, Any], config: GeneratorConfig) -> dict[Path, str]:
    """Render all templates and write them to the output directory."""
    files = render_files(context, config)
    write_files_to_disk(files)
    logger.info(
        "Generated %s (%d interfaces, %d functions)",
        config.output_dir,
        context["interface_count"],
        context["function_count"],
    )
    return files
