"""Command-line interface for apigen."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click
import httpx

from . import __version__
from .codegen import render_files, write_files_to_disk
from .config import GeneratorConfig, load_config
from .context_builder import build_context
from .errors import GenerationError
from .loader import fetch_spec, load_spec

logger = logging.getLogger(__name__)


def load_document(config: GeneratorConfig, client: httpx.Client | None = None) -> dict[str, Any]:
    """Read the configured local document, or fetch it from the API."""
    if config.spec_file:
        logger.info("Reading OpenAPI document from %s", config.spec_file)
        return load_spec(config.spec_file)
    logger.info("Fetching OpenAPI document from %s", config.spec_url)
    return fetch_spec(config.spec_url, client=client)


def generate_client(
    config: GeneratorConfig,
    client: httpx.Client | None = None,
) -> tuple[dict[str, Any], dict[Path, str]]:
    """Run the whole pipeline: load, translate, render, write."""
    spec = load_document(config, client=client)
    context = build_context(spec, source=config.source)
    files = render_files(context, config)
    write_files_to_disk(files)
    return context, files


@click.command()
@click.option("-u", "--api-url", default=None, help="API base URL the document is served from.")
@click.option("-s", "--swagger-path", default=None, help="Path of the OpenAPI document under the API URL.")
@click.option("-f", "--spec-file", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="Read the OpenAPI document from a local JSON or YAML file.")
@click.option("-o", "--output-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Directory for the generated files.")
@click.option("-c", "--config", "config_file", type=click.Path(path_type=Path), default=None, help="JSON config file (default: api-generator.config.json if present).")
@click.option("--prettier/--no-prettier", "use_prettier", default=None, help="Format output with an external prettier executable.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(__version__, prog_name="apigen")
def main(
    api_url: str | None,
    swagger_path: str | None,
    spec_file: Path | None,
    output_dir: Path | None,
    config_file: Path | None,
    use_prettier: bool | None,
    verbose: bool,
):
    """Generate a typed TypeScript client from an OpenAPI / Swagger document."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    overrides = {
        "api_url": api_url,
        "swagger_path": swagger_path,
        "spec_file": spec_file,
        "output_dir": output_dir,
        "use_prettier": use_prettier,
    }
    try:
        config = load_config(config_file, overrides=overrides)
        if not config.spec_file and not config.api_url:
            raise click.UsageError("Provide --spec-file or --api-url (or set API_URL).")
        context, files = generate_client(config)
    except GenerationError as e:
        raise click.ClickException(str(e)) from e

    for path in files:
        click.echo(f"  Created {path}")
    click.echo(
        f"Generated {context['interface_count']} interfaces and "
        f"{context['function_count']} functions in {config.output_dir}"
    )
    if context["used_types"]:
        click.echo(f"Imported types: {', '.join(context['used_types'])}")
    if context["skipped_types"]:
        click.echo(f"Skipped undefined types: {', '.join(context['skipped_types'])}", err=True)
