"""Generator configuration.

Settings are layered: dataclass defaults, then an optional JSON config file,
then environment variables, then explicit overrides (CLI options).
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "api-generator.config.json"

# Environment variable -> config field
_ENV_VARS: dict[str, str] = {
    "API_URL": "api_url",
    "SWAGGER_PATH": "swagger_path",
    "SPEC_FILE": "spec_file",
    "OUTPUT_DIR": "output_dir",
}

# camelCase keys accepted in the config file
_FILE_KEY_ALIASES: dict[str, str] = {
    "apiUrl": "api_url",
    "swaggerPath": "swagger_path",
    "specFile": "spec_file",
    "outputDir": "output_dir",
    "httpClientImport": "http_client_import",
    "typesImport": "types_import",
    "usePrettier": "use_prettier",
}


@dataclass(frozen=True)
class GeneratorConfig:
    """Where the document comes from and where the client goes."""

    api_url: str = ""
    swagger_path: str = "/openapi.json"
    spec_file: str | None = None
    output_dir: Path = Path("api/generated")
    http_client_import: str = "../axios"
    types_import: str = "./interfaces"
    use_prettier: bool = False

    @property
    def spec_url(self) -> str:
        return f"{self.api_url.rstrip('/')}{self.swagger_path}" if self.api_url else self.swagger_path

    @property
    def source(self) -> str:
        """The document location recorded in generated file headers."""
        return self.spec_file or self.spec_url


def _coerce(values: Mapping[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(GeneratorConfig)}
    result: dict[str, Any] = {}
    for key, value in values.items():
        name = _FILE_KEY_ALIASES.get(key, key)
        if name not in known:
            logger.warning("Ignoring unknown config key %r", key)
            continue
        if value is None:
            continue
        if name == "output_dir":
            value = Path(value)
        elif name == "spec_file":
            value = str(value)
        elif name == "use_prettier" and isinstance(value, str):
            value = value.strip().lower() in ("1", "true", "yes", "on")
        result[name] = value
    return result


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return data


def load_config(
    config_file: Path | str | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> GeneratorConfig:
    """Assemble the configuration from every layer.

    An explicitly named config file must exist; the default one is optional.
    """
    config = GeneratorConfig()

    if config_file is not None:
        path = Path(config_file)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        config = replace(config, **_coerce(_read_config_file(path)))
        logger.info("Loaded configuration from %s", path)
    elif Path(DEFAULT_CONFIG_FILE).exists():
        config = replace(config, **_coerce(_read_config_file(Path(DEFAULT_CONFIG_FILE))))
        logger.info("Loaded configuration from %s", DEFAULT_CONFIG_FILE)

    env = os.environ if env is None else env
    from_env = {field: env[var] for var, field in _ENV_VARS.items() if env.get(var)}
    if from_env:
        logger.debug("Using environment settings: %s", ", ".join(sorted(from_env)))
        config = replace(config, **_coerce(from_env))

    if overrides:
        config = replace(config, **_coerce(overrides))
    return config
