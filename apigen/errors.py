"""Exceptions raised at the generator's boundaries.

The schema resolver and synthesizers never raise on malformed input; only
configuration, document loading, formatting and file output can fail a run.
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for failures that abort a generation run."""


class ConfigError(GenerationError):
    """The configuration file is unreadable or malformed."""


class SpecLoadError(GenerationError):
    """A local OpenAPI document could not be read or decoded."""


class SpecFetchError(GenerationError):
    """The OpenAPI document could not be fetched or decoded."""


class FormatError(GenerationError):
    """The external formatter rejected the generated source."""


class OutputWriteError(GenerationError):
    """A generated file could not be written."""
