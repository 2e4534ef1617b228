"""Format generated TypeScript.

The built-in formatter only normalizes whitespace. When configured, an
external ``prettier`` executable does the real pretty-printing.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from collections.abc import Callable

from .errors import FormatError

logger = logging.getLogger(__name__)

Formatter = Callable[[str], str]

_TRAILING_WHITESPACE = re.compile(r"[ \t]+$", re.MULTILINE)
_BLANK_RUNS = re.compile(r"\n{3,}")

PRETTIER_ARGS = ("--parser", "typescript", "--single-quote", "--tab-width", "2")


def format_source(text: str) -> str:
    """Strip trailing whitespace, collapse blank runs, end with one newline."""
    text = _TRAILING_WHITESPACE.sub("", text)
    text = _BLANK_RUNS.sub("\n\n", text)
    return text.strip("\n") + "\n"


def _run_prettier(executable: str, text: str) -> str:
    try:
        result = subprocess.run(
            [executable, *PRETTIER_ARGS],
            input=text,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise FormatError(f"Cannot run prettier: {e}") from e
    if result.returncode != 0:
        raise FormatError(f"prettier failed: {result.stderr.strip()}")
    return result.stdout


def get_formatter(use_prettier: bool = False) -> Formatter:
    """Return the formatter to apply to every generated file."""
    if not use_prettier:
        return format_source
    executable = shutil.which("prettier")
    if executable is None:
        logger.warning("prettier not found on PATH, using built-in formatting")
        return format_source
    return lambda text: _run_prettier(executable, format_source(text))
