"""Utility functions for CLI module."""

import json
import logging
import os
import platform
import sys
from typing import Any

from rich.console import Console

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_console(stderr: bool = False) -> Console:
    """Create Rich console with proper encoding for Windows.

    On Windows in non-interactive mode (subprocess, pipe, etc.), the default
    encoding is often CP1252 which cannot handle Unicode characters. This
    function detects such cases and forces UTF-8 encoding when possible.

    Args:
        stderr: Write to stderr instead of stdout

    Returns:
        Console: Configured Rich console instance
    """
    if platform.system() == "Windows" and not sys.stdout.isatty():
        try:
            import locale

            encoding = locale.getpreferredencoding() or ""
            if "utf" not in encoding.lower():
                os.environ["PYTHONIOENCODING"] = "utf-8"
                return Console(stderr=stderr, force_terminal=True, legacy_windows=False)
            return Console(stderr=stderr)
        except Exception:
            # Fallback to safe ASCII mode if encoding detection fails
            return Console(stderr=stderr, legacy_windows=True, safe_box=True)
    return Console(stderr=stderr)


def setup_logging(log_level: str) -> None:
    """Send log records to stderr.

    stdout is reserved for the stdio transport and for tool output.

    Args:
        log_level: Level name such as "INFO" or "DEBUG"
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,  # Reconfigure if already configured
    )


def parse_tool_arguments(raw_json: str | None, pairs: list[str] | None) -> dict[str, Any]:
    """Build a tool argument record from CLI input.

    ``raw_json`` is a JSON object. Each ``key=value`` pair is added on top;
    values are decoded as JSON when possible (``true``, ``3``) and kept as
    plain strings otherwise.

    Raises:
        ValueError: If the JSON is not an object or a pair has no ``=``
    """
    arguments: dict[str, Any] = {}
    if raw_json:
        decoded = json.loads(raw_json)
        if not isinstance(decoded, dict):
            raise ValueError("Arguments must be a JSON object")
        arguments.update(decoded)

    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got: {pair}")
        try:
            arguments[key] = json.loads(value)
        except json.JSONDecodeError:
            arguments[key] = value
    return arguments
