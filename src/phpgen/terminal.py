"""Terminal color helpers for compiler diagnostics.

ANSI colors with TTY detection, honoring NO_COLOR and FORCE_COLOR.
Used when formatting reported errors and CompilationFailedError summaries.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_blue": "\033[94m",
}

ColorName = Literal[
    "reset", "bold", "dim", "red", "yellow", "cyan",
    "bright_red", "bright_green", "bright_blue",
]

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    """Check if the terminal supports colors and the user allows them.

    Respects:
        - FORCE_COLOR (overrides NO_COLOR)
        - NO_COLOR (https://no-color.org/)
        - sys.stderr.isatty(), since diagnostics go to stderr
    """
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stderr.isatty()


_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    """Return True if colored diagnostics are enabled."""
    return _USE_COLORS


def colorize(text: str, *colors: ColorName) -> str:
    """Apply ANSI color codes to text.

    Example:
        >>> colorize("Error", "red", "bold")
        '\033[31m\033[1mError\033[0m'  # if colors supported
        'Error'  # if colors not supported
    """
    if not _USE_COLORS or not colors:
        return text
    prefix = "".join(_COLORS.get(color, "") for color in colors)
    if not prefix:
        return text
    return f"{prefix}{text}{_COLORS['reset']}"


def strip_colors(text: str) -> str:
    """Remove ANSI color codes from text."""
    return _ANSI_ESCAPE.sub("", text)


def error_code(text: str) -> str:
    """Color text as an error code (bright red + bold)."""
    return colorize(text, "bright_red", "bold")


def location(text: str) -> str:
    """Color text as a source location (cyan)."""
    return colorize(text, "cyan")


def hint(text: str) -> str:
    """Color text as a hint (green)."""
    return colorize(text, "bright_green")


def docs_url(text: str) -> str:
    """Color text as a documentation URL (bright blue)."""
    return colorize(text, "bright_blue")


def format_error_header(code: str | None, message: str) -> str:
    """Format an error header with an optional code.

    Example:
        >>> format_error_header("P-PLG-001", "Unknown function 'foo'")
        '\033[91m\033[1mP-PLG-001\033[0m: Unknown function 'foo''
    """
    if code:
        return f"{error_code(code)}: {message}"
    return message
