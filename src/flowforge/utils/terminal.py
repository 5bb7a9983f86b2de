"""Terminal output helpers for the CLI.

Diagnostics go to stderr, coloured only when stderr is a TTY and
NO_COLOR is not set.
"""

from __future__ import annotations

import os
import sys
from typing import TextIO

RED = "31"
YELLOW = "33"
GREEN = "32"


def use_color(stream: TextIO = sys.stderr) -> bool:
    """True if the given stream is an interactive terminal and NO_COLOR is not set."""
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def colorize(text: str, code: str, enabled: bool) -> str:
    """Wrap text in ANSI color escape if enabled."""
    if not enabled:
        return text
    return f"\033[{code}m{text}\033[0m"


def error(message: str) -> None:
    """Print an 'Error:' line to stderr."""
    print(colorize(f"Error: {message}", RED, use_color(sys.stderr)), file=sys.stderr)


def warning(message: str) -> None:
    """Print a 'Warning:' line to stderr."""
    print(colorize(f"Warning: {message}", YELLOW, use_color(sys.stderr)), file=sys.stderr)


def success(message: str) -> None:
    """Print a status line to stderr."""
    print(colorize(message, GREEN, use_color(sys.stderr)), file=sys.stderr)
