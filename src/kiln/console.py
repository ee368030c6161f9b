"""Console status lines — coloured, timestamped output on stderr.

Every pipeline message goes through here so the dev loop reads as one
stream.  Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
import time


def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

RESET = "\033[0m" if _COLOR else ""
BOLD = "\033[1m" if _COLOR else ""
DIM = "\033[2m" if _COLOR else ""
CYAN = "\033[36m" if _COLOR else ""
GREEN = "\033[32m" if _COLOR else ""
RED = "\033[31m" if _COLOR else ""
YELLOW = "\033[33m" if _COLOR else ""
ORANGE = "\033[38;5;214m" if _COLOR else ""


def _emit(color: str, message: str) -> None:
    stamp = time.strftime("%H:%M:%S")
    print(f"{DIM}[kiln {stamp}]{RESET} {color}{message}{RESET}", file=sys.stderr)


def info(message: str) -> None:
    _emit(CYAN, message)


def success(message: str) -> None:
    _emit(GREEN, message)


def warn(message: str) -> None:
    _emit(YELLOW, message)


def error(message: str) -> None:
    _emit(RED, message)


def plural(count: int, word: str) -> str:
    """``1 document`` / ``3 documents``."""
    return f"{count} {word}" if count == 1 else f"{count} {word}s"
