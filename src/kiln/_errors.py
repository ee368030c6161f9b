"""Kiln error hierarchy.

All kiln-specific errors inherit from KilnError for easy catching.
"""

from pathlib import Path


class KilnError(Exception):
    """Base error for all kiln operations."""


class ConfigError(KilnError):
    """Invalid or missing configuration."""


class ReadError(KilnError):
    """A source file is missing or unreadable."""

    def __init__(self, path: Path, cause: BaseException | None = None) -> None:
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Cannot read {path}{detail}")


class CompileError(KilnError):
    """A document failed to compile (layout, template or markdown failure).

    Attributes:
        path: The content document being compiled.
        cause: The underlying exception.

    """

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to compile {path}: {cause}")


class WriteError(KilnError):
    """An output file could not be written."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot write {path}: {cause}")


class WatchError(KilnError):
    """Subscribing to filesystem changes under a root failed."""

    def __init__(self, root: Path, cause: BaseException) -> None:
        self.root = root
        self.cause = cause
        super().__init__(f"Cannot watch {root}: {cause}")
