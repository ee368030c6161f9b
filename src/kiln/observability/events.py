"""Rebuild event model.

Every rebuild step the orchestrator takes is recorded as a frozen
dataclass carrying a monotonic nanosecond timestamp.

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True)
class DocumentCompiled:
    """A document compiled and its output was written.

    Attributes:
        path: Source document path.
        output: Output file path.
        dependencies: Number of layout/partial dependencies recorded.
        duration_ms: Compile + write time in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    output: str
    dependencies: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class DocumentFailed:
    """A document failed to compile or write; its old output is kept."""

    path: str
    error_type: str
    message: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RebuildCompleted:
    """One change event (or explicit build) finished processing.

    Attributes:
        path: The changed file that triggered the rebuild ("" for builds).
        status: Outcome of the batch.
        succeeded: Number of documents written.
        failed: Number of documents that failed.
        full_rebuild: Whether the fallback full enumeration ran.
        duration_ms: Wall-clock time for the whole batch.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    status: Literal["skipped", "succeeded", "partial", "failed"]
    succeeded: int
    failed: int
    full_rebuild: bool
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ReloadBroadcast:
    """A reload notification went out to connected browsers."""

    path: str
    clients_notified: int
    timestamp_ns: int


type RebuildEvent = DocumentCompiled | DocumentFailed | RebuildCompleted | ReloadBroadcast


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
