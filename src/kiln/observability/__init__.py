"""Rebuild observability — what the dev loop compiled, skipped and broadcast.

Quick Start:
    >>> from kiln.observability import EventLog, RebuildCollector
    >>> collector = RebuildCollector(EventLog())
    >>> # Pass to RebuildOrchestrator(collector=collector)

"""

from kiln.observability.collector import RebuildCollector
from kiln.observability.events import (
    DocumentCompiled,
    DocumentFailed,
    RebuildCompleted,
    RebuildEvent,
    ReloadBroadcast,
    now_ns,
)
from kiln.observability.log import EventLog

__all__ = [
    "DocumentCompiled",
    "DocumentFailed",
    "EventLog",
    "RebuildCollector",
    "RebuildCompleted",
    "RebuildEvent",
    "ReloadBroadcast",
    "now_ns",
]
