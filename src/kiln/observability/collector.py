"""Rebuild collector — the orchestrator's reporting surface.

Wraps an :class:`EventLog` with one ``record_*`` method per event type so
callers never build event objects themselves.

"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from kiln.observability.events import (
    DocumentCompiled,
    DocumentFailed,
    RebuildCompleted,
    ReloadBroadcast,
    now_ns,
)
from kiln.observability.log import EventLog


class RebuildCollector:
    """Records rebuild events into an event log.

    Args:
        log: The EventLog to store events in (a fresh one if omitted).

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_compiled(
        self,
        path: Path,
        output: Path,
        *,
        dependencies: int,
        duration_ms: float,
    ) -> None:
        self._log.append(
            DocumentCompiled(
                path=str(path),
                output=str(output),
                dependencies=dependencies,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_failed(self, path: Path, exc: BaseException) -> None:
        cause = getattr(exc, "cause", None) or exc
        self._log.append(
            DocumentFailed(
                path=str(path),
                error_type=type(cause).__name__,
                message=str(cause),
                timestamp_ns=now_ns(),
            )
        )

    def record_rebuild(
        self,
        path: Path | None,
        status: Any,
        *,
        succeeded: int,
        failed: int,
        full_rebuild: bool,
        duration_ms: float,
    ) -> None:
        self._log.append(
            RebuildCompleted(
                path=str(path) if path is not None else "",
                status=status,
                succeeded=succeeded,
                failed=failed,
                full_rebuild=full_rebuild,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_broadcast(self, path: Path | None, clients_notified: int) -> None:
        self._log.append(
            ReloadBroadcast(
                path=str(path) if path is not None else "",
                clients_notified=clients_notified,
                timestamp_ns=now_ns(),
            )
        )

    def summary(self) -> dict[str, Any]:
        """Aggregate counts for the stats endpoint."""
        rebuilds = self._log.query(event_type=RebuildCompleted, limit=len(self._log))
        durations = [e.duration_ms for e in rebuilds if e.status != "skipped"]  # type: ignore[union-attr]
        return {
            "event_log": self._log.stats(),
            "rebuilds": len(rebuilds),
            "full_rebuilds": sum(1 for e in rebuilds if e.full_rebuild),  # type: ignore[union-attr]
            "avg_rebuild_ms": round(sum(durations) / len(durations), 2) if durations else 0.0,
        }
