"""Event log — bounded, thread-safe store of rebuild events.

Thread Safety:
    All methods are protected by a ``threading.Lock``.

"""

import threading
from collections import Counter, deque
from typing import Any

from kiln.observability.events import RebuildEvent


class EventLog:
    """Ring buffer of rebuild events with simple queries.

    When the buffer is full the oldest events are discarded.

    Args:
        max_events: Maximum number of events to retain.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 5_000) -> None:
        self._max_events = max_events
        self._events: deque[RebuildEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: RebuildEvent) -> None:
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        path: str | None = None,
        limit: int = 100,
    ) -> list[RebuildEvent]:
        """Return matching events, most recent first.

        ``path`` is a substring match against the event's source path.
        """
        with self._lock:
            snapshot = list(self._events)

        results: list[RebuildEvent] = []
        for event in reversed(snapshot):
            if len(results) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if path is not None and path not in event.path:
                continue
            results.append(event)
        return results

    def recent(self, n: int = 20) -> list[RebuildEvent]:
        """Return the N most recent events, oldest first."""
        with self._lock:
            items = list(self._events)
        return items[-n:]

    def clear(self) -> int:
        """Clear all events and return the count that was cleared."""
        with self._lock:
            count = len(self._events)
            self._events.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Summary counts, as served by the dev stats endpoint."""
        with self._lock:
            events = list(self._events)
        by_type = Counter(type(event).__name__ for event in events)
        return {
            "total": len(events),
            "max_events": self._max_events,
            "by_type": dict(by_type),
        }
