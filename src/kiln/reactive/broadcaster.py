"""Live reload channel — pushes refresh notifications to connected browsers.

Each open browser tab holds one SSE connection.  After a successful
rebuild the orchestrator broadcasts a single message; every connected
client receives it once.  Nothing is queued for clients that connect
later.
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

RELOAD_MESSAGE = "reload"

# Per-client backlog.  A browser that stops draining its stream is dropped
# once this many notifications are pending.
CLIENT_QUEUE_SIZE = 16


@dataclass(frozen=True, slots=True)
class ReloadClient:
    """A connected browser.

    Attributes:
        client_id: Unique identifier for this connection.
        queue: Pending messages for the client's SSE generator.

    """

    client_id: str
    queue: asyncio.Queue[str] = field(
        default_factory=lambda: asyncio.Queue(maxsize=CLIENT_QUEUE_SIZE),
        compare=False,
        hash=False,
    )


class LiveReloadChannel:
    """The set of connected clients, addressed only by broadcast.

    Clients are added by the SSE endpoint on connect and removed when the
    stream closes.  A client that cannot accept a message is dropped
    without affecting delivery to the others.

    Thread-safe: client set protected by a lock.

    """

    def __init__(self) -> None:
        self._clients: set[ReloadClient] = set()
        self._lock = threading.Lock()

    @property
    def client_count(self) -> int:
        with self._lock:
            return len(self._clients)

    def clients(self) -> frozenset[ReloadClient]:
        """Snapshot of connected clients (no lock held on return)."""
        with self._lock:
            return frozenset(self._clients)

    def register(self, client: ReloadClient) -> None:
        with self._lock:
            self._clients.add(client)

    def unregister(self, client: ReloadClient) -> None:
        """Remove a client.  Unknown clients are ignored."""
        with self._lock:
            self._clients.discard(client)

    async def broadcast(self, message: str = RELOAD_MESSAGE) -> int:
        """Send ``message`` to every connected client.

        Returns:
            Number of clients that received the message.

        """
        delivered = 0
        for client in self.clients():
            try:
                client.queue.put_nowait(message)
            except asyncio.QueueFull:
                self.unregister(client)
                continue
            delivered += 1
        return delivered

    async def client_generator(self, client: ReloadClient) -> AsyncIterator[str]:
        """Yield messages for one client until it disconnects.

        Swallows ``CancelledError`` / ``GeneratorExit`` raised when the
        browser goes away so disconnects do not surface as loop errors.

        """
        try:
            while True:
                yield await client.queue.get()
        except (asyncio.CancelledError, GeneratorExit):
            return
