"""Watch loop — feeds filesystem changes to the rebuild orchestrator.

Each watched root (content, layouts, partials) gets two tasks:

- a producer running ``watchfiles.awatch`` that turns raw notifications
  into :class:`ChangeEvent` objects on a bounded queue, and
- a consumer that drains the queue in arrival order and hands each
  changed path to the orchestrator, one at a time.

Roots run concurrently.  A root whose subscription fails stops on its
own; the other roots keep going.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from watchfiles import Change

from kiln import console
from kiln._errors import WatchError

type ChangeHandler = Callable[[Path], Awaitable[object]]

# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified", "deleted"]] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}

# Marks the end of a root's event stream.
_DONE = None


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A file change under one watched root.

    Attributes:
        root: The watched directory the event came from.
        name: Path of the changed file relative to ``root``.
        kind: Type of filesystem change.

    """

    root: Path
    name: Path
    kind: Literal["created", "modified", "deleted"]

    @property
    def path(self) -> Path:
        """Absolute path of the changed file."""
        return self.root / self.name

    @classmethod
    def from_watchfiles(cls, root: Path, change: Change, raw_path: str) -> ChangeEvent:
        path = Path(raw_path)
        try:
            name = path.relative_to(root)
        except ValueError:
            name = Path(path.name)
        return cls(root=root, name=name, kind=_CHANGE_KIND_MAP.get(change, "modified"))


class WatchLoop:
    """Watches several roots and serializes events per root.

    Args:
        roots: Directories to watch recursively.
        handler: Coroutine called with each changed absolute path
            (``RebuildOrchestrator.handle_change``).
        queue_size: Bound on pending events per root.
        debounce: watchfiles debounce window in milliseconds.

    """

    def __init__(
        self,
        roots: Sequence[Path],
        handler: ChangeHandler,
        *,
        queue_size: int = 256,
        debounce: int = 300,
    ) -> None:
        self._roots = tuple(dict.fromkeys(roots))
        self._handler = handler
        self._queue_size = queue_size
        self._debounce = debounce
        self._stop_event = asyncio.Event()
        self._tasks: list[asyncio.Task[None]] = []
        self._errors: dict[Path, WatchError] = {}

    @property
    def roots(self) -> tuple[Path, ...]:
        return self._roots

    @property
    def is_running(self) -> bool:
        """Whether any root is still being watched or drained."""
        return any(not task.done() for task in self._tasks)

    @property
    def errors(self) -> dict[Path, WatchError]:
        """Roots whose watch failed, with the error that stopped them."""
        return dict(self._errors)

    def start(self) -> None:
        """Spawn producer and consumer tasks for every root.

        Must be called from inside a running event loop.
        """
        if self.is_running:
            return
        self._stop_event.clear()
        self._errors.clear()
        for root in self._roots:
            queue: asyncio.Queue[ChangeEvent | None] = asyncio.Queue(maxsize=self._queue_size)
            self._tasks.append(asyncio.create_task(self._produce(root, queue), name=f"kiln-watch:{root}"))
            self._tasks.append(asyncio.create_task(self._consume(queue), name=f"kiln-rebuild:{root}"))

    async def stop(self) -> None:
        """Stop watching and wait for every task to finish."""
        self._stop_event.set()
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()

    async def wait(self) -> None:
        """Block until every root has stopped."""
        await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _produce(self, root: Path, queue: asyncio.Queue[ChangeEvent | None]) -> None:
        # Any failure ends this root only; the consumer still gets _DONE.
        # Cancellation propagates, and stop() cancels the consumer too.
        try:
            await self._watch_root(root, queue)
        except Exception as exc:
            error = WatchError(root, exc)
            self._errors[root] = error
            console.error(str(error))
        await queue.put(_DONE)

    async def _watch_root(self, root: Path, queue: asyncio.Queue[ChangeEvent | None]) -> None:
        from watchfiles import awatch

        if not root.is_dir():
            msg = f"{root} is not a directory"
            raise FileNotFoundError(msg)

        async for raw_changes in awatch(
            root,
            stop_event=self._stop_event,
            debounce=self._debounce,
            step=100,
        ):
            for change, raw_path in sorted(raw_changes, key=lambda c: c[1]):
                if Path(raw_path).is_dir():
                    continue
                await queue.put(ChangeEvent.from_watchfiles(root, change, raw_path))

    async def _consume(self, queue: asyncio.Queue[ChangeEvent | None]) -> None:
        while True:
            event = await queue.get()
            if event is _DONE:
                return
            try:
                await self._handler(event.path)
            except Exception as exc:
                console.error(f"Pipeline error ({event.name}): {exc}")
