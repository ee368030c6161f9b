"""Change detector — content digests that filter out no-op saves.

Editors and watchers report far more events than real edits (touch,
atomic-rename saves, duplicate notifications from overlapping roots).
Each event's file is hashed and compared with the last digest seen for
that path; only a different digest lets the rebuild proceed.
"""

from __future__ import annotations

import asyncio
import hashlib
import threading
from collections.abc import Iterable
from pathlib import Path

# Digest recorded for a file that cannot be read.  Never equal to a real
# SHA-1 hex digest, so a deleted file always reads as changed.
EMPTY_DIGEST = ""


def compute_digest(path: Path) -> str:
    """SHA-1 hex digest of a file's bytes, or ``EMPTY_DIGEST`` if unreadable."""
    try:
        data = path.read_bytes()
    except OSError:
        return EMPTY_DIGEST
    return hashlib.sha1(data).hexdigest()


class ChangeDetector:
    """Owns the digest record: ``path -> digest``.

    The record is mutated only when a change is detected, so repeated
    calls for an unchanged file are no-ops beyond the read.  Entries are
    never deleted; a stale entry for a removed file simply never matches.

    Thread-safe: the digest map is protected by a lock.

    """

    def __init__(self) -> None:
        self._digests: dict[Path, str] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._digests)

    def digest_of(self, path: Path) -> str | None:
        """The recorded digest for ``path``, or None if never observed."""
        with self._lock:
            return self._digests.get(path)

    async def should_rebuild(self, path: Path) -> bool:
        """Return True and record the new digest if ``path`` changed.

        A file with no recorded digest counts as changed.  Hashing runs in
        a worker thread so large files do not stall the event loop.

        """
        digest = await asyncio.to_thread(compute_digest, path)
        with self._lock:
            if self._digests.get(path) == digest:
                return False
            self._digests[path] = digest
            return True

    async def prime(self, paths: Iterable[Path]) -> int:
        """Record the current digest of every path without reporting changes.

        Called once after the initial build so a later save that leaves a
        file byte-identical is skipped.  Returns the number of paths recorded.

        """
        paths = list(paths)
        digests = await asyncio.to_thread(lambda: [compute_digest(p) for p in paths])
        with self._lock:
            self._digests.update(zip(paths, digests, strict=True))
        return len(paths)
