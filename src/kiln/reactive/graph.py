"""Dependency graph — which documents include which layouts and partials.

Two views of the same relation are kept side by side:

    forward:  document -> {layout, partials...}
    reverse:  resource -> {documents...}

A pair ``(d, r)`` is in ``forward[d]`` exactly when ``d`` is in
``reverse[r]``.  Both views change together under one lock, so a reader
never sees one updated without the other.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from pathlib import Path


class DependencyGraph:
    """Bidirectional document/resource dependency graph.

    A document's edges are replaced wholesale on every successful compile
    (never patched), so a partial removed from a document disappears from
    that partial's dependents.  Empty reverse entries are pruned.

    Thread-safe: both mappings are protected by a single lock.

    """

    def __init__(self) -> None:
        self._forward: dict[Path, frozenset[Path]] = {}
        self._reverse: dict[Path, set[Path]] = {}
        self._lock = threading.Lock()

    def record_dependencies(self, document: Path, resources: Iterable[Path]) -> None:
        """Replace every edge of ``document`` with ``document -> r`` for each resource."""
        fresh = frozenset(resources)
        with self._lock:
            self._unlink(document)
            self._forward[document] = fresh
            for resource in fresh:
                self._reverse.setdefault(resource, set()).add(document)

    def forget_document(self, document: Path) -> None:
        """Remove ``document`` from both mappings (used when it is deleted)."""
        with self._lock:
            self._unlink(document)

    def dependents(self, resource: Path) -> frozenset[Path]:
        """Documents that currently depend on ``resource``; empty if unknown."""
        with self._lock:
            return frozenset(self._reverse.get(resource, ()))

    def dependencies(self, document: Path) -> frozenset[Path]:
        """Resources ``document`` depended on at its last successful compile."""
        with self._lock:
            return self._forward.get(document, frozenset())

    def documents(self) -> frozenset[Path]:
        """Every document with recorded dependencies."""
        with self._lock:
            return frozenset(self._forward)

    def resources(self) -> frozenset[Path]:
        """Every resource at least one document depends on."""
        with self._lock:
            return frozenset(self._reverse)

    def clear(self) -> None:
        with self._lock:
            self._forward.clear()
            self._reverse.clear()

    def __contains__(self, document: object) -> bool:
        with self._lock:
            return document in self._forward

    def __len__(self) -> int:
        with self._lock:
            return len(self._forward)

    def _unlink(self, document: Path) -> None:
        """Drop the document's forward entry and its reverse memberships.

        Caller must hold the lock.
        """
        for resource in self._forward.pop(document, frozenset()):
            dependents = self._reverse.get(resource)
            if dependents is None:
                continue
            dependents.discard(document)
            if not dependents:
                del self._reverse[resource]
