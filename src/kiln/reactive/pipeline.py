"""Rebuild orchestrator — one changed file in, a minimal rebuild out.

Flow for each change:
    1. ChangeDetector filters out saves that left the file byte-identical.
    2. The affected set is the file itself (when it is a content document)
       plus every document the DependencyGraph says includes it.
    3. Affected documents are recompiled and their edges replaced.  When
       nothing is known to depend on the file (cold start, new document,
       an asset) every document is rebuilt instead, and content assets
       are re-copied.
    4. Successful pages are written to the output tree; a failing document
       is reported and its previous output left in place.
    5. If anything succeeded, connected browsers get one reload message.

All rebuild batches run under a single asyncio lock, which is the one
coordination point for graph and digest mutation.  Compilation, hashing
and writes run in worker threads so the event loop keeps serving.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from kiln import console
from kiln._errors import CompileError, KilnError, WriteError
from kiln.content.document import (
    CompiledDocument,
    discover_documents,
    is_content_document,
    output_path_for,
)
from kiln.export.assets import sync_content_assets
from kiln.reactive.digest import ChangeDetector
from kiln.reactive.graph import DependencyGraph

if TYPE_CHECKING:
    from kiln._types import RebuildStatus
    from kiln.config import KilnConfig
    from kiln.observability.collector import RebuildCollector
    from kiln.reactive.broadcaster import LiveReloadChannel


class Compiler(Protocol):
    """Anything that turns a document path into a CompiledDocument."""

    def compile(self, document: Path) -> CompiledDocument: ...


@dataclass(frozen=True, slots=True)
class DocumentFailure:
    """A document that could not be rebuilt, and why."""

    path: Path
    cause: KilnError


@dataclass(frozen=True, slots=True)
class RebuildResult:
    """Outcome of one change event or explicit build.

    Attributes:
        status: ``skipped`` (file unchanged), ``succeeded`` (no failures),
            ``partial`` (some failed), or ``failed`` (every document failed).
        succeeded: Documents compiled and written.
        failures: Documents that failed, with their errors.
        full_rebuild: Whether every document was enumerated.
        clients_notified: Browsers that received a reload message.

    """

    status: RebuildStatus
    succeeded: tuple[Path, ...] = ()
    failures: tuple[DocumentFailure, ...] = ()
    full_rebuild: bool = False
    clients_notified: int = 0

    @classmethod
    def skipped(cls) -> RebuildResult:
        return cls(status="skipped")

    @classmethod
    def from_outcomes(
        cls,
        succeeded: Sequence[Path],
        failures: Sequence[DocumentFailure],
        *,
        full_rebuild: bool,
        clients_notified: int = 0,
    ) -> RebuildResult:
        if not failures:
            status: RebuildStatus = "succeeded"
        elif succeeded:
            status = "partial"
        else:
            status = "failed"
        return cls(
            status=status,
            succeeded=tuple(succeeded),
            failures=tuple(failures),
            full_rebuild=full_rebuild,
            clients_notified=clients_notified,
        )

    @property
    def failed_paths(self) -> tuple[Path, ...]:
        return tuple(f.path for f in self.failures)

    @property
    def ok(self) -> bool:
        """True when nothing failed (skips count as ok)."""
        return not self.failures


def write_output(path: Path, html: str) -> int:
    """Write a rendered page, creating parent directories as needed.

    Returns the number of bytes written.

    Raises:
        WriteError: If the output path is not writable.

    """
    data = html.encode("utf-8")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as exc:
        raise WriteError(path, exc) from exc
    return len(data)


class RebuildOrchestrator:
    """Turns change events into minimal rebuilds.

    Owns the dependency graph (sole writer) and drives the change detector,
    compiler and reload channel it is given.

    Args:
        config: Site configuration (content, output directories).
        compiler: Document compiler.
        graph: Dependency graph; a fresh one if omitted.
        detector: Change detector; a fresh one if omitted.
        channel: Live reload channel, or None when nothing is listening
            (``kiln build``).
        collector: Optional event collector.

    """

    def __init__(
        self,
        config: KilnConfig,
        compiler: Compiler,
        *,
        graph: DependencyGraph | None = None,
        detector: ChangeDetector | None = None,
        channel: LiveReloadChannel | None = None,
        collector: RebuildCollector | None = None,
    ) -> None:
        self._config = config
        self._compiler = compiler
        self._graph = graph if graph is not None else DependencyGraph()
        self._detector = detector if detector is not None else ChangeDetector()
        self._channel = channel
        self._collector = collector
        self._lock = asyncio.Lock()

    @property
    def graph(self) -> DependencyGraph:
        return self._graph

    @property
    def detector(self) -> ChangeDetector:
        return self._detector

    def is_document(self, path: Path) -> bool:
        """Whether ``path`` is a content document by location and suffix."""
        return is_content_document(path, self._config.content_path, self._config.partials_path)

    def output_path(self, document: Path) -> Path:
        return output_path_for(document, self._config.content_path, self._config.output_path)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def handle_change(self, path: Path) -> RebuildResult:
        """Process one changed file.

        Returns ``skipped`` when the file's content is unchanged.  Never
        raises for a document failure; those are reported in the result.

        """
        async with self._lock:
            t0 = time.perf_counter()
            label = self._display(path)
            console.info(f"File changed: {label}")

            if not await self._detector.should_rebuild(path):
                console.info(f"Skipping rebuild for {label}: content unchanged")
                self._record_rebuild(path, RebuildResult.skipped(), t0)
                return RebuildResult.skipped()

            affected = self.affected_documents(path)
            if affected:
                result = await self._rebuild(sorted(affected), trigger=path, full=False)
            else:
                result = await self._full_rebuild(trigger=path)

            self._record_rebuild(path, result, t0)
            self._report(result, t0)
            return result

    async def build(self, documents: Iterable[Path] | None = None) -> RebuildResult:
        """Compile an explicit list of documents, or every document if omitted."""
        async with self._lock:
            t0 = time.perf_counter()
            if documents is None:
                result = await self._full_rebuild(trigger=None)
            else:
                targets = [self._absolute(d) for d in documents]
                result = await self._rebuild(targets, trigger=None, full=False)
            self._record_rebuild(None, result, t0)
            self._report(result, t0)
            return result

    def affected_documents(self, path: Path) -> set[Path]:
        """Documents that must be recompiled because ``path`` changed.

        A content document that no longer exists is dropped from the
        graph, and its stale output removed, instead of being compiled.

        """
        affected = set(self._graph.dependents(path))
        if self.is_document(path):
            if path.is_file():
                affected.add(path)
            else:
                self._forget(path)
        return affected

    # ------------------------------------------------------------------
    # Rebuild steps
    # ------------------------------------------------------------------

    async def _full_rebuild(self, trigger: Path | None) -> RebuildResult:
        documents = discover_documents(self._config.content_path)
        # Documents removed while nobody was watching
        for stale in self._graph.documents() - set(documents):
            self._graph.forget_document(stale)
        if trigger is not None:
            console.info(f"No known dependents; rebuilding all {console.plural(len(documents), 'document')}")
        try:
            copied = await asyncio.to_thread(
                sync_content_assets, self._config.content_path, self._config.output_path,
            )
        except WriteError as exc:
            console.error(f"Asset copy failed: {exc}")
        else:
            if copied:
                console.info(f"Copied {console.plural(len(copied), 'asset')}")
        return await self._rebuild(documents, trigger=trigger, full=True)

    async def _rebuild(
        self,
        documents: Sequence[Path],
        *,
        trigger: Path | None,
        full: bool,
    ) -> RebuildResult:
        succeeded: list[Path] = []
        failures: list[DocumentFailure] = []

        for document in documents:
            try:
                await self._rebuild_one(document)
            except (CompileError, WriteError) as exc:
                failures.append(DocumentFailure(document, exc))
                console.error(f"Failed: {self._display(document)}: {exc.cause}")
                if self._collector is not None:
                    self._collector.record_failed(document, exc)
            else:
                succeeded.append(document)

        clients = 0
        if succeeded and self._channel is not None:
            clients = await self._channel.broadcast()
            if self._collector is not None:
                self._collector.record_broadcast(trigger, clients)

        return RebuildResult.from_outcomes(
            succeeded, failures, full_rebuild=full, clients_notified=clients,
        )

    async def _rebuild_one(self, document: Path) -> Path:
        """Compile, record edges, write.  Returns the output path."""
        t0 = time.perf_counter()
        try:
            compiled = await asyncio.to_thread(self._compiler.compile, document)
            output = self.output_path(document)
        except CompileError:
            raise
        except Exception as exc:
            raise CompileError(document, exc) from exc

        self._graph.record_dependencies(document, compiled.dependency_paths)
        await asyncio.to_thread(write_output, output, compiled.html)

        if self._collector is not None:
            self._collector.record_compiled(
                document,
                output,
                dependencies=len(compiled.dependencies),
                duration_ms=(time.perf_counter() - t0) * 1000,
            )
        return output

    def _forget(self, document: Path) -> None:
        self._graph.forget_document(document)
        try:
            output = self.output_path(document)
        except ValueError:
            return
        output.unlink(missing_ok=True)
        console.info(f"Removed: {self._display(document)}")

    # ------------------------------------------------------------------
    # Reporting helpers
    # ------------------------------------------------------------------

    def _record_rebuild(self, path: Path | None, result: RebuildResult, t0: float) -> None:
        if self._collector is None:
            return
        self._collector.record_rebuild(
            path,
            result.status,
            succeeded=len(result.succeeded),
            failed=len(result.failures),
            full_rebuild=result.full_rebuild,
            duration_ms=(time.perf_counter() - t0) * 1000,
        )

    def _report(self, result: RebuildResult, t0: float) -> None:
        ms = (time.perf_counter() - t0) * 1000
        built = console.plural(len(result.succeeded), "document")
        if result.status == "succeeded":
            console.success(f"Rebuilt {built} in {ms:.0f}ms")
        elif result.status == "partial":
            console.warn(f"Rebuilt {built}, {len(result.failures)} failed ({ms:.0f}ms)")
        elif result.status == "failed":
            console.error(f"Rebuild failed: {console.plural(len(result.failures), 'document')}")

    def _display(self, path: Path) -> str:
        try:
            return str(path.relative_to(self._config.root))
        except ValueError:
            return str(path)

    def _absolute(self, path: Path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self._config.root / path
