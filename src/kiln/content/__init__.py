"""Content layer — documents, partials, compilation and file watching.

Turns markdown sources into pages, and filesystem notifications into
change events for the rebuild orchestrator.
"""

from kiln.content.document import CompiledDocument, Dependency, discover_documents
from kiln.content.compiler import DocumentCompiler
from kiln.content.watcher import ChangeEvent, WatchLoop
from kiln.content.router import OutputRouter

__all__ = [
    "ChangeEvent",
    "CompiledDocument",
    "Dependency",
    "DocumentCompiler",
    "OutputRouter",
    "WatchLoop",
    "discover_documents",
]
