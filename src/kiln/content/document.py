"""Content documents — discovery, front matter, and output mapping.

A content document is a ``.md`` file inside the content tree that does not
live under an ``_``-prefixed directory.  Each document compiles to exactly
one ``index.html``:

    content/index.md            -> dist/index.html
    content/about.md            -> dist/about/index.html
    content/docs/intro.md       -> dist/docs/intro/index.html

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

import yaml

from kiln._errors import ReadError

DOCUMENT_SUFFIX = ".md"
ROOT_INDEX = "index.md"
_EXCLUDED_PREFIX = "_"


@dataclass(frozen=True, slots=True)
class Dependency:
    """A file consumed while compiling a document.

    Attributes:
        path: Absolute path of the layout or partial.
        kind: Which processing stage consumed it.
        resolved: False when the file did not exist at compile time.
            Unresolved files are still dependencies, so creating them
            later rebuilds the document.

    """

    path: Path
    kind: Literal["layout", "partial"]
    resolved: bool = True


@dataclass(frozen=True, slots=True)
class CompiledDocument:
    """Result of compiling one content document.

    Attributes:
        source: Absolute path of the content document.
        html: Fully rendered page.
        dependencies: Layout and partials consumed, first-seen order, unique.

    """

    source: Path
    html: str
    dependencies: tuple[Dependency, ...]

    @property
    def dependency_paths(self) -> tuple[Path, ...]:
        """Dependency paths only, in recorded order."""
        return tuple(dep.path for dep in self.dependencies)

    @property
    def missing(self) -> tuple[Path, ...]:
        """Dependencies that were referenced but not found."""
        return tuple(dep.path for dep in self.dependencies if not dep.resolved)


def read_text(path: Path) -> str:
    """Read a UTF-8 source file.

    Raises:
        ReadError: If the file is missing, unreadable or not UTF-8.

    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadError(path, exc) from exc


def split_front_matter(source: str) -> tuple[dict[str, Any], str]:
    """Split a ``---`` fenced YAML block off the start of a document.

    Returns ``(metadata, body)``.  Sources without a complete fence come
    back unchanged with empty metadata.

    Raises:
        yaml.YAMLError: If the fenced block is not valid YAML.
        ValueError: If the block parses to something other than a mapping.

    """
    first_line, _, _ = source.partition("\n")
    if first_line.rstrip() != "---":
        return {}, source
    end = source.find("\n---", 3)
    if end == -1:
        return {}, source

    block = source[len(first_line) + 1 : end]
    # Skip the rest of the closing fence line
    _, _, body = source[end + 4 :].partition("\n")

    data = yaml.safe_load(block)
    if data is None:
        return {}, body
    if not isinstance(data, dict):
        msg = f"front matter must be a mapping, got {type(data).__name__}"
        raise ValueError(msg)
    return data, body


def is_content_document(path: Path, content_root: Path, partials_root: Path | None = None) -> bool:
    """Whether ``path`` names a content document by location and suffix."""
    if path.suffix != DOCUMENT_SUFFIX:
        return False
    try:
        rel = path.relative_to(content_root)
    except ValueError:
        return False
    if partials_root is not None and path.is_relative_to(partials_root):
        return False
    return not any(part.startswith(_EXCLUDED_PREFIX) for part in rel.parts[:-1])


def discover_documents(content_root: Path) -> list[Path]:
    """Enumerate every content document, skipping ``_``-prefixed directories.

    Returns absolute paths in a stable (sorted) order.  A missing content
    directory yields an empty list.

    """
    if not content_root.is_dir():
        return []
    return list(_walk(content_root))


def _walk(directory: Path) -> Iterator[Path]:
    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            if not entry.name.startswith(_EXCLUDED_PREFIX):
                yield from _walk(entry)
        elif entry.suffix == DOCUMENT_SUFFIX:
            yield entry


def output_path_for(document: Path, content_root: Path, output_root: Path) -> Path:
    """Map a document to its ``index.html`` in the output tree.

    Only the content root's own ``index.md`` maps to the output root
    index; every other document becomes a directory of the same name.

    Raises:
        ValueError: If the document is outside the content tree.

    """
    rel = document.relative_to(content_root)
    if rel == Path(ROOT_INDEX):
        return output_root / "index.html"
    return output_root / rel.with_suffix("") / "index.html"
