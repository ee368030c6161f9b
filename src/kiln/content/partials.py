"""Partial expansion — inline ``{{> name }}`` references.

Partials live in the partials tree as ``<name>.md`` and are spliced into
the document body before markdown conversion.  A partial may itself
reference partials.  Every reference is reported as a dependency, found or
not, so the caller can rebuild the document once a missing partial
appears.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from kiln import console
from kiln._errors import ReadError
from kiln.content.document import DOCUMENT_SUFFIX, Dependency, read_text

PARTIAL_PATTERN = re.compile(r"\{\{>\s*([\w/.-]+)\s*\}\}")


def partial_path(partials_root: Path, name: str) -> Path:
    """Absolute path of the partial called ``name``.

    ``..`` segments are collapsed so the path matches what the watcher
    reports for the same file.

    """
    return Path(os.path.normpath(partials_root / f"{name}{DOCUMENT_SUFFIX}"))


def missing_marker(name: str) -> str:
    return f"<!-- Missing partial: {name} -->"


def expand_partials(
    text: str,
    partials_root: Path,
    *,
    _stack: tuple[str, ...] = (),
) -> tuple[str, list[Dependency]]:
    """Replace every partial reference in ``text``.

    Returns the expanded text and the partial dependencies in the order
    they were referenced (duplicates included; the compiler dedupes).

    A partial that includes itself, directly or through others, is cut
    off with a comment instead of recursing.

    """
    dependencies: list[Dependency] = []

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        path = partial_path(partials_root, name)
        if name in _stack:
            dependencies.append(Dependency(path, "partial", resolved=True))
            return f"<!-- Recursive partial: {name} -->"
        try:
            fragment = read_text(path)
        except ReadError:
            console.warn(f"Partial '{name}' not found at {path}")
            dependencies.append(Dependency(path, "partial", resolved=False))
            return missing_marker(name)

        dependencies.append(Dependency(path, "partial", resolved=True))
        expanded, nested = expand_partials(fragment, partials_root, _stack=(*_stack, name))
        dependencies.extend(nested)
        return expanded

    return PARTIAL_PATTERN.sub(_replace, text), dependencies
