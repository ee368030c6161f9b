"""Document compiler — markdown + layout into one HTML page.

Per document:
    1. Read the source (an unreadable document compiles as empty).
    2. Split YAML front matter from the body.
    3. Expand ``{{> partial }}`` references.
    4. Render the body as a Kida template (front matter, ``assets``,
       ``base_url``), then convert it to HTML with Patitas.
    5. Render the layout named by ``layout:`` (or the default) with Kida.

The compiler reports every file it consumed.  That list is what the
dependency graph records, so it includes partials that were referenced but
missing, templates the layout extends or includes, and the sitewide shared
partial every page depends on.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from kida import Environment, FileSystemLoader
from patitas import Markdown

from kiln import console
from kiln._errors import CompileError, ReadError
from kiln.config import KilnConfig
from kiln.content.document import (
    CompiledDocument,
    Dependency,
    read_text,
    split_front_matter,
)
from kiln.content.partials import expand_partials, partial_path

LAYOUT_SUFFIX = ".html"

# {% extends "base.html" %}, {% include 'nav.html' %}, {% from "m.html" import x %}
TEMPLATE_REFERENCE = re.compile(
    r"""\{%-?\s*(?:extends|include|import|from)\s+["']([^"']+)["']"""
)


class DocumentCompiler:
    """Compiles content documents for one site.

    Holds a single Kida environment rooted at the layouts directory.
    ``auto_reload`` is on, so an edited layout is picked up on the next
    compile without rebuilding the environment.

    Args:
        config: Site configuration (directories, default layout, base URL).

    """

    def __init__(self, config: KilnConfig) -> None:
        self._config = config
        self._markdown = Markdown(plugins=["table"])
        self._env = Environment(
            loader=FileSystemLoader([config.layouts_path]),
            autoescape=False,
            auto_reload=True,
        )

    @property
    def config(self) -> KilnConfig:
        return self._config

    def layout_path(self, name: str) -> Path:
        """Absolute path of the layout called ``name``."""
        return Path(os.path.normpath(self._config.layouts_path / f"{name}{LAYOUT_SUFFIX}"))

    def layout_references(self, layout: Path) -> list[Dependency]:
        """Templates a layout pulls in through extends, include or import.

        Followed transitively.  Names resolve against the layouts
        directory, as the Kida loader does.

        """
        root = self._config.layouts_path
        found: list[Dependency] = []
        seen = {layout}
        pending = [layout]
        while pending:
            try:
                source = read_text(pending.pop())
            except ReadError:
                continue
            for name in TEMPLATE_REFERENCE.findall(source):
                path = Path(os.path.normpath(root / name))
                if path in seen:
                    continue
                seen.add(path)
                found.append(Dependency(path, "layout", resolved=path.is_file()))
                pending.append(path)
        return found

    def compile(self, document: Path) -> CompiledDocument:
        """Compile one document.

        Raises:
            CompileError: Front matter, markdown or layout failure.  A
                missing layout is reported with a ``ReadError`` cause.

        """
        try:
            source = read_text(document)
        except ReadError as exc:
            console.warn(f"{exc}; compiling as empty")
            source = ""

        try:
            metadata, body = split_front_matter(source)
        except (yaml.YAMLError, ValueError) as exc:
            raise CompileError(document, exc) from exc

        expanded, partial_deps = expand_partials(body, self._config.partials_path)

        layout_name = str(metadata.get("layout") or self._config.default_layout)
        layout = self.layout_path(layout_name)
        shared = partial_path(self._config.partials_path, self._config.shared_partial)
        dependencies = _unique([
            Dependency(layout, "layout", resolved=layout.is_file()),
            *self.layout_references(layout),
            *partial_deps,
            Dependency(shared, "partial", resolved=shared.is_file()),
        ])

        if not layout.is_file():
            raise CompileError(document, ReadError(layout))

        context = self._build_context(document, metadata)
        try:
            rendered = self._env.from_string(expanded).render(**context)
            content = self._markdown(rendered)
        except Exception as exc:
            raise CompileError(document, exc) from exc

        try:
            template = self._env.get_template(f"{layout_name}{LAYOUT_SUFFIX}")
            html = template.render(**context, content=content)
        except Exception as exc:
            raise CompileError(document, exc) from exc

        return CompiledDocument(source=document, html=html, dependencies=dependencies)

    def _build_context(
        self,
        document: Path,
        metadata: dict[str, Any],
    ) -> dict[str, Any]:
        """Template context shared by the body and the layout.

        Front matter keys come first, so ``page``, ``assets`` and
        ``base_url`` cannot be shadowed by a document.  The layout also
        receives ``content``.

        ``assets`` is the URL of the ``assets`` directory beside the
        document, where its images and stylesheets are copied on build.

        """
        try:
            section = document.parent.relative_to(self._config.content_path)
        except ValueError:
            section = document.parent
        assets = f"{self._config.base_url.rstrip('/')}/{(section / 'assets').as_posix().lstrip('/')}"
        context = {k: v for k, v in metadata.items() if k != "content"}
        context.update(page=metadata, assets=assets, base_url=self._config.base_url)
        return context


def _unique(dependencies: Iterable[Dependency]) -> tuple[Dependency, ...]:
    """Drop repeated paths, keeping the first occurrence."""
    seen: set[Path] = set()
    result: list[Dependency] = []
    for dep in dependencies:
        if dep.path in seen:
            continue
        seen.add(dep.path)
        result.append(dep)
    return tuple(result)
