"""Shared test fixtures for kiln."""

from __future__ import annotations

from pathlib import Path

import pytest

from kiln.config import KilnConfig

DEFAULT_LAYOUT = (
    "<!DOCTYPE html>\n<html>\n<head><title>{{ title }}</title></head>\n"
    "<body>{{ content }}</body>\n</html>\n"
)


@pytest.fixture
def tmp_site(tmp_path: Path) -> Path:
    """Create a minimal site structure for testing.

    Returns the site root with content/, layouts/, content/_partials/ and
    public/.  ``docs/page.md`` includes the ``nav`` partial; the root
    ``index.md`` includes nothing.
    """
    content = tmp_path / "content"
    content.mkdir()
    (content / "index.md").write_text(
        "---\ntitle: Home\n---\n\n# Welcome\n\nThis is the home page.\n"
    )

    docs = content / "docs"
    docs.mkdir()
    (docs / "page.md").write_text(
        "---\ntitle: Docs Page\n---\n\n{{> nav }}\n\n# Docs\n\nHello world.\n"
    )

    partials = content / "_partials"
    partials.mkdir()
    (partials / "nav.md").write_text("[Home](/)\n")
    (partials / "async.md").write_text("")

    layouts = tmp_path / "layouts"
    layouts.mkdir()
    (layouts / "default.html").write_text(DEFAULT_LAYOUT)

    public = tmp_path / "public"
    public.mkdir()
    (public / "style.css").write_text("body { margin: 0; }\n")

    return tmp_path


@pytest.fixture
def config(tmp_site: Path) -> KilnConfig:
    """A KilnConfig rooted at the tmp_site fixture."""
    return KilnConfig(root=tmp_site)
