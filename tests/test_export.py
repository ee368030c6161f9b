"""Tests for kiln.export — public asset sync and output cleaning."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from kiln._errors import ConfigError
from kiln.export import clean_output, sync_content_assets, sync_public


class TestSyncPublic:
    """sync_public() — mirror public/ into <output>/public/."""

    def test_copies_tree(self, tmp_path: Path) -> None:
        public = tmp_path / "public"
        (public / "img").mkdir(parents=True)
        (public / "style.css").write_text("body {}")
        (public / "img" / "logo.svg").write_text("<svg/>")
        out = tmp_path / "dist"

        copied = sync_public(public, out)

        assert set(copied) == {out / "public" / "style.css", out / "public" / "img" / "logo.svg"}
        assert (out / "public" / "style.css").read_text() == "body {}"

    def test_missing_public_is_noop(self, tmp_path: Path) -> None:
        assert sync_public(tmp_path / "public", tmp_path / "dist") == ()

    def test_hidden_files_skipped(self, tmp_path: Path) -> None:
        public = tmp_path / "public"
        public.mkdir()
        (public / ".DS_Store").write_text("")
        assert sync_public(public, tmp_path / "dist") == ()

    def test_unchanged_files_not_recopied(self, tmp_path: Path) -> None:
        public = tmp_path / "public"
        public.mkdir()
        (public / "a.css").write_text("a")
        out = tmp_path / "dist"
        sync_public(public, out)

        assert sync_public(public, out) == ()

    def test_newer_source_recopied(self, tmp_path: Path) -> None:
        public = tmp_path / "public"
        public.mkdir()
        src = public / "a.css"
        src.write_text("a")
        out = tmp_path / "dist"
        sync_public(public, out)

        src.write_text("b")
        stat = src.stat()
        os.utime(src, (stat.st_atime, stat.st_mtime + 10))

        assert sync_public(public, out) == (out / "public" / "a.css",)
        assert (out / "public" / "a.css").read_text() == "b"


class TestCleanOutput:
    def test_removes_directory(self, tmp_path: Path) -> None:
        out = tmp_path / "dist"
        (out / "a").mkdir(parents=True)
        (out / "a" / "index.html").write_text("x")

        assert clean_output(out, tmp_path) is True
        assert not out.exists()

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert clean_output(tmp_path / "dist", tmp_path) is False

    def test_refuses_site_root(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            clean_output(tmp_path, tmp_path)

    def test_refuses_ancestor_of_site_root(self, tmp_path: Path) -> None:
        site = tmp_path / "site"
        site.mkdir()
        with pytest.raises(ConfigError):
            clean_output(tmp_path, site)


class TestSyncContentAssets:
    """sync_content_assets() — images, styles and scripts beside documents."""

    def test_copies_to_matching_output_location(self, tmp_path: Path) -> None:
        content = tmp_path / "content"
        (content / "docs" / "assets").mkdir(parents=True)
        (content / "docs" / "assets" / "logo.png").write_bytes(b"\x89PNG")
        (content / "site.css").write_text("h1 {}")
        out = tmp_path / "dist"

        copied = sync_content_assets(content, out)

        assert set(copied) == {out / "docs" / "assets" / "logo.png", out / "site.css"}
        assert (out / "docs" / "assets" / "logo.png").read_bytes() == b"\x89PNG"

    def test_documents_and_other_files_ignored(self, tmp_path: Path) -> None:
        content = tmp_path / "content"
        content.mkdir()
        (content / "index.md").write_text("# Hi")
        (content / "notes.txt").write_text("x")
        assert sync_content_assets(content, tmp_path / "dist") == ()

    def test_underscore_directories_skipped(self, tmp_path: Path) -> None:
        content = tmp_path / "content"
        (content / "_partials").mkdir(parents=True)
        (content / "_partials" / "icon.svg").write_text("<svg/>")
        assert sync_content_assets(content, tmp_path / "dist") == ()

    def test_suffix_case_insensitive(self, tmp_path: Path) -> None:
        content = tmp_path / "content"
        content.mkdir()
        (content / "PHOTO.JPG").write_bytes(b"jpg")
        assert sync_content_assets(content, tmp_path / "dist") == (tmp_path / "dist" / "PHOTO.JPG",)

    def test_only_newer_files_recopied(self, tmp_path: Path) -> None:
        content = tmp_path / "content"
        content.mkdir()
        src = content / "app.js"
        src.write_text("v1")
        out = tmp_path / "dist"
        sync_content_assets(content, out)
        assert sync_content_assets(content, out) == ()

        src.write_text("v2")
        stat = src.stat()
        os.utime(src, (stat.st_atime, stat.st_mtime + 10))

        assert sync_content_assets(content, out) == (out / "app.js",)
        assert (out / "app.js").read_text() == "v2"

    def test_missing_content_is_noop(self, tmp_path: Path) -> None:
        assert sync_content_assets(tmp_path / "content", tmp_path / "dist") == ()
