"""Tests for kiln.content.partials — {{> name }} expansion."""

from __future__ import annotations

from pathlib import Path

from kiln.content.partials import expand_partials, missing_marker, partial_path


class TestExpandPartials:
    """expand_partials() — inline references and report dependencies."""

    def test_no_references(self, tmp_path: Path) -> None:
        text, deps = expand_partials("# Plain\n", tmp_path)
        assert text == "# Plain\n"
        assert deps == []

    def test_simple_reference(self, tmp_path: Path) -> None:
        (tmp_path / "nav.md").write_text("NAV")
        text, deps = expand_partials("before {{> nav }} after", tmp_path)
        assert text == "before NAV after"
        assert [d.path for d in deps] == [tmp_path / "nav.md"]
        assert deps[0].resolved is True
        assert deps[0].kind == "partial"

    def test_whitespace_optional(self, tmp_path: Path) -> None:
        (tmp_path / "nav.md").write_text("NAV")
        text, _ = expand_partials("{{>nav}}", tmp_path)
        assert text == "NAV"

    def test_nested_name(self, tmp_path: Path) -> None:
        (tmp_path / "blocks").mkdir()
        (tmp_path / "blocks" / "cta.md").write_text("CTA")
        text, deps = expand_partials("{{> blocks/cta }}", tmp_path)
        assert text == "CTA"
        assert deps[0].path == tmp_path / "blocks" / "cta.md"

    def test_missing_partial_marker(self, tmp_path: Path) -> None:
        text, deps = expand_partials("x {{> gone }} y", tmp_path)
        assert text == f"x {missing_marker('gone')} y"
        assert "Missing partial: gone" in text
        assert deps[0].path == partial_path(tmp_path, "gone")
        assert deps[0].resolved is False

    def test_recursive_expansion(self, tmp_path: Path) -> None:
        (tmp_path / "outer.md").write_text("[{{> inner }}]")
        (tmp_path / "inner.md").write_text("IN")
        text, deps = expand_partials("{{> outer }}", tmp_path)
        assert text == "[IN]"
        assert [d.path.name for d in deps] == ["outer.md", "inner.md"]

    def test_cycle_is_cut(self, tmp_path: Path) -> None:
        (tmp_path / "a.md").write_text("A{{> b }}")
        (tmp_path / "b.md").write_text("B{{> a }}")
        text, deps = expand_partials("{{> a }}", tmp_path)
        assert text == "AB<!-- Recursive partial: a -->"
        assert {d.path.name for d in deps} == {"a.md", "b.md"}

    def test_repeated_reference_reported_each_time(self, tmp_path: Path) -> None:
        (tmp_path / "nav.md").write_text("N")
        text, deps = expand_partials("{{> nav }}{{> nav }}", tmp_path)
        assert text == "NN"
        assert len(deps) == 2


class TestPartialPath:
    def test_nested_name(self, tmp_path: Path) -> None:
        assert partial_path(tmp_path, "docs/nav") == tmp_path / "docs" / "nav.md"

    def test_parent_segments_collapsed(self, tmp_path: Path) -> None:
        partials = tmp_path / "content" / "_partials"
        assert partial_path(partials, "../shared") == tmp_path / "content" / "shared.md"
