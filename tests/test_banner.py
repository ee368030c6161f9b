"""Tests for kiln.banner — startup banner output."""

from __future__ import annotations

import io
import sys
from pathlib import Path
from unittest.mock import patch

from kiln.banner import print_banner, render_banner
from kiln.config import KilnConfig


class TestPrintBanner:
    """Tests for the startup banner."""

    def _capture_banner(self, **kwargs: object) -> str:
        """Call print_banner and capture stderr output."""
        buf = io.StringIO()
        with patch.object(sys, "stderr", buf):
            config = KilnConfig(root=Path("/tmp/test-site"))
            print_banner(config, 5, **kwargs)
        return buf.getvalue()

    def test_dev_mode_banner(self) -> None:
        output = self._capture_banner(mode="dev")

        assert "kiln" in output
        assert "5 documents found" in output
        assert "http://127.0.0.1:3000" in output
        assert "Watching for changes" in output

    def test_build_mode_banner(self) -> None:
        output = self._capture_banner(mode="build")

        assert "5 documents found" in output
        assert "/tmp/test-site/dist" in output
        assert "http://" not in output
        assert "Watching" not in output

    def test_warnings_listed(self) -> None:
        output = self._capture_banner(mode="build", warnings=["no layouts/ directory"])
        assert "no layouts/ directory" in output

    def test_singular_document(self) -> None:
        config = KilnConfig(root=Path("/tmp/test-site"))
        assert "1 document found" in render_banner(config, 1, "build")

    def test_version_in_header(self) -> None:
        from kiln import __version__

        config = KilnConfig(root=Path("/tmp/test-site"))
        assert __version__ in render_banner(config, 0, "dev")
