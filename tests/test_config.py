"""Tests for kiln.config and kiln.config_loader."""

from pathlib import Path

import pytest

from kiln._errors import ConfigError
from kiln.config import KilnConfig
from kiln.config_loader import find_config_file, load_config


class TestKilnConfig:
    """KilnConfig — frozen dataclass with sensible defaults."""

    def test_defaults(self) -> None:
        config = KilnConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 3000
        assert config.content_dir == "content"
        assert config.layouts_dir == "layouts"
        assert config.partials_dir == "content/_partials"
        assert config.public_dir == "public"
        assert config.default_layout == "default"
        assert config.shared_partial == "async"
        assert config.base_url == "/"
        assert config.clean is False

    def test_frozen(self) -> None:
        config = KilnConfig()
        with pytest.raises(AttributeError):
            config.port = 8000  # type: ignore[misc]

    def test_paths_resolve_from_root(self, tmp_path: Path) -> None:
        config = KilnConfig(root=tmp_path)
        assert config.content_path == tmp_path / "content"
        assert config.layouts_path == tmp_path / "layouts"
        assert config.partials_path == tmp_path / "content" / "_partials"
        assert config.public_path == tmp_path / "public"
        assert config.output_path == tmp_path / "dist"

    def test_relative_root_made_absolute(self) -> None:
        config = KilnConfig(root=Path("site"))
        assert config.root.is_absolute()
        assert config.root.name == "site"

    def test_absolute_output_preserved(self, tmp_path: Path) -> None:
        output = tmp_path / "elsewhere"
        config = KilnConfig(root=tmp_path / "site", output=output)
        assert config.output_path == output

    def test_watch_roots(self, tmp_path: Path) -> None:
        config = KilnConfig(root=tmp_path)
        assert config.watch_roots == (
            tmp_path / "content",
            tmp_path / "layouts",
            tmp_path / "content" / "_partials",
        )


class TestLoadConfig:
    """load_config — file, environment and override merging."""

    def test_no_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config.root == tmp_path
        assert config.port == 3000

    def test_yaml_file(self, tmp_path: Path) -> None:
        (tmp_path / "kiln.yaml").write_text("port: 4000\noutput: build\n")
        config = load_config(tmp_path)
        assert config.port == 4000
        assert config.output_path == tmp_path / "build"

    def test_yaml_kiln_section(self, tmp_path: Path) -> None:
        (tmp_path / "kiln.yml").write_text("kiln:\n  default_layout: page\n")
        config = load_config(tmp_path)
        assert config.default_layout == "page"

    def test_toml_file(self, tmp_path: Path) -> None:
        (tmp_path / "kiln.toml").write_text('host = "0.0.0.0"\n')
        config = load_config(tmp_path)
        assert config.host == "0.0.0.0"

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "kiln.yaml").write_text("theme: dark\nport: 5000\n")
        config = load_config(tmp_path)
        assert config.port == 5000

    def test_overrides_win_over_file(self, tmp_path: Path) -> None:
        (tmp_path / "kiln.yaml").write_text("port: 4000\n")
        config = load_config(tmp_path, port=5000)
        assert config.port == 5000

    def test_none_overrides_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "kiln.yaml").write_text("port: 4000\n")
        config = load_config(tmp_path, port=None, host=None)
        assert config.port == 4000
        assert config.host == "127.0.0.1"

    def test_output_override_coerced_to_path(self, tmp_path: Path) -> None:
        config = load_config(tmp_path, output="public_html")
        assert config.output == Path("public_html")

    def test_base_url_from_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KILN_BASE_URL", "https://example.com/")
        config = load_config(tmp_path)
        assert config.base_url == "https://example.com/"

    def test_override_beats_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KILN_BASE_URL", "https://example.com/")
        config = load_config(tmp_path, base_url="/docs/")
        assert config.base_url == "/docs/"

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        (tmp_path / "kiln.yaml").write_text("port: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid config file"):
            load_config(tmp_path)

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        (tmp_path / "kiln.yaml").write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(tmp_path)

    def test_bad_port_raises(self, tmp_path: Path) -> None:
        (tmp_path / "kiln.yaml").write_text("port: lots\n")
        with pytest.raises(ConfigError, match="Invalid port"):
            load_config(tmp_path)

    def test_undecodable_file_raises(self, tmp_path: Path) -> None:
        (tmp_path / "kiln.yaml").write_bytes(b"title: \xff\xfe\xfa\n")
        with pytest.raises(ConfigError, match="Cannot read config file"):
            load_config(tmp_path)

    def test_unreadable_file_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "kiln.toml").write_text("port = 4000\n")

        def deny(self: Path, *args: object, **kwargs: object) -> str:
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "read_text", deny)
        with pytest.raises(ConfigError, match="Cannot read config file"):
            load_config(tmp_path)


class TestFindConfigFile:
    def test_none_when_absent(self, tmp_path: Path) -> None:
        assert find_config_file(tmp_path) is None

    def test_yaml_preferred_over_toml(self, tmp_path: Path) -> None:
        (tmp_path / "kiln.toml").write_text("")
        (tmp_path / "kiln.yaml").write_text("")
        assert find_config_file(tmp_path) == tmp_path / "kiln.yaml"
