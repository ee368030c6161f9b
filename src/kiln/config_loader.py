"""Load KilnConfig from kiln.yaml or kiln.toml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import fields
from pathlib import Path

import yaml

from kiln._errors import ConfigError
from kiln.config import KilnConfig

_CONFIG_NAMES = ("kiln.yaml", "kiln.yml", "kiln.toml")
_BASE_URL_ENV = "KILN_BASE_URL"


def load_config(root: Path, **overrides: object) -> KilnConfig:
    """Load KilnConfig from root, optionally merging kiln.yaml / kiln.toml.

    Precedence, lowest first: dataclass defaults, config file,
    ``KILN_BASE_URL`` environment variable, keyword overrides.

    Raises:
        ConfigError: If the config file cannot be parsed or holds bad values.

    """
    merged = _read_kiln_config(root)
    env_base_url = os.environ.get(_BASE_URL_ENV)
    if env_base_url:
        merged["base_url"] = env_base_url
    merged.update({k: v for k, v in overrides.items() if v is not None})
    if "output" in merged and not isinstance(merged["output"], Path):
        merged["output"] = Path(str(merged["output"]))
    if "port" in merged:
        try:
            merged["port"] = int(merged["port"])  # type: ignore[call-overload]
        except (TypeError, ValueError) as exc:
            msg = f"Invalid port {merged['port']!r}"
            raise ConfigError(msg) from exc
    return KilnConfig(root=Path(root), **merged)  # type: ignore[arg-type]


def find_config_file(root: Path) -> Path | None:
    """Return the first config file present in root, if any."""
    for name in _CONFIG_NAMES:
        path = root / name
        if path.is_file():
            return path
    return None


def _read_kiln_config(root: Path) -> dict[str, object]:
    """Read kiln config from yaml/toml if present. Returns empty dict otherwise."""
    path = find_config_file(root)
    if path is None:
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read config file {path}: {exc}"
        raise ConfigError(msg) from exc
    try:
        if path.suffix == ".toml":
            data = tomllib.loads(text)
        else:
            data = yaml.safe_load(text) or {}
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        msg = f"Invalid config file {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"Config file must be a mapping: {path}"
        raise ConfigError(msg)
    return _flatten_kiln_section(data)


def _flatten_kiln_section(data: dict[str, object]) -> dict[str, object]:
    """Extract known keys, accepting both top-level and a ``kiln:`` section."""
    known = {f.name for f in fields(KilnConfig)} - {"root"}
    result: dict[str, object] = {k: v for k, v in data.items() if k in known}
    section = data.get("kiln")
    if isinstance(section, dict):
        result.update({k: v for k, v in section.items() if k in known})
    return result
