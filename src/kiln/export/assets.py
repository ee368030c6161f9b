"""Static files — mirror ``public/`` and content assets into the output tree.

``public/`` is copied to ``<output>/public/``.  Images, stylesheets and
scripts that sit beside documents in the content tree are copied to the
same relative place under ``<output>/``, next to the pages that use them.

A file whose copy is already at least as new as the source is left alone,
so repeated builds only touch what changed.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from pathlib import Path

from kiln._errors import ConfigError, WriteError

# Files skipped during copying
_HIDDEN_PREFIXES = (".",)

# Content-tree files copied next to the pages
CONTENT_ASSET_SUFFIXES = frozenset({".jpg", ".jpeg", ".png", ".gif", ".css", ".js", ".svg"})


def sync_public(public_path: Path, output_dir: Path) -> tuple[Path, ...]:
    """Copy new or updated files from ``public_path`` to ``output_dir/public``.

    Skips hidden files (names starting with ``.``).

    Args:
        public_path: Source directory (e.g., ``site_root/public/``).
        output_dir: Root build output directory.

    Returns:
        Destination paths of the files actually copied.

    Raises:
        WriteError: If a destination cannot be written.

    """
    if not public_path.is_dir():
        return ()
    return _copy_newer(public_path, output_dir / "public", public_path.rglob("*"))


def sync_content_assets(content_path: Path, output_dir: Path) -> tuple[Path, ...]:
    """Copy new or updated content assets to the matching place in ``output_dir``.

    ``content/docs/assets/logo.png`` lands at ``<output>/docs/assets/logo.png``.
    Only files with a suffix in :data:`CONTENT_ASSET_SUFFIXES` are copied;
    ``_``-prefixed directories (partials) are skipped, as in discovery.

    Returns:
        Destination paths of the files actually copied.

    Raises:
        WriteError: If a destination cannot be written.

    """
    if not content_path.is_dir():
        return ()
    sources = (
        path
        for path in content_path.rglob("*")
        if path.suffix.lower() in CONTENT_ASSET_SUFFIXES
        and not any(part.startswith("_") for part in path.relative_to(content_path).parts[:-1])
    )
    return _copy_newer(content_path, output_dir, sources)


def _copy_newer(src_root: Path, dest_root: Path, sources: Iterable[Path]) -> tuple[Path, ...]:
    copied: list[Path] = []

    for src_file in sorted(sources):
        if not src_file.is_file() or src_file.name.startswith(_HIDDEN_PREFIXES):
            continue

        dest_file = dest_root / src_file.relative_to(src_root)
        if dest_file.is_file() and dest_file.stat().st_mtime >= src_file.stat().st_mtime:
            continue

        try:
            dest_file.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src_file, dest_file)
        except OSError as exc:
            raise WriteError(dest_file, exc) from exc
        copied.append(dest_file)

    return tuple(copied)


def clean_output(output_dir: Path, site_root: Path) -> bool:
    """Remove the output directory.  Returns False if it did not exist.

    Raises:
        ConfigError: If the output directory is the site root or contains it.

    """
    output_dir = output_dir.resolve()
    site_root = site_root.resolve()
    if output_dir == site_root or output_dir in site_root.parents:
        msg = f"Refusing to clean {output_dir}: it contains the site root"
        raise ConfigError(msg)
    if not output_dir.exists():
        return False
    try:
        shutil.rmtree(output_dir)
    except OSError as exc:
        raise WriteError(output_dir, exc) from exc
    return True
