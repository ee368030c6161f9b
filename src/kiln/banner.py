"""Startup banner — mode-aware status output.

Prints the kiln header, document count, directories and (in dev mode) the
server URL.  Colours come from :mod:`kiln.console`, which already honours
``NO_COLOR`` / ``TERM``.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from kiln.console import BOLD, CYAN, DIM, GREEN, ORANGE, RESET, YELLOW, plural

if TYPE_CHECKING:
    from kiln._types import KilnMode
    from kiln.config import KilnConfig


# ---------------------------------------------------------------------------
# Mode badges
# ---------------------------------------------------------------------------

_MODE_STYLES: dict[str, tuple[str, str]] = {
    "dev": (GREEN, "dev"),
    "build": (YELLOW, "build"),
}


def _mode_badge(mode: str) -> str:
    """Return a styled [mode] badge."""
    color, label = _MODE_STYLES.get(mode, (DIM, mode))
    return f"{color}[{label}]{RESET}"


def _clickable_url(url: str) -> str:
    """Wrap *url* in an OSC 8 hyperlink escape if colours are on."""
    if not RESET:
        return url
    return f"\033]8;;{url}\033\\{BOLD}{CYAN}{url}{RESET}\033]8;;\033\\"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_banner(
    config: KilnConfig,
    document_count: int,
    mode: KilnMode,
    *,
    warnings: list[str] | None = None,
) -> str:
    """Return the banner text (see :func:`print_banner`)."""
    from kiln import __version__

    header = f"  {ORANGE}{BOLD}kiln{RESET} {DIM}v{__version__}{RESET}  {_mode_badge(mode)}"
    lines: list[str] = [
        "",
        header,
        f"  {DIM}{'─' * 43}{RESET}",
        f"  {DIM}├─{RESET} {plural(document_count, 'document')} found",
        f"  {DIM}├─{RESET} content: {DIM}{config.content_path}{RESET}",
        f"  {DIM}├─{RESET} layouts: {DIM}{config.layouts_path}{RESET}",
        f"  {DIM}└─{RESET} output: {DIM}{config.output_path}{RESET}",
    ]

    if mode == "dev":
        url = f"http://{config.host}:{config.port}"
        lines.append("")
        lines.append(f"  {_clickable_url(url)}")
        lines.append("")
        lines.append(f"  {DIM}Watching for changes...{RESET}")

    if warnings:
        lines.append("")
        lines.extend(f"  {YELLOW}!{RESET} {w}" for w in warnings)

    lines.append("")
    return "\n".join(lines)


def print_banner(
    config: KilnConfig,
    document_count: int,
    mode: KilnMode,
    *,
    warnings: list[str] | None = None,
) -> None:
    """Print the kiln startup banner to stderr.

    Args:
        config: Resolved KilnConfig.
        document_count: Number of content documents discovered.
        mode: ``"dev"`` or ``"build"``.
        warnings: Optional list of warning messages to display.

    """
    print(render_banner(config, document_count, mode, warnings=warnings), file=sys.stderr)
