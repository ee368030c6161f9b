"""Kiln application — wiring for the three commands.

The public functions (dev, build, init) are the primary entry points.
``dev`` assembles the full incremental pipeline behind a Chirp app;
``build`` runs the same orchestrator once without a server.
"""

from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

from kiln.config import KilnConfig
from kiln.config_loader import load_config

if TYPE_CHECKING:
    from chirp import App

    from kiln.content.watcher import WatchLoop
    from kiln.observability.collector import RebuildCollector
    from kiln.reactive.broadcaster import LiveReloadChannel
    from kiln.reactive.pipeline import RebuildOrchestrator, RebuildResult


_SCAFFOLD: dict[str, str] = {
    "content/index.md": """\
---
title: Welcome
layout: default
---

# Hello World!
""",
    "layouts/default.html": """\
<!DOCTYPE html>
<html>
<head>
  <title>{{ title }}</title>
</head>
<body>
  {{ content }}
</body>
</html>
""",
    "content/_partials/async.md": "",
}


def _create_orchestrator(
    config: KilnConfig,
    *,
    channel: LiveReloadChannel | None = None,
    collector: RebuildCollector | None = None,
) -> RebuildOrchestrator:
    from kiln.content.compiler import DocumentCompiler
    from kiln.reactive.pipeline import RebuildOrchestrator

    return RebuildOrchestrator(
        config,
        DocumentCompiler(config),
        channel=channel,
        collector=collector,
    )


def _create_chirp_app(config: KilnConfig) -> App:
    """Create a Chirp App for the dev server.

    Pages are served from the output tree, not rendered by Chirp, so the
    template directory only matters for Chirp's own error pages.

    """
    from chirp import App, AppConfig

    app_config = AppConfig(
        template_dir=config.layouts_path,
        debug=True,
        host=config.host,
        port=config.port,
    )
    return App(config=app_config)


def _wire_routes(
    app: App,
    config: KilnConfig,
    channel: LiveReloadChannel,
    collector: RebuildCollector,
) -> None:
    """Register the reload and stats endpoints and the file-serving middleware."""
    from kiln.content.router import OutputRouter
    from kiln.reactive.hmr import reload_script_middleware

    router = OutputRouter(config, app)
    router.register_reload_endpoint(channel)
    router.register_stats_endpoint(collector)
    router.mount_public_files()
    router.register_output_middleware()

    # Chirp's own HTML pages (404s for documents not built yet) reload too.
    app.add_middleware(reload_script_middleware)


def watched_files(config: KilnConfig) -> list[Path]:
    """Every file under the watch roots, each listed once."""
    seen: dict[Path, None] = {}
    for root in config.watch_roots:
        if not root.is_dir():
            continue
        for path in sorted(root.rglob("*")):
            if path.is_file():
                seen.setdefault(path, None)
    return list(seen)


def _start_watcher(config: KilnConfig, orchestrator: RebuildOrchestrator, app: App) -> WatchLoop:
    """Wire the initial build and the WatchLoop to Chirp lifecycle hooks.

    Flow:
        on_startup  → prime digests, start one watch task per root, full build
        file change → orchestrator.handle_change()
        on_shutdown → stop the watch loop (cleanly tears down ``awatch``)

    Digests are primed and the watcher started before the build, so a
    save during the build is queued behind it and rebuilt afterwards.

    Returns the WatchLoop instance.

    """
    from kiln import console
    from kiln.content.watcher import WatchLoop

    watcher = WatchLoop(config.watch_roots, orchestrator.handle_change)

    @app.on_startup
    async def _initial_build() -> None:
        primed = await orchestrator.detector.prime(watched_files(config))
        console.info(f"Tracking {console.plural(primed, 'file')}")
        watcher.start()
        await orchestrator.build()

    @app.on_shutdown
    async def _stop_watcher() -> None:
        await watcher.stop()

    return watcher


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def dev(root: str | Path = ".", **kwargs: object) -> None:
    """Start the development server.

    Builds every document, then watches content, layouts and partials and
    rebuilds only what each change affects.  Connected browsers reload
    after every successful rebuild.

    Args:
        root: Path to the site root directory.
        **kwargs: Override KilnConfig fields.

    """
    from kiln.banner import print_banner
    from kiln.content.document import discover_documents
    from kiln.observability import EventLog, RebuildCollector
    from kiln.reactive.broadcaster import LiveReloadChannel

    config = load_config(Path(root), **kwargs)

    channel = LiveReloadChannel()
    collector = RebuildCollector(EventLog())
    orchestrator = _create_orchestrator(config, channel=channel, collector=collector)

    app = _create_chirp_app(config)
    _wire_routes(app, config, channel, collector)
    _start_watcher(config, orchestrator, app)

    print_banner(config, len(discover_documents(config.content_path)), mode="dev")

    app.run(host=config.host, port=config.port)


def build(
    root: str | Path = ".",
    documents: list[str | Path] | None = None,
    **kwargs: object,
) -> RebuildResult:
    """Compile documents to the output directory once.

    Args:
        root: Path to the site root directory.
        documents: Documents to compile (relative to ``root`` or absolute);
            every document when omitted.
        **kwargs: Override KilnConfig fields.

    Returns:
        The RebuildResult of the batch.

    """
    from kiln import console
    from kiln.banner import print_banner
    from kiln.content.document import discover_documents
    from kiln.export import clean_output, sync_content_assets, sync_public

    config = load_config(Path(root), **kwargs)
    t0 = time.perf_counter()

    if config.clean and clean_output(config.output_path, config.root):
        console.info(f"Removed {config.output_path}")

    copied = sync_public(config.public_path, config.output_path)
    copied += sync_content_assets(config.content_path, config.output_path)

    print_banner(config, len(discover_documents(config.content_path)), mode="build")

    orchestrator = _create_orchestrator(config)
    targets = [Path(d) for d in documents] if documents else None
    result = asyncio.run(orchestrator.build(targets))

    _print_build_summary(result, len(copied), config, (time.perf_counter() - t0) * 1000)
    return result


def _print_build_summary(
    result: RebuildResult,
    asset_count: int,
    config: KilnConfig,
    duration_ms: float,
) -> None:
    """Print build completion summary to stderr."""
    from kiln.console import plural

    lines = [
        "",
        "─" * 41,
        f"  Built {plural(len(result.succeeded), 'document')}",
    ]
    if result.failures:
        lines.append(f"  Failed {plural(len(result.failures), 'document')}")
    if asset_count > 0:
        lines.append(f"  Copied {plural(asset_count, 'static file')}")
    lines.append(f"  Output: {config.output_path}")
    lines.append(f"  Done in {duration_ms:.0f}ms")

    print("\n".join(lines), file=sys.stderr)


def init(root: str | Path = ".") -> list[Path]:
    """Create a sample site structure.  Existing files are never overwritten.

    Returns the files created.

    """
    from kiln import console

    base = Path(root)
    created: list[Path] = []
    for relative, text in _SCAFFOLD.items():
        path = base / relative
        if path.exists():
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        created.append(path)

    if created:
        console.success(f"Created sample site structure ({console.plural(len(created), 'file')})")
    else:
        console.info("Site structure already present; nothing created")
    return created
