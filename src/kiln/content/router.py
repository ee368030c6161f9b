"""Dev router — serves the compiled output tree through Chirp.

Request mapping:

    /public/...      files from the site's ``public/`` directory
    /__kiln/reload   live reload SSE stream
    /__kiln/stats    JSON summary of recent rebuilds
    /<path>          ``<output>/<path>/index.html`` with the reload script
    /<path>.<ext>    a content asset copied into the output tree

Pages are read from disk on every request, so a rebuild is visible on
the next load without re-registering anything.
"""

from __future__ import annotations

import asyncio
import mimetypes
import uuid
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import unquote

from kiln.export.assets import CONTENT_ASSET_SUFFIXES
from kiln.reactive.hmr import RELOAD_ENDPOINT, RELOAD_EVENT, inject_reload_script

if TYPE_CHECKING:
    from chirp import App, Request
    from chirp.middleware.protocol import Next

    from kiln.config import KilnConfig
    from kiln.observability.collector import RebuildCollector
    from kiln.reactive.broadcaster import LiveReloadChannel

STATS_ENDPOINT = "/__kiln/stats"
PUBLIC_PREFIX = "/public"

# Paths the output middleware never claims.
_RESERVED_PREFIXES = ("/__kiln/", f"{PUBLIC_PREFIX}/")


def resolve_output_file(output_root: Path, request_path: str) -> Path | None:
    """Map a URL path to ``<output_root>/<path>/index.html``.

    Returns None when the file does not exist or the path escapes the
    output tree.
    """
    relative = unquote(request_path).strip("/")
    candidate = (output_root / relative / "index.html").resolve()
    root = output_root.resolve()
    if candidate != root / "index.html" and root not in candidate.parents:
        return None
    if not candidate.is_file():
        return None
    return candidate


def resolve_output_asset(output_root: Path, request_path: str) -> Path | None:
    """Map a URL path to a content asset copied into the output tree.

    Only files with a content-asset suffix are served, so compiled pages
    always go through :func:`resolve_output_file`.
    """
    relative = unquote(request_path).strip("/")
    if not relative:
        return None
    candidate = (output_root / relative).resolve()
    if output_root.resolve() not in candidate.parents:
        return None
    if candidate.suffix.lower() not in CONTENT_ASSET_SUFFIXES or not candidate.is_file():
        return None
    return candidate


class OutputRouter:
    """Wires the dev HTTP surface onto a Chirp app.

    Args:
        config: Site configuration (output and public directories).
        app: Chirp App to register routes and middleware on (must not yet
            be frozen).

    """

    def __init__(self, config: KilnConfig, app: App) -> None:
        self._config = config
        self._app = app

    def register_output_middleware(self) -> None:
        """Serve compiled pages and copied content assets from the output tree.

        Anything the output tree cannot answer falls through to the rest
        of the app, which ends in Chirp's 404.
        """
        from chirp.http.response import Response

        output_root = self._config.output_path

        async def output_middleware(request: Request, next: Next) -> Any:
            if request.method != "GET" or request.path.startswith(_RESERVED_PREFIXES):
                return await next(request)

            target = resolve_output_file(output_root, request.path)
            if target is None:
                asset = resolve_output_asset(output_root, request.path)
                if asset is None:
                    return await next(request)
                data = await asyncio.to_thread(asset.read_bytes)
                content_type, _ = mimetypes.guess_type(asset.name)
                return Response(
                    body=data,
                    status=200,
                    content_type=content_type or "application/octet-stream",
                )

            body = await asyncio.to_thread(target.read_text, encoding="utf-8")
            return Response(
                body=inject_reload_script(body),
                status=200,
                content_type="text/html; charset=utf-8",
            )

        self._app.add_middleware(output_middleware)

    def mount_public_files(self) -> None:
        """Serve ``public/`` under ``/public``."""
        from chirp.middleware import StaticFiles

        public = self._config.public_path
        if public.is_dir():
            self._app.add_middleware(StaticFiles(directory=public, prefix=PUBLIC_PREFIX))

    def register_reload_endpoint(self, channel: LiveReloadChannel) -> None:
        """Register the ``/__kiln/reload`` SSE endpoint.

        Each connection becomes one :class:`ReloadClient` on ``channel`` for
        as long as the stream stays open.

        """
        from chirp import EventStream, SSEEvent

        from kiln.reactive.broadcaster import ReloadClient

        async def reload_handler(request: Request) -> Any:
            client = ReloadClient(client_id=str(uuid.uuid4()))
            channel.register(client)

            async def generate():  # type: ignore[return]
                try:
                    async for message in channel.client_generator(client):
                        yield SSEEvent(data=message, event=RELOAD_EVENT)
                finally:
                    channel.unregister(client)

            return EventStream(generate())

        reload_handler.__name__ = "kiln_reload"
        reload_handler.__qualname__ = "OutputRouter.kiln_reload"

        self._app.route(RELOAD_ENDPOINT, name="kiln:reload")(reload_handler)

    def register_stats_endpoint(self, collector: RebuildCollector) -> None:
        """Register the ``/__kiln/stats`` JSON endpoint."""
        import json

        async def stats_handler(request: Request) -> Any:
            from chirp.http.response import Response

            payload = json.dumps(collector.summary(), indent=2)
            return Response(
                body=payload,
                status=200,
                content_type="application/json",
            )

        stats_handler.__name__ = "kiln_stats"
        stats_handler.__qualname__ = "OutputRouter.kiln_stats"

        self._app.route(STATS_ENDPOINT, name="kiln:stats")(stats_handler)
