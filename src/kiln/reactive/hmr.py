"""Reload script injection for dev mode.

Every page served by the dev server gets a small script that opens an
EventSource on the reload endpoint and refreshes the page when a
``kiln:reload`` event arrives.  If the connection drops (server restart,
laptop sleep) the script closes it and retries every five seconds.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chirp.http.request import Request
    from chirp.http.response import Response, SSEResponse, StreamingResponse
    from chirp.middleware.protocol import Next

    type AnyResponse = Response | StreamingResponse | SSEResponse

RELOAD_ENDPOINT = "/__kiln/reload"
RELOAD_EVENT = "kiln:reload"
RECONNECT_MS = 5000

# Marker attribute; pages that already carry it are left alone.
_SCRIPT_MARKER = "data-kiln-reload"

_RELOAD_SCRIPT = f"""\
<script {_SCRIPT_MARKER}>
(function() {{
  function connect() {{
    var src = new EventSource('{RELOAD_ENDPOINT}');
    src.addEventListener('{RELOAD_EVENT}', function() {{
      location.reload();
    }});
    src.onerror = function() {{
      src.close();
      setTimeout(connect, {RECONNECT_MS});
    }};
  }}
  connect();
}})();
</script>
"""


def inject_reload_script(body: str) -> str:
    """Insert the reload script before ``</body>``.

    Falls back to ``</html>``, then to appending.  A body that already
    contains the script is returned unchanged.
    """
    if _SCRIPT_MARKER in body:
        return body
    if "</body>" in body:
        return body.replace("</body>", _RELOAD_SCRIPT + "</body>", 1)
    if "</html>" in body:
        return body.replace("</html>", _RELOAD_SCRIPT + "</html>", 1)
    return body + _RELOAD_SCRIPT


async def reload_script_middleware(request: Request, next: Next) -> AnyResponse:
    """Chirp middleware that injects the reload script into HTML responses.

    Streaming and SSE responses pass through untouched.
    """
    response = await next(request)

    if not hasattr(response, "body") or not hasattr(response, "content_type"):
        return response

    if "text/html" not in response.content_type:
        return response

    body = response.body
    if isinstance(body, bytes):
        body = body.decode("utf-8")

    return replace(response, body=inject_reload_script(body))
