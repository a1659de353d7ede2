"""CSS minifier plugin."""

from __future__ import annotations

from typing import Any, Mapping

from adapters.css_minifier import DEFAULT_MAX_BYTES, CssMinifier, MinifiedCss
from adapters.http_fetch import DEFAULT_TIMEOUT
from core.formatter import shorten_url
from core.models import RequestMetadata


class CssMinifierPlugin:
    """Minify the stylesheet at a URL."""

    name = "cssminifier"
    url_based = True

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self._minifier = CssMinifier(timeout=timeout, max_bytes=max_bytes)

    def default_config(self) -> Mapping[str, Any]:
        return {
            "trigger": r"^cssmin\s+(?=\S)",
            "response_event": "irc_css_minifier",
        }

    async def dispatch_to_worker(self, payload: str, metadata: RequestMetadata) -> MinifiedCss:
        return await self._minifier.run(payload.strip(), metadata)

    def render_success(self, data: MinifiedCss, metadata: RequestMetadata) -> str:
        return f"[{shorten_url(metadata.payload.strip())}] {data.css}"
