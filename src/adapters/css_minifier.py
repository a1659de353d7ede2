"""CSS minifier worker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import rcssmin

from adapters.http_fetch import DEFAULT_TIMEOUT, fetch_page
from core.errors import WorkerError
from core.models import RequestMetadata

DEFAULT_MAX_BYTES = 512 * 1024


@dataclass(frozen=True)
class MinifiedCss:
    url: str
    css: str
    original_size: int

    @property
    def saved(self) -> int:
        return self.original_size - len(self.css)


def minify(css: str) -> str:
    return rcssmin.cssmin(css).strip()


class CssMinifier:
    """Worker that downloads a stylesheet and minifies it."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self._timeout = timeout
        self._max_bytes = max_bytes

    async def run(self, payload: str, metadata: Optional[RequestMetadata] = None) -> MinifiedCss:
        page = await fetch_page(payload, timeout=self._timeout, max_bytes=self._max_bytes)
        if not page.text.strip():
            raise WorkerError("Empty stylesheet")
        return MinifiedCss(url=page.url, css=minify(page.text), original_size=len(page.text))
