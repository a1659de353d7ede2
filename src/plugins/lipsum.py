"""Lorem ipsum generator plugin."""

from __future__ import annotations

from typing import Any, Mapping

from adapters.http_fetch import DEFAULT_TIMEOUT
from adapters.lipsum_client import FEED_URL, LipsumClient, LipsumText
from core.models import RequestMetadata


class LipsumPlugin:
    name = "lipsum"
    url_based = False

    def __init__(self, feed_url: str = FEED_URL, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._client = LipsumClient(feed_url=feed_url, timeout=timeout)

    def default_config(self) -> Mapping[str, Any]:
        # Bare "lipsum" is a valid request, so nothing has to follow the trigger.
        return {
            "trigger": r"^lipsum\b\s*",
            "response_event": "irc_lipsum",
        }

    async def dispatch_to_worker(self, payload: str, metadata: RequestMetadata) -> LipsumText:
        return await self._client.run(payload, metadata)

    def render_success(self, data: LipsumText, metadata: RequestMetadata) -> str:
        return " ".join(data.text.split())
