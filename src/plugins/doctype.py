"""DOCTYPE grabber plugin."""

from __future__ import annotations

from typing import Any, Mapping

from adapters.doctype_grabber import DEFAULT_MAX_BYTES, DoctypeGrabber, DoctypeInfo
from adapters.http_fetch import DEFAULT_TIMEOUT
from core.formatter import shorten_url
from core.models import RequestMetadata


def describe_doctype(info: DoctypeInfo) -> str:
    """Render e.g. "HTML 4.01 Strict + 1 XML prolog (text/html)"."""

    parts = [info.doctype or "NO DOCTYPE"]
    if info.xml_prolog:
        parts.append(f"+ {info.xml_prolog} XML prolog")
    if info.non_white_space:
        parts.append(f"+ {info.non_white_space} non-whitespace characters")
    parts.append(f"({info.mime})")
    return " ".join(parts)


class DoctypePlugin:
    """Show the DOCTYPE of a page and what precedes it."""

    name = "doctype"
    url_based = True

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self._grabber = DoctypeGrabber(timeout=timeout, max_bytes=max_bytes)

    def default_config(self) -> Mapping[str, Any]:
        return {
            "trigger": r"^doctype\s+(?=\S)",
            "response_event": "irc_doctype_grabber",
        }

    async def dispatch_to_worker(self, payload: str, metadata: RequestMetadata) -> DoctypeInfo:
        return await self._grabber.run(payload.strip(), metadata)

    def render_success(self, data: DoctypeInfo, metadata: RequestMetadata) -> str:
        return f"[{shorten_url(metadata.payload.strip())}] {describe_doctype(data)}"
