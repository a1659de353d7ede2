"""Shared aiohttp fetch helper for the page-based workers."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Optional

import aiohttp

from core.errors import WorkerError

LOGGER = logging.getLogger(__name__)

USER_AGENT = "webdev-bots/0.1 (+aiohttp)"
DEFAULT_TIMEOUT = 30.0

_HAS_SCHEME = re.compile(r"^(?:ht|f)tps?://", re.IGNORECASE)


@dataclass(frozen=True)
class FetchedPage:
    url: str
    text: str
    mime: str


def normalize_uri(uri: str) -> str:
    """Add http:// to bare host names such as "zoffix.com"."""

    uri = uri.strip()
    if not _HAS_SCHEME.match(uri):
        uri = f"http://{uri}"
    return uri


async def _read_limited(response: aiohttp.ClientResponse, max_bytes: Optional[int]) -> bytes:
    if max_bytes is None:
        return await response.read()
    body = bytearray()
    while len(body) < max_bytes:
        chunk = await response.content.read(max_bytes - len(body))
        if not chunk:
            break
        body.extend(chunk)
    return bytes(body)


def _decode(body: bytes, charset: Optional[str]) -> str:
    try:
        return body.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


async def fetch_page(
    uri: str,
    timeout: float = DEFAULT_TIMEOUT,
    max_bytes: Optional[int] = None,
) -> FetchedPage:
    """GET a page and return its decoded body.

    Every failure is raised as WorkerError with a user-facing message so
    the pipeline can show it in the channel.
    """

    url = normalize_uri(uri)
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    headers = {"User-Agent": USER_AGENT}
    LOGGER.debug("Fetching %s", url)
    try:
        async with aiohttp.ClientSession(timeout=client_timeout, headers=headers) as session:
            async with session.get(url) as response:
                if response.status >= 400:
                    raise WorkerError(f"Network error: {response.status} {response.reason}")
                body = await _read_limited(response, max_bytes)
                return FetchedPage(
                    url=str(response.url),
                    text=_decode(body, response.charset),
                    mime=response.content_type,
                )
    except aiohttp.ClientError as exc:
        raise WorkerError(f"Network error: {exc}") from exc
    except asyncio.TimeoutError as exc:
        raise WorkerError("Network error: timed out") from exc
    except ValueError as exc:
        # yarl rejects malformed URLs with ValueError.
        raise WorkerError(f"Invalid URL: {uri.strip()}") from exc
