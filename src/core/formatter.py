"""Response formatting helpers (core domain).

Keeping formatting here prevents drift between plugins and keeps replies
consistent regardless of which worker produced them.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional

from core.models import (
    Failure,
    FormattedResponse,
    MessageType,
    RequestMetadata,
    WorkerResult,
)

ELLIPSIS = "..."

_URL_SCHEME = re.compile(r"^(?:(?:ht|f)tps?://(?:www\.)?|www\.)", re.IGNORECASE)
_URL_EXTENSION = re.compile(r"\.(?:s?html?|php|pl|asp|jsp|css|js)$", re.IGNORECASE)
_SHORT_URL_LIMIT = 16
_SHORT_URL_HEAD = 8
_SHORT_URL_TAIL = 5

SuccessRenderer = Callable[[Any, RequestMetadata], str]


def _shorten_step(url: str) -> str:
    short = _URL_SCHEME.sub("", url, count=1)
    short = _URL_EXTENSION.sub("", short, count=1)
    if len(short) > _SHORT_URL_LIMIT:
        short = f"{short[:_SHORT_URL_HEAD]}{ELLIPSIS}{short[-_SHORT_URL_TAIL:]}"
    return short


def shorten_url(url: str) -> str:
    """Return a compact label for a URL, e.g. "zoffix.c.../test".

    The scheme (and a following "www."), and a common page extension are
    removed; anything still longer than 16 characters keeps its first 8
    and last 5 characters. Steps repeat until nothing changes, so the
    result is a fixed point: shortening it again returns it unchanged.
    """

    short = _shorten_step(url)
    while True:
        # Every step that changes the string makes it shorter.
        again = _shorten_step(short)
        if again == short:
            return short
        short = again


def response_prefix(metadata: RequestMetadata) -> str:
    """Address public replies to the requester; private ones need no prefix."""

    if metadata.message_type is MessageType.PUBLIC:
        return f"{metadata.nickname}, "
    return ""


def truncate(text: str, max_length: int) -> tuple[str, bool]:
    """Cut text to max_length characters plus an ellipsis if it is longer."""

    if len(text) <= max_length:
        return text, False
    return text[:max_length] + ELLIPSIS, True


def format_response(
    result: WorkerResult,
    metadata: RequestMetadata,
    max_length: int,
    render_success: SuccessRenderer,
    page: Optional[str] = None,
) -> FormattedResponse:
    """Turn a worker result into a single bounded output line.

    Failures are always rendered; `page` is the requested URL for
    pipelines that work on pages and is shown shortened before the error.
    """

    prefix = response_prefix(metadata)
    if isinstance(result, Failure):
        if page is not None:
            body = f"[{shorten_url(page)}] {result.message}"
        else:
            body = result.message
    else:
        body = render_success(result.data, metadata)

    text, truncated = truncate(prefix + body, max_length)
    return FormattedResponse(text=text, truncated=truncated)
