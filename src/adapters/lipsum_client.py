"""Lorem ipsum worker backed by the lipsum.com JSON feed."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

from adapters.http_fetch import DEFAULT_TIMEOUT, fetch_page
from core.errors import WorkerError
from core.models import RequestMetadata

FEED_URL = "https://www.lipsum.com/feed/json"

KINDS = ("paras", "words", "bytes", "lists")
MAX_AMOUNT = 1000
USAGE = "Usage: lipsum [amount] [paras|words|bytes|lists] [start|nostart]"


@dataclass(frozen=True)
class LipsumRequest:
    amount: int = 1
    what: str = "paras"
    start: bool = True

    def query(self) -> str:
        return urlencode(
            {"amount": self.amount, "what": self.what, "start": "yes" if self.start else "no"}
        )


@dataclass(frozen=True)
class LipsumText:
    text: str
    generated: str


def parse_request(payload: str) -> LipsumRequest:
    """Parse "[amount] [kind] [start|nostart]" in any order."""

    amount = 1
    what = "paras"
    start = True
    for word in payload.lower().split():
        if word.isascii() and word.isdigit():
            amount = int(word)
        elif word in KINDS:
            what = word
        elif word.rstrip("s") + "s" in KINDS:
            what = word.rstrip("s") + "s"
        elif word in ("start", "nostart"):
            start = word == "start"
        else:
            raise WorkerError(USAGE)
    if not 1 <= amount <= MAX_AMOUNT:
        raise WorkerError(f"Amount must be between 1 and {MAX_AMOUNT}")
    return LipsumRequest(amount=amount, what=what, start=start)


class LipsumClient:
    """Worker that asks lipsum.com for placeholder text."""

    def __init__(self, feed_url: str = FEED_URL, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._feed_url = feed_url
        self._timeout = timeout

    async def run(self, payload: str, metadata: Optional[RequestMetadata] = None) -> LipsumText:
        request = parse_request(payload)
        page = await fetch_page(f"{self._feed_url}?{request.query()}", timeout=self._timeout)
        try:
            feed = json.loads(page.text)["feed"]
            return LipsumText(text=feed["lipsum"], generated=feed.get("generated", ""))
        except (ValueError, KeyError, TypeError) as exc:
            raise WorkerError("Unexpected response from lipsum.com") from exc
