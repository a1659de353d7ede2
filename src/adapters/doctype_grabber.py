"""DOCTYPE grabber worker.

Fetches the start of a page and reports its DOCTYPE together with anything
that precedes it and may throw browsers into quirks mode.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from adapters.http_fetch import DEFAULT_TIMEOUT, fetch_page
from core.models import RequestMetadata

# Only the head of the document matters; the DOCTYPE must come first.
DEFAULT_MAX_BYTES = 2048

_DOCTYPE = re.compile(r"<!DOCTYPE\s+([^>]*)>", re.IGNORECASE)
_PUBLIC_ID = re.compile(r"PUBLIC\s+[\"']([^\"']*)[\"']", re.IGNORECASE)
_XML_PROLOG = re.compile(r"<\?xml\b.*?\?>", re.IGNORECASE | re.DOTALL)

KNOWN_DOCTYPES = {
    "-//ietf//dtd html 2.0//en": "HTML 2.0",
    "-//w3c//dtd html 3.2 final//en": "HTML 3.2",
    "-//w3c//dtd html 4.01//en": "HTML 4.01 Strict",
    "-//w3c//dtd html 4.01 transitional//en": "HTML 4.01 Transitional",
    "-//w3c//dtd html 4.01 frameset//en": "HTML 4.01 Frameset",
    "-//w3c//dtd xhtml 1.0 strict//en": "XHTML 1.0 Strict",
    "-//w3c//dtd xhtml 1.0 transitional//en": "XHTML 1.0 Transitional",
    "-//w3c//dtd xhtml 1.0 frameset//en": "XHTML 1.0 Frameset",
    "-//w3c//dtd xhtml 1.1//en": "XHTML 1.1",
    "-//w3c//dtd xhtml basic 1.1//en": "XHTML Basic 1.1",
}


@dataclass(frozen=True)
class DoctypeInfo:
    """What was found at the top of a page."""

    doctype: str
    raw: str
    xml_prolog: int
    non_white_space: int
    mime: str


def _doctype_name(declaration: str) -> str:
    public = _PUBLIC_ID.search(declaration)
    if public:
        name = KNOWN_DOCTYPES.get(" ".join(public.group(1).split()).lower())
        if name:
            return name
    elif declaration.strip().lower() == "html":
        return "HTML5"
    return " ".join(declaration.split())


def parse_doctype(content: str, mime: str = "") -> DoctypeInfo:
    """Inspect page content; an empty `doctype` means none was found."""

    content = content.lstrip("\ufeff")
    found = _DOCTYPE.search(content)
    if found is None:
        return DoctypeInfo(doctype="", raw="", xml_prolog=0, non_white_space=0, mime=mime)

    before = content[: found.start()]
    prologs = _XML_PROLOG.findall(before)
    leftover = _XML_PROLOG.sub("", before)
    return DoctypeInfo(
        doctype=_doctype_name(found.group(1)),
        raw=found.group(0),
        xml_prolog=len(prologs),
        non_white_space=len("".join(leftover.split())),
        mime=mime,
    )


class DoctypeGrabber:
    """Worker that fetches a page and parses its DOCTYPE."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self._timeout = timeout
        self._max_bytes = max_bytes

    async def run(self, payload: str, metadata: Optional[RequestMetadata] = None) -> DoctypeInfo:
        page = await fetch_page(payload, timeout=self._timeout, max_bytes=self._max_bytes)
        return parse_doctype(page.text, page.mime)
