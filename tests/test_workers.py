from __future__ import annotations

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from adapters.css_minifier import CssMinifier, minify
from adapters.doctype_grabber import DoctypeGrabber, parse_doctype
from adapters.http_fetch import normalize_uri
from adapters.lipsum_client import LipsumClient
from core.errors import WorkerError
from core.models import IncomingMessage, MessageType
from plugins import build_pipeline

XHTML = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Strict//EN"\n'
    '  "http://www.w3.org/TR/xhtml1/DTD/xhtml1-strict.dtd">\n'
    "<html></html>"
)


def test_parse_doctype_known_public_identifier() -> None:
    info = parse_doctype(XHTML, "application/xhtml+xml")
    assert info.doctype == "XHTML 1.0 Strict"
    assert info.xml_prolog == 1
    assert info.non_white_space == 0
    assert info.mime == "application/xhtml+xml"
    assert info.raw.startswith("<!DOCTYPE html PUBLIC")


def test_parse_doctype_html5_and_leading_junk() -> None:
    info = parse_doctype("abc\n<!doctype html><html>", "text/html")
    assert info.doctype == "HTML5"
    assert info.non_white_space == 3
    assert info.xml_prolog == 0


def test_parse_doctype_unknown_and_missing() -> None:
    unknown = parse_doctype('<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN"   "x.dtd">')
    assert unknown.doctype == 'svg PUBLIC "-//W3C//DTD SVG 1.1//EN" "x.dtd"'
    missing = parse_doctype("<html><body>hi</body></html>", "text/html")
    assert missing.doctype == ""


def test_normalize_uri() -> None:
    assert normalize_uri(" zoffix.com ") == "http://zoffix.com"
    assert normalize_uri("HTTPS://zoffix.com") == "HTTPS://zoffix.com"


def test_minify() -> None:
    assert minify("a {\n  color: red\n}\n/* note */\n") == "a{color:red}"


def _app() -> web.Application:
    async def page(request: web.Request) -> web.Response:
        return web.Response(text="<!DOCTYPE html>\n<html></html>", content_type="text/html")

    async def broken(request: web.Request) -> web.Response:
        return web.Response(status=500, text="oops")

    async def style(request: web.Request) -> web.Response:
        return web.Response(text="body {\n  margin: 0\n}\n", content_type="text/css")

    async def feed(request: web.Request) -> web.Response:
        assert request.query["what"] == "words"
        return web.json_response(
            {"feed": {"lipsum": "Lorem ipsum\n\ndolor sit amet.", "generated": "Generated 5 words"}}
        )

    app = web.Application()
    app.router.add_get("/", page)
    app.router.add_get("/broken", broken)
    app.router.add_get("/style.css", style)
    app.router.add_get("/feed/json", feed)
    return app


def test_workers_against_local_server() -> None:
    async def scenario():
        async with TestServer(_app()) as server:
            grabber = DoctypeGrabber(timeout=5)
            info = await grabber.run(str(server.make_url("/")))
            with pytest.raises(WorkerError) as excinfo:
                await grabber.run(str(server.make_url("/broken")))
            css = await CssMinifier(timeout=5).run(str(server.make_url("/style.css")))
            lipsum = await LipsumClient(feed_url=str(server.make_url("/feed/json")), timeout=5).run("5 words")
            return info, str(excinfo.value), css, lipsum

    info, error, css, lipsum = asyncio.run(scenario())

    assert info.doctype == "HTML5"
    assert info.mime == "text/html"
    assert error == "Network error: 500 Internal Server Error"
    assert css.css == "body{margin:0}"
    assert css.saved > 0
    assert lipsum.text == "Lorem ipsum\n\ndolor sit amet."


def test_doctype_pipeline_renders_network_error() -> None:
    async def scenario():
        async with TestServer(_app()) as server:
            url = str(server.make_url("/broken"))
            pipeline = build_pipeline("doctype", {"addressed": False}, {"timeout": 5})
            message = IncomingMessage(
                sender_mask="Zoffix!~zoffix@host",
                message_type=MessageType.PUBLIC,
                channel="#zofbot",
                raw_text=f"doctype {url}",
            )
            return url, await pipeline.handle(message)

    url, event = asyncio.run(scenario())

    assert event.error == "Network error: 500 Internal Server Error"
    assert event.out.startswith("Zoffix, [")
    assert event.out.endswith("] Network error: 500 Internal Server Error")


def test_lipsum_pipeline_collapses_whitespace() -> None:
    async def scenario():
        async with TestServer(_app()) as server:
            pipeline = build_pipeline(
                "lipsum",
                {"addressed": False},
                {"feed_url": str(server.make_url("/feed/json")), "timeout": 5},
            )
            message = IncomingMessage(
                sender_mask="Zoffix!~zoffix@host",
                message_type=MessageType.PRIVATE,
                channel=None,
                raw_text="lipsum 5 words",
            )
            return await pipeline.handle(message)

    event = asyncio.run(scenario())

    assert event.out == "Lorem ipsum dolor sit amet."
