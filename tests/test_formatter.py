from __future__ import annotations

from core.formatter import format_response, response_prefix, shorten_url, truncate
from core.models import Failure, MessageType, RequestMetadata, Success


def _metadata(message_type: MessageType = MessageType.PUBLIC, payload: str = "zoffix.com") -> RequestMetadata:
    return RequestMetadata(
        sender_mask="Zoffix!~zoffix@unaffiliated/zoffix",
        message_type=message_type,
        channel="#zofbot" if message_type is MessageType.PUBLIC else None,
        original_text=f"DoctypeBot, doctype {payload}",
        payload=payload,
    )


def _render(data, metadata) -> str:
    return str(data)


def test_failure_with_page_is_prefixed_with_short_url() -> None:
    response = format_response(
        Failure("Network error: 500"),
        _metadata(),
        max_length=350,
        render_success=_render,
        page="zoffix.com",
    )
    assert response.text == "Zoffix, [zoffix.com] Network error: 500"
    assert response.truncated is False


def test_failure_without_page() -> None:
    response = format_response(
        Failure("Invalid input"),
        _metadata(MessageType.PRIVATE),
        max_length=350,
        render_success=_render,
    )
    assert response.text == "Invalid input"


def test_success_uses_renderer_and_prefix() -> None:
    response = format_response(Success("HTML5"), _metadata(), 350, _render)
    assert response.text == "Zoffix, HTML5"
    notice = format_response(Success("HTML5"), _metadata(MessageType.NOTICE), 350, _render)
    assert notice.text == "HTML5"


def test_prefix_only_for_public_messages() -> None:
    assert response_prefix(_metadata()) == "Zoffix, "
    assert response_prefix(_metadata(MessageType.NOTICE)) == ""
    assert response_prefix(_metadata(MessageType.PRIVATE)) == ""


def test_long_output_is_truncated_with_marker() -> None:
    response = format_response(Success("x" * 50), _metadata(MessageType.PRIVATE), 10, _render)
    assert response.text == "x" * 10 + "..."
    assert response.truncated is True


def test_truncate_boundary() -> None:
    assert truncate("abcde", 5) == ("abcde", False)
    assert truncate("abcdef", 5) == ("abcde...", True)
    assert truncate("", 5) == ("", False)


def test_shorten_url_strips_scheme_and_extension() -> None:
    assert shorten_url("http://zoffix.com/new/del/test.html") == "zoffix.c.../test"
    assert shorten_url("https://www.zoffix.com") == "zoffix.com"
    assert shorten_url("www.example.com/a.php") == "example.com/a"
    assert shorten_url("FTP://host.org/style.CSS") == "host.org/style"


def test_shorten_url_keeps_short_values() -> None:
    assert shorten_url("zoffix.com") == "zoffix.com"
    assert shorten_url("a" * 16) == "a" * 16
    assert shorten_url("a" * 17) == "aaaaaaaa...aaaaa"


def test_shorten_url_is_idempotent() -> None:
    for url in (
        "http://zoffix.com/new/del/test.html",
        "https://www.w3.org/TR/html401/struct/global.html",
        "zoffix.com",
        "http://example.com/a/very/long/path/to/page",
        "http://www.www.example.org",
        "foo.html.html",
        "aaaaaaaaaaaaaaaaaa.pl.css",
        "http://example.com/pages/index.shtml",
        "https://https://example.com",
    ):
        once = shorten_url(url)
        assert shorten_url(once) == once


def test_shorten_url_strips_repeated_prefixes_and_extensions() -> None:
    assert shorten_url("http://www.www.example.org") == "example.org"
    assert shorten_url("foo.html.html") == "foo"
    assert shorten_url("aaaaaaaaaaaaaaaaaa.pl.css") == "aaaaaaaa...aa"
