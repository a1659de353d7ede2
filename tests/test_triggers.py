from __future__ import annotations

import re

from core.config import build_pipeline_config
from core.models import IncomingMessage, MessageType
from core.triggers import match, strip_address

DOCTYPE_DEFAULTS = {"trigger": r"doctype\s+", "response_event": "irc_doctype_grabber"}


def _message(text: str, message_type: MessageType = MessageType.PUBLIC) -> IncomingMessage:
    return IncomingMessage(
        sender_mask="Zoffix!~zoffix@unaffiliated/zoffix",
        message_type=message_type,
        channel="#zofbot" if message_type is MessageType.PUBLIC else None,
        raw_text=text,
    )


def test_addressed_public_message_yields_payload() -> None:
    config = build_pipeline_config(defaults=DOCTYPE_DEFAULTS)
    result = match(_message("DoctypeBot, doctype zoffix.com"), config, "DoctypeBot")
    assert result.matched
    assert result.payload == "zoffix.com"
    assert result.original_text == "DoctypeBot, doctype zoffix.com"


def test_addressed_mode_requires_bot_nick() -> None:
    config = build_pipeline_config(defaults=DOCTYPE_DEFAULTS)
    for text in ("doctype zoffix.com", "OtherBot, doctype zoffix.com", "DoctypeBotdoctype zoffix.com"):
        assert not match(_message(text), config, "DoctypeBot").matched


def test_address_separators_and_case() -> None:
    config = build_pipeline_config(defaults=DOCTYPE_DEFAULTS)
    for text in (
        "doctypebot: doctype zoffix.com",
        "DoctypeBot doctype zoffix.com",
        "  DoctypeBot;doctype zoffix.com",
        "DoctypeBot~ doctype zoffix.com",
    ):
        result = match(_message(text), config, "DoctypeBot")
        assert result.matched, text
        assert result.payload == "zoffix.com"


def test_strip_address_returns_none_without_nick() -> None:
    assert strip_address("hello there", "DoctypeBot") is None
    assert strip_address("DoctypeBot, hello", "") is None
    assert strip_address("DoctypeBot, hello", "DoctypeBot") == "hello"


def test_notice_and_private_ignore_addressed_mode() -> None:
    config = build_pipeline_config(defaults=DOCTYPE_DEFAULTS)
    for message_type in (MessageType.NOTICE, MessageType.PRIVATE):
        result = match(_message("doctype zoffix.com", message_type), config, "DoctypeBot")
        assert result.matched
        assert result.payload == "zoffix.com"


def test_unaddressed_public_mode() -> None:
    config = build_pipeline_config({"addressed": False}, defaults=DOCTYPE_DEFAULTS)
    assert match(_message("doctype zoffix.com"), config, "DoctypeBot").payload == "zoffix.com"


def test_trigger_must_match_at_start() -> None:
    config = build_pipeline_config({"addressed": False}, defaults=DOCTYPE_DEFAULTS)
    assert not match(_message("please doctype zoffix.com"), config).matched


def test_per_type_trigger_overrides_global() -> None:
    config = build_pipeline_config(
        {"triggers": {"privmsg": r"^(?:doctype\s+)?(?=\S)"}},
        defaults=DOCTYPE_DEFAULTS,
    )
    private = match(_message("zoffix.com", MessageType.PRIVATE), config)
    assert private.matched
    assert private.payload == "zoffix.com"
    # Notices have no per-type trigger and fall back to the global one.
    assert not match(_message("zoffix.com", MessageType.NOTICE), config).matched


def test_payload_does_not_keep_trigger_prefix() -> None:
    config = build_pipeline_config({"addressed": False}, defaults=DOCTYPE_DEFAULTS)
    trigger = re.compile(r"doctype\s+", re.IGNORECASE)
    result = match(_message("DOCTYPE   zoffix.com"), config)
    assert result.matched
    assert not trigger.match(result.payload)
