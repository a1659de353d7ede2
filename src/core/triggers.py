"""Trigger matching logic (core domain)."""

from __future__ import annotations

import re
from typing import Optional

from core.config import PipelineConfig
from core.models import IncomingMessage, MatchResult, MessageType

# Characters allowed between the bot's nick and the command in addressed
# mode, as in "Bot, cmd", "Bot: cmd" or "Bot~ cmd".
ADDRESS_SEPARATORS = ",:;.!~"


def _address_pattern(bot_nick: str) -> re.Pattern:
    separators = re.escape(ADDRESS_SEPARATORS)
    return re.compile(
        rf"^\s*{re.escape(bot_nick)}(?:[{separators}]\s*|\s+)",
        re.IGNORECASE,
    )


def strip_address(text: str, bot_nick: str) -> Optional[str]:
    """Remove a leading "<nick>," style address, or return None if absent."""

    if not bot_nick:
        return None
    found = _address_pattern(bot_nick).match(text)
    if not found:
        return None
    return text[found.end():]


def _no_match(message: IncomingMessage) -> MatchResult:
    return MatchResult(matched=False, payload="", original_text=message.raw_text)


def match(message: IncomingMessage, config: PipelineConfig, bot_nick: str = "") -> MatchResult:
    """Return the request payload if the message is a command.

    Matching logic:
    - The trigger is the per-type one for the message type when configured,
      otherwise the global trigger.
    - Public messages in addressed mode must start with the bot's nick;
      notices and private messages are never addressed.
    - The trigger must match at the start of the text and is stripped from
      the payload.
    """

    text = message.raw_text
    if config.addressed and message.message_type is MessageType.PUBLIC:
        stripped = strip_address(text, bot_nick)
        if stripped is None:
            return _no_match(message)
        text = stripped

    found = config.trigger_for(message.message_type).match(text)
    if not found:
        return _no_match(message)

    return MatchResult(matched=True, payload=text[found.end():], original_text=message.raw_text)
