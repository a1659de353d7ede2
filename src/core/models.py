"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types. Every instance lives for a
single incoming message.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class MessageType(str, Enum):
    """Kind of IRC message a request arrived with."""

    PUBLIC = "public"
    NOTICE = "notice"
    PRIVATE = "private"

    @classmethod
    def parse(cls, value: Union[str, "MessageType"]) -> "MessageType":
        """Accept enum members, their values and the `privmsg` alias."""

        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        if normalized == "privmsg":
            return cls.PRIVATE
        return cls(normalized)


def nickname_from_mask(sender_mask: str) -> str:
    """Return the nickname part of a `nick!user@host` mask."""

    return sender_mask.split("!", 1)[0]


@dataclass(frozen=True)
class IncomingMessage:
    """Minimal message context used by the core pipeline."""

    sender_mask: str
    message_type: MessageType
    channel: Optional[str]
    raw_text: str

    @property
    def nickname(self) -> str:
        return nickname_from_mask(self.sender_mask)


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    payload: str
    original_text: str


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool


@dataclass(frozen=True)
class RequestMetadata:
    """Data carried from the incoming message through to the response."""

    sender_mask: str
    message_type: MessageType
    channel: Optional[str]
    original_text: str
    payload: str

    @property
    def nickname(self) -> str:
        return nickname_from_mask(self.sender_mask)

    @classmethod
    def from_message(cls, message: IncomingMessage, payload: str) -> "RequestMetadata":
        return cls(
            sender_mask=message.sender_mask,
            message_type=message.message_type,
            channel=message.channel,
            original_text=message.raw_text,
            payload=payload,
        )


@dataclass(frozen=True)
class Success:
    """Worker finished; `data` is the plugin-specific structured result."""

    data: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Worker reported an error meant for the requesting user."""

    message: str

    @property
    def ok(self) -> bool:
        return False


WorkerResult = Union[Success, Failure]


@dataclass(frozen=True)
class FormattedResponse:
    text: str
    truncated: bool


@dataclass(frozen=True)
class ResponseEvent:
    """Result of one request, emitted under the pipeline's response event.

    Exactly one of `result` and `error` is set.
    """

    event_name: str
    out: str
    who: str
    what: str
    message: str
    type: MessageType
    channel: Optional[str]
    result: Any = None
    error: Optional[str] = None
    truncated: bool = False
