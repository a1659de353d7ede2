"""IRC-to-core message mapping adapter.

This keeps pydle-specific details out of the core pipeline.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from core.models import IncomingMessage, MessageType


def sender_mask(nick: str, user_info: Optional[Mapping[str, Any]] = None) -> str:
    """Build a `nick!user@host` mask from pydle's user table entry.

    Falls back to the bare nick when the server hasn't told us the user
    and host yet; ban/allow patterns then only see the nick.
    """

    if not user_info:
        return nick
    username = user_info.get("username")
    hostname = user_info.get("hostname")
    if username and hostname:
        return f"{nick}!{username}@{hostname}"
    return nick


def build_message(
    message_type: MessageType,
    target: str,
    by: str,
    text: str,
    user_info: Optional[Mapping[str, Any]] = None,
) -> IncomingMessage:
    """Build a core IncomingMessage from pydle callback arguments."""

    channel = target if message_type is not MessageType.PRIVATE and target.startswith(("#", "&")) else None
    return IncomingMessage(
        sender_mask=sender_mask(by, user_info),
        message_type=message_type,
        channel=channel,
        raw_text=text or "",
    )
