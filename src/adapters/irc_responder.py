"""IRC response adapter.

Replies go back the way the request came: channel messages to the channel,
notices as a notice to the sender and private messages as a private
message.
"""

from __future__ import annotations

import logging

from core.models import MessageType, ResponseEvent, nickname_from_mask

LOGGER = logging.getLogger(__name__)


def reply_target(event: ResponseEvent) -> str:
    if event.type is MessageType.PUBLIC and event.channel:
        return event.channel
    return nickname_from_mask(event.who)


class IrcResponder:
    """Responder adapter that sends responses through a pydle client."""

    def __init__(self, client) -> None:
        self._client = client

    async def send(self, event: ResponseEvent) -> None:
        """Send the formatted response line."""

        if not event.out:
            return
        target = reply_target(event)
        if event.type is MessageType.NOTICE:
            await self._client.notice(target, event.out)
        else:
            await self._client.message(target, event.out)
        LOGGER.debug("Sent %s reply to %s", event.event_name, target)
