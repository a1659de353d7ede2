"""IRC client for the webdev bots.

The client only translates between pydle callbacks and the core pipelines:
every incoming message is offered to each pipeline in order and accepted
requests run as their own tasks, so a slow worker never holds up the
connection.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Iterable, Optional

import pydle
from dotenv import load_dotenv

from adapters.irc_mapper import build_message
from core.models import MessageType
from core.processor import CommandPipeline, CommandRequest

LOGGER = logging.getLogger(__name__)

# Seconds to wait before each reconnect; the last value repeats.
RECONNECT_DELAYS = (2, 5, 15, 30, 60)


class WebDevBot(pydle.Client):
    """pydle client that routes messages into command pipelines."""

    # stay_connected owns reconnects.
    RECONNECT_ON_ERROR = False

    def __init__(self, nickname: str, channels: Iterable[str], **kwargs) -> None:
        super().__init__(nickname, **kwargs)
        self._channels = list(channels)
        self._pipelines: list[CommandPipeline] = []
        self._tasks: set[asyncio.Task] = set()

    @property
    def pipelines(self) -> list[CommandPipeline]:
        return list(self._pipelines)

    def add_pipeline(self, pipeline: CommandPipeline) -> None:
        self._pipelines.append(pipeline)

    async def on_connect(self) -> None:
        await super().on_connect()
        LOGGER.info("Connected as %s", self.nickname)
        for channel in self._channels:
            await self.join(channel)

    async def on_channel_message(self, target, by, message) -> None:
        await super().on_channel_message(target, by, message)
        self._route(MessageType.PUBLIC, target, by, message)

    async def on_private_message(self, target, by, message) -> None:
        await super().on_private_message(target, by, message)
        self._route(MessageType.PRIVATE, target, by, message)

    async def on_notice(self, target, by, message) -> None:
        await super().on_notice(target, by, message)
        self._route(MessageType.NOTICE, target, by, message)

    def _route(self, message_type: MessageType, target: str, by: str, text: str) -> None:
        if by is None or self.is_same_nick(self.nickname, by):
            return

        message = build_message(message_type, target, by, text, self.users.get(by))
        for pipeline in self._pipelines:
            # Our nick can change after a collision, so addressed mode reads it per message.
            pipeline.bot_nick = self.nickname
            request = pipeline.accept(message)
            if request is None:
                continue
            self._spawn(pipeline, request)
            if request.config.eat:
                break

    def _spawn(self, pipeline: CommandPipeline, request: CommandRequest) -> None:
        task = asyncio.create_task(self._process(pipeline, request))
        # Keep a reference until the task finishes so it isn't garbage collected.
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _process(self, pipeline: CommandPipeline, request: CommandRequest) -> None:
        try:
            await pipeline.process(request)
        except Exception:
            LOGGER.exception("Error while processing %s request", pipeline.name)


def build_client(
    nickname: str,
    channels: Iterable[str],
    realname: Optional[str] = None,
    sasl_username: Optional[str] = None,
) -> WebDevBot:
    """Create the IRC client.

    SASL_PASSWORD is read via python-dotenv to keep secrets out of the
    config file; SASL is only enabled when both username and password exist.
    """

    load_dotenv()

    kwargs = {"realname": realname or nickname}
    sasl_password = os.getenv("SASL_PASSWORD")
    if sasl_username and sasl_password:
        kwargs.update(sasl_username=sasl_username, sasl_password=sasl_password)

    LOGGER.info("Initializing IRC client %s", nickname)
    return WebDevBot(nickname, channels, **kwargs)


async def stay_connected(
    client: pydle.Client,
    hostname: str,
    port: int,
    tls: bool,
    tls_verify: bool = True,
) -> None:
    """Keep the client online, reconnecting after drops and refused connects."""

    password = os.getenv("IRC_PASSWORD") or None
    failures = 0
    while True:
        try:
            await client.connect(
                hostname=hostname,
                port=port,
                password=password,
                tls=tls,
                tls_verify=tls_verify,
            )
        except OSError as exc:
            LOGGER.warning("Cannot reach %s:%s: %s", hostname, port, exc)
            failures += 1
        else:
            failures = 0
            # connect() returns once the read loop is running.
            while client.connected:
                await asyncio.sleep(1)
            LOGGER.info("Disconnected from %s", hostname)

        delay = RECONNECT_DELAYS[min(failures, len(RECONNECT_DELAYS) - 1)]
        LOGGER.info("Reconnecting in %ss", delay)
        await asyncio.sleep(delay)
