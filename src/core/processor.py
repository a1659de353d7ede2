"""Core command processing pipeline.

This module is transport-agnostic. It only relies on ports for workers and
responders, so the same pipeline runs under IRC, the CLI dry run or tests.

The pipeline enforces a strict order per message:
1) Fast-exit for message types the pipeline doesn't listen for
2) Access control (allow list, then bans)
3) Trigger matching and payload extraction
4) One worker dispatch
5) Response formatting (errors are rendered too)
6) Event emission and optional auto-response
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Optional

from core.access import is_allowed
from core.config import PipelineConfig
from core.dispatcher import RequestDispatcher
from core.events import EventBus
from core.formatter import format_response
from core.models import IncomingMessage, RequestMetadata, ResponseEvent, Success
from core.ports import Plugin, ResponderPort
from core.triggers import match

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandRequest:
    """A message that passed filtering and matching, ready for dispatch."""

    metadata: RequestMetadata
    # Snapshot taken when the message was accepted.
    config: PipelineConfig


class _PluginWorker:
    """Expose a plugin's dispatch hook as a WorkerPort."""

    def __init__(self, plugin: Plugin) -> None:
        self._plugin = plugin

    async def run(self, payload: str, metadata: RequestMetadata) -> Any:
        return await self._plugin.dispatch_to_worker(payload, metadata)


class CommandPipeline:
    """Orchestrates access control, matching, dispatch and formatting."""

    def __init__(
        self,
        plugin: Plugin,
        config: PipelineConfig,
        responder: Optional[ResponderPort] = None,
        events: Optional[EventBus] = None,
        bot_nick: str = "",
    ) -> None:
        self._plugin = plugin
        self._config = config
        self._responder = responder
        self._events = events or EventBus()
        self._worker = _PluginWorker(plugin)
        self.bot_nick = bot_nick

    @property
    def name(self) -> str:
        return self._plugin.name

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def events(self) -> EventBus:
        return self._events

    def reconfigure(self, config: PipelineConfig) -> None:
        """Swap in a new configuration snapshot.

        Requests already accepted keep the snapshot they were accepted with.
        """

        self._config = config
        LOGGER.info("Configuration replaced for %s", self.name)

    def accept(self, message: IncomingMessage) -> Optional[CommandRequest]:
        """Filter and match one message; None means it is not for us."""

        config = self._config
        level = logging.INFO if config.debug else logging.DEBUG
        if message.message_type not in config.listen_for:
            return None

        if not is_allowed(message.sender_mask, config.banned, config.allowed):
            LOGGER.log(level, "%s: access denied for %s", self.name, message.sender_mask)
            return None

        result = match(message, config, self.bot_nick)
        if not result.matched:
            LOGGER.log(level, "%s: no trigger match in %r", self.name, message.raw_text)
            return None

        LOGGER.debug("%s: request from %s: %r", self.name, message.sender_mask, result.payload)
        return CommandRequest(
            metadata=RequestMetadata.from_message(message, result.payload),
            config=config,
        )

    async def process(self, request: CommandRequest) -> ResponseEvent:
        """Dispatch an accepted request and deliver the formatted response."""

        metadata = request.metadata
        config = request.config

        dispatcher = RequestDispatcher(self._worker, timeout=config.timeout)
        result = await dispatcher.dispatch(metadata.payload, metadata)

        page = metadata.payload.strip() if self._plugin.url_based else None
        formatted = format_response(
            result,
            metadata,
            config.max_length,
            self._plugin.render_success,
            page=page,
        )

        succeeded = isinstance(result, Success)
        event = ResponseEvent(
            event_name=config.response_event,
            out=formatted.text,
            who=metadata.sender_mask,
            what=metadata.payload,
            message=metadata.original_text,
            type=metadata.message_type,
            channel=metadata.channel,
            result=result.data if succeeded else None,
            error=None if succeeded else result.message,
            truncated=formatted.truncated,
        )

        await self._events.emit(config.response_event, event)
        if config.auto_respond and self._responder is not None:
            await self._responder.send(event)
        LOGGER.info("%s: answered %s", self.name, metadata.nickname)
        return event

    async def handle(self, message: IncomingMessage) -> Optional[ResponseEvent]:
        """Run the whole pipeline for one message."""

        request = self.accept(message)
        if request is None:
            return None
        return await self.process(request)
