"""Named event delivery for pipeline responses."""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Union

from core.models import ResponseEvent

LOGGER = logging.getLogger(__name__)

EventHandler = Callable[[ResponseEvent], Union[None, Awaitable[Any]]]


class EventBus:
    """Dispatch response events to handlers subscribed by event name."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, name: str, handler: EventHandler) -> None:
        self._handlers[name].append(handler)

    def unsubscribe(self, name: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    async def emit(self, name: str, event: ResponseEvent) -> None:
        """Call every handler for `name`; one failing handler doesn't stop the rest."""

        for handler in list(self._handlers.get(name, [])):
            try:
                outcome = handler(event)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception:
                LOGGER.exception("Handler for %s failed", name)
