"""Request dispatching to external workers (core domain)."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from core.errors import WorkerError
from core.models import Failure, RequestMetadata, Success, WorkerResult
from core.ports import WorkerPort

LOGGER = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Request timed out"


class RequestDispatcher:
    """Runs one worker call per request and wraps the outcome.

    No retries are made: a failed call is reported, not repeated. The
    dispatcher holds no per-request state, so any number of dispatches may
    be in flight at once.
    """

    def __init__(self, worker: WorkerPort, timeout: Optional[float] = None) -> None:
        self._worker = worker
        self._timeout = timeout

    async def dispatch(self, payload: str, metadata: RequestMetadata) -> WorkerResult:
        """Forward the payload to the worker and wrap the result."""

        try:
            if self._timeout is None:
                data = await self._worker.run(payload, metadata)
            else:
                data = await asyncio.wait_for(self._worker.run(payload, metadata), self._timeout)
        except WorkerError as exc:
            LOGGER.info("Worker failed for %s: %s", metadata.nickname, exc)
            return Failure(message=str(exc))
        except asyncio.TimeoutError:
            LOGGER.info("Worker timed out for %s", metadata.nickname)
            return Failure(message=TIMEOUT_MESSAGE)
        return Success(data=data)
