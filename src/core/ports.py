"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for workers, responders and plugins so
that the core can be reused with different transports and services.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from core.models import RequestMetadata, ResponseEvent


class WorkerPort(Protocol):
    """Performs the domain task for one request.

    Returns the structured result or raises WorkerError.
    """

    async def run(self, payload: str, metadata: RequestMetadata) -> Any:
        ...


class ResponderPort(Protocol):
    """Delivers a finished response back to the requester."""

    async def send(self, event: ResponseEvent) -> None:
        ...


class Plugin(Protocol):
    """Capabilities a domain plugs into the shared pipeline."""

    name: str
    # URL pipelines prefix error lines with the shortened page.
    url_based: bool

    def default_config(self) -> Mapping[str, Any]:
        ...

    async def dispatch_to_worker(self, payload: str, metadata: RequestMetadata) -> Any:
        ...

    def render_success(self, data: Any, metadata: RequestMetadata) -> str:
        ...
