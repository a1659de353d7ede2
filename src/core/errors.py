"""Exceptions raised by the command pipeline."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for pipeline errors."""


class ConfigurationError(PipelineError, ValueError):
    """Invalid pattern or option detected while building a pipeline."""


class WorkerError(PipelineError):
    """A worker could not complete a request.

    The message is shown to the requesting user as-is, so it should read
    like an answer (e.g. "Network error: 500 Internal Server Error").
    """
