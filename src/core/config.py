"""Core configuration dataclasses.

We keep config file parsing outside the core, but these dataclasses define
the shape the core expects so adapters and app layers can build safely.
A PipelineConfig is an immutable snapshot; changing options at runtime
means building a new snapshot and handing it to the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import re
from typing import Any, Iterable, Mapping, Optional

from core.errors import ConfigurationError
from core.models import MessageType

DEFAULT_MAX_LENGTH = 350

ALL_MESSAGE_TYPES = frozenset(MessageType)

# Original option names are accepted as aliases of the Python ones.
_OPTION_ALIASES = {
    "root": "allowed",
    "listen_for_input": "listen_for",
    "auto": "auto_respond",
}

_KNOWN_OPTIONS = {
    "trigger",
    "triggers",
    "addressed",
    "banned",
    "allowed",
    "listen_for",
    "max_length",
    "auto_respond",
    "response_event",
    "eat",
    "timeout",
    "debug",
    "enabled",
}


@dataclass(frozen=True)
class PipelineConfig:
    """Compiled options of one command pipeline."""

    trigger: re.Pattern
    response_event: str
    triggers: Mapping[MessageType, re.Pattern] = field(default_factory=dict)
    addressed: bool = True
    banned: tuple[re.Pattern, ...] = ()
    # None means "no allow list"; an empty tuple rejects everyone.
    allowed: Optional[tuple[re.Pattern, ...]] = None
    listen_for: frozenset[MessageType] = ALL_MESSAGE_TYPES
    max_length: int = DEFAULT_MAX_LENGTH
    auto_respond: bool = True
    eat: bool = True
    timeout: Optional[float] = None
    debug: bool = False

    def trigger_for(self, message_type: MessageType) -> re.Pattern:
        """Return the per-type trigger when configured, else the global one."""

        return self.triggers.get(message_type, self.trigger)

    def with_banned(self, *patterns: Any) -> "PipelineConfig":
        """Return a new snapshot with extra ban patterns appended."""

        return replace(self, banned=self.banned + _compile_patterns(patterns, "banned"))

    def with_allowed(self, *patterns: Any) -> "PipelineConfig":
        """Return a new snapshot with extra allow patterns appended."""

        current = self.allowed or ()
        return replace(self, allowed=current + _compile_patterns(patterns, "allowed"))


def compile_pattern(value: Any, option: str) -> re.Pattern:
    """Compile a user pattern case-insensitively.

    Precompiled patterns are kept as they are so callers can pass their own
    flags.
    """

    if isinstance(value, re.Pattern):
        return value
    if not isinstance(value, str):
        raise ConfigurationError(f"{option}: expected a regex string, got {value!r}")
    try:
        return re.compile(value, re.IGNORECASE)
    except re.error as exc:
        raise ConfigurationError(f"{option}: invalid regex {value!r}: {exc}") from exc


_LIST_TYPES = (list, tuple, set, frozenset)


def _compile_patterns(values: Iterable[Any], option: str) -> tuple[re.Pattern, ...]:
    if not isinstance(values, _LIST_TYPES):
        raise ConfigurationError(f"{option}: expected a list of patterns")
    return tuple(compile_pattern(value, option) for value in values)


def _flag(options: Mapping[str, Any], name: str, default: bool) -> bool:
    value = options.get(name, default)
    if not isinstance(value, bool):
        raise ConfigurationError(f"{name} must be true or false, got {value!r}")
    return value


def _parse_message_type(value: Any, option: str) -> MessageType:
    try:
        return MessageType.parse(value)
    except ValueError as exc:
        raise ConfigurationError(f"{option}: unknown message type {value!r}") from exc


def _normalize_options(raw: Mapping[str, Any]) -> dict[str, Any]:
    options: dict[str, Any] = {}
    for key, value in raw.items():
        name = _OPTION_ALIASES.get(key, key)
        if name not in _KNOWN_OPTIONS:
            raise ConfigurationError(f"Unknown pipeline option: {key}")
        options[name] = value
    return options


def build_pipeline_config(
    raw: Optional[Mapping[str, Any]] = None,
    defaults: Optional[Mapping[str, Any]] = None,
) -> PipelineConfig:
    """Merge plugin defaults with user options and compile every pattern.

    Raises ConfigurationError for unknown options, bad regexes or values of
    the wrong shape so a broken bot never gets as far as connecting.
    """

    options = _normalize_options(defaults or {})
    options.update(_normalize_options(raw or {}))
    options.pop("enabled", None)

    if "trigger" not in options:
        raise ConfigurationError("trigger is required")
    if not options.get("response_event"):
        raise ConfigurationError("response_event is required")

    triggers_raw = options.get("triggers") or {}
    if not isinstance(triggers_raw, Mapping):
        raise ConfigurationError("triggers: expected a mapping of message type to regex")
    triggers = {
        _parse_message_type(kind, "triggers"): compile_pattern(pattern, f"triggers.{kind}")
        for kind, pattern in triggers_raw.items()
    }

    allowed_raw = options.get("allowed")
    allowed = None if allowed_raw is None else _compile_patterns(allowed_raw, "allowed")

    listen_raw = options.get("listen_for", ALL_MESSAGE_TYPES)
    if not isinstance(listen_raw, _LIST_TYPES):
        raise ConfigurationError("listen_for: expected a list of message types")
    listen_for = frozenset(_parse_message_type(kind, "listen_for") for kind in listen_raw)

    max_length = options.get("max_length", DEFAULT_MAX_LENGTH)
    if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length <= 0:
        raise ConfigurationError(f"max_length must be a positive integer, got {max_length!r}")

    timeout = options.get("timeout")
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigurationError(f"timeout must be a positive number, got {timeout!r}")
        timeout = float(timeout)

    return PipelineConfig(
        trigger=compile_pattern(options["trigger"], "trigger"),
        response_event=str(options["response_event"]),
        triggers=triggers,
        addressed=_flag(options, "addressed", True),
        banned=_compile_patterns(options.get("banned") or (), "banned"),
        allowed=allowed,
        listen_for=listen_for,
        max_length=max_length,
        auto_respond=_flag(options, "auto_respond", True),
        eat=_flag(options, "eat", True),
        timeout=timeout,
        debug=_flag(options, "debug", False),
    )
