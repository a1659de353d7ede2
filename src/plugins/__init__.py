"""Domain plugins for the command pipeline.

Each plugin supplies default options, a worker call and a success renderer;
the shared pipeline does everything else.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from core.config import build_pipeline_config
from core.errors import ConfigurationError
from core.events import EventBus
from core.ports import Plugin, ResponderPort
from core.processor import CommandPipeline
from plugins.css_minifier import CssMinifierPlugin
from plugins.doctype import DoctypePlugin
from plugins.lipsum import LipsumPlugin
from plugins.mailto import MailtoPlugin

PLUGINS: dict[str, Callable[..., Plugin]] = {
    MailtoPlugin.name: MailtoPlugin,
    DoctypePlugin.name: DoctypePlugin,
    CssMinifierPlugin.name: CssMinifierPlugin,
    LipsumPlugin.name: LipsumPlugin,
}


def create_plugin(name: str, worker_options: Mapping[str, Any] | None = None) -> Plugin:
    """Instantiate a plugin by name, passing worker options (e.g. timeout)."""

    factory = PLUGINS.get(name)
    if factory is None:
        known = ", ".join(sorted(PLUGINS))
        raise ConfigurationError(f"Unknown plugin {name!r} (available: {known})")
    return factory(**dict(worker_options or {}))


def build_pipeline(
    name: str,
    options: Mapping[str, Any] | None = None,
    worker_options: Mapping[str, Any] | None = None,
    responder: ResponderPort | None = None,
    events: EventBus | None = None,
    bot_nick: str = "",
) -> CommandPipeline:
    """Create a plugin and its pipeline, validating options up front."""

    plugin = create_plugin(name, worker_options)
    config = build_pipeline_config(options, defaults=plugin.default_config())
    return CommandPipeline(plugin, config, responder=responder, events=events, bot_nick=bot_nick)
