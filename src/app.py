"""Application entry point for the webdev bots."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv

from core.errors import ConfigurationError
from core.models import IncomingMessage, MessageType
from plugins import PLUGINS, build_pipeline, create_plugin

NAME = "WEBDEV BOTS"
FONT = "tarty-1"

DEFAULT_SENDER = "you!user@localhost"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(config: dict, project_root: str) -> None:
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/webdev-bots.log")
        if not os.path.isabs(path):
            path = os.path.join(project_root, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _run() -> None:
    import settings
    from adapters.irc_responder import IrcResponder
    from client import build_client, stay_connected

    _print_banner()
    _configure_logging(settings.LOGGING or {}, settings.PROJECT_ROOT)
    logger = logging.getLogger(__name__)

    logger.info("Starting %s", settings.IRC_NICK)

    if not settings.PLUGINS:
        raise RuntimeError("No plugins enabled in config.json")

    client = build_client(
        settings.IRC_NICK,
        settings.IRC_CHANNELS,
        realname=settings.IRC_REALNAME,
        sasl_username=settings.SASL_USERNAME,
    )
    responder = IrcResponder(client)

    # Pipelines are built before connecting so bad patterns fail fast.
    for name, (options, worker_options) in settings.PLUGINS.items():
        pipeline = build_pipeline(
            name,
            options,
            worker_options,
            responder=responder,
            bot_nick=settings.IRC_NICK,
        )
        client.add_pipeline(pipeline)
        logger.info("Plugin %s loaded (event %s)", name, pipeline.config.response_event)

    try:
        asyncio.run(
            stay_connected(
                client,
                settings.IRC_SERVER,
                settings.IRC_PORT,
                tls=settings.IRC_TLS,
                tls_verify=settings.IRC_TLS_VERIFY,
            )
        )
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


def _try(plugin_name: str, text: str, message_type: str, nick: str, who: str) -> int:
    """Push one message through a plugin's pipeline and print the reply."""

    pipeline = build_pipeline(plugin_name, bot_nick=nick)
    message = IncomingMessage(
        sender_mask=who,
        message_type=MessageType.parse(message_type),
        channel="#test" if message_type == "public" else None,
        raw_text=text,
    )
    event = asyncio.run(pipeline.handle(message))
    if event is None:
        print("(no response: message was filtered out or did not match the trigger)")
        return 1
    print(event.out)
    return 0 if event.error is None else 2


def _list_plugins() -> None:
    for name in PLUGINS:
        defaults = create_plugin(name).default_config()
        print(f"{name:<12} trigger {defaults['trigger']!r:<24} event {defaults['response_event']}")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="webdev-bots")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Connect to IRC with the plugins from config.json")
    subparsers.add_parser("plugins", help="List available plugins")

    try_parser = subparsers.add_parser("try", help="Run one message through a plugin offline")
    try_parser.add_argument("plugin", choices=sorted(PLUGINS))
    try_parser.add_argument("text", help='Message text, e.g. "WebDevBot, mailto foo@bar.com"')
    try_parser.add_argument(
        "--type",
        dest="message_type",
        choices=[kind.value for kind in MessageType],
        default="public",
    )
    try_parser.add_argument("--nick", default="WebDevBot", help="Bot nick for addressed mode")
    try_parser.add_argument("--who", default=DEFAULT_SENDER, help="Sender mask")

    args = parser.parse_args(argv)
    try:
        if args.command == "plugins":
            _list_plugins()
            return 0
        if args.command == "try":
            return _try(args.plugin, args.text, args.message_type, args.nick, args.who)
        _run()
    except ConfigurationError as exc:
        parser.exit(2, f"Configuration error: {exc}\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
