"""Static configuration for the webdev bots.

All user-editable settings (IRC connection, enabled plugins and their
options, logging) live in a single JSON file for quick edits without
touching Python. Secrets come from the environment (.env).
"""

import json
import os

from dotenv import load_dotenv

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

load_dotenv()

# WEBDEV_BOTS_CONFIG lets several bots share one checkout with different files.
CONFIG_PATH = os.getenv("WEBDEV_BOTS_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _normalize_plugins(raw_plugins: dict) -> dict[str, tuple[dict, dict]]:
    """Split each enabled plugin entry into (pipeline options, worker options)."""

    plugins: dict[str, tuple[dict, dict]] = {}
    for name, entry in raw_plugins.items():
        entry = dict(entry or {})
        if not entry.pop("enabled", True):
            continue
        worker_options = entry.pop("worker", {}) or {}
        plugins[name] = (entry, worker_options)
    return plugins


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# IRC connection. Passwords are read from IRC_PASSWORD / SASL_PASSWORD.
_irc = _CONFIG.get("irc", {})
IRC_SERVER = _irc.get("server", "irc.libera.chat")
IRC_TLS = bool(_irc.get("tls", True))
IRC_PORT = int(_irc.get("port", 6697 if IRC_TLS else 6667))
IRC_TLS_VERIFY = bool(_irc.get("tls_verify", True))
IRC_NICK = _irc.get("nick", "WebDevBot")
IRC_REALNAME = _irc.get("realname", IRC_NICK)
IRC_CHANNELS = list(_irc.get("channels", []))
SASL_USERNAME = _irc.get("sasl_username")

# Plugins run in the listed order; the first one that eats a message wins.
PLUGINS = _normalize_plugins(_CONFIG.get("plugins", {}))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
