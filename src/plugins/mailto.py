"""Anti-spam mailto: link generator."""

from __future__ import annotations

from typing import Any, Mapping

from adapters.html_entities import encode_entities
from core.models import RequestMetadata


class MailtoPlugin:
    """Encode an address so harvesters can't read it from the markup."""

    name = "mailto"
    url_based = False

    def default_config(self) -> Mapping[str, Any]:
        return {
            "trigger": r"^mailto\s+(?=\S)",
            "response_event": "irc_antispam_mailto",
            "max_length": 350,
        }

    async def dispatch_to_worker(self, payload: str, metadata: RequestMetadata) -> str:
        return encode_entities(payload)

    def render_success(self, data: str, metadata: RequestMetadata) -> str:
        return data
