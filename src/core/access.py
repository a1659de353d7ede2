"""Sender access control (core domain)."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from core.models import AccessDecision


def _matches_any(sender_mask: str, patterns: Iterable[re.Pattern]) -> bool:
    return any(pattern.search(sender_mask) for pattern in patterns)


def is_allowed(
    sender_mask: str,
    banned: Iterable[re.Pattern],
    allowed: Optional[Iterable[re.Pattern]] = None,
) -> bool:
    """Decide whether a sender may use the pipeline.

    Rules:
    - If an allow list is given (even an empty one) the mask must match at
      least one of its patterns; nothing else is checked.
    - Otherwise the mask must not match any ban pattern.

    Patterns are searched against the full `nick!user@host` mask.
    """

    if allowed is not None:
        return _matches_any(sender_mask, allowed)
    return not _matches_any(sender_mask, banned)


def check_access(
    sender_mask: str,
    banned: Iterable[re.Pattern],
    allowed: Optional[Iterable[re.Pattern]] = None,
) -> AccessDecision:
    return AccessDecision(allowed=is_allowed(sender_mask, banned, allowed))
