"""Utility helpers shared across the engine."""

from __future__ import annotations

import hashlib
from typing import Optional

# Platform notification ids are signed 32-bit integers.
MAX_NOTIFICATION_ID = 2**31 - 1


def clean_capture(value: Optional[str]) -> Optional[str]:
    """Trim a regex capture; return None when nothing meaningful is left.

    Inner whitespace is kept as matched.
    """
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def max_task_id(multiplier: int, slots: int = 3) -> int:
    """Largest task id whose derived alert ids still fit a notification id."""
    return (MAX_NOTIFICATION_ID - slots) // multiplier


def stable_task_id(*parts: str, multiplier: int = 100) -> int:
    """Create a deterministic task id from a set of string parts.

    The id lands in ``[1, max_task_id(multiplier)]`` so that
    ``task_id * multiplier + slot`` never overflows a notification id.
    """
    joined = "|".join(p.strip() for p in parts if p is not None)
    digest = hashlib.sha256(joined.encode("utf-8")).hexdigest()
    return int(digest[:15], 16) % max_task_id(multiplier) + 1
