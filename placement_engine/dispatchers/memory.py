"""In-process dispatcher that only records pending alerts.

Used by the CLI's dry-run mode and by tests.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from ..models import AlertDescriptor
from .base import NotificationDispatcher


logger = logging.getLogger(__name__)


class InMemoryDispatcher(NotificationDispatcher):
    """Keep scheduled alerts in a dict keyed by alert id."""

    name = "memory"

    def __init__(self) -> None:
        self._pending: Dict[int, AlertDescriptor] = {}

    def schedule(self, alert: AlertDescriptor) -> None:
        # Same id replaces the earlier request, as platform schedulers do.
        self._pending[alert.id] = alert

    def cancel(self, ids: Sequence[int]) -> None:
        for i in ids:
            self._pending.pop(i, None)

    def pending(self) -> List[AlertDescriptor]:
        """Pending alerts ordered by fire time."""
        out = sorted(self._pending.values(), key=lambda a: (a.fire_at, a.id))
        logger.debug("Pending notifications: %d", len(out))
        return out
