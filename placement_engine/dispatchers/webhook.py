"""HTTP notification relay dispatcher.

Hands alerts to a relay service that owns delivery to the user's device:

    POST {base_url}/notifications           one alert, JSON body
    POST {base_url}/notifications/cancel    {"ids": [...]}

HTTP 429 responses are retried with exponential backoff. Every other HTTP or
transport failure surfaces as `DispatchError` for that single request.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Sequence

import httpx

from ..errors import DispatchError
from ..models import AlertDescriptor
from .base import NotificationDispatcher


logger = logging.getLogger(__name__)


class WebhookDispatcher(NotificationDispatcher):
    """Schedule and cancel alerts through an HTTP relay."""

    name = "webhook"

    def __init__(
        self,
        base_url: str,
        timeout_s: float = 20.0,
        max_retries: int = 3,
        backoff_s: float = 2.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout_s
        self._max_retries = max_retries
        self._backoff_s = backoff_s
        self._transport = transport

    @staticmethod
    def _payload(alert: AlertDescriptor) -> Dict[str, Any]:
        return {
            "id": alert.id,
            "title": alert.label,
            "body": alert.message,
            "fire_at": alert.fire_at.isoformat(),
            "urgency": alert.urgency,
            "extra": {"task_id": str(alert.task_id)},
        }

    def _post(self, path: str, payload: Dict[str, Any], alert_id: Optional[int] = None) -> None:
        url = f"{self.base_url}{path}"
        retries = 0
        with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
            while True:
                try:
                    resp = client.post(url, json=payload)
                    resp.raise_for_status()
                    return
                except httpx.HTTPStatusError as exc:
                    if exc.response.status_code == 429 and retries < self._max_retries:
                        sleep_s = self._backoff_s * (2**retries)
                        logger.debug("Relay rate-limited %s; retrying in %.1fs", url, sleep_s)
                        time.sleep(sleep_s)
                        retries += 1
                        continue
                    raise DispatchError(
                        f"relay returned {exc.response.status_code} for {path}", alert_id=alert_id
                    ) from exc
                except httpx.HTTPError as exc:
                    raise DispatchError(f"relay request to {path} failed: {exc}", alert_id=alert_id) from exc

    def schedule(self, alert: AlertDescriptor) -> None:
        self._post("/notifications", self._payload(alert), alert_id=alert.id)

    def cancel(self, ids: Sequence[int]) -> None:
        self._post("/notifications/cancel", {"ids": list(ids)})
