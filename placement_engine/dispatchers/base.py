"""Base classes for notification dispatchers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ..models import AlertDescriptor


class NotificationDispatcher(ABC):
    """Abstract base class for a local-notification backend.

    Implementations deliver each alert at or after its `fire_at`, best effort.
    A request that cannot be accepted raises `DispatchError`.
    """

    name: str

    @abstractmethod
    def schedule(self, alert: AlertDescriptor) -> None:
        """Queue one alert for delivery."""
        raise NotImplementedError

    @abstractmethod
    def cancel(self, ids: Sequence[int]) -> None:
        """Cancel pending alerts by id; unknown ids are ignored."""
        raise NotImplementedError
