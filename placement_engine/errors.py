"""Domain errors."""

from __future__ import annotations

from typing import Iterable, Optional


class PlacementError(Exception):
    """Base class for domain-specific errors."""

    pass


class DispatchError(PlacementError):
    """A single schedule or cancel request to a notification dispatcher failed."""

    def __init__(self, message: str, alert_id: Optional[int] = None) -> None:
        super().__init__(message)
        self.alert_id = alert_id


class MissingFieldError(PlacementError):
    """A task draft lacks fields required to build reminders."""

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = list(fields)
        super().__init__(f"Please fill in all required fields. Missing: {', '.join(self.fields)}")
