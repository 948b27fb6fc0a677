"""Data models for the placement engine.

Extraction produces a *partial* record: every field is optional and only set
when a pattern matched. Scheduling consumes a confirmed `ReminderSpec` and
derives immutable `AlertDescriptor`s.

All timestamps are naive local datetimes. Notification text never carries a
time zone, so none is guessed.

This file uses Pydantic v2.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import MissingFieldError


Urgency = Literal["deadline_1h", "deadline_final", "talk_reminder"]

DeadlineStatus = Literal["overdue", "urgent", "soon", "upcoming"]

TaskType = Literal[
    "placement_reminder",
    "team_meeting",
    "assignment_submission",
    "project_deadline",
    "resume_review",
    "custom",
]

TaskPriority = Literal["low", "medium", "high"]


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class ExtractionResult(BaseModel):
    """Fields recovered from a free-text placement notification."""

    company_name: Optional[str] = None
    job_role: Optional[str] = None
    compensation: Optional[str] = Field(
        default=None,
        description="Compensation as written, unit included (e.g. '12 LPA').",
    )
    deadline: Optional[datetime] = None
    talk_time: Optional[datetime] = Field(
        default=None,
        description="Pre-placement talk start, independent of the deadline.",
    )

    @field_validator("company_name", "job_role", "compensation", mode="before")
    @classmethod
    def _strip_text(cls, v: Any) -> Any:
        """Whitespace-only text counts as absent."""
        return _blank_to_none(v)

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class ReminderSpec(BaseModel):
    """A confirmed task, ready for reminder scheduling."""

    model_config = ConfigDict(frozen=True)

    task_id: int
    title: str
    deadline: datetime
    talk_time: Optional[datetime] = None


class AlertDescriptor(BaseModel):
    """One notification request handed to a dispatcher."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="task_id * multiplier + slot.")
    task_id: int
    label: str
    message: str
    fire_at: datetime
    urgency: Urgency


class DispatchReport(BaseModel):
    """Per-alert outcome of a dispatch or cancel batch."""

    task_id: Optional[int] = None
    succeeded: List[int] = Field(default_factory=list)
    failed: List[int] = Field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed


class TaskDraft(BaseModel):
    """The user-editable task form.

    Extraction results are merged into a draft, the user reviews it, and a
    confirmed draft becomes a `ReminderSpec`.
    """

    title: str = ""
    task_type: TaskType = "placement_reminder"
    deadline: Optional[datetime] = None
    priority: TaskPriority = "medium"
    company_name: Optional[str] = None
    job_role: Optional[str] = None
    ctc_lpa: Optional[str] = None
    talk_time: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("company_name", "job_role", "ctc_lpa", "notes", mode="before")
    @classmethod
    def _strip_text(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @property
    def is_placement(self) -> bool:
        return self.task_type == "placement_reminder"

    def missing_fields(self) -> List[str]:
        missing: List[str] = []
        if not self.title.strip():
            missing.append("title")
        if self.deadline is None:
            missing.append("deadline")
        return missing

    def to_reminder_spec(self, task_id: int) -> ReminderSpec:
        """Validate required fields and freeze the draft for scheduling."""
        missing = self.missing_fields()
        if missing:
            raise MissingFieldError(missing)
        return ReminderSpec(
            task_id=task_id,
            title=self.title.strip(),
            deadline=self.deadline,
            talk_time=self.talk_time if self.is_placement else None,
        )

    def to_record(self) -> Dict[str, Any]:
        """JSON-ready row for the surrounding application's task store.

        Placement-only fields are dropped for other task types.
        """
        data = self.model_dump(mode="json")
        if not self.is_placement:
            data.update(company_name=None, job_role=None, ctc_lpa=None, talk_time=None)
        data["progress"] = 0
        data["is_completed"] = False
        return data
