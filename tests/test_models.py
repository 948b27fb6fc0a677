"""Tests for models, settings and id helpers."""

from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from placement_engine.config import Settings
from placement_engine.errors import MissingFieldError
from placement_engine.models import ExtractionResult, ReminderSpec, TaskDraft
from placement_engine.scheduler import reminder_ids
from placement_engine.utils import MAX_NOTIFICATION_ID, clean_capture, max_task_id, stable_task_id


class TestExtractionResult:
    """Tests for ExtractionResult."""

    def test_whitespace_text_is_absent(self) -> None:
        result = ExtractionResult(company_name="   ", job_role="\t", compensation="")
        assert result.company_name is None
        assert result.job_role is None
        assert result.compensation is None
        assert result.is_empty()

    def test_text_is_trimmed(self) -> None:
        assert ExtractionResult(company_name="  Acme ").company_name == "Acme"


class TestTaskDraft:
    """Tests for TaskDraft."""

    def test_missing_required_fields(self) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            TaskDraft().to_reminder_spec(1)
        assert exc_info.value.fields == ["title", "deadline"]
        assert "title, deadline" in str(exc_info.value)

    def test_to_reminder_spec(self) -> None:
        draft = TaskDraft(
            title=" Acme - SDE Application ",
            deadline=datetime(2025, 12, 25, 13, 30),
            talk_time=datetime(2025, 12, 20, 10, 0),
        )
        spec = draft.to_reminder_spec(42)

        assert spec == ReminderSpec(
            task_id=42,
            title="Acme - SDE Application",
            deadline=datetime(2025, 12, 25, 13, 30),
            talk_time=datetime(2025, 12, 20, 10, 0),
        )

    def test_non_placement_task_has_no_talk_reminder(self) -> None:
        draft = TaskDraft(
            title="Team sync",
            task_type="team_meeting",
            deadline=datetime(2025, 12, 25, 13, 30),
            talk_time=datetime(2025, 12, 20, 10, 0),
        )
        assert draft.to_reminder_spec(1).talk_time is None

    def test_record_drops_placement_fields_for_other_types(self) -> None:
        draft = TaskDraft(
            title="Essay",
            task_type="assignment_submission",
            deadline=datetime(2025, 12, 25, 13, 30),
            company_name="Acme",
            ctc_lpa="12 LPA",
        )
        record = draft.to_record()

        assert record["company_name"] is None
        assert record["ctc_lpa"] is None
        assert record["deadline"] == "2025-12-25T13:30:00"
        assert record["progress"] == 0
        assert record["is_completed"] is False

    def test_record_keeps_placement_fields(self) -> None:
        record = TaskDraft(title="A", company_name="Acme", ctc_lpa="12 LPA").to_record()
        assert record["company_name"] == "Acme"
        assert record["priority"] == "medium"

    def test_unknown_task_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TaskDraft(task_type="party")  # type: ignore[arg-type]


class TestReminderSpec:
    """Tests for ReminderSpec immutability."""

    def test_frozen(self) -> None:
        spec = ReminderSpec(task_id=1, title="T", deadline=datetime(2025, 1, 1))
        with pytest.raises(ValidationError):
            spec.title = "changed"  # type: ignore[misc]


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PLACEMENT_WEBHOOK_URL", raising=False)
        monkeypatch.delenv("PLACEMENT_ALERT_ID_MULTIPLIER", raising=False)
        settings = Settings(_env_file=None)

        assert settings.alert_id_multiplier == 100
        assert settings.webhook_url is None
        assert settings.log_level == "INFO"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLACEMENT_WEBHOOK_URL", " https://relay.example/ ")
        monkeypatch.setenv("PLACEMENT_ALERT_ID_MULTIPLIER", "1000")
        monkeypatch.setenv("PLACEMENT_LOG_LEVEL", "debug")
        settings = Settings(_env_file=None)

        assert settings.webhook_url == "https://relay.example"
        assert settings.alert_id_multiplier == 1000
        assert settings.log_level == "DEBUG"

    def test_multiplier_too_small(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, alert_id_multiplier=2)


class TestUtils:
    """Tests for id and text helpers."""

    def test_clean_capture(self) -> None:
        assert clean_capture("  Acme \t Corp  ") == "Acme \t Corp"
        assert clean_capture("   ") is None
        assert clean_capture(None) is None

    def test_stable_task_id_is_deterministic(self) -> None:
        assert stable_task_id("Acme notification") == stable_task_id("Acme notification")
        assert stable_task_id("Acme notification") != stable_task_id("Initech notification")

    def test_stable_task_id_keeps_alert_ids_in_range(self) -> None:
        for text in ("a", "b", "placement drive", "x" * 500):
            task_id = stable_task_id(text)
            assert 1 <= task_id <= max_task_id(100)
            assert max(reminder_ids(task_id)) <= MAX_NOTIFICATION_ID

    def test_max_task_id_boundary(self) -> None:
        top = max_task_id(100)
        assert top * 100 + 3 <= MAX_NOTIFICATION_ID
        assert (top + 1) * 100 + 3 > MAX_NOTIFICATION_ID
