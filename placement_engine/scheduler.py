"""Reminder scheduling.

A confirmed task yields at most three alerts at fixed offsets:

    slot 1  deadline - 60 min   deadline_1h
    slot 2  deadline - 15 min   deadline_final
    slot 3  talk     - 30 min   talk_reminder   (only with a talk time)

Alerts whose fire time is not strictly after `now` are dropped. A task created
14 minutes before its deadline therefore gets no alerts at all, and one created
30 minutes before gets only the final one.

Alert ids are `task_id * multiplier + slot` and do not depend on which slots
survived, so `cancel_reminders` can rebuild them without any stored state.
Callers keep task ids small enough that ids of different tasks cannot overlap
(see `utils.stable_task_id`).

`now` is always passed in; nothing here reads the wall clock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Literal, Optional

from .dispatchers.base import NotificationDispatcher
from .errors import DispatchError
from .models import AlertDescriptor, DeadlineStatus, DispatchReport, ReminderSpec, Urgency


logger = logging.getLogger(__name__)

DEFAULT_ALERT_ID_MULTIPLIER = 100


@dataclass(frozen=True)
class AlertSlot:
    slot: int
    urgency: Urgency
    anchor: Literal["deadline", "talk_time"]
    offset: timedelta
    label: str
    body: str


ALERT_SLOTS = (
    AlertSlot(
        slot=1,
        urgency="deadline_1h",
        anchor="deadline",
        offset=timedelta(minutes=60),
        label="Application Deadline Soon!",
        body="{title} - Deadline in 1 hour",
    ),
    AlertSlot(
        slot=2,
        urgency="deadline_final",
        anchor="deadline",
        offset=timedelta(minutes=15),
        label="URGENT: Deadline in 15 minutes!",
        body="{title} - Apply now or miss the opportunity!",
    ),
    AlertSlot(
        slot=3,
        urgency="talk_reminder",
        anchor="talk_time",
        offset=timedelta(minutes=30),
        label="Pre-placement Talk Starting Soon",
        body="{title} - Talk starts in 30 minutes",
    ),
)


def alert_id(task_id: int, slot: int, multiplier: int = DEFAULT_ALERT_ID_MULTIPLIER) -> int:
    return task_id * multiplier + slot


def reminder_ids(task_id: int, multiplier: int = DEFAULT_ALERT_ID_MULTIPLIER) -> List[int]:
    """Every alert id a task could own, scheduled or not."""
    return [alert_id(task_id, s.slot, multiplier) for s in ALERT_SLOTS]


def schedule_reminders(
    task_id: int,
    title: str,
    deadline: datetime,
    talk_time: Optional[datetime] = None,
    *,
    now: datetime,
    multiplier: int = DEFAULT_ALERT_ID_MULTIPLIER,
) -> List[AlertDescriptor]:
    """Derive the pending alerts for a task.

    `deadline` is required; callers validate it before getting here.

    Returns:
        Alerts in deadline-then-talk order, only those firing after `now`.
    """
    anchors = {"deadline": deadline, "talk_time": talk_time}
    alerts: List[AlertDescriptor] = []

    for s in ALERT_SLOTS:
        anchor = anchors[s.anchor]
        if anchor is None:
            continue
        fire_at = anchor - s.offset
        if fire_at <= now:
            logger.debug("Dropping %s alert for task %s: %s is not after %s", s.urgency, task_id, fire_at, now)
            continue
        alerts.append(
            AlertDescriptor(
                id=alert_id(task_id, s.slot, multiplier),
                task_id=task_id,
                label=s.label,
                message=s.body.format(title=title),
                fire_at=fire_at,
                urgency=s.urgency,
            )
        )

    return alerts


def schedule_for(spec: ReminderSpec, now: datetime, multiplier: int = DEFAULT_ALERT_ID_MULTIPLIER) -> List[AlertDescriptor]:
    return schedule_reminders(
        spec.task_id,
        spec.title,
        spec.deadline,
        spec.talk_time,
        now=now,
        multiplier=multiplier,
    )


def dispatch_reminders(
    alerts: Iterable[AlertDescriptor],
    dispatcher: NotificationDispatcher,
    task_id: Optional[int] = None,
) -> DispatchReport:
    """Hand alerts to a dispatcher one by one.

    A failed alert is recorded and the remaining ones are still attempted;
    nothing already dispatched is rolled back.
    """
    report = DispatchReport(task_id=task_id)
    for alert in alerts:
        try:
            dispatcher.schedule(alert)
        except DispatchError as exc:
            logger.warning("Failed to schedule alert %s (%s): %s", alert.id, alert.urgency, exc)
            report.failed.append(alert.id)
        else:
            report.succeeded.append(alert.id)

    logger.info(
        "Scheduled %d reminders for task: %s (%d failed)",
        len(report.succeeded),
        task_id,
        report.failed_count,
    )
    return report


def cancel_reminders(
    task_id: int,
    dispatcher: NotificationDispatcher,
    multiplier: int = DEFAULT_ALERT_ID_MULTIPLIER,
) -> DispatchReport:
    """Ask the dispatcher to cancel every alert id the task could own.

    Safe to call repeatedly or for a task that never had reminders.
    """
    ids = reminder_ids(task_id, multiplier)
    report = DispatchReport(task_id=task_id)
    try:
        dispatcher.cancel(ids)
    except DispatchError as exc:
        logger.warning("Failed to cancel reminders for task %s: %s", task_id, exc)
        report.failed.extend(ids)
    else:
        report.succeeded.extend(ids)
    return report


def classify_deadline(deadline: datetime, now: datetime) -> DeadlineStatus:
    """Bucket a deadline relative to now for reminder listings."""
    if deadline < now:
        return "overdue"
    if deadline <= now + timedelta(hours=1):
        return "urgent"
    if deadline <= now + timedelta(hours=24):
        return "soon"
    return "upcoming"
