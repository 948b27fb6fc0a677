"""CLI entry point.

This script extracts placement details from a pasted notification, derives the
task's reminders, and optionally hands them to the configured HTTP relay.

Examples:
    python run_extract.py notification.txt
    pbpaste | python run_extract.py - --out task.json
    python run_extract.py notification.txt --title "Acme SDE" --dispatch
    python run_extract.py --cancel 42

The output is a JSON object with the extraction, the suggested task record and
the derived alerts.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from placement_engine.config import get_settings
from placement_engine.dispatchers.base import NotificationDispatcher
from placement_engine.dispatchers.memory import InMemoryDispatcher
from placement_engine.dispatchers.webhook import WebhookDispatcher
from placement_engine.errors import MissingFieldError
from placement_engine.extract import extract, merge_extraction
from placement_engine.models import TaskDraft
from placement_engine.normalize import format_form_datetime
from placement_engine.scheduler import cancel_reminders, dispatch_reminders, schedule_for
from placement_engine.utils import stable_task_id


logger = logging.getLogger("placement_engine.cli")


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Extract placement details and schedule reminders.")
    p.add_argument("source", nargs="?", default="-", help="Notification text file, or '-' for stdin.")
    p.add_argument("--out", type=str, default=None, help="Write the JSON result here instead of stdout.")
    p.add_argument("--title", type=str, default=None, help="Override the suggested task title.")
    p.add_argument("--task-id", type=int, default=None, help="Task id (default: derived from the text).")
    p.add_argument(
        "--now",
        type=datetime.fromisoformat,
        default=None,
        help="Reference time as ISO datetime (default: current local time).",
    )
    p.add_argument(
        "--dispatch",
        action="store_true",
        help="Send the alerts to the relay at PLACEMENT_WEBHOOK_URL (default is a dry run).",
    )
    p.add_argument("--cancel", type=int, default=None, metavar="TASK_ID", help="Cancel a task's reminders and exit.")
    return p.parse_args(argv)


def build_dispatcher(dry_run: bool) -> NotificationDispatcher:
    settings = get_settings()
    if dry_run or not settings.webhook_url:
        if not dry_run:
            logger.warning("PLACEMENT_WEBHOOK_URL is not set; alerts are only recorded in memory")
        return InMemoryDispatcher()
    return WebhookDispatcher(
        settings.webhook_url,
        timeout_s=settings.webhook_timeout_s,
        max_retries=settings.webhook_max_retries,
        backoff_s=settings.webhook_backoff_s,
    )


def read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).expanduser().read_text(encoding="utf-8")


def run(args: argparse.Namespace) -> Dict[str, Any]:
    settings = get_settings()
    multiplier = settings.alert_id_multiplier

    if args.cancel is not None:
        report = cancel_reminders(args.cancel, build_dispatcher(dry_run=not args.dispatch), multiplier)
        return {"cancel": report.model_dump()}

    text = read_source(args.source)
    result = extract(text)
    draft = merge_extraction(TaskDraft(), result)
    if args.title:
        draft = draft.model_copy(update={"title": args.title})

    out: Dict[str, Any] = {
        "extraction": result.model_dump(mode="json"),
        "task": draft.to_record(),
        "deadline_input": format_form_datetime(draft.deadline) if draft.deadline else None,
        "alerts": [],
    }

    task_id = args.task_id if args.task_id is not None else stable_task_id(text, multiplier=multiplier)
    try:
        spec = draft.to_reminder_spec(task_id)
    except MissingFieldError as exc:
        logger.warning("Not scheduling reminders: %s", exc)
        return out

    now = args.now or datetime.now()
    alerts = schedule_for(spec, now, multiplier)
    out["task_id"] = task_id
    out["alerts"] = [a.model_dump(mode="json") for a in alerts]

    report = dispatch_reminders(alerts, build_dispatcher(dry_run=not args.dispatch), task_id=task_id)
    out["dispatch"] = report.model_dump()
    return out


def main(argv: Optional[list] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    data = run(args)
    payload = json.dumps(data, indent=2, ensure_ascii=False)

    if args.out:
        out_path = Path(args.out).expanduser().resolve()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(payload, encoding="utf-8")
        print(f"Wrote result to: {out_path}")
    else:
        print(payload)


if __name__ == "__main__":
    main()
