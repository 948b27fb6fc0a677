"""Date and time token normalization.

Placement notifications write dates day-first (DD/MM/YYYY, DD.MM.YY, DD-MM-YYYY)
and times as "1.30 PM", "9 AM" or "14:00". This module owns the token grammars
used inside the extraction patterns and the conversion of matched tokens to
naive datetimes.

Conventions:
- day first, month second, always; there is no locale detection
- a 2-digit year is 20YY, so "99" is 2099
- a bare hour without AM/PM is taken literally ("14" -> 14:00)

Invalid tokens (31/02/2025, "13 PM") return None instead of raising so that
the caller can treat them as a non-match.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time
from typing import Optional


logger = logging.getLogger(__name__)


# Embedded inside larger patterns; no capture groups of their own.
DATE_TOKEN = r"\d{1,2}[./-]\d{1,2}[./-](?:\d{4}|\d{2})(?!\d)"
TIME_TOKEN = r"\d{1,2}(?:[.:]\d{2})?(?:\s*(?:am|pm)\b)?(?![.:]?\d)"

DATE_SPLIT_RE = re.compile(r"[./-]")
TIME_RE = re.compile(r"(\d{1,2})(?:[.:](\d{2}))?\s*(am|pm)?", flags=re.IGNORECASE)


def parse_date(token: str) -> Optional[date]:
    """Parse a D[./-]M[./-]Y token into a calendar date."""
    parts = DATE_SPLIT_RE.split((token or "").strip())
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        logger.debug("Unrecognised date token: %r", token)
        return None

    day, month, year = parts
    if len(year) == 2:
        year = "20" + year

    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        logger.debug("Date token is not a calendar date: %r", token)
        return None


def parse_time(token: str) -> Optional[time]:
    """Parse an H[.:MM] [AM|PM] token into a time of day."""
    m = TIME_RE.fullmatch((token or "").strip())
    if not m:
        logger.debug("Unrecognised time token: %r", token)
        return None

    hours = int(m.group(1))
    minutes = int(m.group(2) or 0)
    meridiem = (m.group(3) or "").upper()

    if meridiem == "PM" and hours != 12:
        hours += 12
    elif meridiem == "AM" and hours == 12:
        hours = 0

    try:
        return time(hours, minutes)
    except ValueError:
        logger.debug("Time token out of range: %r", token)
        return None


def parse_datetime(date_token: str, time_token: Optional[str] = None) -> Optional[datetime]:
    """Combine a date token and an optional time token.

    Without a time token the result is midnight of that date.
    """
    d = parse_date(date_token)
    if d is None:
        return None
    if time_token is None:
        return datetime.combine(d, time.min)

    t = parse_time(time_token)
    if t is None:
        return None
    return datetime.combine(d, t)


def format_form_datetime(value: datetime) -> str:
    """Render a datetime as a datetime-local form value (YYYY-MM-DDTHH:MM)."""
    return value.strftime("%Y-%m-%dT%H:%M")
