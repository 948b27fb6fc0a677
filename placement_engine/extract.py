"""Placement notification field extraction.

Turns a pasted notification (typically forwarded from a chat channel) into a
partial `ExtractionResult`. Each field has an ordered pattern table, most
specific first; the first pattern that yields a usable value wins and the rest
of that field's table is skipped. The tables are module-level so the
precedence is visible and testable.

A usable value means:
- text fields: the capture is non-empty after trimming
- timestamp fields: the date/time tokens parse to a real calendar datetime

Anything else counts as a non-match for that occurrence. Extraction never raises.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from re import Match, Pattern
from typing import Any, Callable, Dict, Optional, Tuple

from .models import ExtractionResult, TaskDraft
from .normalize import DATE_TOKEN, TIME_TOKEN, parse_datetime
from .utils import clean_capture


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldPattern:
    """One row of a pattern table."""

    name: str
    regex: Pattern[str]
    convert: Callable[[Match[str]], Optional[Any]]


def _text(m: Match[str]) -> Optional[str]:
    return clean_capture(m.group(1))


def _date_time(m: Match[str]) -> Optional[datetime]:
    return parse_datetime(m.group("date"), m.group("time"))


def _date_only(m: Match[str]) -> Optional[datetime]:
    return parse_datetime(m.group("date"))


def _row(name: str, pattern: str, convert: Callable[[Match[str]], Optional[Any]], flags: int = re.IGNORECASE) -> FieldPattern:
    return FieldPattern(name=name, regex=re.compile(pattern, flags), convert=convert)


# Rest of the line after a label.
LINE = r"([^\n\r,]+)"
# Rest of the clause after a phrase; stops at sentence punctuation.
PHRASE = r"([^\n\r,;!?]+?)(?=\.(?:\s|$)|[\n\r,;!?]|$)"

DATE = DATE_TOKEN
TIME = TIME_TOKEN
# Separator between a date token and the time token that follows it. Without
# "at", the time needs minutes or AM/PM so "15/08/2025 20 seats" is date-only.
DT_SEP = r",?[ \t]+(?:at[ \t]+|(?=\d{1,2}(?:[.:]\d{2}|[ \t]*(?:am|pm)\b)))"


COMPANY_PATTERNS: Tuple[FieldPattern, ...] = (
    _row("label", r"\b(?:company|organi[sz]ation)(?:[ \t]+name)?[ \t]*:[ \t]*" + LINE, _text),
    _row(
        "legal_suffix",
        r"\b((?:[A-Z][\w&'.-]*[ \t]+)+(?i:pvt\.?[ \t]+ltd|private[ \t]+limited|ltd|limited|inc|corp|corporation|llp|llc))\b",
        _text,
        flags=0,
    ),
    _row("hiring_at", r"\b(?:hiring|recruitment)\s+(?:at|for|by)\s+" + PHRASE, _text),
    # Case-sensitive: the name must be capitalised and not a sentence opener.
    _row(
        "name_is_hiring",
        r"\b(?!(?:This|That|It|There|Here|What|Who|We|He|She|They)\b)"
        r"([A-Z][\w&]*(?:[ \t]+[A-Z][\w&]*)*)[ \t]+(?:is|hiring|recruiting)\b",
        _text,
        flags=0,
    ),
    _row("position_at", r"\bposition\s+at\s+" + PHRASE, _text),
)

ROLE_PATTERNS: Tuple[FieldPattern, ...] = (
    _row("label", r"\b(?:role|position|designation|job(?:[ \t]+title)?)[ \t]*:[ \t]*" + LINE, _text),
    _row("for_as_role", r"\b(?:for|as)\s+(?:an?\s+|the\s+)?([^\n\r,]+?)\s+(?:role|position)\b", _text),
    _row("hiring_for", r"\bhiring\s+for\s+" + PHRASE, _text),
)

COMPENSATION_PATTERNS: Tuple[FieldPattern, ...] = (
    _row("label", r"\b(?:ctc|salary|package)\b[ \t]*:?[ \t]*(\d+(?:\.\d+)?[ \t]*(?:lpa|lakhs?|l)\b)", _text),
    _row("amount_with_unit", r"(?<![\d.])(\d+(?:\.\d+)?[ \t]*(?:lpa|lakhs?)\b)", _text),
    _row("package_of", r"\bpackage[ \t]*(?:of[ \t]*)?(\d+(?:\.\d+)?)\b", _text),
)

DEADLINE_PATTERNS: Tuple[FieldPattern, ...] = (
    _row(
        "apply_by",
        rf"\bapply\s+(?:in\s+the\s+portal\s+)?by\s+(?P<date>{DATE}),?[ \t]+at[ \t]+(?P<time>{TIME})",
        _date_time,
    ),
    _row(
        "deadline_label",
        rf"\b(?:deadline|last\s+date|submit\s+by)\b[ \t]*:?\s*(?P<date>{DATE}){DT_SEP}(?P<time>{TIME})",
        _date_time,
    ),
    _row("before_by", rf"\b(?:before|by)\s+(?P<date>{DATE}),?[ \t]+at[ \t]+(?P<time>{TIME})", _date_time),
)

# Only consulted when no DEADLINE_PATTERNS row produced a value.
DEADLINE_DATE_ONLY_PATTERNS: Tuple[FieldPattern, ...] = (
    _row(
        "deadline_label",
        rf"\b(?:deadline|due(?:[ \t]+date)?|submit\s+by|last\s+date|apply\s+by)\b[ \t]*:?\s*(?P<date>{DATE})",
        _date_only,
    ),
    _row("before_by", rf"\b(?:before|by)\s+(?P<date>{DATE})", _date_only),
)

TALK_PATTERNS: Tuple[FieldPattern, ...] = (
    _row(
        "preplacement_talk",
        rf"\bpre[- ]?placement\s+talk\b[ \t]*:?\s*(?P<date>{DATE})[\s,]+time\b[ \t]*:?\s*(?P<time>{TIME})",
        _date_time,
    ),
    _row(
        "presentation",
        rf"\b(?:presentation|talk|session)\b[ \t]*:?\s*(?P<date>{DATE}){DT_SEP}(?P<time>{TIME})",
        _date_time,
    ),
)

# Tables per field, tried in order; a later table only runs when every
# earlier one came up empty.
FIELD_PATTERNS: Dict[str, Tuple[Tuple[FieldPattern, ...], ...]] = {
    "company_name": (COMPANY_PATTERNS,),
    "job_role": (ROLE_PATTERNS,),
    "compensation": (COMPENSATION_PATTERNS,),
    "deadline": (DEADLINE_PATTERNS, DEADLINE_DATE_ONLY_PATTERNS),
    "talk_time": (TALK_PATTERNS,),
}


def first_match(patterns: Tuple[FieldPattern, ...], text: str, field: str = "") -> Optional[Any]:
    """Return the first usable value produced by an ordered pattern table."""
    for fp in patterns:
        for m in fp.regex.finditer(text):
            try:
                value = fp.convert(m)
            except (ValueError, OverflowError) as exc:
                logger.debug("Pattern %s/%s failed on %r: %s", field, fp.name, m.group(0), exc)
                continue
            if value is not None:
                logger.debug("Pattern %s/%s matched %r", field, fp.name, m.group(0))
                return value
            logger.debug("Pattern %s/%s matched %r but yielded nothing", field, fp.name, m.group(0))
    return None


def extract(text: str) -> ExtractionResult:
    """Extract placement fields from free text.

    Args:
        text: Raw notification text; may be multi-line, noisy, or empty.

    Returns:
        ExtractionResult with only the fields that matched populated.
    """
    text = text or ""

    values: Dict[str, Any] = {}
    for field, tables in FIELD_PATTERNS.items():
        value = None
        for patterns in tables:
            value = first_match(patterns, text, field)
            if value is not None:
                break
        values[field] = value
    return ExtractionResult(**values)


def suggest_title(result: ExtractionResult) -> str:
    """Default task title built from whatever was extracted."""
    return f"{result.company_name or 'Company'} - {result.job_role or 'Position'} Application"


def merge_extraction(draft: TaskDraft, result: ExtractionResult) -> TaskDraft:
    """Copy extracted fields onto a draft without clearing what the user typed.

    Only populated fields overwrite the draft; the title is always regenerated.
    """
    update: Dict[str, Any] = {"title": suggest_title(result)}
    if result.company_name:
        update["company_name"] = result.company_name
    if result.job_role:
        update["job_role"] = result.job_role
    if result.compensation:
        update["ctc_lpa"] = result.compensation
    if result.deadline is not None:
        update["deadline"] = result.deadline
    if result.talk_time is not None:
        update["talk_time"] = result.talk_time
    return draft.model_copy(update=update)
