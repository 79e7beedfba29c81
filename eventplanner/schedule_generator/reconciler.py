"""
Reconciles a model's schedule reply into validated schedule rows.

The reply is untrusted. It is read in stages, first success wins:

1. structured: the embedded JSON object (repaired once if truncated) with a
   ``schedule`` array;
2. extracted: free-text lines such as ``9:00 AM - 10:00 AM Keynote (Main Hall)``
   under ``Day 1`` / ``Day 2`` headings;
3. synthesized: a single one-hour "Opening Session" at the daily start.

Every candidate then goes through the same validation and the rows are
sorted by date and start time. The result is never empty.
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import List, Optional

from dateutil import parser as dateutil_parser
from pydantic import ValidationError

from eventplanner.models import (
    DEFAULT_STATUS,
    DEFAULT_TITLE,
    OPENING_SESSION_TITLE,
    EventWindow,
    ExtractedCandidate,
    ParsedCandidate,
    ScheduleRow,
    StructuredCandidate,
    SynthesizedCandidate,
)
from eventplanner.schedule_generator.constraints import (
    DEFAULT_SESSION_MINUTES,
    clamp_date,
    clamp_to_window,
    validate_location,
)
from eventplanner.schedule_generator.json_repair import parse_json_object
from eventplanner.schedule_generator.time_parser import (
    format_time,
    minutes_of,
    parse_time,
    time_from_minutes,
)


logger = logging.getLogger(__name__)

DAY_WORDS = {
    'one': 1, 'two': 2, 'three': 3, 'four': 4, 'five': 5,
    'six': 6, 'seven': 7, 'eight': 8, 'nine': 9, 'ten': 10,
    'first': 1, 'second': 2, 'third': 3, 'fourth': 4, 'fifth': 5,
    'sixth': 6, 'seventh': 7, 'eighth': 8, 'ninth': 9, 'tenth': 10,
}
_NUMBER_WORDS = '|'.join(DAY_WORDS)
DAY_MARKER = re.compile(
    rf'\bday\s*(\d+|{_NUMBER_WORDS})\b|\b({_NUMBER_WORDS})\s+day\b',
    re.IGNORECASE,
)
TIME_RANGE = re.compile(
    r'(\d{1,2}[:.]\d{2}\s*(?:AM|PM))\s*(?:-|–|—|to)\s*(\d{1,2}[:.]\d{2}\s*(?:AM|PM))',
    re.IGNORECASE,
)
LOCATION_HINT = re.compile(r'[(\[](.*?)[)\]]')
TITLE_SEPARATORS = ' \t:-–—|*•'


def parse_structured(text: str) -> Optional[List[StructuredCandidate]]:
    """Candidates from the reply's JSON ``schedule`` array, or None"""
    data = parse_json_object(text)
    if data is None:
        return None

    items = data.get('schedule')
    if not isinstance(items, list):
        logger.info("JSON response has no schedule array")
        return None

    candidates = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            candidates.append(StructuredCandidate.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed schedule item {item}: {e}")

    if not candidates:
        logger.info("JSON schedule array has no usable sessions")
        return None
    return candidates


def _day_offset(line: str, window: EventWindow) -> Optional[int]:
    match = DAY_MARKER.search(line)
    if not match:
        return None
    token = (match.group(1) or match.group(2)).lower()
    number = int(token) if token.isdigit() else DAY_WORDS[token]
    # Markers past the last day land on the last day
    return min(max(number - 1, 0), window.duration_days - 1)


def _first_of_day(candidates: List[ParsedCandidate], current_date: date) -> bool:
    # Compares against the previous extracted line only, before any sorting
    return not candidates or candidates[-1].date != current_date


def extract_unstructured(text: str, window: EventWindow, approved: List[str]) -> List[ParsedCandidate]:
    """
    Candidates from free-text lines of the reply.

    Falls back to a single synthesized opening session when no time range
    could be found.
    """
    candidates: List[ParsedCandidate] = []
    current_date = window.start_date

    for raw_line in (text or '').splitlines():
        line = raw_line.strip()
        if not line:
            continue

        offset = _day_offset(line, window)
        if offset is not None:
            current_date = clamp_date(window.start_date + timedelta(days=offset), window)
            continue

        match = TIME_RANGE.search(line)
        if not match:
            continue

        start = parse_time(match.group(1))
        end = parse_time(match.group(2))
        if not (start.ok and end.ok):
            continue
        start_time, end_time = start.value, end.value

        # The first session of a day must not start before the event does
        if _first_of_day(candidates, current_date) and start_time < window.daily_start_time:
            length = (minutes_of(end_time) - minutes_of(start_time)) % (24 * 60)
            start_time = window.daily_start_time
            if length > 0:
                end_time = time_from_minutes(minutes_of(start_time) + length)

        remainder = line[match.end():].strip(TITLE_SEPARATORS)
        location = approved[0] if approved else ''
        hint = LOCATION_HINT.search(remainder)
        if hint:
            location = validate_location(hint.group(1).strip(), approved)
            remainder = (remainder[:hint.start()] + remainder[hint.end():]).strip(TITLE_SEPARATORS)

        candidates.append(ExtractedCandidate(
            date=current_date,
            start_time=format_time(start_time),
            end_time=format_time(end_time),
            title=remainder or DEFAULT_TITLE,
            speaker='',
            location=location,
            status=DEFAULT_STATUS,
            source_line=line,
        ))

    if not candidates:
        logger.info("No sessions found in response text, using default opening session")
        return [default_session(window, approved)]

    logger.info(f"Extracted {len(candidates)} sessions from unstructured response")
    return candidates


def default_session(window: EventWindow, approved: List[str]) -> SynthesizedCandidate:
    start = window.daily_start_time
    end = time_from_minutes(minutes_of(start) + DEFAULT_SESSION_MINUTES)
    return SynthesizedCandidate(
        date=window.start_date,
        start_time=format_time(start),
        end_time=format_time(end),
        title=OPENING_SESSION_TITLE,
        speaker='',
        location=approved[0] if approved else '',
        status=DEFAULT_STATUS,
    )


def resolve_date(value, window: EventWindow) -> date:
    """Date of a candidate, defaulting to the first event day and clamped into the window"""
    resolved = None
    if isinstance(value, datetime):
        resolved = value.date()
    elif isinstance(value, date):
        resolved = value
    elif isinstance(value, str) and value.strip():
        try:
            resolved = date.fromisoformat(value.strip()[:10])
        except ValueError:
            try:
                resolved = dateutil_parser.parse(value, default=datetime.combine(window.start_date, datetime.min.time())).date()
            except (ValueError, OverflowError):
                logger.debug(f"Unparseable session date {value!r}")

    if resolved is None:
        return window.start_date
    return clamp_date(resolved, window)


def validate_candidate(candidate: ParsedCandidate, window: EventWindow, approved: List[str]) -> ScheduleRow:
    """Turn any candidate into a row that satisfies the schedule invariants"""
    session_date = resolve_date(candidate.date, window)

    start = parse_time(candidate.start_time)
    start_time = start.value if start.ok else window.daily_start_time
    end = parse_time(candidate.end_time)
    if end.ok:
        end_time = end.value
    else:
        end_time = time_from_minutes(minutes_of(start_time) + DEFAULT_SESSION_MINUTES)

    start_time, end_time = clamp_to_window(start_time, end_time, window)

    return ScheduleRow(
        date=session_date,
        start_time=start_time,
        end_time=end_time,
        title=(candidate.title or '').strip() or DEFAULT_TITLE,
        speaker='',
        location=validate_location(candidate.location, approved),
        status=(candidate.status or '').strip() or DEFAULT_STATUS,
        origin=candidate.origin,
    )


def sort_rows(rows: List[ScheduleRow]) -> List[ScheduleRow]:
    return sorted(rows, key=lambda row: (row.date, row.start_time))


def reconcile(raw_text: str, window: EventWindow, approved: List[str]) -> List[ScheduleRow]:
    """
    Reconcile a raw model reply into an ordered list of schedule rows.

    Args:
        raw_text: the model's reply, possibly prose, fenced or truncated JSON
        window: the event's date range and daily bounds
        approved: approved location names, may be empty

    Returns:
        Rows sorted by (date, start time); at least one row.
    """
    candidates: Optional[List[ParsedCandidate]] = parse_structured(raw_text)
    if candidates is None:
        candidates = extract_unstructured(raw_text, window, approved)
    else:
        logger.info(f"Parsed {len(candidates)} sessions from JSON response")

    rows = [validate_candidate(candidate, window, approved) for candidate in candidates]
    return sort_rows(rows)
