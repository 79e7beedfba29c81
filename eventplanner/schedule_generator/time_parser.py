"""
Time parsing helpers for schedule cells and model output.

Times are plain ``datetime.time`` values. Arithmetic is done in minutes after
midnight so sessions can be shifted and clamped without dragging a calendar
date along.
"""

import re
from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional


MINUTES_PER_DAY = 24 * 60

# "10:00 AM", "2:30pm", "14:00", "2.30 PM"
TIME_PATTERN = re.compile(r'^(\d{1,2})[:.](\d{2})\s*([AaPp][Mm])?$')


@dataclass(frozen=True)
class TimeParseResult:
    value: Optional[time] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.value is not None


def parse_time(value) -> TimeParseResult:
    """
    Parse a free-text time token into a time of day.

    Accepts ``H:MM``, ``H:MM AM/PM`` and ``H.MM AM/PM``. A ``time`` is
    returned unchanged, a ``datetime`` contributes its time part. Failures are
    reported in the result instead of raised.
    """
    if isinstance(value, datetime):
        return TimeParseResult(value=value.time())
    if isinstance(value, time):
        return TimeParseResult(value=value)
    if value is None:
        return TimeParseResult(error="missing time")

    text = str(value).strip()
    match = TIME_PATTERN.match(text)
    if not match:
        return TimeParseResult(error=f"unrecognised time format: {text!r}")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3).upper() if match.group(3) else None

    if period is not None and not 1 <= hours <= 12:
        return TimeParseResult(error=f"hour out of range for 12-hour clock: {text!r}")

    if period == 'PM' and hours < 12:
        hours += 12
    elif period == 'AM' and hours == 12:
        hours = 0

    if hours > 23 or minutes > 59:
        return TimeParseResult(error=f"time out of range: {text!r}")

    return TimeParseResult(value=time(hours, minutes))


def minutes_of(t: time) -> float:
    """Minutes after midnight, including seconds as a fraction"""
    return t.hour * 60 + t.minute + t.second / 60 + t.microsecond / 60_000_000


def time_from_minutes(minutes: float) -> time:
    """Inverse of minutes_of; wraps past midnight"""
    total = int(round(minutes)) % MINUTES_PER_DAY
    return time(total // 60, total % 60)


def format_time(t: time) -> str:
    """Render a time as 'h:mm AM/PM'"""
    period = 'PM' if t.hour >= 12 else 'AM'
    hour12 = t.hour % 12 or 12
    return f"{hour12}:{t.minute:02d} {period}"
