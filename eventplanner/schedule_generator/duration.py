import math
from dataclasses import dataclass
from typing import Optional

from eventplanner.schedule_generator.time_parser import MINUTES_PER_DAY, minutes_of, parse_time


FORMAT_ERROR = "Format Error"

# Date-serial arithmetic in the sheet leaves a few hundredths of a minute of noise
ONE_HOUR_TOLERANCE = (59.98, 60.02)


@dataclass(frozen=True)
class DurationResult:
    label: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def format_minutes(total_minutes: float) -> str:
    """Label a positive number of minutes as 'Nh', 'Nm' or 'Nh Mm'"""
    if ONE_HOUR_TOLERANCE[0] <= total_minutes <= ONE_HOUR_TOLERANCE[1]:
        return "1h"

    hours = math.floor(total_minutes / 60)
    minutes = round(total_minutes - hours * 60)
    if minutes == 60:
        hours, minutes = hours + 1, 0

    if hours == 0 and minutes == 0:
        return "0m"
    if minutes == 0:
        return f"{hours}h"
    if hours == 0:
        return f"{minutes}m"
    return f"{hours}h {minutes}m"


def calculate_duration(start, end) -> DurationResult:
    """
    Duration label between two times of day.

    A blank start or end gives an empty label. An end before the start is
    taken to be on the next day.
    """
    if _is_blank(start) or _is_blank(end):
        return DurationResult()

    start_result = parse_time(start)
    end_result = parse_time(end)
    if not start_result.ok:
        return DurationResult(error=start_result.error)
    if not end_result.ok:
        return DurationResult(error=end_result.error)

    total_minutes = minutes_of(end_result.value) - minutes_of(start_result.value)
    if total_minutes < 0:
        total_minutes += MINUTES_PER_DAY

    return DurationResult(label=format_minutes(total_minutes))


def duration_cell(start, end) -> str:
    """Duration as written to the Duration column"""
    result = calculate_duration(start, end)
    return result.label if result.ok else FORMAT_ERROR
