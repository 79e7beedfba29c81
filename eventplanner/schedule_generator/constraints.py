"""
Constraint checks applied to every proposed session.

Sessions are snapped to the approved location list and clamped into the
event's date range and daily time window. Corrections are silent and
deterministic; they are logged at DEBUG level only.
"""

import logging
from datetime import date, time
from typing import List, Optional, Tuple

from eventplanner.models import EventWindow
from eventplanner.schedule_generator.time_parser import minutes_of, time_from_minutes


logger = logging.getLogger(__name__)

MIN_SESSION_MINUTES = 15
DEFAULT_SESSION_MINUTES = 60
UNKNOWN_LOCATION = "TBD"


def validate_location(proposed: Optional[str], approved: List[str]) -> str:
    """
    Snap a proposed location to the approved list.

    Exact (case-insensitive) matches return the approved spelling, then a
    substring match in either direction. Unknown locations are kept so they
    can be reviewed by hand.
    """
    proposed = (proposed or "").strip()
    if not approved:
        return proposed or UNKNOWN_LOCATION
    if not proposed:
        return approved[0]

    lowered = proposed.lower()
    for location in approved:
        if location.lower() == lowered:
            return location

    for location in approved:
        candidate = location.lower()
        if candidate and (candidate in lowered or lowered in candidate):
            logger.debug(f"Location {proposed!r} snapped to {location!r}")
            return location

    logger.debug(f"Location {proposed!r} is not on the approved list")
    return proposed


def clamp_date(value: date, window: EventWindow) -> date:
    if value < window.start_date:
        return window.start_date
    if value > window.end_date:
        return window.end_date
    return value


def clamp_to_window(start: time, end: time, window: EventWindow) -> Tuple[time, time]:
    """
    Move a session inside the daily time window.

    A session starting too early is shifted to the daily start, keeping its
    length. A session ending too late is cut at the daily end; if less than
    MIN_SESSION_MINUTES remain the start is pulled back, but never before the
    daily start.
    """
    earliest = minutes_of(window.daily_start_time)
    latest = minutes_of(window.daily_end_time)
    start_minutes = minutes_of(start)
    end_minutes = minutes_of(end)

    if end_minutes <= start_minutes:
        end_minutes = start_minutes + DEFAULT_SESSION_MINUTES

    if start_minutes < earliest:
        shift = earliest - start_minutes
        start_minutes = earliest
        end_minutes += shift

    if end_minutes > latest:
        end_minutes = latest
        if end_minutes - start_minutes < MIN_SESSION_MINUTES:
            start_minutes = max(earliest, end_minutes - MIN_SESSION_MINUTES)

    clamped = (time_from_minutes(start_minutes), time_from_minutes(end_minutes))
    if clamped != (start, end):
        logger.debug(f"Session {start}-{end} clamped to {clamped[0]}-{clamped[1]}")
    return clamped
