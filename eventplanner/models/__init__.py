"""
Event Planner Models Package
Contains all Pydantic data models for the event planner
"""

from .schedule import (
    DEFAULT_STATUS,
    DEFAULT_TITLE,
    OPENING_SESSION_TITLE,
    EventWindow,
    SessionCandidate,
    StructuredCandidate,
    ExtractedCandidate,
    SynthesizedCandidate,
    ParsedCandidate,
    ScheduleRow
)

from .event import (
    EventDetails
)

from .tasks import (
    TaskData,
    TaskRow,
    LogisticsItem,
    LogisticsResponse,
    LogisticsRow,
    get_logistics_schema
)

__all__ = [
    # Schedule Models
    'DEFAULT_STATUS',
    'DEFAULT_TITLE',
    'OPENING_SESSION_TITLE',
    'EventWindow',
    'SessionCandidate',
    'StructuredCandidate',
    'ExtractedCandidate',
    'SynthesizedCandidate',
    'ParsedCandidate',
    'ScheduleRow',

    # Event Models
    'EventDetails',

    # Task and Logistics Models
    'TaskData',
    'TaskRow',
    'LogisticsItem',
    'LogisticsResponse',
    'LogisticsRow',
    'get_logistics_schema'
]
