"""
Schedule Data Models
Pydantic models for the event window, proposed sessions and validated rows
"""

from datetime import date, time
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


DEFAULT_TITLE = "Untitled Session"
DEFAULT_STATUS = "Tentative"
OPENING_SESSION_TITLE = "Opening Session"


class EventWindow(BaseModel):
    """Date range and daily time-of-day bounds for a generated schedule"""
    model_config = ConfigDict(frozen=True)

    start_date: date
    end_date: date
    daily_start_time: time
    daily_end_time: time

    @model_validator(mode='after')
    def _check_bounds(self):
        if self.start_date > self.end_date:
            raise ValueError(f"start_date {self.start_date} is after end_date {self.end_date}")
        if self.daily_start_time >= self.daily_end_time:
            raise ValueError(
                f"daily_start_time {self.daily_start_time} must be before daily_end_time {self.daily_end_time}"
            )
        return self

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days + 1


class SessionCandidate(BaseModel):
    """An untrusted proposed session, before validation"""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    date: Any = None
    start_time: Any = Field(default=None, validation_alias=AliasChoices('startTime', 'start_time', 'start'))
    end_time: Any = Field(default=None, validation_alias=AliasChoices('endTime', 'end_time', 'end'))
    title: Optional[str] = Field(default=None, validation_alias=AliasChoices('title', 'session', 'name'))
    speaker: Optional[str] = Field(default=None, validation_alias=AliasChoices('speaker', 'lead'))
    location: Optional[str] = None
    status: Optional[str] = None

    @field_validator('title', 'speaker', 'location', 'status', mode='before')
    @classmethod
    def _coerce_text(cls, value):
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (int, float)):
            return str(value)
        # Nested objects or lists are not usable as cell text
        return None


class StructuredCandidate(SessionCandidate):
    """Candidate parsed from the JSON payload of a response"""
    origin: Literal['structured'] = 'structured'


class ExtractedCandidate(SessionCandidate):
    """Candidate recovered from a free-text line of a response"""
    origin: Literal['extracted'] = 'extracted'
    source_line: str = ""


class SynthesizedCandidate(SessionCandidate):
    """Default session emitted when nothing could be recovered"""
    origin: Literal['synthesized'] = 'synthesized'


ParsedCandidate = Annotated[
    Union[StructuredCandidate, ExtractedCandidate, SynthesizedCandidate],
    Field(discriminator='origin'),
]


class ScheduleRow(BaseModel):
    """A validated, normalized schedule entry ready to be stored"""
    date: date
    start_time: time
    end_time: time
    title: str = DEFAULT_TITLE
    speaker: Literal[""] = ""
    location: str = ""
    status: str = DEFAULT_STATUS
    origin: Literal['structured', 'extracted', 'synthesized'] = 'structured'

    @model_validator(mode='after')
    def _check_times(self):
        if self.start_time >= self.end_time:
            raise ValueError(f"start_time {self.start_time} must be before end_time {self.end_time}")
        return self

