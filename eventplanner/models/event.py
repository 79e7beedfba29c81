"""
Event Description Data Models
Pydantic model for the details entered on the Event Description sheet
"""

from datetime import date, time
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from eventplanner.models.schedule import EventWindow


class EventDetails(BaseModel):
    """Event information used to build prompts and the event window"""
    event_name: str
    start_date: date
    end_date: Optional[date] = None
    start_time: time = time(9, 0)
    end_time: time = time(17, 0)
    tagline: Optional[str] = None
    theme: Optional[str] = None
    target_audience: Optional[str] = None
    objectives: Optional[str] = None
    description: Optional[str] = None
    success_metrics: Optional[str] = None
    event_website: Optional[str] = None
    location: Optional[str] = None
    attendance_goal: int = Field(default=0, ge=0)

    @model_validator(mode='after')
    def _single_day_default(self):
        # Single-day events leave the end date blank
        if self.end_date is None:
            self.end_date = self.start_date
        return self

    @property
    def duration_days(self) -> int:
        return abs((self.end_date - self.start_date).days) + 1

    def to_window(self) -> EventWindow:
        return EventWindow(
            start_date=min(self.start_date, self.end_date),
            end_date=max(self.start_date, self.end_date),
            daily_start_time=self.start_time,
            daily_end_time=self.end_time,
        )
