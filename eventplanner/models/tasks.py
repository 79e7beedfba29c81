"""
Task and Logistics Data Models
Pydantic models for AI generated task lists and logistics lists
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskData(BaseModel):
    """Task as returned by the model"""
    model_config = ConfigDict(extra='ignore')

    name: str = Field(description="Specific, actionable task name")
    description: str = Field(default="", description="Detailed explanation of the task")
    category: str = Field(default="Other", description="Venue, Marketing, Logistics, Program, Budget, Staffing, Technology, Communications or Other")
    priority: str = Field(default="Medium", description="Critical, High, Medium or Low")
    timeline: str = Field(default="", description="Timing relative to the event, e.g. '4 days before event'")
    status: str = Field(default="Not Started", description="Always 'Not Started'")

    @field_validator('description', 'category', 'priority', 'timeline', 'status', mode='before')
    @classmethod
    def _none_to_default(cls, value, info):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class TaskRow(BaseModel):
    """Row of the Task Management sheet"""
    task_id: str
    name: str
    description: str
    category: str
    owner: str = ""
    due_date: date
    status: str = "Not Started"
    priority: str
    related_session: str = ""
    reminder_sent: str = "No"


class LogisticsItem(BaseModel):
    """Logistics entry as returned by the model"""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    item: Optional[str] = Field(default=None, description="Physical item, equipment or supply")
    quantity: Optional[str] = Field(default=None, description="Calculated number, as a string")
    relatedScheduleItem: Optional[str] = Field(default=None, description="Schedule item this is for")


class LogisticsResponse(BaseModel):
    """Response structure for logistics generation"""
    logistics: List[LogisticsItem] = Field(description="List of logistics items")


class LogisticsRow(BaseModel):
    """Row of the Logistics sheet"""
    item: str
    quantity: str
    related_schedule_item: str
    status: str = "Needed"
    owner: str = ""
    notes: str = ""


def get_logistics_schema():
    """Get the JSON schema for logistics generation"""
    schema = LogisticsResponse.model_json_schema()
    schema["name"] = "logistics"
    return schema
