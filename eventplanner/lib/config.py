"""
Planner configuration
Environment settings (API key, endpoint) and the planner lists that used to
live in the Config sheet.
"""

import json
import logging
import os
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from eventplanner.lib.exceptions import ConfigurationError


DEFAULT_TIMEOUT = 60.0


def split_list(value: Union[str, List[str], None]) -> List[str]:
    """Split a comma-separated config value into trimmed, non-empty entries"""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(',')
    else:
        items = [str(item) for item in value]
    return [item.strip() for item in items if item and item.strip()]


class PlannerConfig(BaseModel):
    """Dropdown lists and defaults used across the planner"""
    location_list: List[str] = Field(default_factory=lambda: ["Main Hall", "Room 101", "Room 102", "Outdoor Area"])
    schedule_status_options: List[str] = Field(default_factory=lambda: ["Tentative", "Confirmed", "Cancelled"])
    task_status_options: List[str] = Field(default_factory=lambda: ["Not Started", "In Progress", "Blocked", "Done", "Cancelled"])
    task_priority_options: List[str] = Field(default_factory=lambda: ["High", "Medium", "Low", "Critical"])
    people_categories: List[str] = Field(default_factory=lambda: ["Staff", "Volunteer", "Speaker", "Participant"])
    default_start_time: str = "9:00 AM"
    default_end_time: str = "5:00 PM"
    pre_event_days: int = Field(default=4, ge=0)
    post_event_days: int = Field(default=2, ge=0)

    @field_validator(
        'location_list',
        'schedule_status_options',
        'task_status_options',
        'task_priority_options',
        'people_categories',
        mode='before',
    )
    @classmethod
    def _split_comma_lists(cls, value):
        return split_list(value)


def load_config(path: Optional[str] = None) -> PlannerConfig:
    """
    Load planner settings from a JSON file, falling back to defaults.

    Keys may use the Config sheet labels ("Location List") or the
    snake_case field names.
    """
    if not path:
        return PlannerConfig()

    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Error loading config from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")

    normalized = {}
    for key, value in data.items():
        field = key.strip().lower().replace(' ', '_')
        normalized[field] = value

    try:
        config = PlannerConfig.model_validate(normalized)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config in {path}: {e}") from e
    logging.getLogger(__name__).info(f"Loaded config from {path}: {len(config.location_list)} approved locations")
    return config


class Settings(BaseModel):
    """Completion provider settings read from the environment"""
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT


def load_settings() -> Settings:
    load_dotenv()
    timeout = os.environ.get("OPENAI_TIMEOUT")
    return Settings(
        api_key=os.environ.get("OPENAI_API_KEY"),
        base_url=os.environ.get("END_POINT") or None,
        timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
    )
