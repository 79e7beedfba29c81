import logging
import random
import re
import string
import time
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from eventplanner.lib.action import Action
from eventplanner.lib.config import PlannerConfig
from eventplanner.models import EventDetails, ScheduleRow, TaskData, TaskRow
from eventplanner.schedule_generator.json_repair import parse_json_object
from eventplanner.schedule_generator.time_parser import format_time


CATEGORY_ORDER = {
    'Venue': 1,
    'Marketing': 2,
    'Logistics': 3,
    'Program': 4,
    'Budget': 5,
    'Staffing': 6,
    'Technology': 7,
    'Communications': 8,
    'Other': 9
}

PRIORITY_ORDER = {
    'Critical': 1,
    'High': 2,
    'Medium': 3,
    'Low': 4
}

TASK_FIELDS = ['name', 'description', 'category', 'priority', 'timeline']

TASK_SYSTEM_PROMPT = (
    "You are an expert event planning assistant that creates detailed, session-specific task lists "
    "for events. You analyze schedules and create specific preparation tasks for each session."
)


def parse_tasks_from_response(response: str) -> List[Dict[str, Any]]:
    """
    Task dictionaries from a model reply.

    Uses the embedded JSON ``tasks`` array (repaired if truncated) and falls
    back to pulling the fields out with regular expressions.
    """
    data = parse_json_object(response)
    if data is not None and isinstance(data.get('tasks'), list):
        return [task for task in data['tasks'] if isinstance(task, dict)]

    tasks = extract_tasks_directly(response)
    if not tasks:
        logging.warning("Failed to parse tasks from response")
    return tasks


def extract_tasks_directly(response: str) -> List[Dict[str, Any]]:
    """Pair up "field": "value" matches; only complete tasks are kept"""
    matches = {
        field: re.findall(rf'"{field}":\s*"([^"]*)"', response or '')
        for field in TASK_FIELDS
    }
    count = min(len(values) for values in matches.values())

    tasks = []
    for i in range(count):
        task = {field: matches[field][i] for field in TASK_FIELDS}
        task['status'] = "Not Started"
        tasks.append(task)

    logging.info(f"Extracted {len(tasks)} tasks directly")
    return tasks


def sort_tasks(tasks: List[TaskData]) -> List[TaskData]:
    """Sort by category, then priority; unknown values go last"""
    return sorted(tasks, key=lambda task: (
        CATEGORY_ORDER.get(task.category, 999),
        PRIORITY_ORDER.get(task.priority, 999),
    ))


def generate_task_id() -> str:
    timestamp = str(int(time.time() * 1000))[-6:]
    suffix = ''.join(random.choices(string.ascii_uppercase + string.digits, k=4))
    return f"T-{timestamp}-{suffix}"


def calculate_due_date(timeline: Optional[str], event: EventDetails, config: PlannerConfig) -> date:
    """
    Due date from a timeline such as "4 days before event", "During event,
    day 2" or "1 week after".
    """
    pre_event_default = event.start_date - timedelta(days=config.pre_event_days)
    if not timeline:
        return pre_event_default

    text = timeline.lower()
    days_match = re.search(r'(\d+)\s+days?', text)

    if 'before' in text or 'prior' in text:
        if days_match:
            return event.start_date - timedelta(days=int(days_match.group(1)))
        if '2 weeks' in text or 'two weeks' in text:
            return event.start_date - timedelta(days=14)
        if 'week' in text:
            return event.start_date - timedelta(days=7)
        if 'month' in text:
            return event.start_date - timedelta(days=30)
        return pre_event_default

    if 'during' in text or 'day of' in text:
        day_match = re.search(r'day\s*(\d+)', text)
        if day_match and event.duration_days > 1:
            offset = min(max(int(day_match.group(1)) - 1, 0), event.duration_days - 1)
            return event.start_date + timedelta(days=offset)
        return event.start_date

    if 'after' in text or 'following' in text:
        if days_match:
            return event.end_date + timedelta(days=int(days_match.group(1)))
        return event.end_date + timedelta(days=config.post_event_days)

    return pre_event_default


class TaskGenerator(Action):
    """Action to generate a task list for an event and its schedule"""

    def __init__(self, model=None, config: PlannerConfig = None):
        super().__init__(model)
        self.config = config or PlannerConfig()
        self.set_system_prompt(TASK_SYSTEM_PROMPT)

    def _session_context(self, sessions: List[ScheduleRow]) -> str:
        if not sessions:
            return ""

        context = f"""

SCHEDULE ANALYSIS (VERY IMPORTANT - CREATE SPECIFIC TASKS FOR THESE):
The event includes {len(sessions)} scheduled sessions:

"""
        for index, session in enumerate(sessions, start=1):
            context += (
                f"{index}. \"{session.title}\" at {session.location} on {session.date.isoformat()} "
                f"({format_time(session.start_time)} - {format_time(session.end_time)})\n"
            )

        locations = sorted({session.location for session in sessions if session.location})
        context += f"""
Locations Used: {', '.join(locations) or 'TBD'}

CRITICAL: Create specific preparation tasks for EACH session listed above, considering:
- Setup requirements for each location
- AV/technical needs for each session type
- Materials and equipment needed
- Pre-event testing and rehearsals"""
        return context

    def build_prompt(self, event: EventDetails, sessions: List[ScheduleRow]) -> str:
        start_date = event.start_date.isoformat()
        end_date = event.end_date.isoformat()
        dates = start_date if event.duration_days == 1 else f"{start_date} to {end_date}"

        return f"""Generate a comprehensive task list for planning and executing the following event:

EVENT DETAILS:
- Name: {event.event_name}
- Date(s): {dates}
- Duration: {event.duration_days} day(s)
- Location: {event.location or 'TBD'}
- Theme: {event.theme or 'N/A'}
- Objectives: {event.objectives or 'N/A'}
- Description: {event.description or 'N/A'}{self._session_context(sessions)}

Create tasks in three phases:
1. PRE-EVENT TASKS (due before {start_date}, with most due {self.config.pre_event_days} days before)
2. DURING-EVENT TASKS (during the event)
3. POST-EVENT TASKS (after {end_date}, with most due {self.config.post_event_days} days after)

For each task, include:
- Task Name: Specific and actionable
- Description: Detailed explanation
- Category: Venue, Marketing, Logistics, Program, Budget, Staffing, Technology, Communications, Other
- Priority: Critical, High, Medium, or Low
- Timeline: Specific timing relative to event or session (e.g. "4 days before event", "During event, day 1", "2 days after event")
- Status: "Not Started"

Return response in this JSON format:
{{
  "tasks": [
    {{
      "name": "Task Name",
      "description": "Detailed task description",
      "category": "Category",
      "priority": "Priority",
      "timeline": "Timeline",
      "status": "Not Started"
    }}
  ]
}}

Focus on creating actionable, specific tasks rather than generic ones. Each session should have 2-4 related tasks."""

    def to_rows(self, tasks: List[Dict[str, Any]], event: EventDetails) -> List[TaskRow]:
        valid = []
        for task in tasks:
            try:
                valid.append(TaskData.model_validate(task))
            except ValidationError as e:
                logging.warning(f"Skipping invalid task {task}: {e}")

        rows = []
        for task in sort_tasks(valid):
            rows.append(TaskRow(
                task_id=generate_task_id(),
                name=task.name,
                description=task.description,
                category=task.category,
                due_date=calculate_due_date(task.timeline, event, self.config),
                status=task.status or "Not Started",
                priority=task.priority,
            ))
        return rows

    def generate_tasks(self, event: EventDetails, sessions: List[ScheduleRow]) -> List[TaskRow]:
        """
        Generate tasks for the event. Transport failures propagate; a reply
        with no recognisable tasks gives an empty list.
        """
        response = self.prompt(self.build_prompt(event, sessions))
        logging.info(f"Received task response ({len(response)} chars)")

        rows = self.to_rows(parse_tasks_from_response(response), event)
        logging.info(f"Successfully extracted {len(rows)} tasks")
        return rows
