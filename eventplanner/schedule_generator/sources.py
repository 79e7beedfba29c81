"""
Readers and writers for the planner's sheets, stored as CSV/JSON files.

- Event Description: two columns (label, value), or a JSON object
- People: one row per person with Name and Category columns
- Schedule: Date, Start Time, End Time, Duration, Session Title, Lead,
  Location, Status, Notes
"""

import json
import logging
import re
from datetime import date, time
from typing import Dict, List, Optional, Tuple

import pandas as pd
from dateutil import parser as dateutil_parser
from pydantic import ValidationError

from eventplanner.lib.config import PlannerConfig
from eventplanner.lib.exceptions import ConfigurationError
from eventplanner.models import EventDetails, LogisticsRow, ScheduleRow, TaskRow
from eventplanner.schedule_generator.duration import duration_cell
from eventplanner.schedule_generator.time_parser import format_time, parse_time


logger = logging.getLogger(__name__)

SCHEDULE_COLUMNS = ['Date', 'Start Time', 'End Time', 'Duration', 'Session Title', 'Lead', 'Location', 'Status', 'Notes']
TASK_COLUMNS = ['Task ID', 'Task Name', 'Description', 'Category', 'Owner', 'Due Date', 'Status', 'Priority', 'Related Session', 'Reminder Sent']
LOGISTICS_COLUMNS = ['Item', 'Quantity', 'Related Schedule Item', 'Status', 'Owner', 'Notes']

# Sheet label -> EventDetails field, alternatives included
EVENT_FIELD_LABELS = {
    'event name': 'event_name',
    'start date (and time)': 'start_date',
    'start date': 'start_date',
    'end date (and time)': 'end_date',
    'end date': 'end_date',
    'start time': 'start_time',
    'end time': 'end_time',
    'location': 'location',
    'theme': 'theme',
    'event theme': 'theme',
    'theme or focus': 'theme',
    'topics': 'theme',
    'focus': 'theme',
    'target audience': 'target_audience',
    'audience': 'target_audience',
    'attendees': 'target_audience',
    'short objectives': 'objectives',
    'objectives': 'objectives',
    'description & messaging': 'description',
    'description': 'description',
    'tagline': 'tagline',
    'event tagline': 'tagline',
    'success metrics': 'success_metrics',
    'event website': 'event_website',
    'website': 'event_website',
    'attendance goal (#)': 'attendance_goal',
    'attendance goal': 'attendance_goal',
}

TIME_OF_DAY = re.compile(r'\d{1,2}[:.]\d{2}(?:\s*[AaPp][Mm])?|\d{1,2}\s*[AaPp][Mm]')


def _read_labels(path: str) -> Dict[str, str]:
    if path.lower().endswith('.json'):
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Error reading event details from {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Event details file {path} must contain a JSON object")
        return {str(k): '' if v is None else str(v) for k, v in data.items()}

    try:
        df = pd.read_csv(path, header=None, dtype=str, keep_default_na=False)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ConfigurationError(f"Error reading event details from {path}: {e}") from e
    if df.shape[1] < 2:
        raise ConfigurationError(f"Event details file {path} needs a label and a value column")
    return dict(zip(df[0], df[1]))


def _split_date_time(value: str) -> Tuple[Optional[date], Optional[time]]:
    """Date part of a cell and, when the cell carries one, its time of day"""
    text = value.strip()
    if not text:
        return None, None
    try:
        parsed = dateutil_parser.parse(text)
    except (ValueError, OverflowError):
        logger.warning(f"Could not parse date {text!r}")
        return None, None

    if TIME_OF_DAY.search(text):
        return parsed.date(), parsed.time().replace(second=0, microsecond=0)
    return parsed.date(), None


def _config_time(value: str, label: str) -> time:
    result = parse_time(value)
    if not result.ok:
        raise ConfigurationError(f"Invalid {label} in config: {result.error}")
    return result.value


def _attendance(value: str) -> int:
    digits = re.sub(r'[^0-9]', '', value or '')
    return int(digits) if digits else 0


def parse_event_details(labels: Dict[str, str], config: Optional[PlannerConfig] = None) -> EventDetails:
    """
    Build EventDetails from label/value pairs of the Event Description sheet.

    Raises:
        ConfigurationError: event name or start date missing, or the daily
            start time is not before the daily end time.
    """
    config = config or PlannerConfig()
    values = {}
    for label, value in labels.items():
        field = EVENT_FIELD_LABELS.get(str(label).strip().lower())
        if field and str(value).strip() and field not in values:
            values[field] = str(value).strip()

    start_date, start_time = _split_date_time(values.get('start_date', ''))
    end_date, end_time = _split_date_time(values.get('end_date', ''))

    if not values.get('event_name') or start_date is None:
        raise ConfigurationError("Missing required event information (Event Name or Start Date)")

    if 'start_time' in values:
        start_time = _config_time(values['start_time'], 'start time')
    if 'end_time' in values:
        end_time = _config_time(values['end_time'], 'end time')

    fields = {k: v for k, v in values.items() if k not in ('start_date', 'end_date', 'start_time', 'end_time', 'attendance_goal')}
    try:
        event = EventDetails(
            start_date=start_date,
            end_date=end_date,
            start_time=start_time or _config_time(config.default_start_time, 'default_start_time'),
            end_time=end_time or _config_time(config.default_end_time, 'default_end_time'),
            attendance_goal=_attendance(values.get('attendance_goal', '')),
            **fields,
        )
        event.to_window()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid event details: {e}") from e

    logger.info(f"Event Info Retrieved: {event.event_name}, Attendance Goal: {event.attendance_goal}")
    return event


def load_event_details(path: str, config: Optional[PlannerConfig] = None) -> EventDetails:
    return parse_event_details(_read_labels(path), config)


def load_speakers(path: Optional[str]) -> List[str]:
    """Names from the People sheet whose Category is Speaker"""
    if not path:
        return []
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    columns = {column.strip().lower(): column for column in df.columns}
    if 'name' not in columns or 'category' not in columns:
        logger.warning(f"People sheet {path} has no Name/Category columns")
        return []

    speakers = [
        row[columns['name']].strip()
        for _, row in df.iterrows()
        if row[columns['category']].strip().lower() == 'speaker' and row[columns['name']].strip()
    ]
    logger.info(f"Found {len(speakers)} speakers")
    return speakers


def schedule_to_frame(rows: List[ScheduleRow]) -> pd.DataFrame:
    records = []
    for row in rows:
        start = format_time(row.start_time)
        end = format_time(row.end_time)
        records.append({
            'Date': row.date.isoformat(),
            'Start Time': start,
            'End Time': end,
            'Duration': duration_cell(start, end),
            'Session Title': row.title,
            'Lead': row.speaker,
            'Location': row.location,
            'Status': row.status,
            'Notes': '',
        })
    return pd.DataFrame(records, columns=SCHEDULE_COLUMNS)


def load_schedule(path: str) -> pd.DataFrame:
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    for column in SCHEDULE_COLUMNS:
        if column not in df.columns:
            df[column] = ''
    return df


def schedule_rows_from_frame(df: pd.DataFrame) -> List[ScheduleRow]:
    """Rows of a stored schedule that still have a valid date and time range"""
    rows = []
    for record in df.to_dict(orient='records'):
        start = parse_time(record.get('Start Time'))
        end = parse_time(record.get('End Time'))
        try:
            session_date = date.fromisoformat(str(record.get('Date', '')).strip()[:10])
            rows.append(ScheduleRow(
                date=session_date,
                start_time=start.value,
                end_time=end.value,
                title=record.get('Session Title') or 'Untitled Session',
                location=record.get('Location', ''),
                status=record.get('Status') or 'Tentative',
            ))
        except (ValueError, ValidationError) as e:
            logger.warning(f"Skipping schedule row {record}: {e}")
    return rows


def session_notes(df: pd.DataFrame) -> Dict[str, str]:
    """Session title -> Notes, for rows with notes"""
    notes = {}
    for record in df.to_dict(orient='records'):
        title = record.get('Session Title', '')
        if title and record.get('Notes') and title not in notes:
            notes[title] = record['Notes']
    return notes


def tasks_to_frame(rows: List[TaskRow]) -> pd.DataFrame:
    records = [{
        'Task ID': row.task_id,
        'Task Name': row.name,
        'Description': row.description,
        'Category': row.category,
        'Owner': row.owner,
        'Due Date': row.due_date.isoformat(),
        'Status': row.status,
        'Priority': row.priority,
        'Related Session': row.related_session,
        'Reminder Sent': row.reminder_sent,
    } for row in rows]
    return pd.DataFrame(records, columns=TASK_COLUMNS)


def logistics_to_frame(rows: List[LogisticsRow]) -> pd.DataFrame:
    records = [{
        'Item': row.item,
        'Quantity': row.quantity,
        'Related Schedule Item': row.related_schedule_item,
        'Status': row.status,
        'Owner': row.owner,
        'Notes': row.notes,
    } for row in rows]
    return pd.DataFrame(records, columns=LOGISTICS_COLUMNS)
