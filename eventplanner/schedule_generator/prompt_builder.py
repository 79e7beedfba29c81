from typing import List

from eventplanner.models import EventDetails
from eventplanner.schedule_generator.time_parser import format_time


SCHEDULE_SYSTEM_PROMPT = (
    "You are an experienced event planner that specializes in creating detailed, "
    "realistic event schedules. You always follow time constraints exactly as provided."
)


def _event_type(event: EventDetails) -> str:
    if event.duration_days > 1:
        return f"{event.duration_days}-day"
    return "one-day"


def build_schedule_prompt(event: EventDetails, speakers: List[str], approved_locations: List[str]) -> str:
    """
    Build the schedule generation prompt.

    The prompt pins the date range, the daily start and end times and the
    approved locations, and asks for the speaker field to be left empty.
    """
    event_type = _event_type(event)
    start_date = event.start_date.isoformat()
    end_date = event.end_date.isoformat()
    start_time = format_time(event.start_time)
    end_time = format_time(event.end_time)
    locations_text = ', '.join(approved_locations)

    if approved_locations:
        location_lines = (
            f"3. Location for each session MUST be one of these exact options: {locations_text}\n"
            f"4. IMPORTANT: Leave the Lead/Speaker field EMPTY for all sessions - this will be assigned later"
        )
        guideline_lines = (
            f"8. CRITICALLY IMPORTANT: ALL locations MUST be chosen from this exact list: {locations_text}\n"
            f"9. CRITICALLY IMPORTANT: LEAVE THE SPEAKER/LEAD FIELD EMPTY FOR ALL SESSIONS"
        )
        location_format = f" (MUST be one of: {locations_text})"
    else:
        location_lines = "3. IMPORTANT: Leave the Lead/Speaker field EMPTY for all sessions - this will be assigned later"
        guideline_lines = "8. CRITICALLY IMPORTANT: LEAVE THE SPEAKER/LEAD FIELD EMPTY FOR ALL SESSIONS"
        location_format = ""

    prompt = f"\nDraft a detailed sample schedule outline for a {event_type} event titled '{event.event_name}'"
    if event.tagline:
        prompt += f" - {event.tagline}"
    if event.theme:
        prompt += f" focused on '{event.theme}'"
    if event.target_audience:
        prompt += f" for {event.target_audience}"

    prompt += f" taking place on {start_date}"
    if event.duration_days > 1:
        prompt += f" through {end_date}"

    prompt += f""".

IMPORTANT TIME CONSTRAINTS:
- The event will START at exactly {start_time} each day
- The event will END at exactly {end_time} each day
- NO sessions should be scheduled before {start_time} or after {end_time}

For this {event_type} event, please include:
1. Realistic timing for each session (start and end times) with appropriate breaks
2. Appropriate session titles that reflect the event context
{location_lines}"""

    if event.objectives:
        prompt += f"\n5. Sessions that align with these objectives: {event.objectives}"
    if event.success_metrics:
        prompt += f"\n6. Keep these success metrics in mind when proposing sessions: {event.success_metrics}"

    context = []
    if event.description:
        context.append(f"- Description & Messaging: {event.description}")
    if event.tagline:
        context.append(f"- Tagline: {event.tagline}")
    if event.event_website:
        context.append(f"- Event Website: {event.event_website}")
    if context:
        prompt += "\nEVENT CONTEXT (IMPORTANT - USE THIS TO CREATE RELEVANT SESSIONS):\n"
        prompt += "\n\n".join(context)
        prompt += "\n\nCREATE SESSION TITLES AND CONTENT THAT DIRECTLY ALIGN WITH THIS EVENT CONTEXT."

    if speakers:
        prompt += (
            "\n7. Note: These are the available speakers, but DO NOT assign them to sessions in your response. "
            f"Leave the speaker/lead field empty: {', '.join(speakers)}"
        )

    prompt += f"""

Format your response as JSON with the following structure for each session:
{{
  "schedule": [
    {{
      "date": "YYYY-MM-DD",
      "startTime": "HH:MM AM/PM",
      "endTime": "HH:MM AM/PM",
      "title": "Session Title",
      "speaker": "",
      "location": "Session Location"{location_format},
      "status": "Tentative"
    }}
  ]
}}

IMPORTANT SCHEDULING GUIDELINES:
1. Ensure each day's schedule is logical and follows a typical event flow
2. Include appropriate breaks (coffee, lunch, etc.) in the schedule
3. Start times and end times should be in sequence without overlaps
4. Make sure sessions align with the event theme, objectives, and descriptions provided
5. Distribute session topics evenly throughout the day to maintain engagement
6. CRITICALLY IMPORTANT: The dates must be EXACTLY between {start_date} and {end_date}, inclusive
7. CRITICALLY IMPORTANT: Start each day no earlier than {start_time} and end no later than {end_time}
{guideline_lines}
"""
    return prompt
