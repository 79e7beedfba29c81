import logging
from typing import Dict, List, Optional

from pydantic import ValidationError

from eventplanner.lib.action import Action
from eventplanner.lib.exceptions import PlannerError
from eventplanner.models import EventDetails, LogisticsResponse, LogisticsRow, get_logistics_schema
from eventplanner.schedule_generator.json_repair import parse_json_object


GENERAL_EVENT = "General Event"


class LogisticsGenerator(Action):
    """Action to generate a logistics list sized to the attendance goal"""

    def __init__(self, model=None):
        super().__init__(model)

    def build_prompt(self, event: EventDetails, items: List[str], notes: Optional[Dict[str, str]] = None) -> str:
        notes = notes or {}

        schedule_context = ""
        for title in items:
            if title == GENERAL_EVENT:
                schedule_context += f'- For the "{GENERAL_EVENT}" (overall needs like registration, signage, etc.)\n'
            elif notes.get(title):
                schedule_context += f'- For "{title}": Note - {notes[title]}\n'
            else:
                schedule_context += f'- For "{title}"\n'

        return f"""Based on the event details below, generate a list of logistical items.
Event Name: {event.event_name}
Tagline: {event.tagline or 'N/A'}
The total expected attendance is {event.attendance_goal}. This is a critical number.

**VERY IMPORTANT INSTRUCTION**: Use the attendance goal to calculate a final number for the 'quantity'. Do NOT return ratios like '1 per 25 attendees'. For an attendance of 100 and a recommendation of 1 per 25, you MUST return the calculated number 4.

Success Metrics: {event.success_metrics or 'N/A'}
Event Website: {event.event_website or 'N/A'}

Focus on the logistics for these specific parts of the event:
{schedule_context}
Do NOT include volunteers, staff, or any people. Only list physical items, equipment, or supplies.
For each item, specify which part it is for using the "relatedScheduleItem" key. You MUST use one of these exact names: {', '.join(items)}.

Return a JSON object with a single key "logistics" containing an array of objects.
Each object must have THREE keys: "item" (string), "quantity" (string representing a number), and "relatedScheduleItem" (string).

Example:
{{
  "logistics": [
    {{ "item": "Guest Check-in Desks", "quantity": "2", "relatedScheduleItem": "General Event" }},
    {{ "item": "3 Volleyball Nets", "quantity": "1", "relatedScheduleItem": "Volleyball Tournament" }}
  ]
}}"""

    def generate_logistics(self, event: EventDetails, items: List[str], notes: Optional[Dict[str, str]] = None) -> List[LogisticsRow]:
        """
        Generate logistics rows for the selected schedule items.

        Args:
            event: event details, the attendance goal drives the quantities
            items: session titles and/or "General Event"
            notes: optional notes per session title, added to the prompt

        Raises:
            PlannerError: no items were selected or the reply holds no usable list
        """
        if not items:
            raise PlannerError("No schedule items selected for logistics generation")

        response = self.prompt(self.build_prompt(event, items, notes), schema=get_logistics_schema())

        data = parse_json_object(response)
        if data is None:
            raise PlannerError("The AI returned an empty or invalid logistics list.")

        try:
            logistics = LogisticsResponse.model_validate(data).logistics
        except ValidationError as e:
            raise PlannerError(f"The AI returned an empty or invalid logistics list: {e}") from e

        if not logistics:
            raise PlannerError("The AI returned an empty or invalid logistics list.")

        rows = [
            LogisticsRow(
                item=entry.item or "Unnamed Item",
                quantity=entry.quantity or "1",
                related_schedule_item=entry.relatedScheduleItem or GENERAL_EVENT,
            )
            for entry in logistics
        ]
        logging.info(f"Generated {len(rows)} logistics items for {event.event_name} ({event.attendance_goal} attendees)")
        return rows
