import logging
from typing import List

from eventplanner.lib.action import Action
from eventplanner.models import EventDetails, ScheduleRow
from eventplanner.schedule_generator.prompt_builder import SCHEDULE_SYSTEM_PROMPT, build_schedule_prompt
from eventplanner.schedule_generator.reconciler import reconcile


class ScheduleGenerator(Action):
    """Action to generate a preliminary schedule for an event"""

    def __init__(self, model=None):
        super().__init__(model)
        self.set_system_prompt(SCHEDULE_SYSTEM_PROMPT)

    def generate_schedule(self, event: EventDetails, speakers: List[str], approved_locations: List[str]) -> List[ScheduleRow]:
        """
        Generate a schedule for the event and reconcile the reply into rows.

        Transport failures propagate as TransportError; anything wrong with
        the reply itself is absorbed by the reconciler.
        """
        prompt = build_schedule_prompt(event, speakers, approved_locations)
        response = self.prompt(prompt)
        logging.info(f"Schedule response preview: {response[:500]}")

        rows = reconcile(response, event.to_window(), approved_locations)
        logging.info(f"Reconciled {len(rows)} schedule items for {event.event_name}")
        return rows
