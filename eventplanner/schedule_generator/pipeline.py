import argparse
import logging
import os
import sys
from typing import List, Optional

import pandas as pd

from eventplanner.lib.config import PlannerConfig, load_config
from eventplanner.lib.exceptions import ConfigurationError, PlannerError, TransportError
from eventplanner.lib.pipeline import Pipeline
from eventplanner.models import EventDetails, ScheduleRow
from eventplanner.schedule_generator.duration import duration_cell
from eventplanner.schedule_generator.logistics_generator import GENERAL_EVENT, LogisticsGenerator
from eventplanner.schedule_generator.schedule_generator import ScheduleGenerator
from eventplanner.schedule_generator.sources import (
    load_event_details,
    load_schedule,
    load_speakers,
    logistics_to_frame,
    schedule_rows_from_frame,
    schedule_to_frame,
    session_notes,
    tasks_to_frame,
)
from eventplanner.schedule_generator.task_generator import TaskGenerator


STEPS = ['schedule', 'durations', 'tasks', 'logistics']

SCHEDULE_FILE = 'schedule.csv'
TASKS_FILE = 'tasks.csv'
LOGISTICS_FILE = 'logistics.csv'


def duration_for_row(row: dict) -> str:
    """Duration cell for a schedule row, recomputed from its start and end times"""
    return duration_cell(row.get('Start Time'), row.get('End Time'))


class EventPlannerPipeline(Pipeline):
    def __init__(self, event: EventDetails, config: PlannerConfig = None, model: str = 'gpt-4.1-mini',
                 output_dir: str = 'output', speakers: List[str] = None):
        super().__init__(output_dir=output_dir)
        self.event = event
        self.config = config or PlannerConfig()
        self.model = model
        self.speakers = speakers or []
        self.schedule: Optional[List[ScheduleRow]] = None

        # Setup logging
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
        self.logger = logging.getLogger(__name__)

    def _stored_schedule(self) -> pd.DataFrame:
        path = self.output_path(SCHEDULE_FILE)
        if not os.path.exists(path):
            raise PlannerError(f"No schedule found at {path}. Run the schedule step first.")
        return load_schedule(path)

    def generate_schedule(self) -> pd.DataFrame:
        self.logger.info(f"Generating schedule for {self.event.event_name}...")
        generator = ScheduleGenerator(model=self.model)
        self.schedule = generator.generate_schedule(self.event, self.speakers, self.config.location_list)

        self.df = schedule_to_frame(self.schedule)
        self.save_csv(SCHEDULE_FILE)
        self.logger.info(f"Saved {SCHEDULE_FILE} with {len(self.df)} sessions")
        return self.df

    def update_durations(self) -> pd.DataFrame:
        """Recompute the Duration column of the stored schedule"""
        self.read_csv(self.output_path(SCHEDULE_FILE))
        self.execute_action(duration_for_row, 'Duration')

        errors = int((self.df['Duration'] == 'Format Error').sum())
        if errors:
            self.logger.warning(f"{errors} schedule rows have unreadable start or end times")
        self.save_csv(SCHEDULE_FILE)
        return self.df

    def _sessions(self) -> List[ScheduleRow]:
        if self.schedule is not None:
            return self.schedule
        return schedule_rows_from_frame(self._stored_schedule())

    def generate_tasks(self) -> pd.DataFrame:
        sessions = self._sessions()
        self.logger.info(f"Generating tasks for {len(sessions)} sessions...")

        generator = TaskGenerator(model=self.model, config=self.config)
        tasks = generator.generate_tasks(self.event, sessions)
        if not tasks:
            self.logger.warning("No tasks could be extracted from the response")

        df = tasks_to_frame(tasks)
        self.save_csv(TASKS_FILE, df)
        self.logger.info(f"Saved {TASKS_FILE} with {len(df)} tasks")
        return df

    def generate_logistics(self, items: List[str] = None) -> pd.DataFrame:
        schedule_df = self._stored_schedule()
        if not items:
            titles = [title for title in schedule_df['Session Title'] if title]
            items = [GENERAL_EVENT] + list(dict.fromkeys(titles))
        self.logger.info(f"Generating logistics for {len(items)} schedule items...")

        generator = LogisticsGenerator(model=self.model)
        rows = generator.generate_logistics(self.event, items, session_notes(schedule_df))

        df = logistics_to_frame(rows)
        self.save_csv(LOGISTICS_FILE, df)
        self.logger.info(f"Saved {LOGISTICS_FILE} with {len(df)} items")
        return df

    def process(self, skip_steps: List[str] = None, only_steps: List[str] = None, logistics_items: List[str] = None):
        """Run the pipeline steps in order"""
        steps = [step for step in STEPS if not only_steps or step in only_steps]
        steps = [step for step in steps if step not in (skip_steps or [])]

        if skip_steps:
            self.logger.info(f"Skipping steps: {', '.join(skip_steps)}")
        self.logger.info(f"Running steps: {', '.join(steps)}")

        if 'schedule' in steps:
            self.generate_schedule()
        if 'durations' in steps:
            self.update_durations()
        if 'tasks' in steps:
            self.generate_tasks()
        if 'logistics' in steps:
            self.generate_logistics(logistics_items)

        self.logger.info("Pipeline completed")
        return steps


def main(argv: List[str] = None) -> int:
    parser = argparse.ArgumentParser(description='Event Planner Pipeline')
    parser.add_argument('--event', required=True, help='Event Description sheet (two-column CSV or JSON)')
    parser.add_argument('--people', help='People sheet CSV, used to list available speakers')
    parser.add_argument('--config', help='Planner config JSON (locations, status lists, defaults)')
    parser.add_argument('--model', default='gpt-4.1-mini', help='AI model to use')
    parser.add_argument('--output-dir', default='output', help='Directory for the generated CSV files')
    parser.add_argument('--skip', nargs='*', choices=STEPS, help='Steps to skip (schedule, durations, tasks, logistics)')
    parser.add_argument('--only', nargs='*', choices=STEPS, help='Steps to run, all by default')
    parser.add_argument('--logistics-items', nargs='*', help='Session titles to generate logistics for')

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        event = load_event_details(args.event, config)
        speakers = load_speakers(args.people)

        pipeline = EventPlannerPipeline(event, config=config, model=args.model,
                                        output_dir=args.output_dir, speakers=speakers)
        pipeline.process(skip_steps=args.skip, only_steps=args.only, logistics_items=args.logistics_items)
    except TransportError as e:
        logging.error(f"Completion request failed: {e}")
        return 2
    except ConfigurationError as e:
        logging.error(f"Configuration error: {e}")
        return 1
    except PlannerError as e:
        logging.error(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
