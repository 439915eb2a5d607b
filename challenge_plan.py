import logging
from datetime import date, datetime
from typing import List, Optional

from errors import (
    EmptyHabitSet, InvalidDate, MissingStartDate, PlanAlreadyExists, StartDateInPast,
)
from habit_tracker import TrackingStore
from local_storage import BaseStorage, dump_json, plan_key, read_json, tracking_key
from models import Habit, Plan, format_date, now_iso, parse_date

logger = logging.getLogger(__name__)


class PlanStore:
    """
    The committed habit set and start date. Created once per user;
    its existence moves the user from setup to the active challenge.
    """

    def __init__(self, storage: BaseStorage, tracker: Optional[TrackingStore] = None):
        self.storage = storage
        self.tracker = tracker if tracker is not None else TrackingStore(storage)

    def get_plan(self, user_id: str) -> Optional[Plan]:
        data = read_json(self.storage, plan_key(user_id))
        if data is None:
            return None
        try:
            return Plan.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Malformed plan for user %s, treating as absent: %s", user_id, e)
            return None

    def has_plan(self, user_id: str) -> bool:
        return self.get_plan(user_id) is not None

    def create_plan(self, user_id: str, habits: List[Habit], start_date,
                    today: Optional[date] = None) -> Plan:
        """
        Write the plan and an empty tracking record in one storage write.

        `start_date` may be a date or a YYYY-MM-DD string. Raises
        EmptyHabitSet, MissingStartDate, InvalidDate, StartDateInPast or
        PlanAlreadyExists; nothing is written when any of them is raised.
        """
        if not habits:
            raise EmptyHabitSet()
        if start_date is None or (isinstance(start_date, str) and not start_date.strip()):
            raise MissingStartDate()

        if isinstance(start_date, datetime):
            start = start_date.date()
        elif isinstance(start_date, date):
            start = start_date
        else:
            try:
                start = parse_date(start_date)
            except ValueError:
                raise InvalidDate()

        today = today or date.today()
        if start < today:
            raise StartDateInPast()
        if self.has_plan(user_id):
            raise PlanAlreadyExists()

        plan = Plan(
            userId=user_id,
            habits=list(habits),
            startDate=format_date(start),
            createdAt=now_iso(),
        )
        self.storage.set_items({
            plan_key(user_id): dump_json(plan.to_dict()),
            tracking_key(user_id): self.tracker.initial_record(plan.habits),
        })
        logger.info("User %s committed to %d habits starting %s",
                    user_id, len(plan.habits), plan.startDate)
        return plan
