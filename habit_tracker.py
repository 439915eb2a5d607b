import logging
from typing import Dict, List, Optional

from local_storage import BaseStorage, dump_json, read_json, tracking_key, write_json
from models import Habit, TrackedHabit, now_iso

logger = logging.getLogger(__name__)


def tracking_record(habits: List[TrackedHabit]) -> Dict:
    return {
        "habits": [h.to_dict() for h in habits],
        "lastUpdated": now_iso(),
    }


class TrackingStore:
    """Per-user completion history for the active challenge."""

    def __init__(self, storage: BaseStorage):
        self.storage = storage

    def load(self, user_id: str) -> List[TrackedHabit]:
        """Current tracked habits, or an empty list if there is no (readable) record."""
        data = read_json(self.storage, tracking_key(user_id))
        if data is None:
            return []
        try:
            return [TrackedHabit.from_dict(h) for h in data["habits"]]
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning("Malformed tracking record for user %s, treating as empty: %s", user_id, e)
            return []

    def save(self, user_id: str, habits: List[TrackedHabit]) -> None:
        write_json(self.storage, tracking_key(user_id), tracking_record(habits))

    def initial_record(self, habits: List[Habit]) -> str:
        """Serialized tracking record with one empty completion set per habit."""
        return dump_json(tracking_record([TrackedHabit.from_habit(h) for h in habits]))

    def is_completed(self, user_id: str, habit_id: str, day: str) -> bool:
        habit = self.find(user_id, habit_id)
        return habit is not None and habit.is_completed(day)

    def find(self, user_id: str, habit_id: str) -> Optional[TrackedHabit]:
        for habit in self.load(user_id):
            if habit.id == habit_id:
                return habit
        return None

    def toggle(self, user_id: str, habit_id: str, day: str) -> List[TrackedHabit]:
        """
        Flip `day` in the habit's completion set and persist the whole
        collection. An unknown habit id is a no-op.
        """
        habits = self.load(user_id)
        for habit in habits:
            if habit.id != habit_id:
                continue
            if day in habit.completedDays:
                habit.completedDays.discard(day)
                logger.info("User %s unmarked %s on %s", user_id, habit_id, day)
            else:
                habit.completedDays.add(day)
                logger.info("User %s completed %s on %s", user_id, habit_id, day)
            self.save(user_id, habits)
            return habits

        logger.debug("Toggle ignored, user %s has no habit %s", user_id, habit_id)
        return habits
