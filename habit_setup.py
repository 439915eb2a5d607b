# habit_setup.py
import logging
from typing import List

from local_storage import BaseStorage, read_json, setup_habits_key, write_json
from models import Category, Habit, timestamp_id

logger = logging.getLogger(__name__)

DEFAULT_EMOJI = "✨"

POPULAR_EMOJIS = ["💪", "🥗", "📚", "⚡", "🧘‍♂️", "💧", "🏃", "🎯", "🔥", "✨", "🌟", "💎"]

DEFAULT_HABITS = [
    Habit("1", "Daily Workout", "💪", Category.FITNESS),
    Habit("2", "No Junk Food", "🥗", Category.NUTRITION),
    Habit("3", "No Alcohol", "🚫", Category.WELLNESS),
    Habit("4", "No Smoking", "🚭", Category.WELLNESS),
    Habit("5", "Learn 1hr/day", "📚", Category.GROWTH),
    Habit("6", "Deep Work 2hrs", "⚡", Category.PRODUCTIVITY),
    Habit("7", "Read Before Bed", "📖", Category.GROWTH),
    Habit("8", "Fixed Sleep Schedule", "😴", Category.WELLNESS),
]


def default_habits() -> List[Habit]:
    return [Habit(h.id, h.name, h.emoji, h.category) for h in DEFAULT_HABITS]


class SetupHabits:
    """The editable habit list a user builds before committing to a plan."""

    def __init__(self, storage: BaseStorage):
        self.storage = storage

    def load(self, user_id: str) -> List[Habit]:
        """
        Return the user's setup list. The first load (no record yet) seeds
        and persists the default habits.
        """
        data = read_json(self.storage, setup_habits_key(user_id))
        if data is None:
            habits = default_habits()
            self.save(user_id, habits)
            return habits

        try:
            return [Habit.from_dict(h) for h in data]
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning("Malformed setup habits for user %s, treating as empty: %s", user_id, e)
            return []

    def save(self, user_id: str, habits: List[Habit]) -> None:
        write_json(self.storage, setup_habits_key(user_id), [h.to_dict() for h in habits])

    def add_habit(self, user_id: str, name: str, emoji: str = DEFAULT_EMOJI,
                  category: str = Category.CUSTOM.value) -> List[Habit]:
        """
        Append a custom habit. A blank name leaves the list unchanged.
        Unknown categories fall back to "custom".
        """
        habits = self.load(user_id)
        name = (name or "").strip()
        if not name:
            return habits

        habit = Habit(
            id=timestamp_id(h.id for h in habits),
            name=name,
            emoji=(emoji or "").strip() or DEFAULT_EMOJI,
            category=Category.coerce(category),
        )
        habits.append(habit)
        self.save(user_id, habits)
        return habits

    def delete_habit(self, user_id: str, habit_id: str) -> List[Habit]:
        habits = self.load(user_id)
        remaining = [h for h in habits if h.id != habit_id]
        if len(remaining) != len(habits):
            self.save(user_id, remaining)
        return remaining

    def rename_habit(self, user_id: str, habit_id: str, name: str) -> List[Habit]:
        """Rename a habit. Empty or whitespace-only names keep the old name."""
        habits = self.load(user_id)
        name = (name or "").strip()
        if not name:
            return habits

        for habit in habits:
            if habit.id == habit_id:
                habit.name = name
                self.save(user_id, habits)
                break
        return habits
