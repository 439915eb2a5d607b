# models.py
"""
Data models for the 30-day challenge.

- User: public account record (no credential)
- Habit: one habit in the setup list or in a plan
- Plan: the committed habit set and start date
- TrackedHabit: a habit plus the set of dates it was completed
- CalendarDay: one cell of the 30-day calendar
"""

import time
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Set

DATE_FORMAT = "%Y-%m-%d"


class Category(Enum):
    """Display grouping for habits. No behavioral effect."""
    FITNESS = "fitness"
    NUTRITION = "nutrition"
    WELLNESS = "wellness"
    GROWTH = "growth"
    PRODUCTIVITY = "productivity"
    CUSTOM = "custom"

    @classmethod
    def coerce(cls, value: Optional[str]) -> "Category":
        """Unknown or missing categories fall back to CUSTOM."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.CUSTOM


class DayStatus(Enum):
    EMPTY = "empty"
    PARTIAL = "partial"
    FULL = "full"


# -------------------------
# Dates / ids
# -------------------------
def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string. Raises ValueError on anything else."""
    if not isinstance(value, str):
        raise ValueError(f"Expected a YYYY-MM-DD string, got {type(value).__name__}")
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


def now_iso() -> str:
    return datetime.now().isoformat()


def timestamp_id(taken: Iterable[str] = ()) -> str:
    """Millisecond timestamp token, bumped until it is not in `taken`."""
    taken = set(taken)
    value = int(time.time() * 1000)
    while str(value) in taken:
        value += 1
    return str(value)


# -------------------------
# Records
# -------------------------
@dataclass
class User:
    id: str
    email: str
    name: str
    createdAt: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "createdAt": self.createdAt,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=str(data["id"]),
            email=data["email"],
            name=data["name"],
            createdAt=data["createdAt"],
        )


@dataclass
class Habit:
    id: str
    name: str
    emoji: str
    category: Category = Category.CUSTOM

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "emoji": self.emoji,
            "category": self.category.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Habit":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            emoji=data.get("emoji", ""),
            category=Category.coerce(data.get("category")),
        )


@dataclass
class TrackedHabit(Habit):
    completedDays: Set[str] = field(default_factory=set)

    def is_completed(self, day: str) -> bool:
        return day in self.completedDays

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        # stored sorted so the file diff stays stable; order carries no meaning
        data["completedDays"] = sorted(self.completedDays)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackedHabit":
        days = data.get("completedDays") or []
        if not isinstance(days, list):
            raise TypeError(f"'completedDays' must be a list, got {type(days).__name__}")
        return cls(
            id=str(data["id"]),
            name=data["name"],
            emoji=data.get("emoji", ""),
            category=Category.coerce(data.get("category")),
            completedDays={str(d) for d in days},
        )

    @classmethod
    def from_habit(cls, habit: Habit) -> "TrackedHabit":
        return cls(id=habit.id, name=habit.name, emoji=habit.emoji, category=habit.category)


@dataclass
class Plan:
    userId: str
    habits: List[Habit]
    startDate: str
    createdAt: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.userId,
            "habits": [h.to_dict() for h in self.habits],
            "startDate": self.startDate,
            "createdAt": self.createdAt,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Plan":
        parse_date(data["startDate"])
        return cls(
            userId=str(data["userId"]),
            habits=[Habit.from_dict(h) for h in data["habits"]],
            startDate=data["startDate"],
            createdAt=data["createdAt"],
        )


@dataclass
class CalendarDay:
    """One cell of the 30-day grid."""
    date: str
    status: DayStatus
    is_today: bool
    is_future: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "status": self.status.value,
            "isToday": self.is_today,
            "isFuture": self.is_future,
        }
