# streaks.py
"""
Streak and progress calculations.

Everything here is a pure function of a tracked-habit snapshot and a
reference day; nothing is cached, callers recompute on every read.
"""

from datetime import date, timedelta
from typing import List, Optional, Tuple

from models import CalendarDay, DayStatus, TrackedHabit, format_date, parse_date

CHALLENGE_DAYS = 30
STREAK_WINDOW = 30


def _as_date(value) -> date:
    return parse_date(value) if isinstance(value, str) else value


def completed_on(habits: List[TrackedHabit], day: str) -> int:
    """Number of habits whose completion set contains `day`"""
    return sum(1 for h in habits if day in h.completedDays)


def today_progress(habits: List[TrackedHabit], today: Optional[date] = None) -> Tuple[int, int]:
    """(completed, total) for today's date"""
    today_str = format_date(today or date.today())
    return completed_on(habits, today_str), len(habits)


def progress_percentage(completed: int, total: int) -> float:
    if total == 0:
        return 0.0
    return completed / total * 100


def day_status(habits: List[TrackedHabit], day: str) -> DayStatus:
    completed = completed_on(habits, day)
    if completed == 0:
        return DayStatus.EMPTY
    if completed == len(habits):
        return DayStatus.FULL
    return DayStatus.PARTIAL


def all_completed(habits: List[TrackedHabit], day: str) -> bool:
    return len(habits) > 0 and all(day in h.completedDays for h in habits)


def current_streak(habits: List[TrackedHabit], today: Optional[date] = None) -> int:
    """
    Count consecutive fully-completed days, scanning back from today over
    at most STREAK_WINDOW days.

    Today is exempt from ending the scan: an unfinished today adds nothing
    but the count still continues from yesterday. Any earlier unfinished
    day stops it.
    """
    today = today or date.today()
    streak = 0
    for i in range(STREAK_WINDOW):
        day = format_date(today - timedelta(days=i))
        if all_completed(habits, day):
            streak += 1
        elif i > 0:
            break
    return streak


def calendar_window(start_date) -> List[str]:
    """The CHALLENGE_DAYS consecutive dates beginning at start_date, in order"""
    start = _as_date(start_date)
    return [format_date(start + timedelta(days=i)) for i in range(CHALLENGE_DAYS)]


def calendar_days(habits: List[TrackedHabit], start_date,
                  today: Optional[date] = None) -> List[CalendarDay]:
    """The fixed 30-cell grid with a status for each day. Future days are not interactive."""
    today = today or date.today()
    today_str = format_date(today)
    return [
        CalendarDay(
            date=day,
            status=day_status(habits, day),
            is_today=day == today_str,
            is_future=parse_date(day) > today,
        )
        for day in calendar_window(start_date)
    ]


def is_future(day, today: Optional[date] = None) -> bool:
    return _as_date(day) > (today or date.today())


def days_since_start(start_date, today: Optional[date] = None) -> int:
    return ((today or date.today()) - _as_date(start_date)).days


def challenge_day(start_date, today: Optional[date] = None) -> int:
    """1-based day of the challenge; 0 before it starts"""
    elapsed = days_since_start(start_date, today)
    if elapsed < 0:
        return 0
    return elapsed + 1


def days_remaining(start_date, today: Optional[date] = None) -> int:
    elapsed = max(0, days_since_start(start_date, today))
    return max(0, CHALLENGE_DAYS - elapsed)


def should_celebrate(was_completed: bool, day: str, today: Optional[date] = None) -> bool:
    """True when a toggle took a habit from incomplete to complete for today itself"""
    return not was_completed and day == format_date(today or date.today())
