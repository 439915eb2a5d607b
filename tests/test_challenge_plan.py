from datetime import date

import pytest

from challenge_plan import PlanStore
from errors import (
    EmptyHabitSet, InvalidDate, MissingStartDate, PlanAlreadyExists, StartDateInPast,
)
from habit_setup import default_habits
from local_storage import MemoryStorage, plan_key, tracking_key

TODAY = date(2025, 1, 1)


@pytest.fixture
def plans():
    return PlanStore(MemoryStorage())


def test_create_plan_initializes_tracking(plans):
    habits = default_habits()[:3]
    plan = plans.create_plan("u1", habits, "2025-01-01", today=TODAY)

    assert plan.startDate == "2025-01-01"
    assert plans.get_plan("u1") == plan

    tracked = plans.tracker.load("u1")
    assert [h.id for h in tracked] == ["1", "2", "3"]
    assert all(h.completedDays == set() for h in tracked)


def test_start_date_may_be_a_date_in_the_future(plans):
    plan = plans.create_plan("u1", default_habits(), date(2025, 2, 1), today=TODAY)
    assert plan.startDate == "2025-02-01"


def test_empty_habit_set_writes_nothing(plans):
    with pytest.raises(EmptyHabitSet):
        plans.create_plan("u1", [], "2025-01-01", today=TODAY)

    assert plans.storage.get_item(tracking_key("u1")) is None
    assert plans.storage.get_item(plan_key("u1")) is None


@pytest.mark.parametrize("start", [None, "", "   "])
def test_missing_start_date(plans, start):
    with pytest.raises(MissingStartDate):
        plans.create_plan("u1", default_habits(), start, today=TODAY)
    assert plans.get_plan("u1") is None


def test_invalid_start_date(plans):
    with pytest.raises(InvalidDate):
        plans.create_plan("u1", default_habits(), "01/02/2025", today=TODAY)


def test_start_date_before_today(plans):
    with pytest.raises(StartDateInPast):
        plans.create_plan("u1", default_habits(), "2024-12-31", today=TODAY)


def test_plan_is_created_once(plans):
    plans.create_plan("u1", default_habits(), "2025-01-01", today=TODAY)
    plans.tracker.toggle("u1", "1", "2025-01-01")

    with pytest.raises(PlanAlreadyExists):
        plans.create_plan("u1", default_habits()[:1], "2025-01-05", today=TODAY)

    # tracking was not reset
    assert plans.tracker.is_completed("u1", "1", "2025-01-01")


def test_plans_are_per_user(plans):
    plans.create_plan("u1", default_habits(), "2025-01-01", today=TODAY)
    assert plans.has_plan("u1")
    assert not plans.has_plan("u2")


def test_corrupted_plan_reads_as_absent(plans):
    plans.storage.set_item(plan_key("u1"), '{"userId": "u1", "startDate": "soon"}')
    assert plans.get_plan("u1") is None
