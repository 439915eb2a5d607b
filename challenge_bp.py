# challenge_bp.py
from flask import Blueprint, current_app, jsonify

import streaks
from errors import InvalidDate
from models import format_date, parse_date
from services import request_fields, require_user

challenge_bp = Blueprint("challenge", __name__)


def _require_plan():
    """Logged in with an active plan; otherwise send them back to setup."""
    services, user, err_resp, err_code = require_user()
    if err_resp:
        return services, None, None, err_resp, err_code
    plan = services.plans.get_plan(user.id)
    if plan is None:
        return services, None, None, jsonify({
            "success": False,
            "error": "Create your plan first",
            "route": "/api/setup/habits",
        }), 409
    return services, user, plan, None, None


def _challenge_view(services, user, plan):
    today = services.today()
    habits = services.tracker.load(user.id)
    completed, total = streaks.today_progress(habits, today)
    return {
        "success": True,
        "today": format_date(today),
        "startDate": plan.startDate,
        "habits": [h.to_dict() for h in habits],
        "progress": {
            "completed": completed,
            "total": total,
            "percentage": streaks.progress_percentage(completed, total),
        },
        "streak": streaks.current_streak(habits, today),
        "day": streaks.challenge_day(plan.startDate, today),
        "daysRemaining": streaks.days_remaining(plan.startDate, today),
        "calendar": [d.to_dict() for d in streaks.calendar_days(habits, plan.startDate, today)],
    }


@challenge_bp.route("/api/challenge", methods=["GET"])
def challenge_page():
    """Everything the tracking view shows, recomputed from the stored habits."""
    services, user, plan, err_resp, err_code = _require_plan()
    if err_resp:
        return err_resp, err_code
    return jsonify(_challenge_view(services, user, plan)), 200


@challenge_bp.route("/api/challenge/habits/<habit_id>/toggle", methods=["POST"])
def toggle_habit(habit_id):
    """Toggle one habit for {date} (today when omitted). Future days are read-only."""
    services, user, plan, err_resp, err_code = _require_plan()
    if err_resp:
        return err_resp, err_code

    today = services.today()
    day = request_fields("date")["date"] or format_date(today)
    try:
        day = format_date(parse_date(day))
    except ValueError:
        raise InvalidDate()
    if streaks.is_future(day, today):
        return jsonify({"success": False, "error": "You can't complete a day that hasn't happened yet"}), 400

    habit = services.tracker.find(user.id, habit_id)
    services.tracker.toggle(user.id, habit_id, day)
    current_app.logger.info("[toggle] user %s habit %s on %s", user.id, habit_id, day)

    view = _challenge_view(services, user, plan)
    view["celebrate"] = habit is not None and streaks.should_celebrate(
        habit.is_completed(day), day, today
    )
    return jsonify(view), 200
