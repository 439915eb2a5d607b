# setup_bp.py
from flask import Blueprint, current_app, jsonify, request

from habit_setup import POPULAR_EMOJIS
from models import Category
from services import request_fields, require_user

setup_bp = Blueprint("setup", __name__)


def _require_setup():
    """Logged in and still without a plan. Once a plan exists setup is closed."""
    services, user, err_resp, err_code = require_user()
    if err_resp:
        return services, None, err_resp, err_code
    if services.plans.has_plan(user.id):
        return services, None, jsonify({
            "success": False,
            "error": "Your challenge has already started",
            "route": "/api/challenge",
        }), 409
    return services, user, None, None


def _habits_response(habits, status=200):
    return jsonify({"success": True, "habits": [h.to_dict() for h in habits]}), status


@setup_bp.route("/api/setup/habits", methods=["GET", "POST"])
def setup_habits():
    """
    - GET: the setup list (defaults on first visit) plus the emoji/category choices.
    - POST: add a custom habit {name, emoji?, category?}.
    """
    services, user, err_resp, err_code = _require_setup()
    if err_resp:
        return err_resp, err_code

    if request.method == "GET":
        habits = services.setup.load(user.id)
        return jsonify({
            "success": True,
            "habits": [h.to_dict() for h in habits],
            "emojis": POPULAR_EMOJIS,
            "categories": [c.value for c in Category],
        }), 200

    data = request_fields("name", "emoji", "category")
    if not (data["name"] or "").strip():
        return jsonify({"success": False, "error": "Habit name is required"}), 400

    habits = services.setup.add_habit(
        user.id,
        data["name"],
        emoji=data["emoji"] or "✨",
        category=data["category"] or Category.CUSTOM.value,
    )
    current_app.logger.info("[setup] user %s added habit %s", user.id, habits[-1].id)
    return _habits_response(habits, 201)


@setup_bp.route("/api/setup/habits/<habit_id>", methods=["PUT", "DELETE"])
def edit_setup_habit(habit_id):
    services, user, err_resp, err_code = _require_setup()
    if err_resp:
        return err_resp, err_code

    if request.method == "DELETE":
        return _habits_response(services.setup.delete_habit(user.id, habit_id))

    data = request_fields("name")
    return _habits_response(services.setup.rename_habit(user.id, habit_id, data["name"]))


@setup_bp.route("/api/plan", methods=["GET", "POST"])
def plan():
    """
    - GET: the user's plan, or 404 if setup is not finished.
    - POST: commit the current setup list with {startDate}.
    """
    services, user, err_resp, err_code = require_user()
    if err_resp:
        return err_resp, err_code

    if request.method == "GET":
        existing = services.plans.get_plan(user.id)
        if existing is None:
            return jsonify({"success": False, "error": "No plan yet", "route": "/api/setup/habits"}), 404
        return jsonify({"success": True, "plan": existing.to_dict()}), 200

    data = request_fields("startDate")
    habits = services.setup.load(user.id)
    created = services.plans.create_plan(
        user.id, habits, data["startDate"], today=services.today()
    )
    current_app.logger.info("[plan] user %s started a challenge on %s", user.id, created.startDate)
    return jsonify({"success": True, "plan": created.to_dict(), "route": "/api/challenge"}), 201
