import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, Optional

from flask import current_app, jsonify, request

from auth_manager import AuthManager, Session
from challenge_plan import PlanStore
from config import Config
from errors import InvalidRequest
from habit_setup import SetupHabits
from habit_tracker import TrackingStore
from habits_repo import SQLStorage, make_engine
from local_storage import BaseStorage, LocalFileStorage, MemoryStorage

logger = logging.getLogger(__name__)

EXTENSION_KEY = "challenge"


@dataclass
class ChallengeServices:
    storage: BaseStorage
    auth: AuthManager
    setup: SetupHabits
    tracker: TrackingStore
    plans: PlanStore
    today: Callable[[], date] = field(default=date.today)


def make_storage(config: Config) -> BaseStorage:
    if config.STORAGE_BACKEND == "memory":
        return MemoryStorage()
    if config.STORAGE_BACKEND == "sqlite":
        return SQLStorage(make_engine(config.DATABASE_URL))
    return LocalFileStorage(config.DATA_FILE)


def build_services(config: Config, storage: BaseStorage = None) -> ChallengeServices:
    storage = storage if storage is not None else make_storage(config)
    logger.info("Using %s storage", type(storage).__name__)
    tracker = TrackingStore(storage)
    return ChallengeServices(
        storage=storage,
        auth=AuthManager(storage, Session(storage)),
        setup=SetupHabits(storage),
        tracker=tracker,
        plans=PlanStore(storage, tracker),
    )


def get_services() -> ChallengeServices:
    return current_app.extensions[EXTENSION_KEY]


def require_user():
    """
    Return (services, user, None, None) when someone is logged in,
    otherwise (services, None, error_response, 401).
    """
    services = get_services()
    user = services.auth.get_current_user()
    if user is None:
        return services, None, jsonify({"success": False, "error": "Authentication required"}), 401
    return services, user, None, None


def request_fields(*names) -> Dict[str, Optional[str]]:
    """
    Read `names` from a JSON object body (or form fields). Missing fields
    come back as None; a non-object body or non-text field is an
    InvalidRequest.
    """
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict(flat=True)
    if not isinstance(data, dict):
        raise InvalidRequest()

    fields = {}
    for name in names:
        value = data.get(name)
        if value is not None and not isinstance(value, str):
            raise InvalidRequest(f"'{name}' must be text")
        fields[name] = value
    return fields
