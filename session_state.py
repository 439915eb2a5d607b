from enum import Enum

from auth_manager import AuthManager
from challenge_plan import PlanStore


class SessionState(Enum):
    UNAUTHENTICATED = "unauthenticated"
    NEEDS_PLAN = "needs_plan"
    ACTIVE = "active"


# Where each state sends the user
ROUTES = {
    SessionState.UNAUTHENTICATED: "/api/login",
    SessionState.NEEDS_PLAN: "/api/setup/habits",
    SessionState.ACTIVE: "/api/challenge",
}


def resolve_state(auth: AuthManager, plans: PlanStore) -> SessionState:
    """Unauthenticated -> NeedsPlan -> Active, derived from the stores on every call."""
    user = auth.get_current_user()
    if user is None:
        return SessionState.UNAUTHENTICATED
    if not plans.has_plan(user.id):
        return SessionState.NEEDS_PLAN
    return SessionState.ACTIVE


def route_for(state: SessionState) -> str:
    return ROUTES[state]
