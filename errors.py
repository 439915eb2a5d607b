# errors.py
"""Validation errors surfaced to the user. None of them are fatal."""


class ChallengeError(ValueError):
    """Base class: carries a user-facing message and a stable code."""
    code = "error"
    message = "Something went wrong"
    status = 400

    def __init__(self, message=None):
        if message:
            self.message = message
        super().__init__(self.message)

    def to_dict(self):
        return {"success": False, "error": self.message, "code": self.code}


class InvalidRequest(ChallengeError):
    code = "invalid_request"
    message = "Request body must be a JSON object of text fields"


# ---------------- Accounts ---------------- #
class DuplicateEmail(ChallengeError):
    code = "duplicate_email"
    message = "Email already exists"
    status = 409


class InvalidCredentials(ChallengeError):
    code = "invalid_credentials"
    message = "Invalid email or password"
    status = 401


class NameRequired(ChallengeError):
    code = "name_required"
    message = "Name is required"


class InvalidEmailFormat(ChallengeError):
    code = "invalid_email_format"
    message = "Please enter a valid email"


class PasswordTooShort(ChallengeError):
    code = "password_too_short"
    message = "Password must be at least 6 characters"


class PasswordTooLong(ChallengeError):
    code = "password_too_long"
    message = "Password must be less than 50 characters"


class PasswordMismatch(ChallengeError):
    code = "password_mismatch"
    message = "Passwords do not match"


# ---------------- Plans ---------------- #
class EmptyHabitSet(ChallengeError):
    code = "empty_habit_set"
    message = "Please add at least one habit!"


class MissingStartDate(ChallengeError):
    code = "missing_start_date"
    message = "Please select a start date!"


class InvalidDate(ChallengeError):
    code = "invalid_date"
    message = "Dates must be formatted as YYYY-MM-DD"


class StartDateInPast(ChallengeError):
    code = "start_date_in_past"
    message = "The start date cannot be before today"


class PlanAlreadyExists(ChallengeError):
    code = "plan_already_exists"
    message = "A challenge plan already exists for this user"
    status = 409
