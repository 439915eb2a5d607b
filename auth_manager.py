import logging
import re
from typing import List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from errors import (
    DuplicateEmail, InvalidCredentials, InvalidEmailFormat, NameRequired,
    PasswordMismatch, PasswordTooLong, PasswordTooShort,
)
from local_storage import (
    BaseStorage, CURRENT_USER_KEY, USERS_KEY, read_json, write_json,
)
from models import User, now_iso, timestamp_id

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 50


class Session:
    """
    The "current user" pointer. With a storage it is persisted under the
    currentUser record; without one it lives only on this object, so
    tests can hold several sessions side by side.
    """

    def __init__(self, storage: Optional[BaseStorage] = None):
        self.storage = storage
        self._user: Optional[User] = None

    @property
    def user(self) -> Optional[User]:
        if self.storage is None:
            return self._user
        data = read_json(self.storage, CURRENT_USER_KEY)
        if data is None:
            return None
        try:
            return User.from_dict(data)
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning("Treating malformed current user record as logged out: %s", e)
            return None

    def set(self, user: User) -> None:
        if self.storage is None:
            self._user = user
        else:
            write_json(self.storage, CURRENT_USER_KEY, user.to_dict())

    def clear(self) -> None:
        if self.storage is None:
            self._user = None
        else:
            self.storage.remove_item(CURRENT_USER_KEY)


class AuthManager:
    def __init__(self, storage: BaseStorage, session: Optional[Session] = None):
        self.storage = storage
        self.session = session if session is not None else Session(storage)

    # ---------------- Validation ---------------- #
    @staticmethod
    def validate_email(email):
        """Validate email format: local@domain.tld, no whitespace"""
        return bool(EMAIL_PATTERN.match(email or ""))

    @staticmethod
    def validate_password(password):
        """Raise PasswordTooShort / PasswordTooLong if the length is out of range"""
        password = password or ""
        if len(password) < MIN_PASSWORD_LENGTH:
            raise PasswordTooShort()
        if len(password) > MAX_PASSWORD_LENGTH:
            raise PasswordTooLong()

    @classmethod
    def validate_signup(cls, name, email, password, confirm_password):
        """Sign-up form checks, in the order the form reports them."""
        if not (name or "").strip():
            raise NameRequired()
        if not cls.validate_email(email):
            raise InvalidEmailFormat()
        cls.validate_password(password)
        if password != confirm_password:
            raise PasswordMismatch()

    # ---------------- User records ---------------- #
    def _load_users(self) -> List[dict]:
        users = read_json(self.storage, USERS_KEY)
        if not isinstance(users, list):
            if users is not None:
                logger.warning("Treating malformed users record as empty")
            return []
        return [u for u in users if isinstance(u, dict)]

    def _save_users(self, users: List[dict]) -> None:
        write_json(self.storage, USERS_KEY, users)

    # ---------------- Operations ---------------- #
    def sign_up(self, email: str, password: str, name: str) -> User:
        """Create a new account and log it in. Email match is exact and case-sensitive."""
        users = self._load_users()
        if any(u.get("email") == email for u in users):
            logger.info("Sign-up rejected, email already registered")
            raise DuplicateEmail()

        user = User(
            id=timestamp_id(str(u.get("id")) for u in users),
            email=email,
            name=name,
            createdAt=now_iso(),
        )
        record = user.to_dict()
        record["passwordHash"] = generate_password_hash(password)
        users.append(record)
        self._save_users(users)

        self.session.set(user)
        logger.info("Created account %s", user.id)
        return user

    def login(self, email: str, password: str) -> User:
        """Verify credentials and log the user in."""
        for record in self._load_users():
            if record.get("email") != email:
                continue
            password_hash = record.get("passwordHash")
            if not isinstance(password_hash, str):
                continue
            if not check_password_hash(password_hash, password or ""):
                continue
            try:
                user = User.from_dict(record)
            except (KeyError, TypeError) as e:
                logger.warning("Skipping malformed user record: %s", e)
                continue
            self.session.set(user)
            logger.info("User %s logged in", user.id)
            return user

        logger.info("Login failed")
        raise InvalidCredentials()

    def logout(self) -> None:
        user = self.session.user
        self.session.clear()
        if user is not None:
            logger.info("User %s logged out", user.id)

    def get_current_user(self) -> Optional[User]:
        return self.session.user

    def is_authenticated(self) -> bool:
        return self.get_current_user() is not None
