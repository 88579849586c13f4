import logging
import sqlite3
from typing import Callable

from werkzeug.security import check_password_hash, generate_password_hash

from database.db_manager import DatabaseManager
from database.user_dao import UserDAO
from models.user import User
from utils.errors import NotAuthenticatedError
from utils.result import Result
from utils.validation import validate_email, validate_password

logger = logging.getLogger(__name__)

_SESSION_KEY = "session_user_id"


class AuthService:
    """Local email/password identity provider.

    The rest of the app only relies on current_user_id(), which raises
    NotAuthenticatedError when nobody is signed in.
    """

    def __init__(self, user_dao: UserDAO, db: DatabaseManager):
        self._dao = user_dao
        self._db = db
        self._current: User | None = None
        self._listeners: list[Callable[[User | None], None]] = []

    @property
    def current_user(self) -> User | None:
        return self._current

    def current_user_id(self) -> str:
        if self._current is None:
            raise NotAuthenticatedError()
        return self._current.id

    def add_listener(self, callback: Callable[[User | None], None]):
        self._listeners.append(callback)

    def _set_current(self, user: User | None):
        self._current = user
        self._db.set_setting(_SESSION_KEY, user.id if user else "")
        for callback in list(self._listeners):
            callback(user)

    def restore_session(self) -> User | None:
        """Sign back in the user persisted by the previous run, if any."""
        user_id = self._db.get_setting(_SESSION_KEY, "")
        if not user_id:
            return None
        user = self._dao.get_by_id(user_id)
        if user is None:
            logger.warning("Stored session refers to unknown user %s", user_id)
            self._db.set_setting(_SESSION_KEY, "")
            return None
        self._current = user
        logger.info("Restored session for %s", user.email)
        return user

    def register(self, email: str, password: str) -> Result:
        try:
            email = validate_email(email)
            validate_password(password)
        except ValueError as e:
            return Result.failure(e)
        if self._dao.get_credentials(email) is not None:
            return Result.failure("An account with this email already exists.")
        try:
            user = self._dao.create(email, generate_password_hash(password))
        except sqlite3.Error as e:
            logger.warning("Registration failed for %s: %s", email, e)
            return Result.failure(e)
        logger.info("Registered %s", email)
        self._set_current(user)
        return Result.success(user)

    def login(self, email: str, password: str) -> Result:
        email = email.strip().lower()
        if not email or not password:
            return Result.failure("Email and password are required.")
        creds = self._dao.get_credentials(email)
        if creds is None:
            return Result.failure("Invalid email or password.")
        user, stored_hash = creds
        if not check_password_hash(stored_hash, password):
            logger.info("Failed sign-in for %s", email)
            return Result.failure("Invalid email or password.")
        logger.info("Signed in %s", email)
        self._set_current(user)
        return Result.success(user)

    def logout(self):
        if self._current is not None:
            logger.info("Signed out %s", self._current.email)
        self._set_current(None)
