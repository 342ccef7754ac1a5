"""
Session identity: who is logged in to the dashboard.

Login resolves an email against every teacher and student in the store. The
password is accepted but not compared with the stored one. The resolved user is
written to a durable JSON slot so the session survives a restart. A login whose
session cannot be written fails, leaving the resolver unauthenticated.
"""

import json
import logging
import time
from enum import Enum
from pathlib import Path

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from gymdesk.config import LOGIN_DELAY, SESSION_FILE, SESSION_KEY
from gymdesk.errors import FailureKind
from gymdesk.models import Student, Teacher, User
from gymdesk.schemas import StoredIdentity
from gymdesk.store import DomainStore

logger = logging.getLogger(__name__)


class AuthState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class SessionSlot:
    """A single named key in a JSON file."""

    def __init__(self, path: str | Path = SESSION_FILE, key: str = SESSION_KEY):
        self.path = Path(path)
        self.key = key

    def _load_file(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def read(self) -> dict | None:
        record = self._load_file().get(self.key)
        return record if isinstance(record, dict) else None

    def write(self, record: dict) -> None:
        data = self._load_file()
        data[self.key] = record
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def clear(self) -> None:
        data = self._load_file()
        if self.key not in data:
            return
        del data[self.key]
        if data:
            self.path.write_text(json.dumps(data), encoding="utf-8")
        else:
            self.path.unlink(missing_ok=True)


class SessionResolver:
    def __init__(self, store: DomainStore, slot: SessionSlot, login_delay: float = LOGIN_DELAY):
        self.store = store
        self.slot = slot
        self.login_delay = login_delay
        self.is_loading = False
        self.last_failure: FailureKind | None = None
        self.last_error = ""
        self._user: User | None = None
        self._state = AuthState.UNAUTHENTICATED
        self._restore()

    @property
    def state(self) -> AuthState:
        return self._state

    def _restore(self) -> None:
        """Pick the session back up from the slot; anything unexpected means no session."""
        record = self.slot.read()
        if record is None:
            return
        try:
            identity = StoredIdentity.model_validate(record)
        except ValidationError:
            logger.warning("Discarding malformed session record")
            self._forget()
            return

        user = self.store.get_user(identity.id)
        if user is None or user.role != identity.role:
            logger.warning("Discarding session for unknown user %s", identity.id)
            self._forget()
            return

        self._set_user(user)
        logger.info("Restored session for %s", user.id)

    def _set_user(self, user: User | None) -> None:
        self._user = user
        self._state = AuthState.AUTHENTICATED if user is not None else AuthState.UNAUTHENTICATED

    def login(self, email: str, password: str) -> bool:
        self._state = AuthState.AUTHENTICATING
        self.is_loading = True
        try:
            if self.login_delay > 0:
                time.sleep(self.login_delay)
            user = self.store.find_user_by_email(email)
        except SQLAlchemyError:
            logger.exception("Login lookup failed for %s", email)
            user = None
        finally:
            self.is_loading = False

        if user is None:
            self._fail_login("Invalid email or password")
            logger.warning("Login failed for %s", email)
            return False

        try:
            self.slot.write(user.model_dump(mode="json", exclude={"username", "password"}))
        except OSError:
            logger.exception("Could not persist session for %s", user.id)
            self._fail_login("Could not save the session")
            return False

        self._set_user(user)
        self.last_failure = None
        self.last_error = ""
        logger.info("Logged in %s as %s", user.id, user.role.value)
        return True

    def _fail_login(self, message: str) -> None:
        self._set_user(None)
        self._forget()
        self.last_failure = FailureKind.AUTHENTICATION
        self.last_error = message

    def _forget(self) -> None:
        try:
            self.slot.clear()
        except OSError:
            logger.exception("Could not clear session file %s", self.slot.path)

    def logout(self) -> None:
        if self._user is not None:
            logger.info("Logged out %s", self._user.id)
        self._set_user(None)
        self._forget()

    def current_user(self) -> User | None:
        return self._user

    def is_student(self) -> bool:
        match self._user:
            case Student():
                return True
            case Teacher() | None:
                return False

    def is_teacher(self) -> bool:
        match self._user:
            case Teacher():
                return True
            case Student() | None:
                return False

