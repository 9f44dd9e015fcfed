"""Session persistence - the active user identity."""

import json
import logging

from pydantic import ValidationError as PydanticValidationError

from anecdote.errors import CorruptDataError, PersistenceError, ValidationError
from anecdote.models import User
from anecdote.persistence.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

SESSION_KEY = "session"


class SessionStore:
    """Owns the active User. One session at a time; login replaces it wholesale."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._user: User | None = None

    @property
    def current(self) -> User | None:
        return self._user

    def login(self, name: str) -> User:
        """Start a named session. Raises ValidationError on blank name."""
        trimmed = (name or "").strip()
        if not trimmed:
            raise ValidationError("Please enter your name.")
        return self._activate(User(name=trimmed, is_guest=False))

    def login_as_guest(self) -> User:
        """Start the shared guest session."""
        return self._activate(User.guest())

    def logout(self) -> None:
        """Forget the active user and its persisted record."""
        self._user = None
        self._store.delete(SESSION_KEY)

    def restore(self) -> User | None:
        """
        Restore a previously persisted session on startup.
        Corrupt records are treated as absent and left in place.
        """
        raw = self._store.get(SESSION_KEY)
        if raw is None:
            return None
        try:
            self._user = self._parse(raw)
        except CorruptDataError as e:
            logger.error("Failed to parse user session: %s", e)
            self._user = None
        return self._user

    def _activate(self, user: User) -> User:
        self._user = user
        try:
            self._store.set(SESSION_KEY, json.dumps(user.model_dump(by_alias=True)))
        except PersistenceError as e:
            logger.error("Could not persist session for %s: %s", user.display_name, e)
        return user

    @staticmethod
    def _parse(raw: str) -> User:
        try:
            return User.model_validate(json.loads(raw))
        except (json.JSONDecodeError, PydanticValidationError, TypeError) as e:
            raise CorruptDataError(str(e)) from e
