"""Per-user anecdote history - bounded, newest first, deduplicated by title."""

import json
import logging

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from anecdote.errors import CorruptDataError, PersistenceError
from anecdote.models import Anecdote, User
from anecdote.persistence.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

KEY_PREFIX = "history"
GUEST_PARTITION = "guest"
MAX_ENTRIES = 50
FALLBACK_ENTRIES = 10

_entries_adapter = TypeAdapter(list[Anecdote])


class HistoryStore:
    """
    Durable history partitioned by user.
    The in-memory list is authoritative for the session and keeps images;
    the durable copy never does.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        max_entries: int = MAX_ENTRIES,
        fallback_entries: int = FALLBACK_ENTRIES,
    ) -> None:
        self._store = store
        self._max = max_entries
        self._fallback = fallback_entries
        self._entries: list[Anecdote] = []

    @property
    def entries(self) -> list[Anecdote]:
        return list(self._entries)

    @staticmethod
    def key_for(user: User) -> str:
        """Guests share one partition; names collide on case and surrounding whitespace."""
        if user.is_guest:
            return f"{KEY_PREFIX}:{GUEST_PARTITION}"
        return f"{KEY_PREFIX}:{user.name.strip().casefold()}"

    def load(self, user: User) -> list[Anecdote]:
        """Replace in-memory history with the user's partition. Corrupt data loads empty."""
        key = self.key_for(user)
        raw = self._store.get(key)
        if raw is None:
            self._entries = []
            return self.entries
        try:
            self._entries = self._parse(raw)
        except CorruptDataError as e:
            logger.error("Failed to load history %s: %s", key, e)
            self._entries = []
        return self.entries

    def clear(self) -> None:
        """Drop in-memory history (logout)."""
        self._entries = []

    def append(self, user: User, anecdote: Anecdote) -> list[Anecdote]:
        """Prepend anecdote, drop earlier same-title entry, truncate, persist."""
        entries = [anecdote] + [h for h in self._entries if h.title != anecdote.title]
        self._entries = entries[: self._max]
        self._persist(self.key_for(user))
        return self.entries

    def _persist(self, key: str) -> None:
        projection = [h.to_storage() for h in self._entries]
        try:
            self._store.set(key, json.dumps(projection))
            return
        except PersistenceError as e:
            logger.warning("Storage full, attempting to trim history %s: %s", key, e)
        try:
            self._store.set(key, json.dumps(projection[: self._fallback]))
        except PersistenceError as e:
            logger.error("Failed to save history %s even after trimming: %s", key, e)

    @staticmethod
    def _parse(raw: str) -> list[Anecdote]:
        try:
            return _entries_adapter.validate_python(json.loads(raw))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise CorruptDataError(str(e)) from e
