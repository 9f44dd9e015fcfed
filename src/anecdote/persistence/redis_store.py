"""Redis-backed key-value store. Use when REDIS_URL is set."""

import logging

import redis

from anecdote.errors import PersistenceError
from anecdote.persistence.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

KEY_PREFIX = "anecdote"


class RedisKeyValueStore(KeyValueStore):
    """Redis-backed store. Keys are namespaced under KEY_PREFIX."""

    def __init__(self, redis_url: str) -> None:
        self._redis_url = redis_url
        self._client = None

    def _get_client(self):
        """Lazy-init Redis client."""
        if self._client is None:
            self._client = redis.from_url(
                self._redis_url,
                decode_responses=True,
            )
        return self._client

    def _key(self, key: str) -> str:
        return f"{KEY_PREFIX}:{key}"

    def get(self, key: str) -> str | None:
        try:
            return self._get_client().get(self._key(key))
        except redis.RedisError as e:
            logger.warning("Redis get failed for %s: %s", key, e)
            return None

    def set(self, key: str, value: str) -> None:
        try:
            self._get_client().set(self._key(key), value)
        except redis.RedisError as e:
            raise PersistenceError(f"Redis set failed for {key!r}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._get_client().delete(self._key(key))
        except redis.RedisError as e:
            logger.error("Redis delete failed for %s: %s", key, e)
