"""Persistence layer."""

from anecdote.persistence.factory import create_kv_store
from anecdote.persistence.history_store import HistoryStore
from anecdote.persistence.kv_store import (
    FileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
)
from anecdote.persistence.redis_store import RedisKeyValueStore
from anecdote.persistence.session_store import SessionStore

__all__ = [
    "FileKeyValueStore",
    "HistoryStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "RedisKeyValueStore",
    "SessionStore",
    "create_kv_store",
]
