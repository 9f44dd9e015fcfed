"""Store factory - creates file or Redis storage based on config."""

from pathlib import Path

from anecdote.config import Settings, get_settings
from anecdote.persistence.kv_store import FileKeyValueStore, KeyValueStore
from anecdote.persistence.redis_store import RedisKeyValueStore


def create_kv_store(settings: Settings | None = None) -> KeyValueStore:
    """
    Create the durable store based on REDIS_URL.
    Uses Redis when REDIS_URL is set; otherwise file-based.
    """
    settings = settings or get_settings()
    if settings.redis_url:
        return RedisKeyValueStore(settings.redis_url)
    data_dir = Path(settings.data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    return FileKeyValueStore(data_dir, quota_bytes=settings.storage_quota_bytes)
