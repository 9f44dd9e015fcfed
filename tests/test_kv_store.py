import pytest

from anecdote.config import Settings
from anecdote.errors import PersistenceError
from anecdote.persistence import (
    FileKeyValueStore,
    MemoryKeyValueStore,
    RedisKeyValueStore,
    create_kv_store,
)


def test_memory_store_roundtrip():
    kv = MemoryKeyValueStore()
    kv.set("session", '{"name": "Ada"}')

    assert kv.get("session") == '{"name": "Ada"}'
    kv.delete("session")
    assert kv.get("session") is None
    kv.delete("session")


def test_memory_store_quota_rejects_oversized_write():
    kv = MemoryKeyValueStore(quota_bytes=20)
    kv.set("a", "x" * 10)

    with pytest.raises(PersistenceError):
        kv.set("b", "y" * 10)

    assert kv.get("b") is None
    kv.set("a", "z" * 15)
    assert kv.get("a") == "z" * 15


def test_file_store_roundtrip(tmp_path):
    kv = FileKeyValueStore(tmp_path)
    kv.set("history:ada lovelace", "[]")

    assert FileKeyValueStore(tmp_path).get("history:ada lovelace") == "[]"
    assert kv.get("history:grace") is None

    kv.delete("history:ada lovelace")
    assert kv.get("history:ada lovelace") is None


def test_file_store_unreadable_file_reads_as_missing(tmp_path):
    kv = FileKeyValueStore(tmp_path)
    kv.set("session", "{}")
    path = next((tmp_path / "storage").glob("*.json"))
    path.write_text("{corrupt")

    assert kv.get("session") is None


def test_file_store_quota(tmp_path):
    kv = FileKeyValueStore(tmp_path, quota_bytes=100)
    kv.set("small", "x")

    with pytest.raises(PersistenceError):
        kv.set("big", "y" * 200)


def test_factory_uses_file_store_without_redis(tmp_path):
    kv = create_kv_store(Settings(data_dir=tmp_path, redis_url=None))

    assert isinstance(kv, FileKeyValueStore)


def test_factory_uses_redis_when_configured(tmp_path):
    kv = create_kv_store(Settings(data_dir=tmp_path, redis_url="redis://localhost:6379/0"))

    assert isinstance(kv, RedisKeyValueStore)


def test_redis_store_maps_errors(monkeypatch):
    import redis

    class DownClient:
        def get(self, key):
            raise redis.ConnectionError("down")

        def set(self, key, value):
            raise redis.ConnectionError("down")

        def delete(self, key):
            raise redis.ConnectionError("down")

    kv = RedisKeyValueStore("redis://localhost:6379/0")
    monkeypatch.setattr(kv, "_get_client", lambda: DownClient())

    assert kv.get("session") is None
    with pytest.raises(PersistenceError):
        kv.set("session", "{}")
    kv.delete("session")


def test_redis_store_namespaces_keys(monkeypatch):
    stored = {}

    class DictClient:
        def get(self, key):
            return stored.get(key)

        def set(self, key, value):
            stored[key] = value

        def delete(self, key):
            stored.pop(key, None)

    kv = RedisKeyValueStore("redis://localhost:6379/0")
    monkeypatch.setattr(kv, "_get_client", lambda: DictClient())
    kv.set("history:guest", "[]")

    assert stored == {"anecdote:history:guest": "[]"}
    assert kv.get("history:guest") == "[]"


def test_file_store_keeps_similar_keys_apart(tmp_path):
    kv = FileKeyValueStore(tmp_path)
    kv.set("history:ada lovelace", "spaced")
    kv.set("history:ada_lovelace", "underscored")
    kv.set("history:a.da", "dotted")
    kv.set("history:a_da", "plain")

    assert kv.get("history:ada lovelace") == "spaced"
    assert kv.get("history:ada_lovelace") == "underscored"
    assert kv.get("history:a.da") == "dotted"
    assert kv.get("history:a_da") == "plain"
    assert len(list((tmp_path / "storage").glob("*.json"))) == 4
