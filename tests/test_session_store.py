import json

import pytest

from anecdote.errors import ValidationError
from anecdote.models import User
from anecdote.persistence import MemoryKeyValueStore, SessionStore
from anecdote.persistence.session_store import SESSION_KEY


def test_login_trims_and_persists(kv):
    store = SessionStore(kv)

    user = store.login("  Ada  ")

    assert user == User(name="Ada", is_guest=False)
    assert store.current == user
    assert json.loads(kv.get(SESSION_KEY)) == {"name": "Ada", "isGuest": False}


@pytest.mark.parametrize("name", ["", "   ", "\t\n"])
def test_login_rejects_blank_name_without_state_change(kv, name):
    store = SessionStore(kv)
    store.login_as_guest()

    with pytest.raises(ValidationError):
        store.login(name)

    assert store.current == User.guest()
    assert json.loads(kv.get(SESSION_KEY))["isGuest"] is True


def test_login_replaces_previous_session(kv):
    store = SessionStore(kv)
    store.login("Ada")

    store.login("Grace")

    assert store.current.name == "Grace"
    assert json.loads(kv.get(SESSION_KEY))["name"] == "Grace"


def test_guest_login_persists_sentinel(kv):
    store = SessionStore(kv)

    user = store.login_as_guest()

    assert user.is_guest
    assert user.name == "Guest"
    assert json.loads(kv.get(SESSION_KEY)) == {"name": "Guest", "isGuest": True}


def test_logout_clears_persisted_user(kv):
    store = SessionStore(kv)
    store.login("Ada")

    store.logout()

    assert store.current is None
    assert kv.get(SESSION_KEY) is None


def test_restore_reads_previous_session(kv):
    SessionStore(kv).login("Ada")

    restored = SessionStore(kv).restore()

    assert restored == User(name="Ada", is_guest=False)


def test_restore_without_record_has_no_session(kv):
    assert SessionStore(kv).restore() is None


@pytest.mark.parametrize(
    "raw",
    ["{not json", '"just a string"', '{"isGuest": false}', '{"name": "", "isGuest": false}', "[]"],
)
def test_restore_corrupt_record_is_absent_and_left_in_place(kv, raw):
    kv.set(SESSION_KEY, raw)
    store = SessionStore(kv)

    assert store.restore() is None
    assert store.current is None
    assert kv.get(SESSION_KEY) == raw


def test_session_write_failure_keeps_in_memory_session():
    kv = MemoryKeyValueStore(quota_bytes=4)
    store = SessionStore(kv)

    user = store.login("Ada")

    assert store.current == user
    assert kv.get(SESSION_KEY) is None
