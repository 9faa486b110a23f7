from datetime import datetime, timedelta

import pytest

from travel_backend.api.credentials import verify_password
from travel_backend.api.errors import DuplicateUsername, InvalidCredentials, ValidationError, WeakPassword
from travel_database.models import Note, User

NOTE = {"heading": "Trip", "message": "Remember passport", "tags": "travel"}
ITEM = {"heading": "Socks", "message": "Five warm pairs"}


# -------- CREDENTIAL STORE --------
def test_register_stores_hash_not_password(credentials, database):
    user = credentials.register("Alice", "password1")
    assert user.username == "alice"
    assert len(user.access_token) == 256

    with database.session() as session:
        stored = session.get(User, user.user_id)
        assert stored.password_hash != "password1"
        assert verify_password("password1", stored.password_hash)
        assert stored.access_token == user.access_token


def test_register_duplicate_checked_before_strength(credentials):
    credentials.register("alice", "password1")
    with pytest.raises(DuplicateUsername):
        credentials.register("ALICE", "x")


def test_register_weak_password(credentials):
    with pytest.raises(WeakPassword):
        credentials.register("bob", "1234567")
    assert credentials.register("bob", "12345678").username == "bob"


def test_register_blank_username(credentials):
    with pytest.raises(ValidationError):
        credentials.register("", "password1")


def test_login_returns_existing_token(credentials):
    registered = credentials.register("alice", "password1")
    first = credentials.login("Alice", "password1")
    second = credentials.login("alice", "password1")
    assert first == second == registered


def test_login_failures(credentials):
    credentials.register("alice", "password1")
    with pytest.raises(InvalidCredentials):
        credentials.login("alice", "password2")
    with pytest.raises(InvalidCredentials):
        credentials.login("nobody", "password1")
    with pytest.raises(InvalidCredentials):
        credentials.login("", "password1")


def test_resolve_token(credentials):
    user = credentials.register("alice", "password1")
    identity = credentials.resolve_token(user.access_token)
    assert identity.user_id == user.user_id
    assert identity.username == "alice"
    assert credentials.resolve_token("nope") is None
    assert credentials.resolve_token(None) is None
    assert credentials.get_user(user.user_id) == identity
    assert credentials.get_user(user.user_id + 100) is None


# -------- RESOURCE STORES --------
@pytest.fixture
def alice(credentials):
    return credentials.register("alice", "password1").user_id


@pytest.fixture
def bob(credentials):
    return credentials.register("bob", "password2").user_id


def test_create_sets_owner_and_timestamp(notes, alice):
    note = notes.create(alice, {**NOTE, "owner_id": 999})
    assert note.owner_id == alice
    assert note.created_at is not None
    assert note.id is not None


def test_create_invalid_writes_nothing(notes, alice):
    with pytest.raises(ValidationError) as excinfo:
        notes.create(alice, {"heading": "Trip"})
    assert "message is required" in excinfo.value.details["errors"]
    assert notes.list(alice) == []


def test_list_is_owner_scoped_and_newest_first(notes, database, alice, bob):
    notes.create(bob, NOTE)
    now = datetime(2024, 5, 1, 12, 0, 0)
    with database.session() as session:
        for offset, heading in ((2, "oldest"), (0, "newest"), (1, "middle")):
            session.add(Note(heading=heading, message="hello there", tags="other",
                             owner_id=alice, created_at=now - timedelta(hours=offset)))
        session.commit()

    assert [n.heading for n in notes.list(alice)] == ["newest", "middle", "oldest"]
    assert [n.heading for n in notes.list(bob)] == ["Trip"]


def test_delete_owned(notes, alice, bob):
    note = notes.create(alice, NOTE)
    assert notes.delete_owned(bob, note.id) is None
    assert len(notes.list(alice)) == 1

    deleted = notes.delete_owned(alice, note.id)
    assert deleted.id == note.id
    assert deleted.heading == "Trip"
    assert notes.list(alice) == []
    assert notes.delete_owned(alice, note.id) is None


def test_update_owned_merges_supplied_fields(notes, alice, bob):
    note = notes.create(alice, NOTE)
    assert notes.update_owned(bob, note.id, {"heading": "Stolen"}) is None

    updated = notes.update_owned(alice, note.id, {"tags": "food"})
    assert updated.tags == "food"
    assert updated.heading == "Trip"
    assert updated.message == "Remember passport"


def test_update_owned_validates(notes, alice):
    note = notes.create(alice, NOTE)
    with pytest.raises(ValidationError):
        notes.update_owned(alice, note.id, {"message": "hi"})
    assert notes.list(alice)[0].message == "Remember passport"


def test_update_missing_record_with_invalid_fields_reports_validation(notes, alice):
    with pytest.raises(ValidationError):
        notes.update_owned(alice, 12345, {"tags": "bogus"})


def test_packing_item_defaults_incomplete(packing_list, alice):
    item = packing_list.create(alice, ITEM)
    assert item.is_completed is False


def test_set_completed(packing_list, alice, bob):
    item = packing_list.create(alice, ITEM)
    assert packing_list.set_completed(bob, item.id, True) is None
    assert packing_list.list(alice)[0].is_completed is False

    assert packing_list.set_completed(alice, item.id, True).is_completed is True
    assert packing_list.set_completed(alice, item.id, False).is_completed is False

    with pytest.raises(ValidationError):
        packing_list.set_completed(alice, item.id, "done")


def test_packing_delete_owned(packing_list, alice, bob):
    item = packing_list.create(alice, ITEM)
    assert packing_list.delete_owned(bob, item.id) is None
    assert packing_list.delete_owned(alice, item.id).id == item.id
    assert packing_list.list(alice) == []
