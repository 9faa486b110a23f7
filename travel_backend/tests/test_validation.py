from travel_backend.api.validation import (
    is_weak_password,
    validate_completed,
    validate_note,
    validate_packing_item,
    validate_username,
)


def test_valid_note_is_trimmed():
    result = validate_note({"heading": "  Trip ", "message": " Remember passport ", "tags": "travel"})
    assert result.ok
    assert result.values == {"heading": "Trip", "message": "Remember passport", "tags": "travel"}


def test_note_reports_every_problem():
    result = validate_note({"heading": "", "message": "hey", "tags": "party"})
    assert not result.ok
    assert len(result.errors) == 3
    assert result.values == {}


def test_note_length_bounds():
    assert validate_note({"heading": "x" * 50, "message": "x" * 5, "tags": "food"}).ok
    assert not validate_note({"heading": "x" * 51, "message": "hello", "tags": "food"}).ok
    assert not validate_note({"heading": "x", "message": "x" * 141, "tags": "food"}).ok


def test_note_drops_unknown_keys():
    result = validate_note({"heading": "Trip", "message": "hello there", "tags": "other", "owner_id": 7})
    assert "owner_id" not in result.values


def test_partial_note_only_checks_supplied_keys():
    result = validate_note({"message": "a brand new message"}, partial=True)
    assert result.ok
    assert result.values == {"message": "a brand new message"}

    assert validate_note({}, partial=True).ok


def test_partial_note_rejects_explicit_null():
    result = validate_note({"heading": None}, partial=True)
    assert result.errors == ["heading is required"]


def test_packing_item_completed_optional():
    result = validate_packing_item({"heading": "Socks", "message": "Five warm pairs"})
    assert result.ok
    assert "is_completed" not in result.values

    result = validate_packing_item({"heading": "Socks", "message": "Five warm pairs", "is_completed": True})
    assert result.values["is_completed"] is True


def test_completed_must_be_boolean():
    assert validate_completed(False).ok
    assert validate_completed(False).values == {"is_completed": False}
    assert not validate_completed("yes").ok
    assert not validate_completed(None).ok


def test_username_is_lowercased():
    result = validate_username(" Alice ")
    assert result.values == {"username": "alice"}
    assert not validate_username("").ok
    assert not validate_username(None).ok


def test_password_strength():
    assert is_weak_password("1234567")
    assert not is_weak_password("12345678")
