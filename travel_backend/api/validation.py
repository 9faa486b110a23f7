"""
Explicit field validators for notes and packing list items.

Validators never raise: they return a Validation holding the cleaned values
that passed and a list of human-readable problems. Stores check `ok` before
touching the database. Keys outside the known field set (including any
client-supplied owner) are dropped.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from travel_database.models import NOTE_TAGS

HEADING_MIN, HEADING_MAX = 1, 50
MESSAGE_MIN, MESSAGE_MAX = 5, 140
PASSWORD_MIN = 8
USERNAME_MAX = 64


@dataclass
class Validation:
    values: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _text(name: str, value: Any, min_length: int, max_length: int, errors: List[str]) -> Optional[str]:
    if value is None:
        errors.append(f"{name} is required")
        return None
    if not isinstance(value, str):
        errors.append(f"{name} must be a string")
        return None
    value = value.strip()
    if len(value) < min_length:
        errors.append(f"{name} must be at least {min_length} characters")
        return None
    if len(value) > max_length:
        errors.append(f"{name} must be at most {max_length} characters")
        return None
    return value


def _check(validation: Validation, name: str, fields: Mapping[str, Any], partial: bool, check):
    if partial and name not in fields:
        return
    cleaned = check(fields.get(name))
    if cleaned is not None:
        validation.values[name] = cleaned


def _heading(value, errors):
    return _text("heading", value, HEADING_MIN, HEADING_MAX, errors)


def _message(value, errors):
    return _text("message", value, MESSAGE_MIN, MESSAGE_MAX, errors)


def _tags(value, errors):
    if value not in NOTE_TAGS:
        errors.append(f"tags must be one of: {', '.join(NOTE_TAGS)}")
        return None
    return value


def _is_completed(value, errors):
    if not isinstance(value, bool):
        errors.append("isCompleted must be true or false")
        return None
    return value


# PUBLIC_INTERFACE
def validate_note(fields: Mapping[str, Any], partial: bool = False) -> Validation:
    """Validates heading, message and tags. With partial=True only supplied keys are checked."""
    result = Validation()
    _check(result, "heading", fields, partial, lambda v: _heading(v, result.errors))
    _check(result, "message", fields, partial, lambda v: _message(v, result.errors))
    _check(result, "tags", fields, partial, lambda v: _tags(v, result.errors))
    return result


# PUBLIC_INTERFACE
def validate_packing_item(fields: Mapping[str, Any], partial: bool = False) -> Validation:
    """Validates heading and message, plus is_completed when it is supplied."""
    result = Validation()
    _check(result, "heading", fields, partial, lambda v: _heading(v, result.errors))
    _check(result, "message", fields, partial, lambda v: _message(v, result.errors))
    _check(result, "is_completed", fields, True, lambda v: _is_completed(v, result.errors))
    return result


# PUBLIC_INTERFACE
def validate_completed(value: Any) -> Validation:
    result = Validation()
    _check(result, "is_completed", {"is_completed": value}, False, lambda v: _is_completed(v, result.errors))
    return result


# PUBLIC_INTERFACE
def validate_username(username: Any) -> Validation:
    """Normalizes a username to lowercase; blank or oversized names are rejected."""
    result = Validation()
    cleaned = _text("username", username, 1, USERNAME_MAX, result.errors)
    if cleaned is not None:
        result.values["username"] = cleaned.lower()
    return result


def is_weak_password(password: str) -> bool:
    return len(password) < PASSWORD_MIN
