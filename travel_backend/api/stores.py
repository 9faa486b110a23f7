"""
Ownership-scoped stores for notes and packing list items.

Every read and mutation filters on both the record id and the caller's user
id. A record that exists but belongs to someone else is indistinguishable
from one that does not exist: both come back as None, which the route layer
reports as NotFound. Invalid input raises ValidationError before anything is
written. SQLAlchemy errors propagate and are treated as infrastructure faults.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

from travel_database.db import Database
from travel_database.models import Note, PackingListItem

from .errors import ValidationError
from .validation import Validation, validate_completed, validate_note, validate_packing_item

logger = logging.getLogger("travel_notes.stores")


def _raise_if_invalid(validation: Validation):
    if not validation.ok:
        raise ValidationError(details={"errors": validation.errors})


class OwnedRecordStore:
    """Shared list/create/update/delete logic; subclasses pick the model and validator."""

    model: Any = None
    record_name = "record"

    def __init__(self, database: Database):
        self.database = database

    def validate(self, fields: Mapping[str, Any], partial: bool = False) -> Validation:
        raise NotImplementedError

    def _owned(self, session, owner_id: int, record_id: int):
        return (
            session.query(self.model)
            .filter(self.model.id == record_id, self.model.owner_id == owner_id)
            .first()
        )

    def list(self, owner_id: int) -> List[Any]:
        """Returns the owner's records, newest first. Empty list when there are none."""
        with self.database.session() as session:
            return (
                session.query(self.model)
                .filter(self.model.owner_id == owner_id)
                .order_by(self.model.created_at.desc(), self.model.id.desc())
                .all()
            )

    def create(self, owner_id: int, fields: Mapping[str, Any]):
        validation = self.validate(fields)
        _raise_if_invalid(validation)
        with self.database.session() as session:
            record = self.model(owner_id=owner_id, **validation.values)
            session.add(record)
            session.commit()
            session.refresh(record)
            logger.info("Created %s id=%s for user id=%s", self.record_name, record.id, owner_id)
            return record

    def delete_owned(self, owner_id: int, record_id: int):
        """Removes and returns the record, or None if the caller does not own one with that id."""
        with self.database.session() as session:
            record = self._owned(session, owner_id, record_id)
            if record is None:
                return None
            session.delete(record)
            session.commit()
            logger.info("Deleted %s id=%s for user id=%s", self.record_name, record_id, owner_id)
            return record

    def update_owned(self, owner_id: int, record_id: int, fields: Mapping[str, Any]):
        """Merges only the supplied fields and returns the updated record, or None if not owned."""
        validation = self.validate(fields, partial=True)
        _raise_if_invalid(validation)
        return self._apply(owner_id, record_id, validation.values)

    def _apply(self, owner_id: int, record_id: int, values: Dict[str, Any]):
        with self.database.session() as session:
            record = self._owned(session, owner_id, record_id)
            if record is None:
                return None
            for key, value in values.items():
                setattr(record, key, value)
            session.commit()
            session.refresh(record)
            return record


# PUBLIC_INTERFACE
class NoteStore(OwnedRecordStore):
    model = Note
    record_name = "note"

    def validate(self, fields, partial=False):
        return validate_note(fields, partial=partial)


# PUBLIC_INTERFACE
class PackingListStore(OwnedRecordStore):
    model = PackingListItem
    record_name = "packing list item"

    def validate(self, fields, partial=False):
        return validate_packing_item(fields, partial=partial)

    def set_completed(self, owner_id: int, record_id: int, is_completed: Any) -> Optional[PackingListItem]:
        validation = validate_completed(is_completed)
        _raise_if_invalid(validation)
        return self._apply(owner_id, record_id, validation.values)
