from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

NOTE_TAGS = ("travel", "packing", "food", "sightseeing", "accommodation", "transport", "other")


def utcnow():
    return datetime.now(timezone.utc)


# PUBLIC_INTERFACE
class User(Base):
    """
    SQLAlchemy model for a registered traveller.

    The access token is issued once at registration and never rotated.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(64), unique=True, index=True, nullable=False)
    password_hash = Column(String(128), nullable=False)
    access_token = Column(String(256), unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)


# PUBLIC_INTERFACE
class Note(Base):
    """
    SQLAlchemy model for a travel note.
    """
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, index=True)
    heading = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    tags = Column(String(32), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    # No relationship/cascade: removing a user leaves their records in place.
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)


# PUBLIC_INTERFACE
class PackingListItem(Base):
    """
    SQLAlchemy model for an entry on a user's packing list.
    """
    __tablename__ = "packing_list_items"

    id = Column(Integer, primary_key=True, index=True)
    heading = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
