import logging

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger("travel_notes.db")


# PUBLIC_INTERFACE
def make_engine(database_url: str):
    """
    Builds an engine for the given URL.

    SQLite URLs get check_same_thread disabled because FastAPI runs sync
    handlers in a thread pool; in-memory SQLite also needs a StaticPool so
    every session sees the same database.
    """
    kwargs = {"future": True, "echo": False}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


# PUBLIC_INTERFACE
class Database:
    """
    Owns the engine and the session factory shared by every store.
    """

    def __init__(self, engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

    @classmethod
    def from_url(cls, database_url: str) -> "Database":
        return cls(make_engine(database_url))

    def session(self):
        return self.SessionLocal()

    def is_ready(self) -> bool:
        """Returns True if a trivial query round-trips to the store."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.warning("Database not ready: %s", exc)
            return False
        return True

    def dispose(self):
        self.engine.dispose()
