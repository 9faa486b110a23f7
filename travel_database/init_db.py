"""
Database initialization/migration script.

Run this script to create all required tables in the database named by
DATABASE_URL (or the default SQLite file).
"""
import os

from dotenv import load_dotenv

from travel_database.db import make_engine
from travel_database.models import Base

DEFAULT_DATABASE_URL = "sqlite:///./travel_notes.db"


# PUBLIC_INTERFACE
def init_db(engine):
    """Initializes the database by creating all tables if they do not exist."""
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    load_dotenv()
    init_db(make_engine(os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)))
    print("Database tables created successfully.")
