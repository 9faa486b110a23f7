from travel_database.db import Database, make_engine
from travel_database.init_db import init_db
from travel_database.models import NOTE_TAGS, Base, Note, PackingListItem, User

__all__ = ["Base", "Database", "NOTE_TAGS", "Note", "PackingListItem", "User", "init_db", "make_engine"]
