import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from travel_backend.api.config import Settings
from travel_backend.api.credentials import CredentialStore, pwd_context
from travel_backend.api.main import create_app
from travel_backend.api.stores import NoteStore, PackingListStore
from travel_database.db import Database
from travel_database.models import Base


@pytest.fixture(scope="session", autouse=True)
def fast_hashing():
    """Drop bcrypt to its minimum cost so registration-heavy tests stay quick."""
    pwd_context.update(bcrypt__rounds=4)
    yield


@pytest.fixture
def engine():
    """Fixture for a fresh in-memory SQLite engine per test."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def database(engine):
    return Database(engine)


@pytest.fixture
def credentials(database):
    return CredentialStore(database)


@pytest.fixture
def notes(database):
    return NoteStore(database)


@pytest.fixture
def packing_list(database):
    return PackingListStore(database)


@pytest.fixture
def app(database):
    return create_app(Settings(database_url="sqlite://"), database=database)


@pytest.fixture
def client(app):
    """Fixture for FastAPI TestClient bound to the test database."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def user_data():
    """Returns default user data for registration."""
    return {"username": "alice", "password": "alicepassword123"}


@pytest.fixture
def second_user_data():
    """Returns a second user's data."""
    return {"username": "bob", "password": "bobpassword456"}


def register_and_auth(client, username, password):
    """Helper for registering a user and returning their access token."""
    r = client.post("/register", json={"username": username, "password": password})
    assert r.status_code == 201
    return r.json()["accessToken"]


@pytest.fixture
def auth_header(client, user_data):
    """Returns {'Authorization': <token>} for the default user."""
    token = register_and_auth(client, user_data["username"], user_data["password"])
    return {"Authorization": token}


@pytest.fixture
def second_auth_header(client, second_user_data):
    """Returns auth header for second user."""
    token = register_and_auth(client, second_user_data["username"], second_user_data["password"])
    return {"Authorization": token}


@pytest.fixture
def note_data():
    return {"heading": "Trip", "message": "Remember passport", "tags": "travel"}


@pytest.fixture
def item_data():
    return {"heading": "Socks", "message": "Five warm pairs"}
