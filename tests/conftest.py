"""Pytest fixtures: an in-memory SQLite database behind app.main:app.

Environment is pinned before the app is imported so settings never pick up a
developer's .env (load_dotenv does not override variables that are already set).
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"
os.environ["SMTP_HOST"] = ""
os.environ["NOTIFY_EMAIL_TO"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_notifier
from app.core.database import Base, get_db
from app.main import app
from app.models import property as property_models, user as user_models  # noqa: F401

# Smallest valid payload: the 8-byte PNG signature
PNG_DATA_URL = "data:image/png;base64,iVBORw0KGgo="

ALICE = {
    "name": "Alice",
    "email": "alice@example.com",
    "mobile": "9000000001",
    "password": "secret1",
    "role": "Owner",
}

BOB = {
    "name": "Bob",
    "email": "bob@example.com",
    "mobile": "9000000002",
    "password": "secret2",
    "role": "Owner",
}

TARA = {
    "name": "Tara",
    "email": "tara@example.com",
    "mobile": "9000000003",
    "password": "secret3",
    "role": "Tenant",
}


class RecordingNotifier:
    def __init__(self):
        self.notices = []

    def notify_new_property(self, notice):
        self.notices.append(notice)


def property_payload(**overrides):
    payload = {
        "address": "12 MG Road, Indore",
        "nearbyLandmark": "Near City Mall",
        "description": "Bright 1BHK with balcony",
        "rent": 5000,
        "gender": "Boys",
        "furnishing": "Semi-furnished",
        "restriction": "Without restriction",
        "images": [PNG_DATA_URL],
        "wifi": True,
        "ac": False,
        "waterSupply": True,
        "powerBackup": False,
        "security": True,
        "bhk": 1,
        "bathroom": 1,
        "floor": 2,
        "totalFloors": 4,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(session_factory, notifier):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def register(client, user):
    response = client.post("/api/users/register", json=user)
    assert response.status_code == 201, response.text
    return response.json()["user"]


def login(client, user):
    response = client.post(
        "/api/users/login",
        json={"mobile": user["mobile"], "password": user["password"]},
    )
    assert response.status_code == 200, response.text
    return response.json()


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice_headers(client):
    register(client, ALICE)
    return auth_headers(login(client, ALICE)["token"])


@pytest.fixture
def bob_headers(client):
    register(client, BOB)
    return auth_headers(login(client, BOB)["token"])
