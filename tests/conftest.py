import os

# Settings are read once at import time, so the test environment must be in
# place before anything from the application is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_USERNAME"] = "Ballas"
os.environ["ADMIN_PASSWORD"] = "hunter2-test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["REQUIRE_ADMIN_FOR_WRITES"] = "true"
os.environ["APP_ENV"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from auth.security import hash_password
from fundmanager import repository
from fundmanager.db import SessionLocal, engine
from fundmanager.models import Base
from main import app, seed_admin_user

ADMIN_USERNAME = "Ballas"
ADMIN_PASSWORD = "hunter2-test"


@pytest.fixture(autouse=True)
def fresh_database():
    """Every test starts from empty tables plus the seeded admin."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    seed_admin_user()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_token(client):
    response = client.post("/api/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def member_user(db_session):
    """A non-admin account that can sign in but not write."""
    repository.users.create(db_session, {
        "username": "rider",
        "password_hash": hash_password("rider-pass"),
        "display_name": "Ryder",
        "role": "member",
    })
    return {"username": "rider", "password": "rider-pass"}


@pytest.fixture
def create(client, admin_headers):
    """POST as admin and return the single created row."""

    def _create(path, payload):
        response = client.post(path, json=payload, headers=admin_headers)
        assert response.status_code == 200, response.text
        rows = response.json()
        assert isinstance(rows, list) and len(rows) == 1
        return rows[0]

    return _create
