import hashlib

from auth.jwt_handler import create_access_token, decode_access_token
from auth.security import hash_password, needs_rehash, verify_password
from fundmanager import repository
from tests.conftest import ADMIN_PASSWORD, ADMIN_USERNAME


def test_login_returns_token_and_principal(client):
    response = client.post("/api/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["username"] == ADMIN_USERNAME
    assert body["role"] == "admin"
    assert body["token_type"] == "bearer"
    assert decode_access_token(body["access_token"])["sub"] == body["id"]


def test_login_wrong_password_is_401(client):
    response = client.post("/api/auth/login", json={"username": ADMIN_USERNAME, "password": "nope"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid username or password"}


def test_login_unknown_user_gives_same_error(client):
    response = client.post("/api/auth/login", json={"username": "nobody", "password": "x"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid username or password"}


def test_login_requires_both_fields(client):
    response = client.post("/api/auth/login", json={"username": ADMIN_USERNAME})

    assert response.status_code == 400
    assert response.json() == {"error": "password is required"}


def test_guest_session_is_read_only(client):
    response = client.post("/api/auth/guest")

    assert response.status_code == 200
    assert response.json() == {"role": "guest", "can_write": False, "principal": None}


def test_me_reports_admin_capabilities(client, admin_headers):
    response = client.get("/api/auth/me", headers=admin_headers)

    body = response.json()
    assert body["role"] == "admin"
    assert body["can_write"] is True
    assert body["principal"]["username"] == ADMIN_USERNAME


def test_me_without_token_is_guest(client):
    assert client.get("/api/auth/me").json()["role"] == "guest"


def test_garbage_token_is_rejected(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired session"}


def test_expired_token_is_rejected(client):
    token = create_access_token({"sub": "abc", "role": "admin"}, expires_minutes=-1)

    response = client.post("/api/members", json={"name": "X"}, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_write_without_token_is_401(client):
    response = client.post("/api/members", json={"name": "Sweet"})

    assert response.status_code == 401
    assert response.json() == {"error": "Authentication required"}


def test_write_as_non_admin_is_403(client, member_user):
    login = client.post("/api/auth/login", json=member_user).json()
    headers = {"Authorization": f"Bearer {login['access_token']}"}

    response = client.post("/api/members", json={"name": "Sweet"}, headers=headers)

    assert response.status_code == 403
    assert response.json() == {"error": "Admin privileges required"}
    assert client.get("/api/auth/me", headers=headers).json()["can_write"] is False


def test_reads_are_open_to_guests(client):
    for path in ("/api/members", "/api/resources", "/api/inventory", "/api/tasks",
                 "/api/task-completions", "/api/strikes", "/api/crafted-items", "/api/orders"):
        response = client.get(path)
        assert response.status_code == 200, path
        assert response.json() == []


def test_legacy_sha256_hash_is_upgraded_on_login(client, db_session):
    legacy = hashlib.sha256(b"old-pass").hexdigest()
    user = repository.users.create(db_session, {
        "username": "oldtimer",
        "password_hash": legacy,
        "role": "admin",
    })

    response = client.post("/api/auth/login", json={"username": "oldtimer", "password": "old-pass"})

    assert response.status_code == 200
    db_session.expire_all()
    stored = repository.users.get(db_session, user.id).password_hash
    assert stored != legacy
    assert verify_password("old-pass", stored)
    assert not needs_rehash(stored)


def test_password_helpers():
    hashed = hash_password("s3cret")

    assert verify_password("s3cret", hashed)
    assert not verify_password("other", hashed)
    assert not verify_password("s3cret", "not a hash")
