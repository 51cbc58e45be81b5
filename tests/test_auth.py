from jose import jwt

from conftest import auth, register
from dialogue_rating.api.utils import create_access_token, verify_token
from dialogue_rating.database.config.config import settings


def test_register_returns_token_and_user(client):
    body = register(client)

    assert body["user"]["username"] == "alice"
    assert body["user"]["email"] == "a@x.com"
    assert body["user"]["is_admin"] is False
    claims = verify_token(body["token"])
    assert claims == {"id": body["user"]["id"], "username": "alice", "email": "a@x.com", "is_admin": False}


def test_token_expires_after_seven_days(client):
    body = register(client)
    payload = jwt.decode(body["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["exp"] - payload["iat"] == 7 * 24 * 60 * 60


def test_register_duplicate_username_is_conflict(client):
    register(client)
    response = client.post("/api/register", json={"username": "alice", "email": "other@x.com", "password": "pw"})
    assert response.status_code == 400
    assert response.json() == {"error": "Username or email already exists"}


def test_register_duplicate_email_is_conflict(client):
    register(client)
    response = client.post("/api/register", json={"username": "alice2", "email": "a@x.com", "password": "pw"})
    assert response.status_code == 400


def test_register_requires_every_field(client):
    for body in (
        {"username": "bob", "email": "b@x.com"},
        {"username": "", "email": "b@x.com", "password": "pw"},
        {"username": "bob", "email": "   ", "password": "pw"},
    ):
        response = client.post("/api/register", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "All fields are required"


def test_password_is_stored_hashed(client):
    from dialogue_rating.database.entities.user import User
    from dialogue_rating.database.helpers.transactionManagement import SessionFactory

    register(client)
    with SessionFactory() as session:
        user = session.query(User).filter(User.username == "alice").one()
    assert user.password != "secret1"
    assert user.password.startswith("$2")


def test_login_by_username_or_email(client):
    register(client)
    for login in ("alice", "a@x.com"):
        response = client.post("/api/login", json={"username": login, "password": "secret1"})
        assert response.status_code == 200
        assert response.json()["user"]["username"] == "alice"


def test_login_accepts_email_field(client):
    register(client)
    response = client.post("/api/login", json={"email": "a@x.com", "password": "secret1"})
    assert response.status_code == 200


def test_login_with_wrong_password_is_401(client):
    register(client)
    response = client.post("/api/login", json={"username": "alice", "password": "wrong"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


def test_login_with_unknown_user_is_401(client):
    response = client.post("/api/login", json={"username": "nobody", "password": "secret1"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


def test_login_requires_both_fields(client):
    response = client.post("/api/login", json={"username": "alice"})
    assert response.status_code == 400


def test_missing_token_is_401(client):
    response = client.get("/api/me")
    assert response.status_code == 401
    assert response.json() == {"error": "Access token required"}


def test_non_bearer_header_is_401(client):
    response = client.get("/api/me", headers={"Authorization": "Basic abc"})
    assert response.status_code == 401


def test_malformed_token_is_403(client):
    response = client.get("/api/me", headers=auth("not-a-jwt"))
    assert response.status_code == 403
    assert response.json() == {"error": "Invalid or expired token"}


def test_expired_token_is_403(client):
    body = register(client)
    claims = {"sub": str(body["user"]["id"]), **body["user"]}
    expired = create_access_token(claims, expires_in_minutes=-1)
    assert client.get("/api/me", headers=auth(expired)).status_code == 403


def test_token_signed_with_other_key_is_403(client):
    body = register(client)
    forged = jwt.encode({"sub": "1", **body["user"]}, "another-secret", algorithm="HS256")
    assert client.get("/api/me", headers=auth(forged)).status_code == 403


def test_me_returns_claims(client, alice, alice_headers):
    response = client.get("/api/me", headers=alice_headers)
    assert response.status_code == 200
    assert response.json() == alice["user"]


def test_register_rejects_password_over_72_bytes(client):
    response = client.post("/api/register", json={"username": "bob", "email": "b@x.com", "password": "p" * 80})
    assert response.status_code == 400
    assert response.json() == {"error": "Password must be at most 72 bytes"}

    # multibyte characters count by their UTF-8 length
    response = client.post("/api/register", json={"username": "bob", "email": "b@x.com", "password": "é" * 37})
    assert response.status_code == 400


def test_register_accepts_password_of_exactly_72_bytes(client):
    body = register(client, password="p" * 72)
    response = client.post("/api/login", json={"username": "alice", "password": "p" * 72})
    assert response.status_code == 200
    assert response.json()["user"] == body["user"]


def test_login_with_overlong_password_is_401(client):
    register(client)
    response = client.post("/api/login", json={"username": "alice", "password": "p" * 80})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


def test_unexpected_error_is_json_500(alice_headers, monkeypatch):
    from fastapi.testclient import TestClient

    from dialogue_rating.api import fast_api
    from dialogue_rating.main import app

    def boom(**kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(fast_api, "next_dialogue_for", boom)
    with TestClient(app, raise_server_exceptions=False) as c:
        response = c.get("/api/dialogue/random", headers=alice_headers)
    assert response.status_code == 500
    assert response.json() == {"error": "Server error"}
