from conftest import register
from dialogue_rating.crypt.encrypt_decrypt import EncryptionDec
from dialogue_rating.database.entities.user import User
from dialogue_rating.database.helpers.transactionManagement import SessionFactory
from dialogue_rating.scripts.create_admin import main


def fetch(username):
    with SessionFactory() as session:
        return session.query(User).filter(User.username == username).one_or_none()


def test_create_new_admin():
    assert main(["create", "boss", "boss@x.com", "bosspw"]) == 0

    boss = fetch("boss")
    assert boss.is_admin is True
    assert boss.email == "boss@x.com"
    assert EncryptionDec().check_passwords("bosspw", boss.password)


def test_create_uses_defaults():
    assert main(["create"]) == 0
    admin = fetch("admin")
    assert admin.email == "admin@example.com"
    assert EncryptionDec().check_passwords("admin123", admin.password)


def test_promote_existing_user_by_email(client):
    register(client)
    assert main(["create", "someone-else", "a@x.com", "newpw"]) == 0

    alice = fetch("alice")
    assert alice.is_admin is True
    assert EncryptionDec().check_passwords("newpw", alice.password)
    assert fetch("someone-else") is None

    response = client.post("/api/login", json={"username": "alice", "password": "newpw"})
    assert response.json()["user"]["is_admin"] is True


def test_revoke(client):
    register(client)
    main(["create", "alice", "a@x.com", "secret1"])

    assert main(["revoke", "alice"]) == 0
    assert fetch("alice").is_admin is False


def test_revoke_unknown_user_fails():
    assert main(["revoke", "ghost"]) == 1


def test_create_rejects_overlong_password():
    assert main(["create", "boss", "boss@x.com", "p" * 80]) == 1
    assert fetch("boss") is None
