import json
import os
import tempfile
from pathlib import Path

import pytest

# Settings are read at import time, so the environment must point at the
# scratch database and dialogue directory before the package is imported.
_TMP = Path(tempfile.mkdtemp(prefix="dialogue-rating-tests-"))
DIALOGUES_DIR = _TMP / "dialogues"
DIALOGUES_DIR.mkdir()

os.environ["DB_DRIVER_NAME"] = "sqlite"
os.environ["DB_DATABASE_NAME"] = str(_TMP / "test.sqlite")
os.environ["DIALOGUES_DIR"] = str(DIALOGUES_DIR)
os.environ["DIALOGUES_MANIFEST"] = "llm_generated_dialogues.json"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["API_PREFIX"] = "/api"

from fastapi.testclient import TestClient  # noqa: E402

from dialogue_rating.database.config.connection_engine import create_schema, drop_schema  # noqa: E402
from dialogue_rating.main import app  # noqa: E402
from dialogue_rating.scripts.create_admin import create_or_promote_admin  # noqa: E402

PRODUCTS = {
    7: ("Electric Kettle", 1),
    8: ("Noise Cancelling Headphones", 2),
    9: ("Standing Desk", 3),
}


def dialogue_document(product_id, title, kind):
    return {
        "product_id": product_id,
        "product_title": title,
        "kind": kind,
        "summary": f"A shopper asks about the {title.lower()}.",
        "turns": [
            {"speaker": "user", "text": f"Is the {title.lower()} any good?"},
            {"speaker": "assistant", "text": "It has excellent reviews."},
        ],
    }


def write_dialogue_file(name, document, directory=DIALOGUES_DIR):
    path = Path(directory) / name
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_database():
    drop_schema()
    create_schema()
    for path in DIALOGUES_DIR.iterdir():
        path.unlink()
    yield


@pytest.fixture
def dialogue_files():
    paths = [
        write_dialogue_file(f"product_{pid}.json", dialogue_document(pid, title, kind))
        for pid, (title, kind) in PRODUCTS.items()
    ]
    write_dialogue_file("llm_generated_dialogues.json", [dialogue_document(99, "Manifest Only", 1)])
    return paths


@pytest.fixture
def client(dialogue_files):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def empty_client():
    with TestClient(app) as c:
        yield c


def register(client, username="alice", email="a@x.com", password="secret1"):
    response = client.post("/api/register", json={"username": username, "email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client):
    return register(client)


@pytest.fixture
def alice_headers(alice):
    return auth(alice["token"])


@pytest.fixture
def admin_headers(client):
    register(client, username="root", email="root@x.com", password="rootpw")
    create_or_promote_admin(username="root", email="root@x.com", password="rootpw")
    response = client.post("/api/login", json={"username": "root", "password": "rootpw"})
    assert response.status_code == 200, response.text
    return auth(response.json()["token"])


def full_scores(value=4, **overrides):
    scores = {
        "realism": value,
        "conciseness": value,
        "coherence": value,
        "overall_naturalness": value,
        "utterance_realism": value,
        "script_following": value,
    }
    scores.update(overrides)
    return scores
