from datetime import datetime, timedelta, timezone

from conftest import PRODUCTS, auth, full_scores, register
from dialogue_rating.database.entities.rating import RATING_METRICS
from dialogue_rating.scripts.create_admin import create_or_promote_admin, revoke_admin

ADMIN_ROUTES = ("/api/admin/stats", "/api/admin/users", "/api/admin/ratings", "/api/admin/dialogues")


def rate(client, headers, dialogue_id, **scores):
    response = client.post("/api/rating", headers=headers, json={"dialogue_id": dialogue_id, **scores})
    assert response.status_code == 200, response.text
    return response.json()["rating_id"]


def test_admin_routes_reject_regular_users(client, alice_headers):
    for route in ADMIN_ROUTES:
        response = client.get(route, headers=alice_headers)
        assert response.status_code == 403
        assert response.json() == {"error": "Admin access required"}


def test_admin_routes_require_token(client):
    for route in ADMIN_ROUTES:
        assert client.get(route).status_code == 401


def test_admin_flag_is_read_live(client):
    token = register(client, username="carol", email="c@x.com", password="pw")["token"]
    assert client.get("/api/admin/stats", headers=auth(token)).status_code == 403

    create_or_promote_admin(username="carol", email="c@x.com", password="pw")
    assert client.get("/api/admin/stats", headers=auth(token)).status_code == 200

    revoke_admin(username="carol")
    assert client.get("/api/admin/stats", headers=auth(token)).status_code == 403
    # the token itself stays valid for regular routes until it expires
    assert client.get("/api/dialogue/random", headers=auth(token)).status_code == 200


def test_stats_without_ratings(client, admin_headers):
    stats = client.get("/api/admin/stats", headers=admin_headers).json()
    assert stats["totalUsers"] == 1
    assert stats["totalRatings"] == 0
    assert stats["totalDialogues"] == len(PRODUCTS)
    assert stats["averageRatings"] == {metric: 0 for metric in RATING_METRICS}
    assert stats["ratingsByDate"] == []


def test_stats_with_ratings(client, admin_headers, alice_headers):
    rate(client, alice_headers, "dialogue_7", **full_scores(5))
    rate(client, alice_headers, "dialogue_8", **full_scores(4, realism=2))
    bob = auth(register(client, username="bob", email="b@x.com", password="pw")["token"])
    rate(client, bob, "dialogue_7", **full_scores(3, realism=2))

    stats = client.get("/api/admin/stats", headers=admin_headers).json()
    assert stats["totalUsers"] == 3
    assert stats["totalRatings"] == 3
    assert stats["averageRatings"]["realism"] == 3.0
    assert stats["averageRatings"]["coherence"] == 4.0
    today = datetime.now(timezone.utc).date().isoformat()
    assert stats["ratingsByDate"] == [{"date": today, "count": 3}]


def test_averages_are_rounded(client, admin_headers, alice_headers):
    bob = auth(register(client, username="bob", email="b@x.com", password="pw")["token"])
    dave = auth(register(client, username="dave", email="d@x.com", password="pw")["token"])
    rate(client, alice_headers, "dialogue_7", realism=5)
    rate(client, bob, "dialogue_7", realism=5)
    rate(client, dave, "dialogue_7", realism=4)

    stats = client.get("/api/admin/stats", headers=admin_headers).json()
    assert stats["averageRatings"]["realism"] == 4.67


def test_list_users_with_rating_counts(client, admin_headers, alice_headers):
    rate(client, alice_headers, "dialogue_7", **full_scores())
    rate(client, alice_headers, "dialogue_8", **full_scores())
    register(client, username="bob", email="b@x.com", password="pw")

    users = client.get("/api/admin/users", headers=admin_headers).json()
    assert [u["username"] for u in users] == ["bob", "alice", "root"]
    counts = {u["username"]: u["rating_count"] for u in users}
    assert counts == {"bob": 0, "alice": 2, "root": 0}
    root = users[-1]
    assert root["is_admin"] is True
    assert "password" not in root
    assert datetime.fromisoformat(root["created_at"]).utcoffset() == timedelta(0)


def test_list_ratings_paginates_newest_first(client, admin_headers, alice_headers):
    ids = [rate(client, alice_headers, f"dialogue_{pid}", **full_scores()) for pid in PRODUCTS]

    page = client.get("/api/admin/ratings", headers=admin_headers).json()
    assert [r["id"] for r in page] == list(reversed(ids))
    first = page[0]
    assert first["username"] == "alice"
    assert first["product_title"] == "Standing Desk"
    assert first["dialogue"]["product_id"] == 9
    assert first["ratings"] == full_scores()

    second_page = client.get("/api/admin/ratings?limit=2&offset=2", headers=admin_headers).json()
    assert [r["id"] for r in second_page] == [ids[0]]


def test_list_ratings_rejects_bad_paging(client, admin_headers):
    assert client.get("/api/admin/ratings?limit=0", headers=admin_headers).status_code == 400
    assert client.get("/api/admin/ratings?offset=-1", headers=admin_headers).status_code == 400
    assert client.get("/api/admin/ratings?limit=abc", headers=admin_headers).status_code == 400


def test_list_dialogues_ordered_by_rating_count(client, admin_headers, alice_headers):
    bob = auth(register(client, username="bob", email="b@x.com", password="pw")["token"])
    rate(client, alice_headers, "dialogue_9", **full_scores(5))
    rate(client, bob, "dialogue_9", **full_scores(2))
    rate(client, alice_headers, "dialogue_7", **full_scores(4))

    dialogues = client.get("/api/admin/dialogues", headers=admin_headers).json()
    assert [d["dialogue_id"] for d in dialogues] == ["dialogue_9", "dialogue_7", "dialogue_8"]
    assert [d["rating_count"] for d in dialogues] == [2, 1, 0]
    assert dialogues[0]["average_ratings"]["realism"] == 3.5
    assert dialogues[0]["product_title"] == "Standing Desk"
    assert dialogues[0]["kind"] == 3
    assert dialogues[2]["average_ratings"] == {metric: None for metric in RATING_METRICS}
