import pytest


@pytest.fixture
def friends(client, alice, bob):
    """Alice and Bob are friends."""
    fr = client.post(f"/api/v1/users/{bob[0]['id']}/friend-requests", headers=alice[1]).get_json()["data"]
    client.post(f"/api/v1/friend-requests/{fr['id']}/accept", headers=bob[1])
    return alice, bob


def _post(client, headers, content, privacy="public"):
    resp = client.post("/api/v1/posts", headers=headers, json={"content": content, "privacy": privacy})
    assert resp.status_code == 201
    return resp.get_json()["data"]


class TestPostCrud:
    def test_create_defaults_to_public(self, client, alice):
        resp = client.post("/api/v1/posts", headers=alice[1], json={"content": "hello"})

        body = resp.get_json()["data"]
        assert resp.status_code == 201
        assert body["privacy"] == "public"
        assert body["user_id"] == alice[0]["id"]

    def test_create_validates(self, client, alice):
        blank = client.post("/api/v1/posts", headers=alice[1], json={"content": "   "})
        bad_privacy = client.post("/api/v1/posts", headers=alice[1], json={"content": "x", "privacy": "secret"})

        assert blank.status_code == 400
        assert bad_privacy.status_code == 400

    def test_get_and_list(self, client, alice, bob):
        post = _post(client, alice[1], "first")

        got = client.get(f"/api/v1/posts/{post['id']}", headers=bob[1])
        assert got.get_json()["data"]["content"] == "first"

        listed = client.get(f"/api/v1/users/{alice[0]['id']}/posts", headers=bob[1]).get_json()["data"]
        assert [p["id"] for p in listed] == [post["id"]]

    def test_missing_post(self, client, alice):
        assert client.get("/api/v1/posts/missing", headers=alice[1]).status_code == 404

    def test_update_by_author(self, client, alice):
        post = _post(client, alice[1], "draft")

        resp = client.put(
            f"/api/v1/posts/{post['id']}", headers=alice[1], json={"content": "final", "privacy": "friends"}
        )
        body = resp.get_json()["data"]
        assert resp.status_code == 200
        assert body["content"] == "final"
        assert body["privacy"] == "friends"

    def test_only_author_can_update_or_delete(self, client, alice, bob):
        post = _post(client, alice[1], "mine")

        update = client.put(f"/api/v1/posts/{post['id']}", headers=bob[1], json={"content": "yours"})
        delete = client.delete(f"/api/v1/posts/{post['id']}", headers=bob[1])

        assert update.status_code == 403
        assert update.get_json()["error"] == "FORBIDDEN"
        assert delete.status_code == 403

    def test_delete(self, client, alice):
        post = _post(client, alice[1], "bye")

        assert client.delete(f"/api/v1/posts/{post['id']}", headers=alice[1]).status_code == 200
        assert client.get(f"/api/v1/posts/{post['id']}", headers=alice[1]).status_code == 404


class TestFeed:
    def test_feed_has_own_and_friends_posts(self, client, friends, make_user):
        alice, bob = friends
        _, carol_headers, _ = make_user("carol@example.com", name="Carol")

        own = _post(client, alice[1], "alice public")
        own_private = _post(client, alice[1], "alice only", privacy="only_me")
        friend_public = _post(client, bob[1], "bob public")
        friend_friends = _post(client, bob[1], "bob friends", privacy="friends")
        _post(client, bob[1], "bob only", privacy="only_me")
        _post(client, carol_headers, "carol public")

        feed = client.get("/api/v1/feed", headers=alice[1]).get_json()["data"]

        assert {p["id"] for p in feed} == {own["id"], own_private["id"], friend_public["id"], friend_friends["id"]}
        by_id = {p["id"]: p for p in feed}
        assert by_id[friend_public["id"]]["user_name"] == "Bob"

    def test_feed_paging(self, client, alice):
        for i in range(3):
            _post(client, alice[1], f"post {i}")

        page = client.get("/api/v1/feed?limit=2", headers=alice[1]).get_json()["data"]
        rest = client.get("/api/v1/feed?limit=2&offset=2", headers=alice[1]).get_json()["data"]

        assert len(page) == 2
        assert len(rest) == 1

    def test_feed_requires_auth(self, client):
        assert client.get("/api/v1/feed").status_code == 401
