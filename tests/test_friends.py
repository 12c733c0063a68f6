import pytest


@pytest.fixture
def pending_request(client, alice, bob):
    """Alice has asked Bob to be friends."""
    bob_user = bob[0]
    resp = client.post(f"/api/v1/users/{bob_user['id']}/friend-requests", headers=alice[1])
    assert resp.status_code == 201
    return resp.get_json()["data"]


def _friend_ids(client, user_id, headers):
    resp = client.get(f"/api/v1/users/{user_id}/friends", headers=headers)
    assert resp.status_code == 200
    return {u["id"] for u in resp.get_json()["data"]}


class TestFriendRequests:
    def test_request_is_pending(self, pending_request, alice, bob):
        assert pending_request["status"] == "pending"
        assert pending_request["from_user_id"] == alice[0]["id"]
        assert pending_request["to_user_id"] == bob[0]["id"]

    def test_recipient_sees_pending_requests(self, client, pending_request, bob):
        resp = client.get("/api/v1/me/friend-requests", headers=bob[1])

        ids = [r["id"] for r in resp.get_json()["data"]]
        assert ids == [pending_request["id"]]

    def test_cannot_request_self(self, client, alice):
        resp = client.post(f"/api/v1/users/{alice[0]['id']}/friend-requests", headers=alice[1])
        assert resp.status_code == 400

    def test_cannot_request_unknown_user(self, client, alice):
        resp = client.post("/api/v1/users/nobody/friend-requests", headers=alice[1])
        assert resp.status_code == 404

    def test_no_duplicate_pending_request_in_either_direction(self, client, pending_request, alice, bob):
        again = client.post(f"/api/v1/users/{bob[0]['id']}/friend-requests", headers=alice[1])
        reverse = client.post(f"/api/v1/users/{alice[0]['id']}/friend-requests", headers=bob[1])

        assert again.status_code == 400
        assert reverse.status_code == 400

    def test_only_recipient_can_accept(self, client, pending_request, alice):
        resp = client.post(f"/api/v1/friend-requests/{pending_request['id']}/accept", headers=alice[1])
        assert resp.status_code == 403


class TestFriendships:
    def test_accept_makes_friendship_in_both_directions(self, client, pending_request, alice, bob):
        resp = client.post(f"/api/v1/friend-requests/{pending_request['id']}/accept", headers=bob[1])
        assert resp.status_code == 200

        assert _friend_ids(client, alice[0]["id"], alice[1]) == {bob[0]["id"]}
        assert _friend_ids(client, bob[0]["id"], alice[1]) == {alice[0]["id"]}

        pending = client.get("/api/v1/me/friend-requests", headers=bob[1]).get_json()["data"]
        assert pending == []

    def test_accepting_twice_fails(self, client, pending_request, bob):
        client.post(f"/api/v1/friend-requests/{pending_request['id']}/accept", headers=bob[1])
        resp = client.post(f"/api/v1/friend-requests/{pending_request['id']}/accept", headers=bob[1])
        assert resp.status_code == 400

    def test_already_friends(self, client, pending_request, alice, bob):
        client.post(f"/api/v1/friend-requests/{pending_request['id']}/accept", headers=bob[1])

        resp = client.post(f"/api/v1/users/{alice[0]['id']}/friend-requests", headers=bob[1])
        assert resp.status_code == 400

    def test_reject(self, client, pending_request, alice, bob):
        resp = client.post(f"/api/v1/friend-requests/{pending_request['id']}/reject", headers=bob[1])

        assert resp.status_code == 200
        assert _friend_ids(client, alice[0]["id"], alice[1]) == set()
        # A rejected request does not block a new one
        again = client.post(f"/api/v1/users/{bob[0]['id']}/friend-requests", headers=alice[1])
        assert again.status_code == 201

    def test_unfriend_removes_both_directions(self, client, pending_request, alice, bob):
        client.post(f"/api/v1/friend-requests/{pending_request['id']}/accept", headers=bob[1])

        resp = client.delete(f"/api/v1/users/{bob[0]['id']}/friends", headers=alice[1])
        assert resp.status_code == 200
        assert _friend_ids(client, alice[0]["id"], alice[1]) == set()
        assert _friend_ids(client, bob[0]["id"], bob[1]) == set()
