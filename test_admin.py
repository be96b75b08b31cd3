import uuid

import pytest

API = "/api/v1"
ADMIN = f"{API}/admin"


@pytest.fixture
def admin_headers(make_user):
    _, headers = make_user("Admin", admin=True)
    return headers


@pytest.fixture
def admin_id(client, admin_headers):
    return client.get(f"{API}/users/me", headers=admin_headers).json()["id"]


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/banned-users"),
        ("get", "/users"),
        ("get", "/swaps"),
        ("get", "/stats/swaps"),
        ("get", "/stats/users"),
        ("get", "/report"),
    ],
)
def test_admin_routes_require_admin_role(client, make_user, method, path):
    _, headers = make_user("Alice")

    anonymous = getattr(client, method)(f"{ADMIN}{path}")
    regular = getattr(client, method)(f"{ADMIN}{path}", headers=headers)

    assert anonymous.status_code == 401
    assert regular.status_code == 403
    assert regular.json() == {"error": "Admin access required"}


def test_regular_user_cannot_ban(client, make_user):
    _, alice_headers = make_user("Alice")
    bob, _ = make_user("Bob")

    response = client.patch(f"{ADMIN}/ban/{bob['id']}", headers=alice_headers)

    assert response.status_code == 403


def test_ban_and_unban(client, make_user, admin_headers):
    alice, alice_headers = make_user("Alice", skills_offered=["Guitar"])
    make_user("Bob", skills_offered=["Guitar"])

    banned = client.patch(f"{ADMIN}/ban/{alice['id']}", headers=admin_headers)
    assert banned.status_code == 200
    assert banned.json()["banned"] is True

    banned_list = client.get(f"{ADMIN}/banned-users", headers=admin_headers).json()
    assert [user["id"] for user in banned_list] == [alice["id"]]

    me = client.get(f"{API}/users/me", headers=alice_headers)
    login = client.post(f"{API}/users/login", json={"email": alice["email"], "password": "password123"})
    browse = client.get(f"{API}/users/browse", params={"skill": "Guitar"})
    assert me.status_code == 403
    assert login.status_code == 403
    assert login.json() == {"error": "This account has been banned"}
    assert [user["name"] for user in browse.json()] == ["Bob"]

    unbanned = client.patch(f"{ADMIN}/unban/{alice['id']}", headers=admin_headers)
    assert unbanned.status_code == 200
    assert unbanned.json()["banned"] is False
    assert client.get(f"{API}/users/me", headers=alice_headers).status_code == 200
    assert client.get(f"{ADMIN}/banned-users", headers=admin_headers).json() == []


def test_banned_user_cannot_be_sent_swap_requests(client, make_user, admin_headers):
    alice, _ = make_user("Alice", skills_offered=["Guitar"])
    _, bob_headers = make_user("Bob", skills_offered=["Python"])
    client.patch(f"{ADMIN}/ban/{alice['id']}", headers=admin_headers)

    response = client.post(
        f"{API}/swaps/request",
        json={"receiver_id": alice["id"], "skill_offered": "Python", "skill_wanted": "Guitar"},
        headers=bob_headers,
    )

    assert response.status_code == 403


def test_admin_cannot_ban_themselves(client, admin_headers, admin_id):
    response = client.patch(f"{ADMIN}/ban/{admin_id}", headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "You cannot ban yourself"}


def test_ban_unknown_user(client, admin_headers):
    response = client.patch(f"{ADMIN}/ban/{uuid.uuid4()}", headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_delete_user_removes_swaps_and_feedback(client, make_user, admin_headers, request_swap, complete_swap):
    alice, alice_headers = make_user("Alice", skills_offered=["Guitar"])
    bob, bob_headers = make_user("Bob", skills_offered=["Python"])
    carol, carol_headers = make_user("Carol", skills_offered=["Drums"])
    done = complete_swap(alice_headers, bob_headers, bob["id"], "Guitar", "Python")
    request_swap(carol_headers, alice["id"], "Drums", "Guitar")
    kept = request_swap(carol_headers, bob["id"], "Drums", "Python")
    client.post(f"{API}/feedbacks", json={"swap_id": done["id"], "rating": 5}, headers=alice_headers)
    client.post(f"{API}/feedbacks", json={"swap_id": done["id"], "rating": 3}, headers=bob_headers)

    response = client.delete(f"{ADMIN}/users/{alice['id']}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"user_id": alice["id"], "swaps_deleted": 2, "feedback_deleted": 2}

    profile = client.get(f"{API}/users/profile/{alice['id']}", headers=admin_headers)
    assert profile.status_code == 404

    bob_profile = client.get(f"{API}/users/profile/{bob['id']}", headers=admin_headers).json()
    assert bob_profile["rating"] == 0.0
    assert bob_profile["review_count"] == 0

    remaining = client.get(f"{ADMIN}/swaps", headers=admin_headers).json()
    assert [swap["id"] for swap in remaining] == [kept["id"]]
    assert client.get(f"{API}/feedbacks/{bob['id']}").json() == []


def test_delete_user_rejects_self_and_unknown(client, admin_headers, admin_id):
    own = client.delete(f"{ADMIN}/users/{admin_id}", headers=admin_headers)
    unknown = client.delete(f"{ADMIN}/users/{uuid.uuid4()}", headers=admin_headers)

    assert own.status_code == 400
    assert unknown.status_code == 404


def test_swap_stats(client, make_user, admin_headers, request_swap, complete_swap):
    _, alice_headers = make_user("Alice", skills_offered=["Guitar"])
    bob, bob_headers = make_user("Bob", skills_offered=["Python"])
    complete_swap(alice_headers, bob_headers, bob["id"], "Guitar", "Python")
    request_swap(alice_headers, bob["id"], "Guitar", "Python")
    rejected = request_swap(alice_headers, bob["id"], "Guitar", "Python")
    client.patch(f"{API}/swaps/{rejected['id']}", json={"status": "rejected"}, headers=bob_headers)

    response = client.get(f"{ADMIN}/stats/swaps", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {
        "total": 3,
        "pending": 1,
        "accepted": 0,
        "rejected": 1,
        "cancelled": 0,
        "completed": 1,
    }


def test_user_stats_and_listing(client, make_user, admin_headers):
    alice, _ = make_user("Alice")
    make_user("Bob")
    client.patch(f"{ADMIN}/ban/{alice['id']}", headers=admin_headers)

    stats = client.get(f"{ADMIN}/stats/users", headers=admin_headers).json()
    users = client.get(f"{ADMIN}/users", headers=admin_headers).json()

    assert stats == {"total": 3, "active": 1, "banned": 1}
    assert sorted(user["name"] for user in users) == ["Admin", "Alice", "Bob"]


def test_list_all_swaps_with_status_filter(client, make_user, admin_headers, request_swap):
    _, alice_headers = make_user("Alice", skills_offered=["Guitar"])
    bob, bob_headers = make_user("Bob", skills_offered=["Python"])
    pending = request_swap(alice_headers, bob["id"], "Guitar", "Python")
    accepted = request_swap(alice_headers, bob["id"], "Guitar", "Python")
    client.patch(f"{API}/swaps/{accepted['id']}", json={"status": "accepted"}, headers=bob_headers)

    everything = client.get(f"{ADMIN}/swaps", headers=admin_headers).json()
    only_pending = client.get(f"{ADMIN}/swaps", params={"status": "pending"}, headers=admin_headers).json()

    assert {swap["id"] for swap in everything} == {pending["id"], accepted["id"]}
    assert [swap["id"] for swap in only_pending] == [pending["id"]]
    assert everything[0]["requester"]["name"] == "Alice"


def test_report(client, make_user, admin_headers, complete_swap):
    _, alice_headers = make_user("Alice", skills_offered=["Guitar"])
    bob, bob_headers = make_user("Bob", skills_offered=["Python"])
    swap = complete_swap(alice_headers, bob_headers, bob["id"], "Guitar", "Python")
    client.post(f"{API}/feedbacks", json={"swap_id": swap["id"], "rating": 4}, headers=alice_headers)

    response = client.get(f"{ADMIN}/report", headers=admin_headers)

    assert response.status_code == 200
    report = response.json()
    assert report["users"] == 3
    assert report["active_users"] == 2
    assert report["banned_users"] == 0
    assert report["total_swaps"] == 1
    assert report["pending_swaps"] == 0
    assert report["completed_swaps"] == 1
    assert report["total_feedback"] == 1
    assert report["generated_at"]


def test_user_stats_count_only_regular_accounts_as_banned(client, make_user, admin_headers):
    other_admin, _ = make_user("Moderator", admin=True)
    alice, _ = make_user("Alice")
    make_user("Bob")
    client.patch(f"{ADMIN}/ban/{other_admin['id']}", headers=admin_headers)
    client.patch(f"{ADMIN}/ban/{alice['id']}", headers=admin_headers)

    stats = client.get(f"{ADMIN}/stats/users", headers=admin_headers).json()
    report = client.get(f"{ADMIN}/report", headers=admin_headers).json()

    assert stats == {"total": 4, "active": 1, "banned": 1}
    assert report["banned_users"] == 1
