import itertools
import os

# Must be set before the application modules read their settings
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ADMIN_TOKEN"] = "test-admin-token"
os.environ["STORAGE_BACKEND"] = "memory"

import pytest
from fastapi.testclient import TestClient

from skillswap.core.config import Settings
from skillswap.core.storage import MemoryStore
from skillswap.main import create_app

API = "/api/v1"


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def client(store):
    app = create_app(store=store, settings=Settings())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(client):
    """Register a user through the API and return (user, auth headers)."""
    counter = itertools.count()

    def _make_user(
        name="User",
        skills_offered=None,
        skills_wanted=None,
        is_public=True,
        admin=False,
        password="password123",
    ):
        payload = {
            "name": name,
            "email": f"{name.lower().replace(' ', '.')}{next(counter)}@example.com",
            "password": password,
            "skills_offered": skills_offered or [],
            "skills_wanted": skills_wanted or [],
            "is_public": is_public,
        }
        if admin:
            payload["admin_token"] = "test-admin-token"

        response = client.post(f"{API}/users/register", json=payload)
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"], {"Authorization": f"Bearer {body['access_token']}"}

    return _make_user


@pytest.fixture
def request_swap(client):
    def _request_swap(headers, receiver_id, skill_offered, skill_wanted, message="Let's swap!"):
        response = client.post(
            f"{API}/swaps/request",
            json={
                "receiver_id": receiver_id,
                "skill_offered": skill_offered,
                "skill_wanted": skill_wanted,
                "message": message,
            },
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _request_swap


@pytest.fixture
def complete_swap(client, request_swap):
    """Create a swap and drive it through accepted to completed."""

    def _complete_swap(requester_headers, receiver_headers, receiver_id, skill_offered, skill_wanted):
        swap = request_swap(requester_headers, receiver_id, skill_offered, skill_wanted)
        for new_status, headers in (("accepted", receiver_headers), ("completed", requester_headers)):
            response = client.patch(f"{API}/swaps/{swap['id']}", json={"status": new_status}, headers=headers)
            assert response.status_code == 200, response.text
        return swap

    return _complete_swap
