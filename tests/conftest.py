import os
import tempfile
import uuid
from dataclasses import dataclass
from pathlib import Path

import pytest

# Settings are read at import time, so the environment must be in place before the app is imported.
_tmp_dir = Path(tempfile.mkdtemp(prefix="skillswap-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp_dir / 'test.db'}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "development"
os.environ["ADMIN_PASSWORD"] = "Admin123!"
os.environ["SEED_SKILLS"] = "Python,Cooking,Guitar,Chess"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RESET_DB"] = "false"

from fastapi.testclient import TestClient  # noqa: E402

from skillswap.main import app  # noqa: E402

PASSWORD = "Passw0rd!"


@dataclass
class UserHandle:
    user_name: str
    headers: dict
    profile: dict | None = None

    @property
    def profile_id(self) -> int:
        return self.profile["id"]


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="session")
def skill_ids(client):
    r = client.get("/api/skills")
    assert r.status_code == 200
    return {s["name"]: s["id"] for s in r.json()}


def login(client, user_name: str, password: str = PASSWORD) -> dict:
    r = client.post("/api/auth/login", json={"userName": user_name, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
def make_user(client):
    """Register a fresh user; with_profile=True also creates their profile."""

    def _make(with_profile: bool = True, display_name: str | None = None, offered=None, wanted=None) -> UserHandle:
        user_name = f"user_{uuid.uuid4().hex[:10]}"
        r = client.post(
            "/api/auth/register",
            json={"userName": user_name, "email": f"{user_name}@skillswap.io", "password": PASSWORD},
        )
        assert r.status_code == 200, r.text
        headers = login(client, user_name)
        profile = None
        if with_profile:
            r = client.post(
                "/api/profiles",
                json={
                    "displayName": display_name or user_name.title(),
                    "skillsOfferedIds": offered or [],
                    "skillsWantedIds": wanted or [],
                },
                headers=headers,
            )
            assert r.status_code == 200, r.text
            profile = r.json()
        return UserHandle(user_name=user_name, headers=headers, profile=profile)

    return _make


@pytest.fixture
def admin_headers(client):
    return login(client, "admin", "Admin123!")


@pytest.fixture
def make_session(client):
    """Create a session hosted by the given user and return its JSON."""

    def _make(host: UserHandle, title: str = "Intro session", skill_id: int | None = None, **extra) -> dict:
        body = {"title": title, "description": "Bring a laptop", "durationMinutes": 60, **extra}
        if skill_id is not None:
            body["skillId"] = skill_id
        r = client.post("/api/sessions", json=body, headers=host.headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _make


def notifications_for(client, user: UserHandle) -> list[dict]:
    r = client.get("/api/notifications", params={"pageSize": 100}, headers=user.headers)
    assert r.status_code == 200, r.text
    return r.json()
