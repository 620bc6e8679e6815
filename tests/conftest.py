from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from aula.app.core.config import Settings
from aula.app.main import create_app
from aula.app.security.google import GoogleIdentityVerifier

SECRET = "test-secret"
GOOGLE_CLIENT_ID = "test-client.apps.googleusercontent.com"


class FakeGoogleTokens:
    """Stands in for google.oauth2.id_token.verify_oauth2_token."""

    def __init__(self):
        self.claims = {}
        self.calls = []

    def __call__(self, token, request, audience):
        self.calls.append((token, audience))
        if audience != GOOGLE_CLIENT_ID:
            raise ValueError("Token has wrong audience")
        if token not in self.claims:
            raise ValueError("Could not verify token signature.")
        return self.claims[token]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        SECRET_KEY=SECRET,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'aula-test.db'}",
        GOOGLE_CLIENT_ID=GOOGLE_CLIENT_ID,
        BCRYPT_ROUNDS=4,
        CORS_ORIGINS="",
    )


@pytest.fixture
def google_tokens() -> FakeGoogleTokens:
    return FakeGoogleTokens()


@pytest.fixture
def client(settings, google_tokens):
    verifier = GoogleIdentityVerifier(GOOGLE_CLIENT_ID, verify_token=google_tokens)
    app = create_app(settings, identity_verifier=verifier)
    with TestClient(app) as c:
        yield c


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, username="profe", password="s3creta") -> str:
    resp = client.post("/api/register", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]
