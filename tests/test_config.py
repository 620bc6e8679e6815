from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from aula.app.core.config import Settings


def test_secret_key_is_required(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_blank_secret_key_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, SECRET_KEY="   ")


def test_secret_key_from_environment(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "from-env")
    assert Settings(_env_file=None).SECRET_KEY == "from-env"


def test_token_lifetime_defaults_to_eight_hours():
    assert Settings(_env_file=None, SECRET_KEY="x").access_token_lifetime == timedelta(hours=8)


@pytest.mark.parametrize("url,expected", [
    ("postgres://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
    ("postgresql://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
    ("postgresql+asyncpg://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
    ("sqlite:///./x.db", "sqlite+aiosqlite:///./x.db"),
])
def test_database_url_normalized(url, expected):
    assert Settings(_env_file=None, SECRET_KEY="x", DATABASE_URL=url).DATABASE_URL == expected


def test_cors_origins_parsed():
    s = Settings(_env_file=None, SECRET_KEY="x", CORS_ORIGINS=" http://a.test , ,http://b.test")
    assert s.BACKEND_CORS_ORIGINS == ["http://a.test", "http://b.test"]
    assert Settings(_env_file=None, SECRET_KEY="x", CORS_ORIGINS="").BACKEND_CORS_ORIGINS == []
