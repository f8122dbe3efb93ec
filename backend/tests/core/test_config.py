"""Configuration — verifies placeholder secrets are refused outside local development.

Tests:
    - Placeholder token secret → settings fail to load
    - Placeholder admin password → settings fail to load
    - ALLOW_INSECURE_DEFAULTS accepts both placeholders
    - Real values load normally; postgres URLs are rewritten for asyncpg
"""

import pytest
from pydantic import ValidationError

from app.config import PLACEHOLDER_ADMIN_PASSWORD, PLACEHOLDER_JWT_SECRET, Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("AUTH_JWT_SECRET", "ADMIN_PASSWORD", "ALLOW_INSECURE_DEFAULTS", "DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)


def test_placeholder_secret_refused():
    with pytest.raises(ValidationError, match="AUTH_JWT_SECRET"):
        Settings(_env_file=None, admin_password="s3cret-admin-pass")


def test_placeholder_admin_password_refused():
    with pytest.raises(ValidationError, match="ADMIN_PASSWORD"):
        Settings(_env_file=None, auth_jwt_secret="a-real-secret-of-sufficient-length")


def test_insecure_defaults_allowed_for_development(monkeypatch):
    monkeypatch.setenv("ALLOW_INSECURE_DEFAULTS", "true")
    settings = Settings(_env_file=None)
    assert settings.auth_jwt_secret == PLACEHOLDER_JWT_SECRET
    assert settings.admin_password == PLACEHOLDER_ADMIN_PASSWORD


def test_real_values_load(monkeypatch):
    monkeypatch.setenv("AUTH_JWT_SECRET", "a-real-secret-of-sufficient-length")
    monkeypatch.setenv("ADMIN_PASSWORD", "s3cret-admin-pass")
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/restaurant")
    settings = Settings(_env_file=None)
    assert settings.allow_insecure_defaults is False
    assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/restaurant"
