"""
Unit tests for config.py — production guard and per-environment values.
"""

from __future__ import annotations

import importlib
from datetime import timedelta
from types import SimpleNamespace

import pytest

import taskapi.config
from taskapi.config import (
    BaseConfig,
    ProductionConfig,
    TestingConfig,
    config_by_name,
    validate_production_config,
)


def _fake_app(**overrides):
    values = {
        "SQLALCHEMY_DATABASE_URI": "postgresql://db/taskapi",
        "SECRET_KEY": "a-real-flask-secret",
        "JWT_SECRET_KEY": "a-real-jwt-secret",
        **overrides,
    }
    return SimpleNamespace(config=values)


def test_valid_production_config_passes():
    validate_production_config(_fake_app())


@pytest.mark.parametrize("key,value", [
    ("SQLALCHEMY_DATABASE_URI", ""),
    ("SECRET_KEY", "change-me-in-production"),
    ("JWT_SECRET_KEY", "change-me-in-production"),
])
def test_production_guard_rejects_missing_or_placeholder_values(key, value):
    with pytest.raises(ValueError):
        validate_production_config(_fake_app(**{key: value}))


def test_revocation_and_session_lifetimes_default_to_four_hours():
    assert BaseConfig.REVOKED_TOKEN_TTL == timedelta(hours=4)
    assert BaseConfig.USER_SESSION_TTL == timedelta(hours=4)


def test_cookie_names_and_work_factor():
    assert BaseConfig.TOKEN_COOKIE_NAME == "token"
    assert BaseConfig.BCRYPT_LOG_ROUNDS == 10
    assert TestingConfig.BCRYPT_LOG_ROUNDS == 4


def test_only_production_marks_cookies_secure():
    assert ProductionConfig.AUTH_COOKIE_SECURE is True
    assert config_by_name["development"].AUTH_COOKIE_SECURE is False


@pytest.fixture
def reload_config(monkeypatch):
    """Re-evaluates taskapi.config under a patched environment, then restores it."""
    monkeypatch.delenv("JWT_ACCESS_TOKEN_EXPIRES", raising=False)
    monkeypatch.delenv("JWT_ACCESS_TOKEN_EXPIRES_HOURS", raising=False)

    def _reload(**env):
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return importlib.reload(taskapi.config)

    yield _reload

    monkeypatch.undo()
    importlib.reload(taskapi.config)


def test_revocation_outlives_a_longer_configured_token(reload_config):
    config = reload_config(JWT_ACCESS_TOKEN_EXPIRES_HOURS="8")

    assert config.BaseConfig.JWT_ACCESS_TOKEN_EXPIRES == timedelta(hours=8)
    assert config.BaseConfig.REVOKED_TOKEN_TTL == timedelta(hours=8)
    assert config.BaseConfig.USER_SESSION_TTL == timedelta(hours=8)


def test_revocation_tracks_token_lifetime_given_in_seconds(reload_config):
    config = reload_config(JWT_ACCESS_TOKEN_EXPIRES="600")

    assert config.BaseConfig.REVOKED_TOKEN_TTL == config.BaseConfig.JWT_ACCESS_TOKEN_EXPIRES
    assert config.TestingConfig.REVOKED_TOKEN_TTL == timedelta(seconds=600)
