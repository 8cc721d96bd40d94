"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from carboniq.config.settings import Settings


def test_defaults_run_locally(settings):
    assert settings.store_backend == "memory"
    assert settings.auth_backend == "static"
    assert settings.verification_delay_seconds == 2.0
    assert settings.verification_seed is None


def test_log_level_is_normalised():
    assert Settings(log_level="debug").log_level == "DEBUG"


def test_invalid_log_level():
    with pytest.raises(ValidationError):
        Settings(log_level="chatty")


def test_unknown_store_backend():
    with pytest.raises(ValidationError):
        Settings(store_backend="mongo")


def test_negative_delay():
    with pytest.raises(ValidationError):
        Settings(verification_delay_seconds=-1)


def test_supabase_backend_needs_project():
    with pytest.raises(ValidationError):
        Settings(store_backend="supabase")
    with pytest.raises(ValidationError):
        Settings(auth_backend="supabase", supabase_url="https://x.supabase.co")


def test_static_tokens_from_env(monkeypatch):
    monkeypatch.setenv("STATIC_AUTH_TOKENS", '{"dev-token": "dev-user"}')
    assert Settings().static_auth_tokens == {"dev-token": "dev-user"}
