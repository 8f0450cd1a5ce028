from __future__ import annotations

import pytest

from studyplan.utils.config import DEFAULT_PORT, get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_port_read_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8123")

    assert get_settings().port == 8123


def test_invalid_port_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("PORT", "not-a-port")

    assert get_settings().port == DEFAULT_PORT


def test_blank_api_key_is_treated_as_missing(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "")

    assert get_settings().openai_api_key is None


def test_remote_defaults(monkeypatch):
    for name in ("REMOTE_MODEL", "REMOTE_MAX_OUTPUT_TOKENS", "REMOTE_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.remote_model == "gpt-4.1-mini"
    assert settings.remote_max_output_tokens == 512
    assert settings.remote_timeout_seconds == 15.0
