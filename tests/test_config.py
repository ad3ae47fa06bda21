"""Tests for configuration parsing."""

import pytest

from pantry_coach.config import Settings, parse_diet_type


def test_parse_diet_type() -> None:
    assert parse_diet_type(" Keto ") == "keto"
    assert parse_diet_type("low-glycemic") == "low-glycemic"
    assert parse_diet_type("atkins") is None
    assert parse_diet_type(None) is None


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORAGE_BACKEND", "supabase")
    monkeypatch.setenv("HISTORY_LIMIT", "25")
    monkeypatch.setenv("OPENAI_STORE", "true")

    settings = Settings()

    assert settings.storage_backend == "supabase"
    assert settings.history_limit == 25
    assert settings.openai_store is True
    assert settings.supabase_table == "pantry_state"
