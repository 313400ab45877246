"""Unit tests for configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from automation_engine.config import EngineSettings


def test_settings_defaults(settings: EngineSettings) -> None:
    assert settings.log_level == "INFO"
    assert settings.log_json is True
    assert settings.default_user == "system"
    assert settings.default_role == "orchestrator"
    assert settings.run_history_limit == 100
    assert settings.parsed_cors_origins() == ["http://localhost:5173", "http://127.0.0.1:5173"]


def test_settings_from_environment(
    settings: EngineSettings, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("AUTOMATION_LOG_JSON", "false")
    monkeypatch.setenv("AUTOMATION_DEFAULT_ROLE", "builder")
    monkeypatch.setenv("AUTOMATION_RUN_HISTORY_LIMIT", "5")
    monkeypatch.setenv("AUTOMATION_CORS_ORIGINS", " https://a.example , ,https://b.example")

    loaded = EngineSettings(_env_file=None)

    assert loaded.log_level == "DEBUG"
    assert loaded.log_json is False
    assert loaded.default_role == "builder"
    assert loaded.run_history_limit == 5
    assert loaded.parsed_cors_origins() == ["https://a.example", "https://b.example"]


def test_settings_from_env_file(settings: EngineSettings, tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("AUTOMATION_DEFAULT_USER=ops\nUNRELATED=1\n", encoding="utf-8")

    loaded = EngineSettings(_env_file=env_file)

    assert loaded.default_user == "ops"


def test_run_history_limit_must_be_positive(
    settings: EngineSettings, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("AUTOMATION_RUN_HISTORY_LIMIT", "0")

    with pytest.raises(ValidationError):
        EngineSettings(_env_file=None)
