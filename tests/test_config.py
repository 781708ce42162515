"""Tests for configuration loading."""
import pytest

from mockinterview.config import LLM_TIMEOUT, QUESTION_COUNT, get_config


def test_missing_project_is_an_error(monkeypatch):
    monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)
    with pytest.raises(ValueError, match="GOOGLE_CLOUD_PROJECT"):
        get_config()


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "demo-project")
    monkeypatch.setenv("MOCKINTERVIEW_SESSIONS_DIR", str(tmp_path))
    monkeypatch.setenv("MOCKINTERVIEW_LOG_LEVEL", "warning")
    monkeypatch.setenv("MOCKINTERVIEW_MODEL", "gemini-test")

    config = get_config()

    assert config.google_cloud_project == "demo-project"
    assert config.sessions_dir == str(tmp_path)
    assert config.log_level == "WARNING"
    assert config.model_name == "gemini-test"
    assert config.question_count == QUESTION_COUNT
    assert config.llm_timeout == LLM_TIMEOUT
