"""Tests for settings loading."""

import pydantic
import pytest

from llemy.config import Settings

ENV_VARS = [
    "LLEMY_LOG_LEVEL",
    "LLEMY_REPO",
    "LLEMY_ISSUE_LIMIT",
    "LLEMY_CONCURRENCY",
    "LLEMY_POLL_MAX_ATTEMPTS",
    "LLEMY_PLANNER_MODE",
    "LLEMY_ANTHROPIC_API_KEY",
    "ANTHROPIC_API_KEY",
    "LLEMY_CLAUDE_MODEL",
    "CLAUDE_MODEL",
]


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """Run each test in an empty directory with no llemy variables set."""
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        settings = Settings()

        assert settings.repo == ""
        assert settings.plan_label == "llemy-plan"
        assert settings.done_label == "llemy-done"
        assert settings.issue_limit == 50
        assert settings.concurrency == 3
        assert settings.poll_interval_seconds == 5.0
        assert settings.poll_max_attempts == 120
        assert settings.codex_timeout_seconds == 1800.0
        assert settings.codex_args == ["--full-auto"]
        assert settings.planner_mode == "handoff"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("LLEMY_REPO", "acme/widgets")
        monkeypatch.setenv("LLEMY_ISSUE_LIMIT", "10")
        monkeypatch.setenv("LLEMY_PLANNER_MODE", "api")

        settings = Settings()

        assert settings.repo == "acme/widgets"
        assert settings.issue_limit == 10
        assert settings.planner_mode == "api"

    @pytest.mark.parametrize("raw", ["0", "-4", "lots", ""])
    def test_non_positive_integers_fall_back(self, monkeypatch, raw):
        monkeypatch.setenv("LLEMY_CONCURRENCY", raw)
        monkeypatch.setenv("LLEMY_ISSUE_LIMIT", raw)

        settings = Settings()

        assert settings.concurrency == 3
        assert settings.issue_limit == 50

    def test_unprefixed_anthropic_variables(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-plain")
        monkeypatch.setenv("CLAUDE_MODEL", "claude-custom")

        settings = Settings()

        assert settings.anthropic_api_key == "sk-plain"
        assert settings.claude_model == "claude-custom"

    def test_workspace_env_file(self, tmp_path):
        (tmp_path / ".llemy").mkdir()
        (tmp_path / ".llemy" / ".env").write_text("LLEMY_TODO_LABEL=ready-for-codex\n")

        assert Settings().todo_label == "ready-for-codex"

    def test_log_level_is_normalized(self, monkeypatch):
        monkeypatch.setenv("LLEMY_LOG_LEVEL", " debug ")
        assert Settings().log_level == "DEBUG"

    def test_unknown_log_level_is_rejected(self):
        with pytest.raises(pydantic.ValidationError, match="Unknown log level"):
            Settings(log_level="verbose")

    def test_codex_args_split(self):
        settings = Settings(codex_args_prefix="--full-auto  --model o4-mini")
        assert settings.codex_args == ["--full-auto", "--model", "o4-mini"]
