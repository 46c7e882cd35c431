"""Configuration management for llemy."""

import logging
from typing import Any, Literal

from pydantic import AliasChoices, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from the environment, `.llemy/.env` and `.env`.

    Process environment wins over `.llemy/.env`, which wins over `.env`.
    """

    # Target repository (owner/name). Resolved with `gh repo view` when empty.
    repo: str = ""

    # Pipeline labels
    plan_label: str = "llemy-plan"
    planned_label: str = "llemy-planned"
    todo_label: str = "llemy-todo"
    done_label: str = "llemy-done"

    # Scanning
    issue_limit: int = 50
    concurrency: int = 3  # batch size for repository queries
    repositories_file: str = "repositories.txt"

    # Workspace layout
    workspace_dir: str = ".llemy"
    plan_scan_file: str = ".llemy/llemy-plan-issues.json"
    todo_scan_file: str = ".llemy/llemy-todo-issues.json"
    plan_dir: str = ".llemy/plan"
    todo_dir: str = ".llemy/todo"
    task_dir: str = ".llemy/todo-tasks"
    logs_dir: str = ".llemy/logs"

    # Handoff polling (120 x 5s = 10 minute ceiling)
    poll_interval_seconds: float = 5.0
    poll_max_attempts: int = 120

    # External programs
    gh_command: str = "gh"
    codex_command: str = "codex"
    codex_timeout_seconds: float = 1800.0  # 30 minutes
    codex_args_prefix: str = "--full-auto"

    # Planner: wait for a human/agent to write the todo file, or call the API
    planner_mode: Literal["handoff", "api"] = "handoff"

    # Hosted LLM (planner_mode == "api")
    anthropic_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("LLEMY_ANTHROPIC_API_KEY", "ANTHROPIC_API_KEY"),
    )
    claude_model: str = Field(
        default="claude-sonnet-4-20250514",
        validation_alias=AliasChoices("LLEMY_CLAUDE_MODEL", "CLAUDE_MODEL"),
    )
    anthropic_base_url: str = "https://api.anthropic.com"
    anthropic_max_tokens: int = 8192
    anthropic_timeout_seconds: float = 300.0
    policy_file: str = ".claude/claude.md"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="LLEMY_",
        env_file=(".env", ".llemy/.env"),
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("issue_limit", "concurrency", "poll_max_attempts", mode="before")
    @classmethod
    def _positive_or_default(cls, value: Any, info: ValidationInfo) -> Any:
        default = cls.model_fields[info.field_name].default
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            return default
        return parsed if parsed > 0 else default

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @property
    def codex_args(self) -> list[str]:
        return self.codex_args_prefix.split()


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
