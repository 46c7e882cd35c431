"""Workspace setup for `llemy init`."""

import logging
from pathlib import Path

from ..config import Settings
from ..issue_tracker.label_manager import LLEMY_LABELS, LabelManager
from ..issue_tracker.public_api import IssueTracker

logger = logging.getLogger("llemy.workspace")

ENV_TEMPLATE = """# LLEMY settings

# Optional override if running outside the target repository
# LLEMY_REPO=owner/name

# Labels
LLEMY_PLAN_LABEL=llemy-plan
LLEMY_TODO_LABEL=llemy-todo
# LLEMY_PLANNED_LABEL=llemy-planned
# LLEMY_DONE_LABEL=llemy-done

# Scanning
# LLEMY_ISSUE_LIMIT=50
# LLEMY_CONCURRENCY=3

# Handoff polling
# LLEMY_POLL_INTERVAL_SECONDS=5
# LLEMY_POLL_MAX_ATTEMPTS=120

# Codex
# LLEMY_CODEX_TIMEOUT_SECONDS=1800
# LLEMY_CODEX_ARGS_PREFIX=--full-auto

# Optional Claude API planner (LLEMY_PLANNER_MODE=api)
# LLEMY_PLANNER_MODE=handoff
# ANTHROPIC_API_KEY=
# CLAUDE_MODEL=claude-sonnet-4-20250514
"""


def label_definitions(settings: Settings) -> dict[str, tuple[str, str]]:
    """Map the configured label names onto the default colours and descriptions."""
    configured = [
        settings.plan_label,
        settings.planned_label,
        settings.todo_label,
        settings.done_label,
    ]
    return {name: style for name, style in zip(configured, LLEMY_LABELS.values())}


def ensure_directories(settings: Settings) -> list[Path]:
    dirs = [
        Path(settings.workspace_dir),
        Path(settings.plan_dir),
        Path(settings.todo_dir),
        Path(settings.logs_dir),
    ]
    for path in dirs:
        path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created: {path.resolve()}")
    return dirs


def ensure_env_file(settings: Settings) -> Path:
    """Write the .env template unless one already exists."""
    env_path = Path(settings.workspace_dir) / ".env"
    if env_path.exists():
        logger.info(f"Exists: {env_path.resolve()}")
        return env_path
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
    logger.info(f"Created: {env_path.resolve()}")
    return env_path


async def initialize_workspace(settings: Settings, tracker: IssueTracker) -> str:
    """Prepare the local workspace and the repository's labels.

    Returns:
        The repository that was initialized.
    """
    await tracker.ensure_ready()
    repo = await tracker.resolve_repository(settings.repo)
    logger.info(f"Initializing LLEMY for {repo}")

    ensure_directories(settings)
    ensure_env_file(settings)
    await LabelManager(tracker).ensure_labels_exist(repo, label_definitions(settings))

    logger.info("LLEMY init complete.")
    return repo
