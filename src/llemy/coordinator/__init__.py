"""Coordinator module: scanning, per-issue pipelines and their building blocks."""

from .batching import run_batches
from .documents import parse_plan, parse_todo, parse_todo_file, render_plan, write_plan
from .handoff import HandoffWaiter
from .implementer import ImplementPipeline
from .pipeline import IssuePipeline, collect_work_items, load_payload
from .planner import PlanPipeline
from .prompt_builder import build_implementation_prompt, build_planning_prompt
from .scanner import (
    Scanner,
    build_payload,
    format_report,
    read_repositories,
    write_payload,
    write_task_files,
)
from .workspace import initialize_workspace

__all__ = [
    # Building blocks
    "run_batches",
    "HandoffWaiter",
    "parse_plan",
    "parse_todo",
    "parse_todo_file",
    "render_plan",
    "write_plan",
    "build_implementation_prompt",
    "build_planning_prompt",
    # Scanning
    "Scanner",
    "build_payload",
    "format_report",
    "read_repositories",
    "write_payload",
    "write_task_files",
    # Pipelines
    "IssuePipeline",
    "PlanPipeline",
    "ImplementPipeline",
    "collect_work_items",
    "load_payload",
    # Setup
    "initialize_workspace",
]
