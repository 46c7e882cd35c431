"""Command-line entry point for llemy.

Usage:
    llemy init           Initialize .llemy folders, env template, and labels
    llemy plan           Run planning flow (llemy-plan -> llemy-todo)
    llemy do             Run implementation flow (llemy-todo -> llemy-done)
    llemy scan-plan      Only scan llemy-plan issues
    llemy process-plan   Only process the last plan scan
    llemy scan-todo      Only scan llemy-todo issues
    llemy process-todo   Only process the last todo scan
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path

import pydantic

from .common.errors import LlemyError
from .common.models import ScanResult, utc_now
from .config import Settings, get_settings
from .coordinator.handoff import HandoffWaiter
from .coordinator.implementer import ImplementPipeline
from .coordinator.planner import PlanPipeline
from .coordinator.scanner import (
    Scanner,
    build_payload,
    format_report,
    read_repositories,
    write_payload,
    write_task_files,
)
from .coordinator.workspace import initialize_workspace
from .execution.agent_runner import CodexAgent
from .execution.command_runner import CommandRunner
from .execution.llm_client import AnthropicClient
from .issue_tracker.github_cli import GitHubCLI
from .issue_tracker.public_api import IssueTracker

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger("llemy.cli")


def configure_logging(level: str = "INFO", log_file: str | Path | None = None) -> None:
    """Log to stderr and, when given, append to a run log file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


# -----------------------------------------------------------------------------
# Stages
# -----------------------------------------------------------------------------


def report_scan(result: ScanResult) -> None:
    """Print the scan report and copy it into the run log."""
    report = format_report(result)
    print(report)
    logger.info(f"Scan report:\n{report}")


async def scan_plan(settings: Settings, tracker: IssueTracker) -> int:
    await tracker.ensure_ready()
    repo = await tracker.resolve_repository(settings.repo)

    scanner = Scanner(tracker, settings.concurrency, settings.issue_limit)
    result = await scanner.scan([repo], settings.plan_label)

    report_scan(result)
    path = write_payload(settings.plan_scan_file, build_payload(result, settings.plan_label))
    logger.info(f"Wrote {path}")
    return 0


async def scan_todo(settings: Settings, tracker: IssueTracker) -> int:
    await tracker.ensure_ready()
    repositories_file = Path(settings.repositories_file)
    if repositories_file.exists():
        repos = read_repositories(repositories_file)
        if not repos:
            raise LlemyError(f"{repositories_file} contains no valid repositories")
    else:
        repos = [await tracker.resolve_repository(settings.repo)]

    scanner = Scanner(tracker, settings.concurrency, settings.issue_limit)
    result = await scanner.scan(repos, settings.todo_label, include_body=True)

    report_scan(result)
    path = write_payload(settings.todo_scan_file, build_payload(result, settings.todo_label))
    write_task_files(settings.task_dir, result)
    logger.info(f"Wrote {path}")
    return 0


async def process_plan(
    settings: Settings, tracker: IssueTracker, tracker_ready: bool = False
) -> int:
    llm = None
    if settings.planner_mode == "api":
        llm = AnthropicClient(
            api_key=settings.anthropic_api_key,
            model=settings.claude_model,
            max_tokens=settings.anthropic_max_tokens,
            base_url=settings.anthropic_base_url,
            timeout=settings.anthropic_timeout_seconds,
        )

    pipeline = PlanPipeline(
        tracker,
        settings.plan_scan_file,
        plan_dir=settings.plan_dir,
        todo_dir=settings.todo_dir,
        from_label=settings.plan_label,
        planned_label=settings.planned_label,
        todo_label=settings.todo_label,
        waiter=HandoffWaiter(settings.poll_interval_seconds, settings.poll_max_attempts),
        llm=llm,
        policy_file=settings.policy_file,
        tracker_ready=tracker_ready,
    )
    try:
        summary = await pipeline.run()
    finally:
        if llm is not None:
            await llm.close()
    return summary.exit_code


async def process_todo(
    settings: Settings, tracker: IssueTracker, tracker_ready: bool = False
) -> int:
    agent = CodexAgent(
        CommandRunner(),
        command=settings.codex_command,
        args_prefix=settings.codex_args,
        timeout=settings.codex_timeout_seconds,
    )
    pipeline = ImplementPipeline(
        tracker,
        settings.todo_scan_file,
        agent=agent,
        work_dir=Path.cwd(),
        from_label=settings.todo_label,
        done_label=settings.done_label,
        tracker_ready=tracker_ready,
    )
    summary = await pipeline.run()
    return summary.exit_code


async def plan_flow(settings: Settings, tracker: IssueTracker) -> int:
    logger.info("Running scan-plan...")
    await scan_plan(settings, tracker)
    logger.info("Running process-plan...")
    return await process_plan(settings, tracker, tracker_ready=True)


async def do_flow(settings: Settings, tracker: IssueTracker) -> int:
    logger.info("Running scan-todo...")
    await scan_todo(settings, tracker)
    logger.info("Running process-todo...")
    return await process_todo(settings, tracker, tracker_ready=True)


async def init(settings: Settings, tracker: IssueTracker) -> int:
    await initialize_workspace(settings, tracker)
    return 0


Stage = Callable[[Settings, IssueTracker], Awaitable[int]]

# command -> (stage, run log name)
COMMANDS: dict[str, tuple[Stage, str | None]] = {
    "init": (init, None),
    "plan": (plan_flow, "plan.log"),
    "do": (do_flow, "do.log"),
    "scan-plan": (scan_plan, "plan.log"),
    "process-plan": (process_plan, "plan.log"),
    "scan-todo": (scan_todo, "do.log"),
    "process-todo": (process_todo, "do.log"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="llemy",
        description="Plan and implement GitHub issues with coding agents.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.add_parser("init", help="Initialize .llemy folders, env template, and labels")
    subparsers.add_parser("plan", help="Run planning flow (llemy-plan -> llemy-todo)")
    subparsers.add_parser("do", help="Run implementation flow (llemy-todo -> llemy-done)")
    subparsers.add_parser("scan-plan", help="Scan llemy-plan issues only")
    subparsers.add_parser("process-plan", help="Process the last plan scan only")
    subparsers.add_parser("scan-todo", help="Scan llemy-todo issues only")
    subparsers.add_parser("process-todo", help="Process the last todo scan only")
    return parser


async def main(
    argv: list[str] | None = None,
    settings: Settings | None = None,
    tracker: IssueTracker | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    if settings is None:
        try:
            settings = get_settings()
        except pydantic.ValidationError as e:
            print(f"Invalid configuration: {' '.join(str(e).split())}", file=sys.stderr)
            return 1

    stage, log_name = COMMANDS[args.command]
    try:
        configure_logging(settings.log_level, Path(settings.logs_dir) / log_name if log_name else None)
    except OSError as e:
        print(f"Cannot open run log: {e}", file=sys.stderr)
        return 1
    if log_name:
        logger.info(f"=== LLEMY {args.command.upper()} RUN: {utc_now().isoformat()} ===")

    tracker = tracker or GitHubCLI(CommandRunner(), command=settings.gh_command)
    try:
        code = await stage(settings, tracker)
    except (LlemyError, OSError) as e:
        logger.error(" ".join(str(e).split()))
        code = 1

    if log_name:
        logger.info("=== COMPLETED SUCCESSFULLY ===" if code == 0 else "=== FAILED ===")
    return code


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
