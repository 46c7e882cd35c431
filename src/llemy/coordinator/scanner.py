"""Scan repositories for open issues carrying a pipeline label.

Repositories are queried through the batch scheduler. A repository whose
query fails is reported with its error instead of failing the scan.
"""

import json
import logging
from pathlib import Path

from ..common.models import IssueRecord, ScanError, ScanPayload, ScanResult, repo_slug
from ..issue_tracker.public_api import IssueTracker
from .batching import run_batches

logger = logging.getLogger("llemy.scanner")


class Scanner:
    """Lists labeled issues across repositories with bounded concurrency."""

    def __init__(self, tracker: IssueTracker, concurrency: int = 3, issue_limit: int = 50):
        self._tracker = tracker
        self._concurrency = concurrency
        self._issue_limit = issue_limit

    async def scan(self, repos: list[str], label: str, include_body: bool = False) -> ScanResult:
        """Query every repository; map each to its issues or its error."""

        async def query(repo: str) -> list[IssueRecord]:
            return await self._tracker.list_issues(
                repo, label, self._issue_limit, include_body=include_body
            )

        outcomes = await run_batches(repos, self._concurrency, query)

        result: ScanResult = {}
        for outcome in outcomes:
            if outcome.status == "success":
                result[outcome.item] = outcome.value
            else:
                logger.error(f"{outcome.item}: {outcome.reason}")
                result[outcome.item] = outcome.reason

        found = sum(len(v) for v in result.values() if isinstance(v, list))
        logger.info(f"Scanned {len(repos)} repositories for {label}: {found} issues")
        return result


def build_payload(result: ScanResult, label: str) -> ScanPayload:
    """Flatten a scan result into the payload written to disk."""
    issues: list[IssueRecord | ScanError] = []
    for repo, entry in result.items():
        if isinstance(entry, str):
            issues.append(ScanError(repo=repo, error=entry))
        else:
            issues.extend(entry)
    return ScanPayload(label=label, repos=list(result), issues=issues)


def write_payload(path: str | Path, payload: ScanPayload) -> Path:
    """Write the payload as indented JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


def format_report(result: ScanResult) -> str:
    """Human-readable summary, one block per repository."""
    lines = []
    for repo, entry in result.items():
        issues = entry if isinstance(entry, list) else []
        lines.append(f"{repo} ({len(issues)})")
        for issue in issues:
            lines.append(f"  - #{issue.number} {issue.title} + {issue.url}")
        if isinstance(entry, str):
            lines.append(f"  - ERROR: {entry}")
    return "\n".join(lines)


def read_repositories(path: str | Path) -> list[str]:
    """Read owner/name lines, skipping blanks and # comments."""
    lines = Path(path).read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip() and not line.strip().startswith("#")]


def task_file_name(issue: IssueRecord) -> str:
    return f"{repo_slug(issue.repo)}_{issue.number}.md"


def write_task_files(task_dir: str | Path, result: ScanResult) -> list[Path]:
    """Write each scanned issue's body to its own task file."""
    task_dir = Path(task_dir)
    task_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for entry in result.values():
        if isinstance(entry, str):
            continue
        for issue in entry:
            path = task_dir / task_file_name(issue)
            path.write_text(f"{issue.body or ''}\n", encoding="utf-8")
            written.append(path)
    return written
