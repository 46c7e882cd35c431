"""GitHub implementation of the issue tracker, driven through the `gh` CLI."""

import json
import logging
from typing import Any

from ..common.errors import (
    ExternalCommandError,
    QueryError,
    ReadinessError,
    RepositoryResolutionError,
)
from ..common.models import IssueRecord, TodoTicket
from ..execution.command_runner import CommandRunner
from .public_api import IssueTracker

logger = logging.getLogger("llemy.github")


class GitHubCLI(IssueTracker):
    """
    GitHub implementation of the issue tracker interface.

    Every operation is one `gh` invocation; `gh` must already be
    authenticated. JSON output is requested with `--json` and parsed here.
    """

    LIST_FIELDS = "number,title,url,updatedAt,labels"
    VIEW_FIELDS = "number,title,url,body,labels,updatedAt"
    LABEL_LIST_LIMIT = 200

    def __init__(self, runner: CommandRunner | None = None, command: str = "gh"):
        self._runner = runner or CommandRunner()
        self._command = command

    async def _gh(self, args: list[str]) -> str:
        return await self._runner.run(self._command, args)

    async def ensure_ready(self) -> None:
        """Check that gh is installed and logged in."""
        try:
            await self._gh(["--version"])
            await self._gh(["auth", "status"])
        except ExternalCommandError as e:
            raise ReadinessError("gh CLI not available or not authenticated") from e

    async def resolve_repository(self, override: str = "") -> str:
        """Use the override if set, otherwise ask gh for the current repository."""
        repo = (override or "").strip()
        if repo:
            return repo

        message = (
            "Unable to resolve current repository. "
            "Run inside a GitHub repo or set LLEMY_REPO=owner/name"
        )
        try:
            output = await self._gh(["repo", "view", "--json", "nameWithOwner"])
            data = json.loads(output)
        except (ExternalCommandError, json.JSONDecodeError) as e:
            raise RepositoryResolutionError(message) from e

        name = data.get("nameWithOwner") if isinstance(data, dict) else None
        if isinstance(name, str) and name.strip():
            return name.strip()
        raise RepositoryResolutionError(message)

    async def list_issues(
        self,
        repo: str,
        label: str,
        limit: int,
        include_body: bool = False,
    ) -> list[IssueRecord]:
        """List open issues with a label, capped at limit."""
        fields = self.LIST_FIELDS + (",body" if include_body else "")
        output = await self._gh(
            [
                "issue", "list",
                "--repo", repo,
                "--label", label,
                "--state", "open",
                "--limit", str(limit),
                "--json", fields,
            ]
        )

        try:
            items = json.loads(output)
        except json.JSONDecodeError as e:
            raise QueryError("Failed to parse gh issue list JSON") from e
        if not isinstance(items, list):
            raise QueryError("Failed to parse gh issue list JSON")

        issues = []
        for data in items:
            if not isinstance(data, dict) or not _is_issue_number(data.get("number")):
                logger.warning(f"{repo}: skipping malformed issue entry")
                continue
            issue = self._parse_issue(repo, data)
            if not include_body:
                issue = issue.model_copy(update={"body": None})
            issues.append(issue)

        return issues

    async def get_issue(self, repo: str, number: int) -> IssueRecord:
        """Fetch one issue including its body."""
        output = await self._gh(
            ["issue", "view", str(number), "--repo", repo, "--json", self.VIEW_FIELDS]
        )
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise QueryError(f"Failed to parse issue JSON for {repo}#{number}") from e
        if not isinstance(data, dict):
            raise QueryError(f"Failed to parse issue JSON for {repo}#{number}")

        return self._parse_issue(repo, {**data, "number": number})

    async def create_issue(self, repo: str, ticket: TodoTicket) -> str:
        """Create an issue; gh prints the new issue's URL."""
        args = ["issue", "create", "--repo", repo, "--title", ticket.title, "--body", ticket.body]
        for label in ticket.labels:
            args.extend(["--label", label])
        return await self._gh(args)

    async def edit_labels(
        self,
        repo: str,
        number: int,
        add: list[str] | None = None,
        remove: list[str] | None = None,
    ) -> None:
        """Apply label removals and additions in one `gh issue edit` call."""
        args = ["issue", "edit", str(number), "--repo", repo]
        for label in remove or []:
            args.extend(["--remove-label", label])
        for label in add or []:
            args.extend(["--add-label", label])
        await self._gh(args)

    async def add_comment(self, repo: str, number: int, body: str) -> None:
        """Add a comment to an issue."""
        await self._gh(["issue", "comment", str(number), "--repo", repo, "--body", body])

    async def list_label_names(self, repo: str) -> set[str]:
        """Return names of labels defined in the repository."""
        output = await self._gh(
            ["label", "list", "--repo", repo, "--limit", str(self.LABEL_LIST_LIMIT), "--json", "name"]
        )
        try:
            rows = json.loads(output)
        except json.JSONDecodeError as e:
            raise QueryError("Failed to parse gh label list JSON") from e
        if not isinstance(rows, list):
            raise QueryError("Failed to parse gh label list JSON")
        return set(_label_names(rows))

    async def create_label(self, repo: str, name: str, color: str, description: str) -> None:
        await self._gh(
            ["label", "create", name, "--repo", repo, "--color", color, "--description", description]
        )

    async def update_label(self, repo: str, name: str, color: str, description: str) -> None:
        await self._gh(
            ["label", "edit", name, "--repo", repo, "--color", color, "--description", description]
        )

    def _parse_issue(self, repo: str, data: dict) -> IssueRecord:
        """Parse gh JSON output into an IssueRecord."""
        labels = data.get("labels")
        body = data.get("body")
        return IssueRecord(
            repo=repo,
            number=data["number"],
            title=_as_str(data.get("title")),
            url=_as_str(data.get("url")),
            updated_at=data.get("updatedAt") if isinstance(data.get("updatedAt"), str) else None,
            labels=tuple(_label_names(labels)) if isinstance(labels, list) else (),
            body=body if isinstance(body, str) else "",
        )


def _is_issue_number(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _label_names(rows: list) -> list[str]:
    """Flatten [{"name": ...}] to bare names, dropping anything malformed."""
    names = []
    for row in rows:
        name = row.get("name") if isinstance(row, dict) else None
        if isinstance(name, str) and name.strip():
            names.append(name.strip())
    return names
