"""Shared fakes for llemy tests."""

import pytest

from llemy.common.errors import ExternalCommandError, ReadinessError
from llemy.common.models import IssueRecord, TodoTicket
from llemy.issue_tracker.public_api import IssueTracker


class FakeTracker(IssueTracker):
    """In-memory issue tracker that behaves like gh for label edits."""

    def __init__(self, repo: str = "acme/widgets"):
        self.repo = repo
        self.ready = True
        self.ready_checks = 0
        self.issues: dict[tuple[str, int], IssueRecord] = {}
        self.labels: dict[tuple[str, int], list[str]] = {}
        self.listings: dict[str, list[IssueRecord] | Exception] = {}
        self.broken_issues: set[int] = set()
        self.fail_label_edits = 0
        self.created: list[tuple[str, TodoTicket]] = []
        self.comments: list[tuple[str, int, str]] = []
        self.label_edits: list[tuple[str, int, list[str], list[str]]] = []
        self.repo_labels: set[str] = set()
        self.label_writes: list[tuple[str, str, str, str]] = []

    def add_issue(self, number: int, title: str = "", body: str = "", labels=(), repo=None):
        repo = repo or self.repo
        issue = IssueRecord(
            repo=repo,
            number=number,
            title=title or f"Issue {number}",
            url=f"https://github.com/{repo}/issues/{number}",
            body=body,
            labels=tuple(labels),
        )
        self.issues[(repo, number)] = issue
        self.labels[(repo, number)] = list(labels)
        return issue

    async def ensure_ready(self) -> None:
        self.ready_checks += 1
        if not self.ready:
            raise ReadinessError("gh CLI not available or not authenticated")

    async def resolve_repository(self, override: str = "") -> str:
        return override.strip() or self.repo

    async def list_issues(self, repo, label, limit, include_body=False):
        listing = self.listings.get(repo, [])
        if isinstance(listing, Exception):
            raise listing
        return listing[:limit]

    async def get_issue(self, repo, number):
        if number in self.broken_issues:
            raise ExternalCommandError("gh", ["issue", "view"], f"issue {number} not found")
        return self.issues[(repo, number)]

    async def create_issue(self, repo, ticket):
        self.created.append((repo, ticket))
        return f"https://github.com/{repo}/issues/{1000 + len(self.created)}"

    async def edit_labels(self, repo, number, add=None, remove=None):
        add = list(add or [])
        remove = list(remove or [])
        self.label_edits.append((repo, number, add, remove))
        if self.fail_label_edits:
            self.fail_label_edits -= 1
            raise ExternalCommandError("gh", ["issue", "edit"], "HTTP 502")
        current = self.labels.setdefault((repo, number), [])
        for label in remove:
            if label not in current:
                raise ExternalCommandError("gh", ["issue", "edit"], f"'{label}' not found")
        for label in remove:
            current.remove(label)
        for label in add:
            if label not in current:
                current.append(label)

    async def add_comment(self, repo, number, body):
        self.comments.append((repo, number, body))

    async def list_label_names(self, repo):
        return set(self.repo_labels)

    async def create_label(self, repo, name, color, description):
        self.label_writes.append(("create", name, color, description))
        self.repo_labels.add(name)

    async def update_label(self, repo, name, color, description):
        self.label_writes.append(("edit", name, color, description))


class FakeRunner:
    """Stands in for CommandRunner; replies are consumed in order."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls: list[tuple[str, list[str], float | None]] = []

    def push(self, *replies):
        self.replies.extend(replies)

    async def run(self, program, args, timeout=None):
        self.calls.append((program, list(args), timeout))
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def tracker():
    """Create an empty fake tracker."""
    return FakeTracker()


@pytest.fixture
def runner():
    """Create a fake command runner with no queued replies."""
    return FakeRunner()
