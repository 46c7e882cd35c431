"""Public API for issue tracker module.

This module defines the interface the pipelines depend on.
Implementation modules import from here, not the other way around.
"""

from abc import ABC, abstractmethod

from ..common.models import IssueRecord, TodoTicket


class IssueTracker(ABC):
    """Abstract interface for issue tracking systems."""

    @abstractmethod
    async def ensure_ready(self) -> None:
        """Verify the tracker is reachable and authenticated.

        Raises:
            ReadinessError: The tracker cannot be used.
        """

    @abstractmethod
    async def resolve_repository(self, override: str = "") -> str:
        """
        Determine the repository to work on.

        Args:
            override: Explicit owner/name; used verbatim when non-empty.

        Returns:
            Repository in owner/name format.
        """

    @abstractmethod
    async def list_issues(
        self,
        repo: str,
        label: str,
        limit: int,
        include_body: bool = False,
    ) -> list[IssueRecord]:
        """
        List open issues carrying a label.

        Args:
            repo: Repository in owner/name format.
            label: Label to filter on.
            limit: Maximum number of issues returned.
            include_body: Also fetch issue bodies.

        Returns:
            IssueRecords in tracker order.
        """

    @abstractmethod
    async def get_issue(self, repo: str, number: int) -> IssueRecord:
        """
        Get full details of one issue.

        Args:
            repo: Repository in owner/name format.
            number: Issue number.

        Returns:
            IssueRecord including the body.
        """

    @abstractmethod
    async def create_issue(self, repo: str, ticket: TodoTicket) -> str:
        """
        Create an issue from a ticket.

        Args:
            repo: Repository in owner/name format.
            ticket: Title, labels and body of the new issue.

        Returns:
            URL of the created issue.
        """

    @abstractmethod
    async def edit_labels(
        self,
        repo: str,
        number: int,
        add: list[str] | None = None,
        remove: list[str] | None = None,
    ) -> None:
        """
        Add and remove labels on an issue in a single call.

        Args:
            repo: Repository in owner/name format.
            number: Issue number.
            add: Labels to add.
            remove: Labels to remove.
        """

    @abstractmethod
    async def add_comment(self, repo: str, number: int, body: str) -> None:
        """
        Add a comment to an issue.

        Args:
            repo: Repository in owner/name format.
            number: Issue number.
            body: Comment body.
        """

    @abstractmethod
    async def list_label_names(self, repo: str) -> set[str]:
        """Return the names of all labels defined in a repository."""

    @abstractmethod
    async def create_label(self, repo: str, name: str, color: str, description: str) -> None:
        """Create a repository label."""

    @abstractmethod
    async def update_label(self, repo: str, name: str, color: str, description: str) -> None:
        """Update colour and description of an existing label."""
