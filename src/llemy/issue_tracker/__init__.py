"""Issue tracker abstraction layer."""

from .github_cli import GitHubCLI
from .label_manager import LLEMY_LABELS, LabelManager
from .public_api import IssueTracker

__all__ = [
    # Interface
    "IssueTracker",
    # Implementations
    "GitHubCLI",
    # Label management
    "LLEMY_LABELS",
    "LabelManager",
]
