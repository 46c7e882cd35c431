"""Label lifecycle management for the llemy pipelines.

Labels are the only state an issue carries:
llemy-plan -> llemy-planned, and llemy-todo -> llemy-done.
"""

import logging

from ..common.errors import ExternalCommandError, LabelUpdateError
from ..common.models import IssueRef
from .public_api import IssueTracker

logger = logging.getLogger("llemy.labels")

# name -> (color, description)
LLEMY_LABELS = {
    "llemy-plan": ("0e8a16", "Needs planning by Claude"),
    "llemy-planned": ("1d76db", "Plan created and ready for handoff"),
    "llemy-todo": ("fbca04", "Ready for Codex implementation"),
    "llemy-done": ("5319e7", "Completed by Codex"),
}


class LabelManager:
    """Manages label transitions on issues."""

    def __init__(self, tracker: IssueTracker):
        self._tracker = tracker

    async def transition(self, ref: IssueRef, from_label: str, to_label: str) -> None:
        """Swap from_label for to_label.

        If the combined edit fails (typically because from_label is already
        gone), to_label is added on its own. There is no rollback: an issue
        left in its old state is picked up again on the next run.
        """
        try:
            await self._tracker.edit_labels(
                ref.repo, ref.number, add=[to_label], remove=[from_label]
            )
        except ExternalCommandError as e:
            logger.warning(f"{ref.tag}: removing {from_label} failed ({e.detail}); adding {to_label} only")
            try:
                await self._tracker.edit_labels(ref.repo, ref.number, add=[to_label])
            except ExternalCommandError as fallback:
                raise LabelUpdateError(
                    ref.tag, to_label, fallback.detail, removal_error=e.detail
                ) from fallback

        logger.info(f"{ref.tag}: transitioned {from_label} -> {to_label}")

    async def ensure_labels_exist(
        self, repo: str, labels: dict[str, tuple[str, str]] | None = None
    ) -> None:
        """Create missing labels and refresh colour and description of existing ones."""
        existing = await self._tracker.list_label_names(repo)
        for name, (color, description) in (labels or LLEMY_LABELS).items():
            if name in existing:
                await self._tracker.update_label(repo, name, color, description)
                logger.info(f"Updated label: {name}")
            else:
                await self._tracker.create_label(repo, name, color, description)
                logger.info(f"Created label: {name}")
