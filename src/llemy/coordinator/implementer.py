"""Implementation pipeline: llemy-todo issues are handed to the coding agent."""

import logging
from pathlib import Path

from ..common.models import IssueRef
from ..execution.agent_runner import CodexAgent
from ..issue_tracker.label_manager import LabelManager
from ..issue_tracker.public_api import IssueTracker
from .pipeline import IssuePipeline
from .prompt_builder import build_implementation_prompt

logger = logging.getLogger("llemy.implementer")


class ImplementPipeline(IssuePipeline):
    """Runs the agent on each scanned llemy-todo issue, then marks it done."""

    name = "do"

    def __init__(
        self,
        tracker: IssueTracker,
        input_file: str | Path,
        agent: CodexAgent,
        work_dir: str | Path,
        from_label: str = "llemy-todo",
        done_label: str = "llemy-done",
        tracker_ready: bool = False,
    ):
        super().__init__(tracker, input_file, tracker_ready)
        self._agent = agent
        self._work_dir = Path(work_dir)
        self._from_label = from_label
        self._done_label = done_label
        self._labels = LabelManager(tracker)

    async def prepare(self) -> None:
        await super().prepare()
        await self._agent.ensure_ready()

    async def process(self, ref: IssueRef) -> str:
        logger.info(f"[{ref.tag}] Fetching issue...")
        issue = await self._tracker.get_issue(ref.repo, ref.number)

        logger.info(f"[{ref.tag}] Running Codex implementation...")
        summary = await self._agent.implement(build_implementation_prompt(issue), self._work_dir)

        logger.info(f"[{ref.tag}] Adding completion comment...")
        await self._tracker.add_comment(
            ref.repo, ref.number, f"✅ Implementation completed by Codex\n\n{summary}"
        )

        logger.info(f"[{ref.tag}] Relabeling issue...")
        await self._labels.transition(ref, self._from_label, self._done_label)

        return f"Implemented and labeled {self._done_label}"
