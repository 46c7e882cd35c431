"""Planning pipeline: llemy-plan issues become llemy-todo tickets.

For each issue a plan document is written, a todo document is obtained
(from an out-of-band planner, or from the hosted LLM), and the ticket it
describes is filed. The source issue then moves to llemy-planned.
"""

import logging
from pathlib import Path

from ..common.errors import ReadinessError
from ..common.models import IssueRef
from ..execution.llm_client import AnthropicClient
from ..issue_tracker.label_manager import LabelManager
from ..issue_tracker.public_api import IssueTracker
from .documents import parse_todo_file, render_plan, write_plan
from .handoff import HandoffWaiter
from .pipeline import IssuePipeline
from .prompt_builder import build_planning_prompt

logger = logging.getLogger("llemy.planner")


class PlanPipeline(IssuePipeline):
    """Turns each scanned llemy-plan issue into a new llemy-todo issue."""

    name = "plan"

    def __init__(
        self,
        tracker: IssueTracker,
        input_file: str | Path,
        plan_dir: str | Path,
        todo_dir: str | Path,
        from_label: str = "llemy-plan",
        planned_label: str = "llemy-planned",
        todo_label: str = "llemy-todo",
        waiter: HandoffWaiter | None = None,
        llm: AnthropicClient | None = None,
        policy_file: str | Path | None = None,
        tracker_ready: bool = False,
    ):
        super().__init__(tracker, input_file, tracker_ready)
        self._plan_dir = Path(plan_dir)
        self._todo_dir = Path(todo_dir)
        self._from_label = from_label
        self._planned_label = planned_label
        self._todo_label = todo_label
        self._waiter = waiter or HandoffWaiter()
        self._llm = llm
        self._policy_file = Path(policy_file) if policy_file else None
        self._policy: str | None = None
        self._labels = LabelManager(tracker)

    def plan_path(self, ref: IssueRef) -> Path:
        return self._plan_dir / f"{ref.slug}_{ref.number}_plan.md"

    def todo_path(self, ref: IssueRef) -> Path:
        return self._todo_dir / f"{ref.slug}_{ref.number}_todo.md"

    async def prepare(self) -> None:
        if self._llm is not None:
            if self._policy_file is None or not self._policy_file.exists():
                raise ReadinessError(f"Missing CLAUDE.md policy file at {self._policy_file}")
            self._policy = self._policy_file.read_text(encoding="utf-8")
        self._plan_dir.mkdir(parents=True, exist_ok=True)
        self._todo_dir.mkdir(parents=True, exist_ok=True)
        await super().prepare()

    async def process(self, ref: IssueRef) -> str:
        logger.info(f"[{ref.tag}] Fetching issue...")
        issue = await self._tracker.get_issue(ref.repo, ref.number)

        plan_path = self.plan_path(ref)
        todo_path = self.todo_path(ref)
        logger.info(f"[{ref.tag}] Writing plan to {plan_path}")
        write_plan(plan_path, issue)

        if self._llm is not None:
            logger.info(f"[{ref.tag}] Calling Claude API to generate todo...")
            prompt = build_planning_prompt(render_plan(issue), self._policy or "")
            todo_content = await self._llm.generate_ticket(prompt)
            logger.info(f"[{ref.tag}] Writing todo to {todo_path}")
            todo_path.write_text(todo_content, encoding="utf-8")
        else:
            logger.info(f"[{ref.tag}] Waiting for {todo_path}")
            logger.info(f'[{ref.tag}] Paused - run: "Process plan file {plan_path} and create {todo_path}"')
            await self._waiter.wait_for(todo_path)
            logger.info(f"[{ref.tag}] Todo file detected, continuing...")

        ticket = parse_todo_file(todo_path, f"Plan for {ref.tag}", self._todo_label)

        logger.info(f"[{ref.tag}] Creating {self._todo_label} issue...")
        created = await self._tracker.create_issue(ref.repo, ticket)

        logger.info(f"[{ref.tag}] Relabeling original issue...")
        await self._labels.transition(ref, self._from_label, self._planned_label)

        return f"Processed -> {created}"
