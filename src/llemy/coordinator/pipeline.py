"""Per-issue pipeline driver.

A pipeline reads the payload written by a scan, keeps the well-formed
entries, checks its tools are ready, then processes the issues one at a
time. A failing issue is recorded and the next one is processed anyway.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..common.errors import ScanPayloadError
from ..common.models import IssueRef, PipelineRunSummary
from ..issue_tracker.public_api import IssueTracker

logger = logging.getLogger("llemy.pipeline")


def load_payload(path: str | Path) -> dict:
    """Read a scan payload; missing or invalid files are fatal."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ScanPayloadError(f"Missing input file: {path}") from e
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ScanPayloadError(f"Invalid JSON in: {path}") from e
    if not isinstance(payload, dict):
        raise ScanPayloadError(f"Invalid JSON in: {path}")
    return payload


def collect_work_items(payload: dict) -> list[IssueRef]:
    """Keep entries with a repository, a positive issue number, and no error."""
    entries = payload.get("issues")
    if not isinstance(entries, list):
        return []

    items = []
    for entry in entries:
        if not isinstance(entry, dict) or entry.get("error"):
            continue
        repo = entry.get("repo")
        number = entry.get("number")
        if not isinstance(repo, str) or not repo.strip():
            continue
        if not _is_positive_int(number):
            continue
        items.append(IssueRef(repo=repo, number=number))
    return items


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class IssuePipeline(ABC):
    """Base class for the plan and implement pipelines."""

    name = "pipeline"

    def __init__(
        self,
        tracker: IssueTracker,
        input_file: str | Path,
        tracker_ready: bool = False,
    ):
        self._tracker = tracker
        self._input_file = Path(input_file)
        # Set when a scan in the same run already checked the tracker.
        self._tracker_ready = tracker_ready

    async def prepare(self) -> None:
        """Readiness checks; any error here aborts the run."""
        if not self._tracker_ready:
            await self._tracker.ensure_ready()

    @abstractmethod
    async def process(self, ref: IssueRef) -> str:
        """
        Process one issue.

        Returns:
            Short description of the result, for the log.
        """

    async def run(self) -> PipelineRunSummary:
        """Process every work item in the scan payload."""
        items = collect_work_items(load_payload(self._input_file))
        if not items:
            raise ScanPayloadError(f"No issues to process in {self._input_file}")

        await self.prepare()

        summary = PipelineRunSummary()
        for ref in items:
            logger.info(f"[{ref.tag}] Processing ({self.name})")
            try:
                result = await self.process(ref)
            except Exception as e:
                message = " ".join(str(e).split()) or type(e).__name__
                summary.record_failure(ref, message)
                logger.error(f"Failed {ref.tag}: {message}")
                continue
            summary.record_success()
            logger.info(f"[{ref.tag}] ✓ {result}")

        logger.info(f"Done. Completed={summary.completed} Failed={len(summary.failures)}")
        return summary
