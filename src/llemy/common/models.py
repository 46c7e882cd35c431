"""Shared Pydantic models for llemy."""

import re
from datetime import datetime, timezone
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def repo_slug(repo: str) -> str:
    """Turn owner/name into a string safe to use in a file name."""
    return re.sub(r"[^a-zA-Z0-9_.-]", "_", repo.strip().replace("/", "_"))


class IssueRef(BaseModel):
    """Identifies one issue: the unit of work for every pipeline."""

    model_config = ConfigDict(frozen=True)

    repo: str
    number: int

    @property
    def tag(self) -> str:
        return f"{self.repo}#{self.number}"

    @property
    def slug(self) -> str:
        return repo_slug(self.repo)


class IssueRecord(IssueRef):
    """An issue as returned by the issue tracker."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = ""
    url: str = ""
    updated_at: str | None = Field(default=None, alias="updatedAt")
    labels: tuple[str, ...] = ()
    body: str | None = None


class ScanError(BaseModel):
    """Scan payload entry for a repository whose query failed."""

    repo: str
    error: str


# Repository -> its issues, or the error message its query failed with.
ScanResult = dict[str, list[IssueRecord] | str]


class ScanPayload(BaseModel):
    """The JSON document a scan writes and a pipeline reads."""

    model_config = ConfigDict(populate_by_name=True)

    generated_at: datetime = Field(default_factory=utc_now, alias="generatedAt")
    label: str
    repos: list[str] = Field(default_factory=list)
    issues: list[IssueRecord | ScanError] = Field(default_factory=list)


class Success(BaseModel):
    """A work item whose worker returned normally."""

    status: Literal["success"] = "success"
    item: Any
    value: Any = None


class Failure(BaseModel):
    """A work item whose worker raised."""

    status: Literal["failure"] = "failure"
    item: Any
    reason: str


BatchOutcome = Annotated[Success | Failure, Field(discriminator="status")]


class TodoTicket(BaseModel):
    """A ticket destined to become a new issue."""

    title: str = Field(min_length=1)
    labels: list[str] = Field(default_factory=list)
    body: str = Field(min_length=1)


class PipelineRunSummary(BaseModel):
    """Counts accumulated over one pipeline run."""

    completed: int = 0
    failures: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def record_success(self) -> None:
        self.completed += 1

    def record_failure(self, ref: IssueRef, message: str) -> None:
        self.failures.append(f"{ref.tag}: {message}")
