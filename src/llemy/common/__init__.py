"""Common models and errors for llemy."""

from .errors import (
    CommandTimeoutError,
    ExternalCommandError,
    HandoffTimeoutError,
    LabelUpdateError,
    LlemyError,
    QueryError,
    ReadinessError,
    RepositoryResolutionError,
    ScanPayloadError,
    TicketGenerationError,
    ValidationError,
)
from .models import (
    BatchOutcome,
    Failure,
    IssueRecord,
    IssueRef,
    PipelineRunSummary,
    ScanError,
    ScanPayload,
    ScanResult,
    Success,
    TodoTicket,
    repo_slug,
    utc_now,
)

__all__ = [
    # Models
    "BatchOutcome",
    "Failure",
    "IssueRecord",
    "IssueRef",
    "PipelineRunSummary",
    "ScanError",
    "ScanPayload",
    "ScanResult",
    "Success",
    "TodoTicket",
    "repo_slug",
    "utc_now",
    # Errors
    "CommandTimeoutError",
    "ExternalCommandError",
    "HandoffTimeoutError",
    "LabelUpdateError",
    "LlemyError",
    "QueryError",
    "ReadinessError",
    "RepositoryResolutionError",
    "ScanPayloadError",
    "TicketGenerationError",
    "ValidationError",
]
