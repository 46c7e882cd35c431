"""Error taxonomy for llemy.

Startup and readiness errors abort a run. Everything raised while a single
issue is being processed is caught by the pipeline and recorded against that
issue.
"""


class LlemyError(Exception):
    """Base class for all llemy errors."""


class ExternalCommandError(LlemyError):
    """An external program failed, was killed, or could not be started."""

    def __init__(self, program: str, args: list[str], detail: str):
        self.program = program
        self.args_list = list(args)
        self.detail = detail
        super().__init__(detail)


class CommandTimeoutError(ExternalCommandError, TimeoutError):
    """An external program ran past its timeout and was killed."""


class QueryError(LlemyError):
    """Structured output from an external source could not be parsed."""


class ValidationError(LlemyError):
    """A todo document is missing a required field."""


class RepositoryResolutionError(LlemyError):
    """No usable owner/name repository could be determined."""


class HandoffTimeoutError(LlemyError, TimeoutError):
    """A handoff artifact never appeared."""

    def __init__(self, path: str, attempts: int):
        self.path = path
        self.attempts = attempts
        super().__init__(f"Timeout waiting for {path} to be created (after {attempts} checks)")


class LabelUpdateError(LlemyError):
    """Both the label transition and the add-only fallback failed."""

    def __init__(self, tag: str, label: str, detail: str, removal_error: str | None = None):
        self.tag = tag
        self.label = label
        self.detail = detail
        self.removal_error = removal_error
        message = f"Failed to add label {label} to {tag}: {detail}"
        if removal_error:
            message += f" (transition error: {removal_error})"
        super().__init__(message)


class ReadinessError(LlemyError):
    """A required external tool is missing or not authenticated."""


class ScanPayloadError(LlemyError):
    """The scan payload file is missing, malformed, or empty."""


class TicketGenerationError(LlemyError):
    """The hosted LLM did not return a usable ticket."""
