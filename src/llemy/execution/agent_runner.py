"""Coding agent runner using the Codex CLI."""

import logging
from pathlib import Path

from ..common.errors import ExternalCommandError, ReadinessError
from .command_runner import CommandRunner

logger = logging.getLogger("llemy.agent")

EMPTY_SUMMARY = "Implementation completed. (No summary text returned)"


class CodexAgent:
    """
    Runs `codex exec` non-interactively against a working directory.

    The agent edits files in place; its stdout is taken as a free-text
    summary of what it did.
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        command: str = "codex",
        args_prefix: list[str] | None = None,
        timeout: float | None = 1800.0,
    ):
        self._runner = runner or CommandRunner()
        self._command = command
        self._args_prefix = list(args_prefix) if args_prefix is not None else ["--full-auto"]
        self._timeout = timeout

    async def ensure_ready(self) -> None:
        """Check that the codex CLI is installed."""
        try:
            await self._runner.run(self._command, ["--version"])
        except ExternalCommandError as e:
            raise ReadinessError(f"{self._command} CLI not available") from e

    async def implement(self, prompt: str, cwd: str | Path) -> str:
        """
        Run the agent on a prompt.

        Args:
            prompt: Implementation instructions.
            cwd: Directory the agent works in.

        Returns:
            The agent's completion summary.

        Raises:
            CommandTimeoutError: The agent ran past its timeout.
            ExternalCommandError: The agent failed.
        """
        args = ["exec", *self._args_prefix, "--cd", str(cwd), prompt]
        logger.info(f"Running {self._command} in {cwd} (timeout={self._timeout}s)")
        summary = await self._runner.run(self._command, args, timeout=self._timeout)
        return summary or EMPTY_SUMMARY
