"""Async execution of external programs."""

import asyncio
import contextlib
import logging
import os
from pathlib import Path

from ..common.errors import CommandTimeoutError, ExternalCommandError

logger = logging.getLogger("llemy.commands")


class CommandRunner:
    """
    Runs one external program per call and returns its trimmed stdout.

    The child inherits the runner's working directory and environment,
    which default to the current process's.
    """

    def __init__(self, cwd: str | Path | None = None, env: dict[str, str] | None = None):
        self._cwd = Path(cwd) if cwd else None
        self._env = env

    async def run(
        self,
        program: str,
        args: list[str],
        timeout: float | None = None,
    ) -> str:
        """
        Run a program to completion.

        Args:
            program: Executable name or path.
            args: Arguments passed verbatim (no shell).
            timeout: Seconds before the child is killed.

        Returns:
            Standard output with surrounding whitespace removed.

        Raises:
            CommandTimeoutError: The timeout elapsed.
            ExternalCommandError: Non-zero exit, signal, or spawn failure.
        """
        logger.debug(f"Running {program} {' '.join(args[:3])}")
        try:
            process = await asyncio.create_subprocess_exec(
                program,
                *args,
                cwd=self._cwd,
                env=self._env if self._env is not None else os.environ.copy(),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ExternalCommandError(program, args, f"Failed to start {program}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            raise CommandTimeoutError(
                program, args, f"{program} timed out after {timeout:g}s"
            ) from None

        out = stdout.decode("utf-8", errors="replace").strip()
        if process.returncode != 0:
            err = stderr.decode("utf-8", errors="replace").strip()
            if process.returncode < 0:
                status = f"{program} exited due to signal {-process.returncode}"
            else:
                status = f"{program} exited with status {process.returncode}"
            raise ExternalCommandError(program, args, err or out or status)

        return out
