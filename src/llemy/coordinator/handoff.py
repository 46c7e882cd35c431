"""Waiting on artifacts produced outside the process.

The planner hands a plan file to a human or a separate agent and blocks
until the matching todo file shows up. The wait is bounded.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from ..common.errors import HandoffTimeoutError

logger = logging.getLogger("llemy.handoff")


class HandoffWaiter:
    """Polls for a file until it exists or the attempts run out."""

    def __init__(
        self,
        poll_interval: float = 5.0,
        max_attempts: int = 120,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        exists: Callable[[Path], bool] | None = None,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self._poll_interval = poll_interval
        self._max_attempts = max_attempts
        self._sleep = sleep
        self._exists = exists or Path.exists

    async def wait_for(self, path: str | Path) -> Path:
        """
        Block until path exists.

        Each attempt is one existence check; the waiter sleeps between
        checks, never after the last one.

        Returns:
            The path, once it exists.

        Raises:
            HandoffTimeoutError: Still missing after max_attempts checks.
        """
        path = Path(path)
        for attempt in range(1, self._max_attempts + 1):
            if self._exists(path):
                logger.debug(f"{path} found after {attempt} checks")
                return path
            if attempt < self._max_attempts:
                await self._sleep(self._poll_interval)

        raise HandoffTimeoutError(str(path), self._max_attempts)
