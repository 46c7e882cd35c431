"""Bounded fan-out over work items.

Items are processed in contiguous batches. Batches run one after another;
items inside a batch run concurrently and the batch ends only when every
item has settled. This caps in-flight calls at the batch size.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from ..common.models import BatchOutcome, Failure, Success

logger = logging.getLogger("llemy.batching")

T = TypeVar("T")


async def run_batches(
    items: Sequence[T],
    batch_size: int,
    worker: Callable[[T], Awaitable[Any]],
) -> list[BatchOutcome]:
    """
    Apply worker to every item, batch_size at a time.

    Args:
        items: Work items, in order.
        batch_size: Maximum number of concurrent worker calls.
        worker: Coroutine function called exactly once per item.

    Returns:
        One Success or Failure per item, in item order.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")

    outcomes: list[BatchOutcome] = []
    total = (len(items) + batch_size - 1) // batch_size

    for index, start in enumerate(range(0, len(items), batch_size), start=1):
        batch = items[start : start + batch_size]
        logger.debug(f"Batch {index}/{total}: {len(batch)} items")

        settled = await asyncio.gather(
            *(worker(item) for item in batch),
            return_exceptions=True,
        )

        for item, result in zip(batch, settled):
            if isinstance(result, Exception):
                outcomes.append(Failure(item=item, reason=str(result) or type(result).__name__))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(Success(item=item, value=result))

    return outcomes
