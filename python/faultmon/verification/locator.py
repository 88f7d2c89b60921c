"""Binary search for the first output still inside its finalization window."""

from __future__ import annotations

from typing import Awaitable, Callable

import structlog

from faultmon.core.errors import OutputRetrievalError
from faultmon.core.types import OutputProposal

logger = structlog.get_logger()

OutputFetcher = Callable[[int], Awaitable[OutputProposal]]


async def find_first_unfinalized_index(
    fetch_output: OutputFetcher,
    total_outputs: int,
    finalization_window: int,
    current_time: int,
) -> int:
    """Return the smallest index whose output is not yet finalized.

    Outputs are appended in timestamp order, so "finalized" is monotonic over
    the index range and a binary search over ``[0, total_outputs)`` finds the
    boundary in O(log n) fetches. When nothing is posted, or every output is
    already finalized, the result is ``total_outputs``: the next index that
    will be proposed.
    """
    if total_outputs < 0:
        raise ValueError(f"total_outputs must be non-negative, got {total_outputs}")

    low, high = 0, total_outputs
    while low < high:
        mid = (low + high) // 2
        try:
            output = await fetch_output(mid)
        except Exception as e:
            raise OutputRetrievalError(mid, e) from e

        if output.is_finalized(finalization_window, current_time):
            low = mid + 1
        else:
            high = mid

    logger.info("first_unfinalized_output_index", index=low, total=total_outputs)
    return low
