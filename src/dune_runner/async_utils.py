import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from dune_runner.errors import DuneError, ExecutionTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_deadline(
    awaitable: Awaitable[T],
    timeout_seconds: Optional[float],
    *,
    execution_id: str,
    cancel: Callable[[str], Awaitable[bool]],
) -> T:
    """Await ``awaitable`` for at most ``timeout_seconds`` on behalf of an execution.

    When the deadline passes the remote execution is cancelled through
    ``cancel`` and ``ExecutionTimeoutError`` is raised. A failed or refused
    cancellation is logged and never replaces the timeout error. A
    ``timeout_seconds`` of ``None`` waits indefinitely.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError as exc:
        logger.warning(
            "execution %s not finished after %s seconds, cancelling", execution_id, timeout_seconds
        )
        try:
            cancelled = await cancel(execution_id)
        except DuneError as cancel_exc:
            logger.warning("Timeout cancellation failed: %s", cancel_exc)
        else:
            if not cancelled:
                logger.warning("Timeout cancellation refused for execution %s", execution_id)
        raise ExecutionTimeoutError(
            f"execution {execution_id} not finished after {timeout_seconds} seconds",
            execution_id=execution_id,
        ) from exc
