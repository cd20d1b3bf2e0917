import asyncio
import logging
from typing import Awaitable, Callable, FrozenSet

from dune_runner.models import TERMINAL_STATES, ExecutionState, ExecutionStatus

logger = logging.getLogger(__name__)

_sleep = asyncio.sleep


async def poll_until_terminal(
    get_status: Callable[[str], Awaitable[ExecutionStatus]],
    execution_id: str,
    interval_seconds: float,
    *,
    terminal_states: FrozenSet[ExecutionState] = TERMINAL_STATES,
) -> ExecutionStatus:
    """Check an execution's status every ``interval_seconds`` until it is terminal.

    The loop has no retry cap or deadline of its own; wrap the call with
    ``with_deadline`` or cancel the awaiting task to stop it early. Success and
    failure are not distinguished here, only terminality.
    """
    status = await get_status(execution_id)
    while not status.state.is_terminal(terminal_states):
        if status.state is ExecutionState.EXPIRED:
            logger.warning(
                "execution %s reported %s, which is not treated as terminal; still polling",
                execution_id,
                status.state.value,
            )
        logger.info(
            "waiting for query execution %s to complete: current state %s",
            execution_id,
            status.state.value,
        )
        await _sleep(interval_seconds)
        status = await get_status(execution_id)
    return status
