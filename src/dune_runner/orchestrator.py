"""Submit an execution, wait for it to finish and collect every result page."""

import logging
from enum import Enum
from typing import FrozenSet, Optional, Union

from dune_runner.async_utils import with_deadline
from dune_runner.backend import ExecutionBackend
from dune_runner.constants import POLL_FREQUENCY_SECONDS
from dune_runner.errors import DuneError, IncompleteExecutionError
from dune_runner.models import (
    TERMINAL_STATES,
    ExecutionParams,
    ExecutionResultCSV,
    ExecutionState,
    ExecutionStatus,
    ResultsResponse,
)
from dune_runner.pagination import CsvPager, JsonPager, drain
from dune_runner.polling import poll_until_terminal

logger = logging.getLogger(__name__)


class ResultFormat(str, Enum):
    """Representation in which results are retrieved."""

    JSON = "json"
    CSV = "csv"


class ExecutionOrchestrator:
    """Drives one execution from submission to its aggregated result."""

    def __init__(
        self,
        backend: ExecutionBackend,
        terminal_states: FrozenSet[ExecutionState] = TERMINAL_STATES,
    ) -> None:
        """Initialize with the backend used for every remote call."""
        self._backend = backend
        self._terminal_states = terminal_states

    async def run_to_completion(
        self,
        query_id: int,
        params: Optional[ExecutionParams] = None,
        ping_frequency: float = POLL_FREQUENCY_SECONDS,
        result_format: ResultFormat = ResultFormat.JSON,
        *,
        timeout_seconds: Optional[float] = None,
    ) -> Union[ResultsResponse, ExecutionResultCSV]:
        """Execute ``query_id`` and return its complete result.

        Raises ``SubmissionError`` when the request is rejected and
        ``IncompleteExecutionError`` when the execution ends FAILED or
        CANCELLED. Nothing is retried.
        """
        logger.info("refreshing query %s with parameters %s", query_id, params)
        execution_id = None
        try:
            submission = await self._backend.execute_query(query_id, params)
            execution_id = submission.execution_id
            status = await self._wait_for_terminal(execution_id, ping_frequency, timeout_seconds)
            if status.state is not ExecutionState.COMPLETED:
                error = IncompleteExecutionError(execution_id, status.state, query_id=query_id)
                logger.error("%s", error)
                raise error
            return await self._fetch_results(execution_id, result_format)
        except DuneError as exc:
            exc.add_context(query_id=query_id, execution_id=execution_id)
            raise

    async def _wait_for_terminal(
        self, execution_id: str, ping_frequency: float, timeout_seconds: Optional[float]
    ) -> ExecutionStatus:
        polling = poll_until_terminal(
            self._backend.get_execution_status,
            execution_id,
            ping_frequency,
            terminal_states=self._terminal_states,
        )
        return await with_deadline(
            polling,
            timeout_seconds,
            execution_id=execution_id,
            cancel=self._backend.cancel_execution,
        )

    async def _fetch_results(
        self, execution_id: str, result_format: ResultFormat
    ) -> Union[ResultsResponse, ExecutionResultCSV]:
        if result_format is ResultFormat.CSV:
            first_page = await self._backend.get_execution_results_csv(execution_id)
            return await drain(first_page, CsvPager(self._backend.get_results_page_csv))
        first_page = await self._backend.get_execution_results(execution_id)
        return await drain(first_page, JsonPager(self._backend.get_results_page))
