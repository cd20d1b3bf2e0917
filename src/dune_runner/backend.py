from typing import Optional, Protocol, runtime_checkable

from dune_runner.models import (
    ExecutionParams,
    ExecutionResponse,
    ExecutionResultCSV,
    ExecutionStatus,
    GetResultParams,
    ResultsResponse,
)


@runtime_checkable
class ExecutionBackend(Protocol):
    """Protocol for the remote execution service consumed by the orchestration core."""

    async def execute_query(
        self, query_id: int, params: Optional[ExecutionParams] = None
    ) -> ExecutionResponse:
        """Submit a query for execution and return its execution handle."""
        ...

    async def get_execution_status(self, execution_id: str) -> ExecutionStatus:
        """Return the current status of an execution."""
        ...

    async def get_execution_results(
        self, execution_id: str, params: Optional[GetResultParams] = None
    ) -> ResultsResponse:
        """Return the first JSON result page of an execution."""
        ...

    async def get_execution_results_csv(
        self, execution_id: str, params: Optional[GetResultParams] = None
    ) -> ExecutionResultCSV:
        """Return the first CSV result page of an execution."""
        ...

    async def get_latest_results(
        self, query_id: int, params: Optional[GetResultParams] = None
    ) -> ResultsResponse:
        """Return the first JSON page of a query's most recent execution."""
        ...

    async def get_latest_results_csv(
        self, query_id: int, params: Optional[GetResultParams] = None
    ) -> ExecutionResultCSV:
        """Return the first CSV page of a query's most recent execution."""
        ...

    async def get_results_page(self, url: str) -> ResultsResponse:
        """Fetch a JSON continuation page by its absolute URL."""
        ...

    async def get_results_page_csv(self, url: str) -> ExecutionResultCSV:
        """Fetch a CSV continuation page by its absolute URL."""
        ...

    async def cancel_execution(self, execution_id: str) -> bool:
        """Cancel a running execution."""
        ...
