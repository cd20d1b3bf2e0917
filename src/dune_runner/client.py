import logging
from typing import Optional, Sequence

import httpx

from dune_runner.api import ExecutionAPI, QueryAPI
from dune_runner.config import DuneConfig
from dune_runner.constants import (
    BASE_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    POLL_FREQUENCY_SECONDS,
    THREE_MONTHS_IN_HOURS,
)
from dune_runner.freshness import FreshnessAwareFetcher
from dune_runner.models import (
    ExecutionParams,
    ExecutionPerformance,
    ExecutionResultCSV,
    QueryParameter,
    ResultsResponse,
)
from dune_runner.orchestrator import ExecutionOrchestrator, ResultFormat

logger = logging.getLogger(__name__)


class DuneClient:
    """Entry point for running queries and reading their results.

    ``execution`` and ``query`` expose the raw route groups; the methods on
    this class add polling, pagination and freshness handling on top.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = BASE_URL,
        *,
        request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        poll_interval_seconds: float = POLL_FREQUENCY_SECONDS,
        max_age_hours: float = THREE_MONTHS_IN_HOURS,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the route groups over one shared HTTP client."""
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=request_timeout_seconds)
        self._poll_interval_seconds = poll_interval_seconds
        self._max_age_hours = max_age_hours

        self.execution = ExecutionAPI(api_key, base_url, http_client=self._http_client)
        self.query = QueryAPI(api_key, base_url, http_client=self._http_client)
        self._orchestrator = ExecutionOrchestrator(self.execution)
        self._fetcher = FreshnessAwareFetcher(self.execution, self._orchestrator)

    @classmethod
    def from_config(
        cls, config: DuneConfig, http_client: Optional[httpx.AsyncClient] = None
    ) -> "DuneClient":
        """Build a client from a ``DuneConfig``."""
        return cls(
            config.api_key,
            config.base_url,
            request_timeout_seconds=config.request_timeout_seconds,
            poll_interval_seconds=config.poll_interval_seconds,
            max_age_hours=config.max_age_hours,
            http_client=http_client,
        )

    @classmethod
    def from_env(cls, http_client: Optional[httpx.AsyncClient] = None) -> "DuneClient":
        """Build a client from ``DUNE_*`` environment variables."""
        return cls.from_config(DuneConfig.from_env(), http_client=http_client)

    async def aclose(self) -> None:
        """Release the HTTP connection pool when this client created it."""
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "DuneClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def run_query(
        self,
        query_id: int,
        parameters: Optional[Sequence[QueryParameter]] = None,
        *,
        performance: ExecutionPerformance = ExecutionPerformance.MEDIUM,
        ping_frequency: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
    ) -> ResultsResponse:
        """Execute a query and return all of its JSON result rows."""
        return await self._orchestrator.run_to_completion(
            query_id,
            ExecutionParams.build(parameters, performance),
            self._ping_frequency(ping_frequency),
            ResultFormat.JSON,
            timeout_seconds=timeout_seconds,
        )

    async def run_query_csv(
        self,
        query_id: int,
        parameters: Optional[Sequence[QueryParameter]] = None,
        *,
        performance: ExecutionPerformance = ExecutionPerformance.MEDIUM,
        ping_frequency: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
    ) -> ExecutionResultCSV:
        """Execute a query and return all of its results as CSV text."""
        return await self._orchestrator.run_to_completion(
            query_id,
            ExecutionParams.build(parameters, performance),
            self._ping_frequency(ping_frequency),
            ResultFormat.CSV,
            timeout_seconds=timeout_seconds,
        )

    async def get_latest_result(
        self,
        query_id: int,
        parameters: Optional[Sequence[QueryParameter]] = None,
        max_age_hours: Optional[float] = None,
    ) -> ResultsResponse:
        """Return the latest results, re-running the query if they are too old.

        Args:
            query_id: Query to get results of.
            parameters: Parameters the results were computed for.
            max_age_hours: Oldest acceptable results; older ones are refreshed.
        """
        return await self._fetcher.get_latest(
            query_id,
            parameters,
            self._max_age(max_age_hours),
            ResultFormat.JSON,
            ping_frequency=self._poll_interval_seconds,
        )

    async def get_latest_result_csv(
        self,
        query_id: int,
        parameters: Optional[Sequence[QueryParameter]] = None,
        max_age_hours: Optional[float] = None,
    ) -> ExecutionResultCSV:
        """Return the latest results in CSV format, re-running the query if they are too old."""
        return await self._fetcher.get_latest(
            query_id,
            parameters,
            self._max_age(max_age_hours),
            ResultFormat.CSV,
            ping_frequency=self._poll_interval_seconds,
        )

    def _ping_frequency(self, ping_frequency: Optional[float]) -> float:
        return self._poll_interval_seconds if ping_frequency is None else ping_frequency

    def _max_age(self, max_age_hours: Optional[float]) -> float:
        return self._max_age_hours if max_age_hours is None else max_age_hours
