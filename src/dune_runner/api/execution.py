import logging
from typing import Optional

from dune_runner.api.router import Router, parse_model
from dune_runner.errors import SubmissionError, TransportError
from dune_runner.models import (
    ExecutionParams,
    ExecutionResponse,
    ExecutionResultCSV,
    ExecutionStatus,
    GetResultParams,
    ResultsResponse,
)

logger = logging.getLogger(__name__)


def _search_params(params: Optional[GetResultParams]) -> dict:
    return params.to_search_params() if params is not None else {}


class ExecutionAPI(Router):
    """Execution routes of the Dune API: https://docs.dune.com/api-reference/executions."""

    async def execute_query(
        self, query_id: int, params: Optional[ExecutionParams] = None
    ) -> ExecutionResponse:
        """Submit a query for execution."""
        payload = (params or ExecutionParams()).to_payload()
        try:
            body = await self._post(f"query/{query_id}/execute", payload)
        except TransportError as exc:
            if exc.status_code is None:
                raise
            raise SubmissionError(
                f"execution request for query {query_id} rejected: {exc.message}",
                query_id=query_id,
            ) from exc
        response = parse_model(ExecutionResponse, body)
        logger.debug("execute response %s", response)
        return response

    async def cancel_execution(self, execution_id: str) -> bool:
        """Cancel an execution; returns the API's success flag."""
        body = await self._post(f"execution/{execution_id}/cancel")
        return bool(body.get("success", False)) if isinstance(body, dict) else False

    async def get_execution_status(self, execution_id: str) -> ExecutionStatus:
        """Return the status of an execution."""
        body = await self._get(f"execution/{execution_id}/status")
        return parse_model(ExecutionStatus, body)

    async def get_execution_results(
        self, execution_id: str, params: Optional[GetResultParams] = None
    ) -> ResultsResponse:
        """Return the first JSON page of an execution's results."""
        body = await self._get(f"execution/{execution_id}/results", _search_params(params))
        return parse_model(ResultsResponse, body)

    async def get_execution_results_csv(
        self, execution_id: str, params: Optional[GetResultParams] = None
    ) -> ExecutionResultCSV:
        """Return the first CSV page of an execution's results."""
        return await self._get_csv(f"execution/{execution_id}/results/csv", _search_params(params))

    async def get_latest_results(
        self, query_id: int, params: Optional[GetResultParams] = None
    ) -> ResultsResponse:
        """Return the first JSON page of a query's latest execution results."""
        body = await self._get(f"query/{query_id}/results", _search_params(params))
        return parse_model(ResultsResponse, body)

    async def get_latest_results_csv(
        self, query_id: int, params: Optional[GetResultParams] = None
    ) -> ExecutionResultCSV:
        """Return the first CSV page of a query's latest execution results."""
        return await self._get_csv(f"query/{query_id}/results/csv", _search_params(params))

    async def get_results_page(self, url: str) -> ResultsResponse:
        """Fetch a JSON continuation page."""
        return parse_model(ResultsResponse, await self._get_by_url(url))

    async def get_results_page_csv(self, url: str) -> ExecutionResultCSV:
        """Fetch a CSV continuation page."""
        return await self._get_csv_by_url(url)
