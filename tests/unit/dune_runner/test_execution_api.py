import json

import httpx
import pytest

from dune_runner.api import ExecutionAPI
from dune_runner.errors import MalformedResponseError, SubmissionError, TransportError
from dune_runner.models import (
    ExecutionParams,
    ExecutionState,
    GetResultParams,
    QueryParameter,
)
from dune_runner.pagination import CsvPager, JsonPager, drain

BASE = "https://api.dune.com/api/v1"


def _page(execution_id, rows, next_uri=None, column="n"):
    body = {
        "execution_id": execution_id,
        "query_id": 1,
        "state": "QUERY_STATE_COMPLETED",
        "result": {"rows": rows, "metadata": {"column_names": [column]}},
    }
    if next_uri:
        body["next_uri"] = next_uri
        body["next_offset"] = len(rows)
    return body


def _api(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ExecutionAPI("secret", BASE, http_client=client)


@pytest.mark.asyncio
async def test_execute_query_posts_parameters_and_tier():
    """Execution requests carry the API key, parameters and performance tier."""
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"execution_id": "e-1", "state": "QUERY_STATE_PENDING"})

    api = _api(handler)
    response = await api.execute_query(
        42, ExecutionParams.build([QueryParameter.text("wallet", "0x1")])
    )

    assert response.execution_id == "e-1"
    assert response.state is ExecutionState.PENDING
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == f"{BASE}/query/42/execute"
    assert request.headers["X-Dune-Api-Key"] == "secret"
    assert json.loads(request.content) == {
        "query_parameters": {"wallet": "0x1"},
        "performance": "medium",
    }


@pytest.mark.asyncio
async def test_rejected_execution_raises_submission_error():
    """HTTP rejections of the execute call are submission errors."""

    def handler(request):
        return httpx.Response(404, json={"error": "Query not found"})

    with pytest.raises(SubmissionError, match="Query not found") as exc_info:
        await _api(handler).execute_query(0)

    assert exc_info.value.query_id == 0
    assert isinstance(exc_info.value.__cause__, TransportError)
    assert exc_info.value.__cause__.status_code == 404


@pytest.mark.asyncio
async def test_network_failure_on_execute_stays_transport_error():
    """Failures without a response are transport errors, not rejections."""

    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as exc_info:
        await _api(handler).execute_query(1)

    assert not isinstance(exc_info.value, SubmissionError)
    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_status_error_payload_raises_transport_error():
    """An error body is surfaced even with a success status code."""

    def handler(request):
        return httpx.Response(200, json={"error": {"type": "invalid_api_key"}})

    with pytest.raises(TransportError, match="invalid_api_key"):
        await _api(handler).get_execution_status("e-1")


@pytest.mark.asyncio
async def test_get_execution_status():
    """Status responses are parsed into ExecutionStatus."""

    def handler(request):
        assert str(request.url) == f"{BASE}/execution/e-9/status"
        return httpx.Response(
            200,
            json={
                "execution_id": "e-9",
                "query_id": 5,
                "state": "QUERY_STATE_EXECUTING",
                "queue_position": 3,
            },
        )

    status = await _api(handler).get_execution_status("e-9")

    assert status.state is ExecutionState.RUNNING
    assert status.queue_position == 3


@pytest.mark.asyncio
async def test_invalid_json_is_malformed():
    """Undecodable bodies raise MalformedResponseError."""

    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>")

    with pytest.raises(MalformedResponseError):
        await _api(handler).get_execution_results("e-1")


@pytest.mark.asyncio
async def test_unexpected_payload_shape_is_malformed():
    """Bodies that do not validate raise MalformedResponseError."""

    def handler(request):
        return httpx.Response(200, json={"execution_id": "e-1", "state": "NOT_A_STATE"})

    with pytest.raises(MalformedResponseError, match="ExecutionStatus"):
        await _api(handler).get_execution_status("e-1")


@pytest.mark.asyncio
async def test_latest_results_follow_absolute_next_uri():
    """Continuation pages are requested at the server-supplied address."""
    next_uri = "https://api.dune.com/api/v1/execution/e-7/results?offset=2&limit=2"
    requested = []

    def handler(request):
        requested.append(request.url)
        if request.url.path == "/api/v1/query/9/results":
            return httpx.Response(200, json=_page("e-7", [{"n": 0}, {"n": 1}], next_uri))
        return httpx.Response(200, json=_page("e-7", [{"n": 2}], column="ignored"))

    api = _api(handler)
    first = await api.get_latest_results(
        9, GetResultParams(query_parameters=[QueryParameter.text("chain", "base")])
    )
    result = await drain(first, JsonPager(api.get_results_page))

    assert [row["n"] for row in result.get_rows()] == [0, 1, 2]
    assert result.result.metadata.column_names == ["n"]
    assert requested[0].params["params.chain"] == "base"
    assert str(requested[1]) == next_uri


@pytest.mark.asyncio
async def test_csv_pages_read_continuation_headers():
    """CSV continuation comes from response headers."""
    next_uri = f"{BASE}/execution/e-3/results/csv?offset=1"

    def handler(request):
        if request.url.path.endswith("/execution/e-3/results/csv") and not request.url.params:
            return httpx.Response(
                200,
                text="a,b\n1,2\n",
                headers={"x-dune-next-uri": next_uri, "x-dune-next-offset": "1"},
            )
        return httpx.Response(200, text="3,4\n")

    api = _api(handler)
    first = await api.get_execution_results_csv("e-3")
    last = await api.get_results_page_csv(first.next_uri)

    assert first.data == "a,b\n1,2\n"
    assert first.next_uri == next_uri
    assert first.next_offset == 1
    assert last.data == "3,4\n"
    assert last.next_uri is None
    assert last.next_offset is None


@pytest.mark.asyncio
async def test_latest_csv_pages_drain_through_header_links():
    """Latest CSV results stitch every page linked by the continuation headers."""
    next_uri = f"{BASE}/query/4/results/csv?offset=1"

    def handler(request):
        if "offset" not in request.url.params:
            return httpx.Response(200, text="x\n1\n", headers={"x-dune-next-uri": next_uri})
        return httpx.Response(200, text="2\n")

    api = _api(handler)
    first = await api.get_latest_results_csv(4)
    result = await drain(first, CsvPager(api.get_results_page_csv))

    assert result.data == "x\n1\n2\n"


@pytest.mark.asyncio
async def test_invalid_csv_offset_header_is_malformed():
    """A non-numeric offset hint cannot be trusted."""

    def handler(request):
        return httpx.Response(200, text="a\n", headers={"x-dune-next-offset": "soon"})

    with pytest.raises(MalformedResponseError, match="x-dune-next-offset"):
        await _api(handler).get_latest_results_csv(1)


@pytest.mark.asyncio
async def test_cancel_execution():
    """Cancellation returns the API's success flag."""

    def handler(request):
        assert request.method == "POST"
        assert request.url.path == "/api/v1/execution/e-1/cancel"
        return httpx.Response(200, json={"success": True})

    assert await _api(handler).cancel_execution("e-1") is True
