"""Live checks against the Dune API (RUN_INTEGRATION_TESTS=1 and TEST_DUNE_API_KEY required)."""

import os

import pytest

from dune_runner import DuneClient, QueryParameter

pytestmark = pytest.mark.integration

# Public query exposing text, number, date and enum parameters.
PARAMETERIZED_QUERY_ID = 1215383


@pytest.fixture
def api_key():
    """Key for the live API; DUNE_* variables are cleared for every test."""
    key = os.getenv("TEST_DUNE_API_KEY")
    if not key:
        pytest.skip("TEST_DUNE_API_KEY not set")
    return key


@pytest.mark.asyncio
async def test_run_query_with_parameters(api_key):
    """A parameterized query runs to completion and returns rows."""
    parameters = [
        QueryParameter.text("TextField", "Plain Text"),
        QueryParameter.number("NumberField", 3.1415926535),
        QueryParameter.date("DateField", "2022-05-04 00:00:00"),
        QueryParameter.enum("ListField", "Option 1"),
    ]
    async with DuneClient(api_key) as client:
        result = await client.run_query(PARAMETERIZED_QUERY_ID, parameters)

    assert result.get_rows()
    assert result.next_uri is None


@pytest.mark.asyncio
async def test_latest_result_csv(api_key):
    """Latest results are available as CSV text."""
    async with DuneClient(api_key) as client:
        result = await client.get_latest_result_csv(PARAMETERIZED_QUERY_ID)

    assert result.data
    assert result.next_uri is None
