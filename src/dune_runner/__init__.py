"""Async client for the Dune query execution API.

Runs saved queries, waits for their executions to finish and stitches paged
JSON or CSV results back together.
"""

from dune_runner.client import DuneClient
from dune_runner.config import DuneConfig
from dune_runner.errors import (
    DuneError,
    ExecutionTimeoutError,
    IncompleteExecutionError,
    MalformedResponseError,
    SubmissionError,
    TransportError,
)
from dune_runner.models import (
    ExecutionPerformance,
    ExecutionResultCSV,
    ExecutionState,
    QueryParameter,
    ResultsResponse,
)
from dune_runner.orchestrator import ResultFormat

__all__ = [
    "DuneClient",
    "DuneConfig",
    "DuneError",
    "ExecutionPerformance",
    "ExecutionResultCSV",
    "ExecutionState",
    "ExecutionTimeoutError",
    "IncompleteExecutionError",
    "MalformedResponseError",
    "QueryParameter",
    "ResultFormat",
    "ResultsResponse",
    "SubmissionError",
    "TransportError",
]
