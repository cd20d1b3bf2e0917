"""Request and response models for the Dune API."""

from .execution import (
    TERMINAL_STATES,
    ExecutionPerformance,
    ExecutionResponse,
    ExecutionResult,
    ExecutionResultCSV,
    ExecutionState,
    ExecutionStatus,
    ExecutionTimes,
    ResultMetadata,
    ResultsResponse,
)
from .parameters import ExecutionParams, GetResultParams, ParameterType, QueryParameter
from .query import CreateQueryResponse, DuneQuery

__all__ = [
    "CreateQueryResponse",
    "DuneQuery",
    "ExecutionParams",
    "ExecutionPerformance",
    "ExecutionResponse",
    "ExecutionResult",
    "ExecutionResultCSV",
    "ExecutionState",
    "ExecutionStatus",
    "ExecutionTimes",
    "GetResultParams",
    "ParameterType",
    "QueryParameter",
    "ResultMetadata",
    "ResultsResponse",
    "TERMINAL_STATES",
]
