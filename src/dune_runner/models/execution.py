"""Execution lifecycle and result payload models."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExecutionState(str, Enum):
    """Lifecycle states reported by the execution API."""

    PENDING = "QUERY_STATE_PENDING"
    RUNNING = "QUERY_STATE_EXECUTING"
    COMPLETED = "QUERY_STATE_COMPLETED"
    FAILED = "QUERY_STATE_FAILED"
    CANCELLED = "QUERY_STATE_CANCELLED"
    EXPIRED = "QUERY_STATE_EXPIRED"

    def is_terminal(self, terminal_states: Optional[FrozenSet["ExecutionState"]] = None) -> bool:
        """Return True when no further transitions are expected."""
        return self in (TERMINAL_STATES if terminal_states is None else terminal_states)


# EXPIRED is deliberately absent: see DESIGN.md, "EXPIRED state handling".
TERMINAL_STATES: FrozenSet[ExecutionState] = frozenset(
    {ExecutionState.COMPLETED, ExecutionState.FAILED, ExecutionState.CANCELLED}
)


class ExecutionPerformance(str, Enum):
    """Execution engine tier requested on submission."""

    MEDIUM = "medium"
    LARGE = "large"


class ExecutionResponse(BaseModel):
    """Acknowledgement returned when an execution is submitted."""

    model_config = ConfigDict(frozen=True)

    execution_id: str
    state: ExecutionState


class ExecutionTimes(BaseModel):
    """Timestamps shared by status and result payloads."""

    submitted_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    execution_started_at: Optional[datetime] = None
    execution_ended_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None


class ResultMetadata(BaseModel):
    """Column and size descriptors for a result set."""

    column_names: List[str] = Field(default_factory=list)
    column_types: List[str] = Field(default_factory=list)
    row_count: Optional[int] = None
    result_set_bytes: Optional[int] = None
    total_row_count: Optional[int] = None
    total_result_set_bytes: Optional[int] = None
    datapoint_count: Optional[int] = None
    pending_time_millis: Optional[int] = None
    execution_time_millis: Optional[int] = None


class ExecutionStatus(ExecutionTimes):
    """Status snapshot of a single execution."""

    execution_id: str
    query_id: int
    state: ExecutionState
    is_execution_finished: Optional[bool] = None
    queue_position: Optional[int] = None
    result_metadata: Optional[ResultMetadata] = None


class ExecutionResult(BaseModel):
    """Rows and metadata carried by a JSON result page."""

    rows: List[Dict[str, Any]] = Field(default_factory=list)
    metadata: Optional[ResultMetadata] = None


class ResultsResponse(ExecutionTimes):
    """One JSON result page, or the aggregate of every page of an execution.

    ``next_uri`` is the absolute address of the following page; when it is
    ``None`` this page is the last one.
    """

    execution_id: str
    query_id: int
    state: ExecutionState
    is_execution_finished: Optional[bool] = None
    result: Optional[ExecutionResult] = None
    next_uri: Optional[str] = None
    next_offset: Optional[int] = None

    def get_rows(self) -> List[Dict[str, Any]]:
        """Return the result rows, or an empty list when no result is attached."""
        if self.result is None:
            return []
        return self.result.rows


class ExecutionResultCSV(BaseModel):
    """One CSV result page, or the concatenated text of every page."""

    data: str
    next_uri: Optional[str] = None
    next_offset: Optional[int] = None
