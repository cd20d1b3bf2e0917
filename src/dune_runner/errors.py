"""Typed failures raised by the Dune client.

Every error carries the query and execution it belongs to when known. Callers
layered above the client decide whether to retry; nothing in this package
retries on their behalf.
"""

from __future__ import annotations

from typing import Optional

from dune_runner.models.execution import ExecutionState


class DuneError(RuntimeError):
    """Base class for all client failures."""

    def __init__(
        self,
        message: str,
        *,
        query_id: Optional[int] = None,
        execution_id: Optional[str] = None,
    ) -> None:
        """Attach optional query/execution context to the error."""
        super().__init__(message)
        self.message = message
        self.query_id = query_id
        self.execution_id = execution_id

    def add_context(
        self, *, query_id: Optional[int] = None, execution_id: Optional[str] = None
    ) -> "DuneError":
        """Fill in context that is not already set and return the same error."""
        if self.query_id is None and query_id is not None:
            self.query_id = query_id
        if self.execution_id is None and execution_id is not None:
            self.execution_id = execution_id
        return self

    def __str__(self) -> str:
        context = []
        if self.query_id is not None:
            context.append(f"query_id={self.query_id}")
        if self.execution_id is not None:
            context.append(f"execution_id={self.execution_id}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class SubmissionError(DuneError):
    """Raised when the API rejects an execution request."""


class TransportError(DuneError):
    """Raised on network failures and HTTP error responses."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        query_id: Optional[int] = None,
        execution_id: Optional[str] = None,
    ) -> None:
        """Record the HTTP status code when a response was received."""
        super().__init__(message, query_id=query_id, execution_id=execution_id)
        self.status_code = status_code


class MalformedResponseError(DuneError):
    """Raised when a response payload or its pagination headers cannot be parsed."""


class IncompleteExecutionError(DuneError):
    """Raised when an execution reaches a terminal state other than COMPLETED."""

    def __init__(
        self, execution_id: str, state: ExecutionState, *, query_id: Optional[int] = None
    ) -> None:
        """Build the canonical message for an unsuccessful terminal state."""
        super().__init__(
            f"refresh (execution {execution_id}) yields incomplete terminal state {state.value}",
            query_id=query_id,
            execution_id=execution_id,
        )
        self.state = state


class ExecutionTimeoutError(DuneError):
    """Raised when an optional polling deadline elapses before a terminal state."""
