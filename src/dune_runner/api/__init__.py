"""HTTP route groups of the Dune API."""

from .execution import ExecutionAPI
from .query import QueryAPI
from .router import Router

__all__ = ["ExecutionAPI", "QueryAPI", "Router"]
