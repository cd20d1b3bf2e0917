"""Query parameters and request payload encoders."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator

from dune_runner.models.execution import ExecutionPerformance

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ParameterType(str, Enum):
    """Supported query parameter kinds."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    ENUM = "enum"


class QueryParameter(BaseModel):
    """A single named query parameter."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: ParameterType
    value: str

    @classmethod
    def text(cls, name: str, value: str) -> "QueryParameter":
        """Build a text parameter."""
        return cls(name=name, type=ParameterType.TEXT, value=value)

    @classmethod
    def number(cls, name: str, value: Union[int, float, str]) -> "QueryParameter":
        """Build a number parameter."""
        return cls(name=name, type=ParameterType.NUMBER, value=str(value))

    @classmethod
    def date(cls, name: str, value: Union[datetime, str]) -> "QueryParameter":
        """Build a date parameter, formatting datetimes the way the API expects."""
        if isinstance(value, datetime):
            value = value.strftime(DATE_FORMAT)
        return cls(name=name, type=ParameterType.DATE, value=value)

    @classmethod
    def enum(cls, name: str, value: str) -> "QueryParameter":
        """Build an enum (list) parameter."""
        return cls(name=name, type=ParameterType.ENUM, value=value)

    def to_dict(self) -> Dict[str, str]:
        """Return the query-definition representation used by the CRUD endpoints."""
        return {"key": self.name, "type": self.type.value, "value": self.value}


def _ensure_unique_names(
    parameters: Tuple[QueryParameter, ...],
) -> Tuple[QueryParameter, ...]:
    seen = set()
    duplicates = []
    for parameter in parameters:
        if parameter.name in seen:
            duplicates.append(parameter.name)
        seen.add(parameter.name)
    if duplicates:
        raise ValueError(f"Duplicate query parameter names: {', '.join(sorted(set(duplicates)))}")
    return parameters


class ExecutionParams(BaseModel):
    """Optional parameters for a query execution."""

    model_config = ConfigDict(frozen=True)

    query_parameters: Tuple[QueryParameter, ...] = ()
    performance: ExecutionPerformance = ExecutionPerformance.MEDIUM

    @field_validator("query_parameters")
    @classmethod
    def check_unique_names(cls, value: Tuple[QueryParameter, ...]) -> Tuple[QueryParameter, ...]:
        return _ensure_unique_names(value)

    @classmethod
    def build(
        cls,
        parameters: Optional[Sequence[QueryParameter]] = None,
        performance: ExecutionPerformance = ExecutionPerformance.MEDIUM,
    ) -> "ExecutionParams":
        """Build execution params from an optional parameter sequence."""
        return cls(query_parameters=tuple(parameters or ()), performance=performance)

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON body for the execute endpoint."""
        return {
            "query_parameters": {p.name: p.value for p in self.query_parameters},
            "performance": self.performance.value,
        }


class GetResultParams(BaseModel):
    """Filters and paging hints for result endpoints."""

    model_config = ConfigDict(frozen=True)

    query_parameters: Tuple[QueryParameter, ...] = ()
    limit: Optional[int] = None
    offset: Optional[int] = None

    @field_validator("query_parameters")
    @classmethod
    def check_unique_names(cls, value: Tuple[QueryParameter, ...]) -> Tuple[QueryParameter, ...]:
        return _ensure_unique_names(value)

    def to_search_params(self) -> Dict[str, Any]:
        """Return URL search params; each parameter is sent as ``params.<name>``."""
        search: Dict[str, Any] = {}
        if self.limit is not None:
            search["limit"] = self.limit
        if self.offset is not None:
            search["offset"] = self.offset
        for parameter in self.query_parameters:
            search[f"params.{parameter.name}"] = parameter.value
        return search
