"""Saved query definitions returned by the query CRUD endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class DuneQuery(BaseModel):
    """A saved query and its settings."""

    query_id: int
    name: str
    query_sql: str
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    version: Optional[int] = None
    parameters: List[Dict[str, Any]] = Field(default_factory=list)
    query_engine: Optional[str] = None
    owner: Optional[str] = None
    is_private: bool = False
    is_archived: bool = False
    is_unsaved: bool = False


class CreateQueryResponse(BaseModel):
    """Identifier echoed by create, update and visibility endpoints."""

    query_id: int
