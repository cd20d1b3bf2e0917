import logging
from typing import Any, Dict, List, Optional, Sequence

from dune_runner.api.router import Router, parse_model
from dune_runner.errors import DuneError
from dune_runner.models import CreateQueryResponse, DuneQuery, QueryParameter

logger = logging.getLogger(__name__)


class QueryAPI(Router):
    """Saved-query routes of the Dune API: https://docs.dune.com/api-reference/queries."""

    async def create_query(
        self,
        name: str,
        query_sql: str,
        params: Optional[Sequence[QueryParameter]] = None,
        is_private: bool = False,
    ) -> DuneQuery:
        """Create a saved query and return its definition."""
        payload = {
            "name": name,
            "query_sql": query_sql,
            "is_private": is_private,
            "parameters": [p.to_dict() for p in params or ()],
        }
        created = parse_model(CreateQueryResponse, await self._post("query", payload))
        return await self.get_query(created.query_id)

    async def get_query(self, query_id: int) -> DuneQuery:
        """Retrieve a saved query by ID."""
        return parse_model(DuneQuery, await self._get(f"query/{query_id}"))

    async def update_query(
        self,
        query_id: int,
        name: Optional[str] = None,
        query_sql: Optional[str] = None,
        params: Optional[Sequence[QueryParameter]] = None,
        description: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> int:
        """Update the given fields of a saved query and return its ID."""
        payload: Dict[str, Any] = {}
        if name is not None:
            payload["name"] = name
        if description is not None:
            payload["description"] = description
        if tags is not None:
            payload["tags"] = tags
        if query_sql is not None:
            payload["query_sql"] = query_sql
        if params is not None:
            payload["parameters"] = [p.to_dict() for p in params]

        if not payload:
            logger.warning("Called update_query with no proposed changes.")
            return query_id

        response = parse_model(CreateQueryResponse, await self._patch(f"query/{query_id}", payload))
        return response.query_id

    async def archive_query(self, query_id: int) -> bool:
        """Archive a query and return its resulting archived flag."""
        response = parse_model(CreateQueryResponse, await self._post(f"query/{query_id}/archive"))
        return (await self.get_query(response.query_id)).is_archived

    async def unarchive_query(self, query_id: int) -> bool:
        """Unarchive a query and return its resulting archived flag."""
        response = parse_model(
            CreateQueryResponse, await self._post(f"query/{query_id}/unarchive")
        )
        return (await self.get_query(response.query_id)).is_archived

    async def make_private(self, query_id: int) -> None:
        """Make a query private; raises if the change did not take effect."""
        response = parse_model(CreateQueryResponse, await self._post(f"query/{query_id}/private"))
        query = await self.get_query(response.query_id)
        if not query.is_private:
            raise DuneError("Query was not made private!", query_id=query_id)

    async def make_public(self, query_id: int) -> None:
        """Make a query public; raises if the change did not take effect."""
        response = parse_model(
            CreateQueryResponse, await self._post(f"query/{query_id}/unprivate")
        )
        query = await self.get_query(response.query_id)
        if query.is_private:
            raise DuneError("Query is still private.", query_id=query_id)
