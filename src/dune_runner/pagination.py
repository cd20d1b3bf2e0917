"""Drain paginated result sets into a single logical result.

The server hands out the absolute address of the next page on every page that
has a successor. ``drain`` follows those addresses until a page arrives
without one, merging pages in the order received. There is no cap on the
number of pages.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Generic, Protocol, TypeVar

from dune_runner.models import ExecutionResult, ExecutionResultCSV, ResultsResponse

logger = logging.getLogger(__name__)

PageT = TypeVar("PageT")


class Pager(Protocol[PageT]):
    """Continuation and merge capabilities for one page representation."""

    def has_continuation(self, page: PageT) -> bool:
        """Return True when the server advertised a following page."""
        ...

    async def fetch_next(self, page: PageT) -> PageT:
        """Fetch the page that follows ``page``."""
        ...

    def merge(self, accumulated: PageT, page: PageT) -> PageT:
        """Append ``page`` to the accumulated result."""
        ...


async def drain(initial_page: PageT, pager: Pager[PageT]) -> PageT:
    """Follow continuation links from ``initial_page`` and merge every page."""
    result = initial_page
    page = initial_page
    fetched = 0
    while pager.has_continuation(page):
        page = await pager.fetch_next(page)
        result = pager.merge(result, page)
        fetched += 1
    if fetched:
        logger.debug("drained %d continuation page(s)", fetched)
    return result


class _UrlPager(Generic[PageT]):
    def __init__(self, fetch_page: Callable[[str], Awaitable[PageT]]) -> None:
        self._fetch_page = fetch_page

    def has_continuation(self, page) -> bool:
        return bool(page.next_uri)

    async def fetch_next(self, page) -> PageT:
        logger.debug("fetching next page %s (offset %s)", page.next_uri, page.next_offset)
        return await self._fetch_page(page.next_uri)


class JsonPager(_UrlPager[ResultsResponse]):
    """Pager for JSON result pages."""

    def merge(self, accumulated: ResultsResponse, page: ResultsResponse) -> ResultsResponse:
        return concat_results(accumulated, page)


class CsvPager(_UrlPager[ExecutionResultCSV]):
    """Pager for CSV result pages."""

    def merge(
        self, accumulated: ExecutionResultCSV, page: ExecutionResultCSV
    ) -> ExecutionResultCSV:
        return concat_csv(accumulated, page)


def concat_results(left: ResultsResponse, right: ResultsResponse) -> ResultsResponse:
    """Append ``right``'s rows to ``left``; metadata stays that of ``left``."""
    metadata = left.result.metadata if left.result is not None else None
    merged = ExecutionResult(rows=left.get_rows() + right.get_rows(), metadata=metadata)
    return left.model_copy(
        update={
            "result": merged,
            "next_uri": right.next_uri,
            "next_offset": right.next_offset,
        }
    )


def concat_csv(left: ExecutionResultCSV, right: ExecutionResultCSV) -> ExecutionResultCSV:
    """Append ``right``'s text verbatim; header lines are not de-duplicated."""
    return ExecutionResultCSV(
        data=left.data + right.data,
        next_uri=right.next_uri,
        next_offset=right.next_offset,
    )
