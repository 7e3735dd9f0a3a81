"""Cursor paginator over list/search endpoints.

Architecture:
    A ``Paginator`` is bound to one page-fetch function. Each call to
    ``pages()`` or ``paginate()`` opens an independent cursor; the cursor's
    state (last token, consumed tokens, counters) lives only inside that
    iterator and is never shared or persisted.

Design Decisions:
    - An absent or empty ``next_page_token`` is the only termination signal;
      empty pages with a token are followed
    - Exactly one request per page and no re-sorting or dedup of results
    - A token the cursor already sent is rejected with ``PaginationError``
    - Filters are validated when the iterator is created, before any I/O
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from time import perf_counter
from typing import Any, Generic, TypeVar

from ...core.exceptions import PaginationError
from ...models.page import Page, PageParams
from ..telemetry import log_page_fetched, log_pagination_complete
from .definitions import FetchPage, filter_values, validate_filter

T = TypeVar("T")


class Paginator(Generic[T]):
    """Iterate every page (or record) of a paginated endpoint.

    Example:
        >>> paginator = Paginator(fetch_history_page, endpoint_id="document_history")
        >>> async for event in paginator.paginate({"page_size": 50}):
        ...     print(event.accessor)
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        *,
        endpoint_id: str = "list",
        filter_model: type[PageParams] = PageParams,
    ) -> None:
        """Initialize paginator.

        Args:
            fetch_page: Async function returning one ``Page`` for a filter dict
            endpoint_id: Name used in log records
            filter_model: Model the caller's filter is validated against
        """
        self._fetch_page = fetch_page
        self._endpoint_id = endpoint_id
        self._filter_model = filter_model

    @property
    def endpoint_id(self) -> str:
        return self._endpoint_id

    def pages(
        self, filter: PageParams | Mapping[str, Any] | None = None
    ) -> AsyncIterator[Page[T]]:
        """Open a cursor yielding whole pages.

        A ``page_token`` in ``filter`` resumes an earlier cursor at that page.

        Raises:
            ValidationError: Malformed filter (raised here, before any request)
        """
        params = filter_values(validate_filter(filter, self._filter_model))
        return self._iter_pages(params)

    def paginate(self, filter: PageParams | Mapping[str, Any] | None = None) -> AsyncIterator[T]:
        """Open a cursor yielding individual records, page after page."""
        return self._iter_results(self.pages(filter))

    async def _iter_results(self, pages: AsyncIterator[Page[T]]) -> AsyncIterator[T]:
        async for page in pages:
            for item in page.results:
                yield item

    async def _iter_pages(self, params: dict[str, Any]) -> AsyncIterator[Page[T]]:
        token: str | None = params.pop("page_token", None) or None
        consumed: set[str] = set()
        page_index = 0
        total_results = 0

        while True:
            request = dict(params)
            if token is not None:
                request["page_token"] = token
                consumed.add(token)

            started = perf_counter()
            page = await self._fetch_page(request)
            log_page_fetched(
                endpoint_id=self._endpoint_id,
                page_index=page_index,
                results=len(page.results),
                has_next=page.has_next,
                latency_ms=(perf_counter() - started) * 1000.0,
            )
            page_index += 1
            total_results += len(page.results)
            yield page

            next_token = page.next_page_token
            if not next_token:
                log_pagination_complete(
                    endpoint_id=self._endpoint_id, pages=page_index, total_results=total_results
                )
                return
            if next_token in consumed:
                raise PaginationError(
                    f"{self._endpoint_id}: server returned page token {next_token!r} again",
                    page_token=next_token,
                )
            token = next_token
