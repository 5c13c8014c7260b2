"""Cursor-following pagination over GitHub list endpoints."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import parse_qsl, urlparse

from comment_stats.github_client import (
    PageFailure,
    PageResult,
    RateLimitState,
    page_number,
    parse_link_header,
)
from comment_stats.progress import EndpointProgress, ProgressCallback

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100

PageHandler = Callable[[Any], None]


class PageFetcher(Protocol):
    """The part of GitHubClient the walker depends on."""

    async def fetch_page(
        self, path: str, params: dict[str, str | int] | None = None
    ) -> PageResult: ...

    def relative_path(self, url: str) -> str: ...


@dataclass
class PageCursor:
    """Path and query of the next page to fetch."""

    path: str
    query: dict[str, str | int] = field(default_factory=dict)

    @property
    def page(self) -> int | None:
        """Requested page number, or None when absent or not numeric."""
        value = self.query.get("page")
        try:
            return int(value) if value is not None else None
        except ValueError:
            return None


class PaginationWalker:
    """Walk every page of an endpoint by following ``rel="next"`` links.

    Pages are fetched one at a time and handed to the page handler in order.
    A failed page ends the walk for that endpoint: it carries no link header,
    so there is nothing left to follow.
    """

    def __init__(
        self,
        client: PageFetcher,
        rate_limit: RateLimitState,
        page_size: int = DEFAULT_PAGE_SIZE,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        """Initialize the walker.

        Args:
            client: Client used to fetch single pages
            rate_limit: Rate limit state shared by every walk of the run
            page_size: Value of the ``per_page`` query parameter
            progress_callback: Receiver for PageProgress values
        """
        self.client = client
        self.rate_limit = rate_limit
        self.page_size = page_size
        self.progress_callback = progress_callback

    async def walk(self, start_path: str, on_page: PageHandler) -> int:
        """Fetch all pages of ``start_path`` and feed their bodies to ``on_page``.

        Args:
            start_path: API path of the first page
            on_page: Called synchronously with each decoded page body

        Returns:
            Number of pages fetched successfully
        """
        progress = EndpointProgress(start_path, self.progress_callback, self.rate_limit)
        cursor = PageCursor(path=start_path, query={"per_page": self.page_size})
        fetched = 0
        total: int | None = None
        current = 0
        started = False

        progress.started()

        while True:
            result = await self.client.fetch_page(cursor.path, dict(cursor.query))
            links: dict[str, str] = {}
            has_link_header = False

            if isinstance(result, PageFailure):
                attempted = (cursor.page or current + 1) if started else 1
                self._report_failure(progress, cursor, result, attempted)
            else:
                fetched += 1
                if result.body is not None:
                    on_page(result.body)

                link_header = result.headers.get("link")
                if link_header:
                    has_link_header = True
                    links = parse_link_header(link_header)

                self.rate_limit.update(result.headers)

            if not started:
                if not has_link_header:
                    total = 1
                elif "last" in links:
                    total = page_number(links["last"])
                current = 1
                started = True
            else:
                current = cursor.page or current + 1

            progress.page(current, total)

            if not has_link_header or "next" not in links:
                break

            cursor = self._next_cursor(links["next"])

        logger.debug(f"Finished {start_path}: {fetched} page(s)")
        progress.finished(current)
        return fetched

    def _next_cursor(self, next_url: str) -> PageCursor:
        query: dict[str, str | int] = {"per_page": self.page_size}
        query.update(parse_qsl(urlparse(next_url).query))
        return PageCursor(path=self.client.relative_path(next_url), query=query)

    def _report_failure(
        self,
        progress: EndpointProgress,
        cursor: PageCursor,
        failure: PageFailure,
        page: int,
    ) -> None:
        endpoint = progress.endpoint
        if failure.rate_limited:
            logger.warning(f"Rate limit exceeded while fetching {cursor.path}")
            message = f"Rate limit exceeded while fetching {endpoint}"
        else:
            logger.warning(f"Failed to fetch {cursor.path} {cursor.query}: {failure.reason}")
            message = f"Failed to fetch {endpoint}: {failure.reason}"

        progress.failed(
            message,
            page=page,
            status_code=failure.status_code,
            rate_limited=failure.rate_limited,
        )
