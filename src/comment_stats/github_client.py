"""GitHub API client for fetching single pages of repository data."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs, urlparse

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"


@dataclass
class RateLimitState:
    """Requests consumed in the current rate limit window.

    Only used for display; nothing throttles on it.
    """

    current: int = 0
    total: int = 0

    def update(self, headers: Mapping[str, str]) -> bool:
        """Update from rate limit response headers.

        Both ``x-ratelimit-limit`` and ``x-ratelimit-remaining`` must be present
        and numeric, otherwise the state is left unchanged.

        Returns:
            True if the state was updated
        """
        try:
            limit = int(headers["x-ratelimit-limit"])
            remaining = int(headers["x-ratelimit-remaining"])
        except (KeyError, TypeError, ValueError):
            return False

        self.total = limit
        self.current = limit - remaining
        return True


@dataclass
class PageSuccess:
    """A page fetched successfully. ``body`` is None when the response was empty."""

    body: Any
    headers: Mapping[str, str] = field(default_factory=dict)
    status_code: int = 200


@dataclass
class PageFailure:
    """A page that could not be fetched."""

    reason: str
    status_code: int | None = None
    rate_limited: bool = False


PageResult = PageSuccess | PageFailure


def parse_link_header(link_header: str | None) -> dict[str, str]:
    """Parse GitHub's Link header for pagination URLs.

    Args:
        link_header: The Link header value from GitHub API response

    Returns:
        Dictionary with 'next', 'prev', 'first', 'last' URLs if present
    """
    links: dict[str, str] = {}

    if not link_header:
        return links

    for link in link_header.split(","):
        link = link.strip()
        if ";" not in link:
            continue

        url_part, rel_part = link.split(";", 1)
        url = url_part.strip(" <>")

        for param in rel_part.split(";"):
            param = param.strip()
            if param.startswith("rel="):
                rel = param[4:].strip("\"'")
                links[rel] = url
                break

    return links


def page_number(url: str) -> int | None:
    """Extract the ``page`` query parameter from a pagination URL."""
    query_params = parse_qs(urlparse(url).query)
    if "page" in query_params:
        with contextlib.suppress(ValueError, IndexError):
            return int(query_params["page"][0])
    return None


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code not in (403, 429):
        return False
    if response.headers.get("x-ratelimit-remaining") == "0":
        return True
    return "rate limit" in response.text.lower()


def _error_message(response: httpx.Response) -> str:
    with contextlib.suppress(ValueError):
        data = response.json()
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
    return response.reason_phrase or "request failed"


class GitHubClient:
    """Client for fetching pages from the GitHub REST API."""

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub Personal Access Token
            base_url: GitHub API base URL
            http_client: Preconfigured HTTP client, mainly for tests
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self._base_path = urlparse(self.base_url).path.rstrip("/")
        self._http_client = http_client

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=30.0,
            )
        return self._http_client

    def relative_path(self, url: str) -> str:
        """Turn an absolute pagination URL into a path relative to the base URL."""
        path = urlparse(url).path
        if self._base_path and path.startswith(self._base_path + "/"):
            path = path[len(self._base_path) :]
        return path

    async def fetch_page(
        self, path: str, params: Mapping[str, str | int] | None = None
    ) -> PageResult:
        """Fetch one page with a GET request.

        Transport and HTTP errors are returned as PageFailure, never raised.

        Args:
            path: API path relative to the base URL
            params: Query parameters

        Returns:
            PageSuccess with the decoded JSON body, or PageFailure
        """
        client = self._get_http_client()
        try:
            response = await client.get(
                path,
                params=dict(params or {}),
                headers=self.headers,
                follow_redirects=True,
            )
        except httpx.HTTPError as error:
            logger.debug(f"Transport error fetching {path}: {error!r}")
            return PageFailure(reason=f"{type(error).__name__}: {error}")

        # Also covers a redirect without a usable Location header
        if not response.is_success:
            return PageFailure(
                reason=f"{response.status_code} {_error_message(response)}",
                status_code=response.status_code,
                rate_limited=_is_rate_limited(response),
            )

        body: Any = None
        if response.content:
            try:
                body = response.json()
            except ValueError as error:
                return PageFailure(
                    reason=f"Invalid JSON in response: {error}",
                    status_code=response.status_code,
                )

        logger.debug(f"Fetched {response.url} ({response.status_code})")
        return PageSuccess(
            body=body, headers=response.headers, status_code=response.status_code
        )

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> GitHubClient:
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit with cleanup."""
        await self.close()
