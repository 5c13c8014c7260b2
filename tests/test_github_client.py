"""Tests for the GitHub API client."""

import httpx
import pytest

from comment_stats.github_client import (
    GitHubClient,
    PageFailure,
    PageSuccess,
    RateLimitState,
    page_number,
    parse_link_header,
)


def make_client(handler, base_url="https://api.github.com"):
    """Create a client whose requests are answered by ``handler``."""
    http_client = httpx.AsyncClient(
        base_url=base_url, transport=httpx.MockTransport(handler)
    )
    return GitHubClient(token="test_token", base_url=base_url, http_client=http_client)


class TestRateLimitState:
    """Test rate limit bookkeeping."""

    def test_update_with_both_headers(self):
        state = RateLimitState()
        updated = state.update(
            {"x-ratelimit-limit": "5000", "x-ratelimit-remaining": "4990"}
        )

        assert updated
        assert state.total == 5000
        assert state.current == 10

    def test_update_requires_both_headers(self):
        state = RateLimitState(current=3, total=60)
        assert not state.update({"x-ratelimit-limit": "5000"})
        assert not state.update({"x-ratelimit-remaining": "10"})
        assert (state.current, state.total) == (3, 60)

    def test_update_ignores_non_numeric_values(self):
        state = RateLimitState(current=3, total=60)
        assert not state.update(
            {"x-ratelimit-limit": "lots", "x-ratelimit-remaining": "10"}
        )
        assert (state.current, state.total) == (3, 60)


class TestLinkHeader:
    """Test Link header parsing."""

    def test_parse_link_header_empty(self):
        assert parse_link_header("") == {}
        assert parse_link_header(None) == {}

    def test_parse_link_header_multiple_links(self):
        link_header = (
            '<https://api.github.com/repositories/1/issues/comments?per_page=100&page=2>; rel="next", '
            '<https://api.github.com/repositories/1/issues/comments?per_page=100&page=5>; rel="last"'
        )
        links = parse_link_header(link_header)

        assert set(links) == {"next", "last"}
        assert links["next"].endswith("page=2")
        assert page_number(links["last"]) == 5

    def test_parse_link_header_malformed(self):
        assert parse_link_header("malformed header without proper format") == {}

    def test_page_number_missing_or_invalid(self):
        assert page_number("https://api.github.com/x?per_page=100") is None
        assert page_number("https://api.github.com/x?page=abc") is None


class TestGitHubClient:
    """Test the GitHubClient class."""

    def test_client_initialization(self):
        client = GitHubClient(token="test_token")
        assert client.base_url == "https://api.github.com"
        assert client.headers["Authorization"] == "Bearer test_token"
        assert client.headers["X-GitHub-Api-Version"] == "2022-11-28"

    def test_relative_path_strips_base_path(self):
        client = GitHubClient(token="t", base_url="https://ghe.example.com/api/v3/")
        url = "https://ghe.example.com/api/v3/repositories/7/comments?page=2"
        assert client.relative_path(url) == "/repositories/7/comments"

    def test_relative_path_without_base_path(self):
        client = GitHubClient(token="t")
        url = "https://api.github.com/repositories/7/comments?page=2"
        assert client.relative_path(url) == "/repositories/7/comments"

    @pytest.mark.asyncio
    async def test_fetch_page_success(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json=[{"id": 1}],
                headers={"link": '<https://api.github.com/x?page=2>; rel="next"'},
            )

        async with make_client(handler) as client:
            result = await client.fetch_page("/repos/o/r/comments", {"per_page": 100})

        assert isinstance(result, PageSuccess)
        assert result.body == [{"id": 1}]
        assert "rel=\"next\"" in result.headers["link"]
        assert seen[0].url.path == "/repos/o/r/comments"
        assert seen[0].url.params["per_page"] == "100"
        assert seen[0].headers["authorization"] == "Bearer test_token"

    @pytest.mark.asyncio
    async def test_fetch_page_empty_body(self):
        async with make_client(lambda request: httpx.Response(204)) as client:
            result = await client.fetch_page("/repos/o/r/comments")

        assert isinstance(result, PageSuccess)
        assert result.body is None

    @pytest.mark.asyncio
    async def test_fetch_page_http_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"message": "Not Found"})

        async with make_client(handler) as client:
            result = await client.fetch_page("/repos/o/missing/comments")

        assert isinstance(result, PageFailure)
        assert result.status_code == 404
        assert "Not Found" in result.reason
        assert not result.rate_limited

    @pytest.mark.asyncio
    async def test_fetch_page_rate_limited(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                403,
                json={"message": "API rate limit exceeded for user ID 1."},
                headers={"x-ratelimit-remaining": "0"},
            )

        async with make_client(handler) as client:
            result = await client.fetch_page("/repos/o/r/comments")

        assert isinstance(result, PageFailure)
        assert result.rate_limited

    @pytest.mark.asyncio
    async def test_fetch_page_forbidden_is_not_rate_limited(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"message": "Resource not accessible"})

        async with make_client(handler) as client:
            result = await client.fetch_page("/repos/o/r/comments")

        assert isinstance(result, PageFailure)
        assert not result.rate_limited

    @pytest.mark.asyncio
    async def test_fetch_page_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        async with make_client(handler) as client:
            result = await client.fetch_page("/repos/o/r/comments")

        assert isinstance(result, PageFailure)
        assert result.status_code is None
        assert "ConnectError" in result.reason

    @pytest.mark.asyncio
    async def test_fetch_page_invalid_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>oops</html>")

        async with make_client(handler) as client:
            result = await client.fetch_page("/repos/o/r/comments")

        assert isinstance(result, PageFailure)
        assert "Invalid JSON" in result.reason

    @pytest.mark.asyncio
    async def test_close_releases_http_client(self):
        client = make_client(lambda request: httpx.Response(200, json=[]))
        await client.close()
        assert client._http_client is None

    @pytest.mark.asyncio
    async def test_fetch_page_follows_redirect_of_moved_repository(self):
        """A renamed repository answers 301; the moved location holds the data."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            if request.url.path == "/repos/o/old-name/comments":
                return httpx.Response(
                    301,
                    json={"message": "Moved Permanently"},
                    headers={"location": "https://api.github.com/repositories/7/comments?per_page=100"},
                )
            return httpx.Response(200, json=[{"id": 1}])

        async with make_client(handler) as client:
            result = await client.fetch_page("/repos/o/old-name/comments", {"per_page": 100})

        assert isinstance(result, PageSuccess)
        assert result.body == [{"id": 1}]
        assert seen == ["/repos/o/old-name/comments", "/repositories/7/comments"]

    @pytest.mark.asyncio
    async def test_fetch_page_redirect_without_location_is_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(301, json={"message": "Moved Permanently"})

        async with make_client(handler) as client:
            result = await client.fetch_page("/repos/o/old-name/comments")

        assert isinstance(result, PageFailure)
        assert result.status_code == 301
        assert "Moved Permanently" in result.reason
