"""Per-endpoint progress reported while walking paginated endpoints.

The walker only emits PageProgress values; rendering them (progress bars,
log lines) is left to whoever supplies the callback.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from comment_stats.github_client import RateLimitState


class WalkStage(Enum):
    """Where an endpoint walk is when a PageProgress is emitted."""

    STARTED = "started"
    PAGE = "page"
    FAILED = "failed"
    FINISHED = "finished"


@dataclass(frozen=True)
class PageProgress:
    """Snapshot of one endpoint walk.

    Attributes:
        endpoint: API path the walk started from
        stage: What happened
        page: Page reached so far; on FINISHED, the last page reached
        total_pages: Page count if known from the ``last`` link
        rate_limit_used: Requests used in the current rate limit window
        rate_limit_total: Size of the rate limit window
        message: Diagnostic for FAILED, empty otherwise
        status_code: HTTP status of a failed page, if there was a response
        rate_limited: Whether a failed page was refused by the rate limit
    """

    endpoint: str
    stage: WalkStage
    page: int = 0
    total_pages: int | None = None
    rate_limit_used: int = 0
    rate_limit_total: int = 0
    message: str = ""
    status_code: int | None = None
    rate_limited: bool = False

    @property
    def pages_label(self) -> str:
        """``page/total``, with ``?`` for an unknown total."""
        total = "?" if self.total_pages is None else self.total_pages
        return f"{self.page}/{total}"

    @property
    def rate_limit_label(self) -> str:
        return f"{self.rate_limit_used}/{self.rate_limit_total}"


ProgressCallback = Callable[[PageProgress], None]


class EndpointProgress:
    """Emit PageProgress values for a single endpoint walk.

    Every value carries the endpoint and the rate limit usage at the time it
    was emitted.
    """

    def __init__(
        self,
        endpoint: str,
        callback: ProgressCallback | None = None,
        rate_limit: RateLimitState | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.callback = callback
        self.rate_limit = rate_limit if rate_limit is not None else RateLimitState()

    def _emit(self, stage: WalkStage, **fields: object) -> None:
        if self.callback is None:
            return
        self.callback(
            PageProgress(
                endpoint=self.endpoint,
                stage=stage,
                rate_limit_used=self.rate_limit.current,
                rate_limit_total=self.rate_limit.total,
                **fields,
            )
        )

    def started(self) -> None:
        self._emit(WalkStage.STARTED)

    def page(self, page: int, total_pages: int | None) -> None:
        self._emit(WalkStage.PAGE, page=page, total_pages=total_pages)

    def failed(
        self,
        message: str,
        page: int,
        status_code: int | None = None,
        rate_limited: bool = False,
    ) -> None:
        """Report a page that could not be fetched.

        Args:
            message: Human-readable diagnostic
            page: Page the walk was on when it failed
            status_code: HTTP status, if a response arrived
            rate_limited: Whether the rate limit refused the request
        """
        self._emit(
            WalkStage.FAILED,
            message=message,
            page=page,
            status_code=status_code,
            rate_limited=rate_limited,
        )

    def finished(self, last_page: int) -> None:
        """Report the end of the walk; the last page reached is the real total."""
        self._emit(WalkStage.FINISHED, page=last_page, total_pages=last_page)
