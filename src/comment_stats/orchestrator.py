"""Run one report: walk the four endpoints in order, then render."""

from __future__ import annotations

import logging
from datetime import datetime

from comment_stats.aggregator import UserStatsAggregator
from comment_stats.config import RepoRef, ReportConfig
from comment_stats.github_client import GitHubClient, RateLimitState
from comment_stats.models import UserStat
from comment_stats.pagination import DEFAULT_PAGE_SIZE, PageFetcher, PaginationWalker
from comment_stats.period import Period
from comment_stats.progress import ProgressCallback
from comment_stats.renderer import render_report

logger = logging.getLogger(__name__)

# Commit comments, issue comments and pull request review comments
COMMENT_ENDPOINTS = ("comments", "issues/comments", "pulls/comments")
CONTRIBUTOR_STATS_ENDPOINT = "stats/contributors"


async def collect_user_stats(
    client: PageFetcher,
    repo: RepoRef,
    period: Period,
    page_size: int = DEFAULT_PAGE_SIZE,
    progress_callback: ProgressCallback | None = None,
    rate_limit: RateLimitState | None = None,
    now: datetime | None = None,
) -> dict[str, UserStat]:
    """Aggregate comment and commit counts for every commenter of a repository.

    The endpoints are walked sequentially: the three comment endpoints first,
    then contributor statistics, so commit totals can only attach to users
    already seen commenting.

    Args:
        client: Client used to fetch pages
        repo: Repository to report on
        period: Trailing period comments must fall into
        page_size: Items requested per page
        progress_callback: Receiver for PageProgress values
        rate_limit: Rate limit state for the run; a fresh one if omitted
        now: Reference time for the period

    Returns:
        Mapping of login to aggregated UserStat
    """
    aggregator = UserStatsAggregator(period, now=now)
    walker = PaginationWalker(
        client,
        rate_limit if rate_limit is not None else RateLimitState(),
        page_size=page_size,
        progress_callback=progress_callback,
    )

    for endpoint in COMMENT_ENDPOINTS:
        await walker.walk(f"{repo.api_path}/{endpoint}", aggregator.on_comments)

    await walker.walk(
        f"{repo.api_path}/{CONTRIBUTOR_STATS_ENDPOINT}", aggregator.on_commits
    )

    logger.info(f"Collected stats for {len(aggregator.user_stats)} user(s) in {repo}")
    return aggregator.user_stats


async def run_report(
    config: ReportConfig, progress_callback: ProgressCallback | None = None
) -> list[str]:
    """Fetch, aggregate and render the report described by ``config``.

    Returns:
        Report lines, ready to print
    """
    async with GitHubClient(token=config.token, base_url=config.base_url) as client:
        user_stats = await collect_user_stats(
            client,
            config.repo,
            config.period,
            page_size=config.page_size,
            progress_callback=progress_callback,
        )

    return render_report(user_stats)
