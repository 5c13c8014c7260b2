"""comment-stats - rank the commenters of a GitHub repository.

Library API:

    from comment_stats import build_report_config, run_report

    config = build_report_config("owner/name", "30d", token="ghp_...")
    lines = asyncio.run(run_report(config))
"""

__version__ = "0.1.0"

from comment_stats.aggregator import (
    UserStatsAggregator,
    count_comments,
    merge_commit_totals,
)
from comment_stats.config import (
    RepoRef,
    ReportConfig,
    build_report_config,
    parse_repo,
)
from comment_stats.errors import CommentStatsError, ConfigurationError
from comment_stats.github_client import (
    GitHubClient,
    PageFailure,
    PageSuccess,
    RateLimitState,
)
from comment_stats.models import UserStat
from comment_stats.orchestrator import collect_user_stats, run_report
from comment_stats.pagination import PageCursor, PaginationWalker
from comment_stats.period import Period, is_within_period, parse_period
from comment_stats.progress import PageProgress, ProgressCallback, WalkStage
from comment_stats.renderer import NO_COMMENTS_MESSAGE, render_report

__all__ = [
    # Entry points
    "build_report_config",
    "run_report",
    "collect_user_stats",
    "render_report",
    "NO_COMMENTS_MESSAGE",
    # Building blocks
    "GitHubClient",
    "PageSuccess",
    "PageFailure",
    "RateLimitState",
    "PageCursor",
    "PaginationWalker",
    "UserStatsAggregator",
    "count_comments",
    "merge_commit_totals",
    "UserStat",
    "Period",
    "parse_period",
    "is_within_period",
    "RepoRef",
    "ReportConfig",
    "parse_repo",
    "ProgressCallback",
    "PageProgress",
    "WalkStage",
    # Exceptions
    "CommentStatsError",
    "ConfigurationError",
    # Metadata
    "__version__",
]
