"""Per-user aggregation of comment and commit counts.

Only users with at least one comment inside the period are reported. Commit
totals are attached to those users afterwards; contributors who never
commented are dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, MutableMapping
from datetime import UTC, datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from comment_stats.models import Comment, ContributorStats, UserStat
from comment_stats.period import Period, is_within_period

logger = logging.getLogger(__name__)

UserStats = MutableMapping[str, UserStat]

ModelT = TypeVar("ModelT", bound=BaseModel)


def count_comments(
    user_stats: UserStats,
    comments: Iterable[Comment],
    period: Period,
    now: datetime | None = None,
) -> None:
    """Count each comment inside the period towards its author."""
    for comment in comments:
        if comment.user is None:
            continue
        if not is_within_period(period, comment.created_at, now):
            continue

        login = comment.user.login
        stat = user_stats.get(login)
        if stat is None:
            user_stats[login] = UserStat(login=login)
        else:
            stat.comments += 1


def merge_commit_totals(
    user_stats: UserStats, contributors: Iterable[ContributorStats]
) -> None:
    """Attach lifetime commit totals to users that already have comments."""
    for contributor in contributors:
        if contributor.author is None:
            continue

        stat = user_stats.get(contributor.author.login)
        if stat is not None:
            stat.commits = contributor.total


def _parse_records(body: Any, model: type[ModelT], source: str) -> list[ModelT]:
    if not isinstance(body, list):
        logger.warning(f"Ignoring {source} page that is not a list: {type(body).__name__}")
        return []

    records = []
    for item in body:
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed {source} record: {e.error_count()} error(s)")
    return records


class UserStatsAggregator:
    """Page handlers sharing one login -> UserStat mapping."""

    def __init__(self, period: Period, now: datetime | None = None) -> None:
        """Initialize the aggregator.

        Args:
            period: Trailing period comments must fall into
            now: Reference time for the period, fixed for the whole run
        """
        self.period = period
        self.now = now or datetime.now(UTC)
        self.user_stats: dict[str, UserStat] = {}

    def on_comments(self, body: Any) -> None:
        """Handle one page from any of the comment endpoints."""
        comments = _parse_records(body, Comment, "comment")
        count_comments(self.user_stats, comments, self.period, self.now)

    def on_commits(self, body: Any) -> None:
        """Handle one page from the contributor statistics endpoint."""
        if isinstance(body, dict) and not body:
            # GitHub answers 202 with an empty object while it computes the statistics
            logger.warning("Contributor statistics are not ready yet; commit counts are unavailable")
            return
        contributors = _parse_records(body, ContributorStats, "contributor")
        merge_commit_totals(self.user_stats, contributors)
