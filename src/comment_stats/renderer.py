"""Plain-text rendering of the per-user report."""

from __future__ import annotations

from collections.abc import Mapping

from comment_stats.models import UserStat

NO_COMMENTS_MESSAGE = "No comments in this repository."


def _sort_key(stat: UserStat) -> tuple[int, str]:
    return (-stat.comments, stat.login)


def format_line(stat: UserStat, width: int) -> str:
    """Format one report line, e.g. ``42 comments, alice (7 commits)``."""
    commits = stat.commits or "no"
    return f"{stat.comments:>{width}} comments, {stat.login} ({commits} commits)"


def render_report(user_stats: Mapping[str, UserStat]) -> list[str]:
    """Render user stats ranked by comment count.

    Ties are ordered by login. Comment counts are right-aligned to the width
    of the largest count.
    """
    rows = sorted(user_stats.values(), key=_sort_key)
    if not rows:
        return [NO_COMMENTS_MESSAGE]

    width = len(str(max(stat.comments for stat in rows)))
    return [format_line(stat, width) for stat in rows]
