"""Pydantic models for GitHub API records and report data."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class GitHubUser(BaseModel):
    """GitHub user reference as embedded in comments and statistics."""

    login: str
    id: int | None = None
    type: str | None = None


class Comment(BaseModel):
    """A commit, issue or pull request review comment.

    All three comment endpoints share the fields used here. ``user`` is null
    for comments left by deleted accounts.
    """

    id: int | None = None
    user: GitHubUser | None = None
    created_at: datetime
    html_url: str | None = None


class ContributorStats(BaseModel):
    """One entry of the repository contributor statistics endpoint."""

    author: GitHubUser | None = None
    total: int = 0


class UserStat(BaseModel):
    """Aggregated counters for one login."""

    login: str
    comments: int = 1
    commits: int | None = None
