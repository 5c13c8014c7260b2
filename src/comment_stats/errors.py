"""Exception hierarchy for comment-stats."""


class CommentStatsError(Exception):
    """Base exception for comment-stats errors."""


class ConfigurationError(CommentStatsError):
    """Raised when the report configuration is invalid."""
