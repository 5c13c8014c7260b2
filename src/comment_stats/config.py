"""Report configuration: repository, period and option validation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from comment_stats.errors import ConfigurationError
from comment_stats.github_client import DEFAULT_BASE_URL
from comment_stats.pagination import DEFAULT_PAGE_SIZE
from comment_stats.period import Period, parse_period


class RepoRef(BaseModel):
    """Repository identifier split into owner and name."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @property
    def api_path(self) -> str:
        return f"/repos/{self.owner}/{self.name}"

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


def parse_repo(repo_path: str) -> RepoRef:
    """Parse an ``owner/name`` repository identifier.

    Raises:
        ConfigurationError: If the identifier is not exactly two non-empty parts
    """
    parts = repo_path.strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise ConfigurationError(f"Wrong format of repo: {repo_path!r} (expected owner/name)")
    return RepoRef(owner=parts[0], name=parts[1])


class ReportConfig(BaseModel):
    """Everything one report run needs, validated before any network activity."""

    model_config = ConfigDict(frozen=True)

    repo: RepoRef
    period: Period = Period()
    token: str
    page_size: int = DEFAULT_PAGE_SIZE
    base_url: str = DEFAULT_BASE_URL

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("token must not be empty")
        return v.strip()

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        """GitHub list endpoints accept at most 100 items per page."""
        if v < 1 or v > 100:
            raise ValueError("page_size must be between 1 and 100")
        return v


def build_report_config(
    repo: str,
    period: str,
    token: str | None,
    page_size: int = DEFAULT_PAGE_SIZE,
    base_url: str = DEFAULT_BASE_URL,
) -> ReportConfig:
    """Validate raw option values into a ReportConfig.

    Raises:
        ConfigurationError: If any value is invalid or the token is missing
    """
    repo_ref = parse_repo(repo)
    parsed_period = parse_period(period)

    if not token:
        raise ConfigurationError("GitHub token is required")

    try:
        return ReportConfig(
            repo=repo_ref,
            period=parsed_period,
            token=token,
            page_size=page_size,
            base_url=base_url,
        )
    except ValidationError as e:
        messages = "; ".join(str(error["msg"]) for error in e.errors())
        raise ConfigurationError(messages) from e
