"""Command-line interface for comment-stats."""

import asyncio
import logging

import typer
from rich import print
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
)

from comment_stats.config import ReportConfig, build_report_config
from comment_stats.errors import ConfigurationError
from comment_stats.github_client import DEFAULT_BASE_URL
from comment_stats.orchestrator import run_report
from comment_stats.pagination import DEFAULT_PAGE_SIZE
from comment_stats.progress import PageProgress, WalkStage

app = typer.Typer(
    name="comment-stats",
    help="Rank the commenters of a GitHub repository and show their commit totals",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


class ProgressDisplay:
    """Render walker progress as one progress bar per endpoint."""

    def __init__(self, progress: Progress) -> None:
        self.progress = progress
        self._tasks: dict[str, TaskID] = {}

    def __call__(self, update: PageProgress) -> None:
        if update.stage == WalkStage.STARTED:
            self._tasks[update.endpoint] = self.progress.add_task(
                update.endpoint, total=None, pages=update.pages_label, rate_limit="-"
            )
            return

        if update.stage == WalkStage.FAILED:
            self.progress.console.print(f"[red]{update.message}[/red]")
            return

        task_id = self._tasks.get(update.endpoint)
        if task_id is None:
            return
        self.progress.update(
            task_id,
            completed=update.page,
            total=update.total_pages,
            pages=update.pages_label,
            rate_limit=update.rate_limit_label,
        )


def _create_progress() -> Progress:
    return Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        TextColumn("| ETA:"),
        TimeRemainingColumn(),
        TextColumn("| page {task.fields[pages]}, rate limit: {task.fields[rate_limit]}"),
        console=err_console,
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def _generate_report(config: ReportConfig) -> list[str]:
    with _create_progress() as progress:
        return await run_report(config, progress_callback=ProgressDisplay(progress))


@app.command()
def version() -> None:
    """Show the version and exit."""
    from comment_stats import __version__

    print(f"comment-stats {__version__}")


@app.command()
def report(
    repo: str = typer.Option(..., "--repo", "-r", help="Repository as owner/name"),
    period: str = typer.Option(
        "0d",
        "--period",
        "-p",
        help="Trailing period to count comments in, in days (e.g. 30d). 0d counts all history",
    ),
    token: str | None = typer.Option(
        None,
        "--token",
        "-t",
        help="GitHub Personal Access Token (or set GITHUB_TOKEN env var)",
        envvar="GITHUB_TOKEN",
    ),
    page_size: int = typer.Option(
        DEFAULT_PAGE_SIZE, "--page-size", help="Items requested per page (1-100)"
    ),
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--base-url", help="GitHub API base URL (for GitHub Enterprise)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Report comment and commit counts per user for a repository."""
    _configure_logging(verbose)

    try:
        config = build_report_config(
            repo, period, token, page_size=page_size, base_url=base_url
        )
    except ConfigurationError as e:
        err_console.print(f"[red]Configuration error: {e}[/red]")
        if not token:
            err_console.print(
                "[yellow]Pass --token or set the GITHUB_TOKEN environment variable[/yellow]"
            )
        raise typer.Exit(1)

    if config.period.is_unbounded:
        err_console.print(f'[dim]Fetching comments for all history for "{config.repo}"...[/dim]')
    else:
        err_console.print(
            f'[dim]Fetching comments for past {config.period.quantity} days for "{config.repo}"...[/dim]'
        )

    try:
        lines = asyncio.run(_generate_report(config))
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Report cancelled by user[/yellow]")
        raise typer.Exit(130)

    for line in lines:
        typer.echo(line)


if __name__ == "__main__":
    app()
