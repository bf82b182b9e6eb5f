"""CLI commands for auditing deleted crash tests against open issues."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..analysis.correlation import classify_deletions, summarize
from ..config import AuditSettings, default_cache_dir
from ..errors import ConfigurationError, CrashAuditError
from ..github_client.client import GitHubClient
from ..history.scanner import CrashHistoryScanner
from ..report.renderer import ReportRenderer
from ..storage.cache import IssueCache
from ..storage.snapshot import OpenIssueSnapshot, SnapshotProvider
from ..utils.date_parser import format_duration
from .options import (
    CACHE_DIR_OPTION,
    FROM_DATE_OPTION,
    PATH_GLOB_OPTION,
    REFRESH_CACHE_OPTION,
    REPO_PATH_ARGUMENT,
    TO_DATE_OPTION,
    TOKEN_OPTION,
    TRACKER_OPTION,
    VERBOSE_OPTION,
)

console = Console()


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # PyGithub and GitPython are noisy at DEBUG
    for name in ("github", "git", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _show_parameters(settings: AuditSettings) -> None:
    params_table = Table(title="Audit Parameters")
    params_table.add_column("Parameter", style="cyan")
    params_table.add_column("Value", style="green")

    params_table.add_row("Repository", str(settings.repo_path))
    params_table.add_row("Crash tests", settings.path_glob)
    params_table.add_row("Tracker", settings.tracker)
    params_table.add_row(
        "From", settings.from_date.isoformat() if settings.from_date else "start"
    )
    params_table.add_row(
        "To", settings.to_date.isoformat() if settings.to_date else "present"
    )
    params_table.add_row("Cache", str(IssueCache(settings.cache_dir).path))

    console.print(params_table)


def load_open_issues(settings: AuditSettings) -> OpenIssueSnapshot:
    """Load the open-issue snapshot from cache or GitHub."""

    def fetch_issues() -> set[int]:
        console.print(f"🌐 Fetching open issues from {settings.tracker}...")
        client = GitHubClient(token=settings.github_token)
        return client.fetch_open_issue_numbers(
            settings.tracker_owner, settings.tracker_name
        )

    provider = SnapshotProvider(IssueCache(settings.cache_dir), fetch_issues)
    snapshot = provider.get_snapshot(force_refresh=settings.refresh_cache)

    if snapshot.source == "cache":
        console.print(
            f"📦 Using cached data (updated {format_duration(snapshot.age())} ago)"
        )
        console.print("Use --refresh-cache to update")
    else:
        console.print(f"💾 Cached {len(snapshot.issue_numbers)} open issues")

    return snapshot


def audit(
    repo_path: Path = REPO_PATH_ARGUMENT,
    from_date: str | None = FROM_DATE_OPTION,
    to_date: str | None = TO_DATE_OPTION,
    token: str | None = TOKEN_OPTION,
    refresh_cache: bool = REFRESH_CACHE_OPTION,
    verbose: bool = VERBOSE_OPTION,
    path_glob: str | None = PATH_GLOB_OPTION,
    tracker: str | None = TRACKER_OPTION,
    cache_dir: str | None = CACHE_DIR_OPTION,
) -> None:
    """Find crash tests that were deleted while their issue is still open.

    Walks the repository's first-parent history for deleted crash test files,
    then checks each issue against the open issues on GitHub.

    Examples:
        # Audit the whole history
        crash-audit audit ../rust

        # Only commits from 2024, refreshing the cached open issues
        crash-audit audit ../rust --from 2024-01-01 --to 2024-12-31 \\
            --refresh-cache
    """
    try:
        settings = AuditSettings.from_cli(
            repo_path=repo_path,
            from_date=from_date,
            to_date=to_date,
            path_glob=path_glob,
            tracker=tracker,
            cache_dir=cache_dir,
            github_token=token,
            refresh_cache=refresh_cache,
            verbose=verbose,
        )
    except ConfigurationError as e:
        console.print(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    configure_logging(settings.verbose)
    _show_parameters(settings)

    try:
        console.print("🔎 Scanning git history for deleted crash tests...")
        with CrashHistoryScanner(settings.repo_path, settings.path_glob) as scanner:
            deletions = scanner.scan(
                from_date=settings.from_date, to_date=settings.to_date
            )
            console.print(
                f"✅ Found {len(deletions)} deleted crash test files "
                f"in {scanner.commits_scanned} commits"
            )
            if not deletions:
                console.print(
                    "No deleted crash test files found in the specified range."
                )
                return
            current_files = scanner.list_current_files()

        snapshot = load_open_issues(settings)

        console.print("🔗 Checking deleted files against open issues...")
        classifications = classify_deletions(
            deletions, snapshot.issue_numbers, current_files
        )
        summary = summarize(classifications, len(snapshot.issue_numbers))

    except CrashAuditError as e:
        console.print(f"❌ Error: {e}")
        if e.__cause__ is not None:
            console.print(f"   Caused by: {e.__cause__}")
        raise typer.Exit(1)

    console.print()
    ReportRenderer(console=console, tracker=settings.tracker).render(
        classifications, summary
    )


def cache_status(cache_dir: str | None = CACHE_DIR_OPTION) -> None:
    """Show the cached open-issue snapshot."""
    cache = IssueCache(cache_dir or default_cache_dir())

    if not cache.exists():
        console.print(f"No cache found at {cache.path}")
        console.print("Run an audit to fetch and cache open issues.")
        return

    try:
        cached = cache.load()
    except CrashAuditError as e:
        console.print(f"❌ Error: {e}")
        raise typer.Exit(1)

    stats_table = Table(title="Open Issue Cache")
    stats_table.add_column("Metric", style="cyan")
    stats_table.add_column("Value", style="green")

    stats_table.add_row("Cache Path", str(cache.path.absolute()))
    stats_table.add_row("Open Issues", str(cached.issue_count))
    stats_table.add_row("Updated", cached.timestamp.isoformat())
    stats_table.add_row("Age", format_duration(cached.age()))

    console.print(stats_table)


def clear_cache(cache_dir: str | None = CACHE_DIR_OPTION) -> None:
    """Delete the cached open-issue snapshot."""
    cache = IssueCache(cache_dir or default_cache_dir())

    try:
        removed = cache.clear()
    except CrashAuditError as e:
        console.print(f"❌ Error: {e}")
        raise typer.Exit(1)

    if removed:
        console.print(f"🗑️  Removed {cache.path}")
    else:
        console.print(f"No cache found at {cache.path}")
