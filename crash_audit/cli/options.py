"""Standardized CLI option definitions shared by the audit commands."""

import typer

REPO_PATH_ARGUMENT = typer.Argument(
    ..., help="Path to the repository to audit", show_default=False
)

FROM_DATE_OPTION = typer.Option(
    None, "--from", help="Only scan commits on or after this date (YYYY-MM-DD)"
)

TO_DATE_OPTION = typer.Option(
    None, "--to", help="Only scan commits on or before this date (YYYY-MM-DD)"
)

TOKEN_OPTION = typer.Option(
    None, "--token", "-t", help="GitHub API token (defaults to GITHUB_TOKEN env var)"
)

REFRESH_CACHE_OPTION = typer.Option(
    False, "--refresh-cache", help="Ignore the cached open issues and refetch them"
)

VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Verbose output")

PATH_GLOB_OPTION = typer.Option(
    None,
    "--path-glob",
    help="Pathspec of crash test files (defaults to tests/crashes/*.rs)",
)

TRACKER_OPTION = typer.Option(
    None,
    "--tracker",
    help="GitHub repository holding the issues, as owner/name "
    "(defaults to rust-lang/rust)",
)

CACHE_DIR_OPTION = typer.Option(
    None, "--cache-dir", help="Cache directory path (defaults to ./.cache)"
)
