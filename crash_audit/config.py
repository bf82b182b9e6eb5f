"""Run configuration for crash audits."""

import os
from datetime import date
from pathlib import Path

from pydantic import BaseModel, Field

from .errors import ConfigurationError
from .history.scanner import DEFAULT_PATH_GLOB
from .storage.cache import DEFAULT_CACHE_DIR
from .utils.date_parser import parse_date_range

DEFAULT_TRACKER = "rust-lang/rust"


def default_tracker() -> str:
    return os.getenv("CRASH_AUDIT_TRACKER", DEFAULT_TRACKER)


def default_cache_dir() -> str:
    return os.getenv("CRASH_AUDIT_CACHE_DIR", DEFAULT_CACHE_DIR)


def default_path_glob() -> str:
    return os.getenv("CRASH_AUDIT_PATH_GLOB", DEFAULT_PATH_GLOB)


def parse_tracker(tracker: str) -> tuple[str, str]:
    """Split an 'owner/name' tracker string.

    Raises:
        ConfigurationError: If the string is not exactly two non-empty parts
    """
    parts = tracker.strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise ConfigurationError(
            f"Invalid tracker '{tracker}'. Expected format: owner/name "
            f"(e.g. {DEFAULT_TRACKER})"
        )
    return parts[0], parts[1]


_DEFAULT_OWNER, _DEFAULT_NAME = parse_tracker(DEFAULT_TRACKER)


class AuditSettings(BaseModel):
    """Validated settings for one audit run."""

    repo_path: Path = Field(..., description="Repository working tree")
    path_glob: str = Field(DEFAULT_PATH_GLOB, description="Crash test pathspec")
    from_date: date | None = Field(None, description="Inclusive start date")
    to_date: date | None = Field(None, description="Inclusive end date")
    tracker_owner: str = Field(_DEFAULT_OWNER, description="Tracker repository owner")
    tracker_name: str = Field(_DEFAULT_NAME, description="Tracker repository name")
    cache_dir: Path = Field(Path(DEFAULT_CACHE_DIR), description="Cache directory")
    github_token: str | None = Field(None, description="GitHub access token")
    refresh_cache: bool = Field(False, description="Ignore the cache and refetch")
    verbose: bool = Field(False, description="Verbose output")

    @property
    def tracker(self) -> str:
        return f"{self.tracker_owner}/{self.tracker_name}"

    @classmethod
    def from_cli(
        cls,
        repo_path: Path,
        from_date: str | None = None,
        to_date: str | None = None,
        path_glob: str | None = None,
        tracker: str | None = None,
        cache_dir: str | None = None,
        github_token: str | None = None,
        refresh_cache: bool = False,
        verbose: bool = False,
    ) -> "AuditSettings":
        """Build settings from command-line values and environment defaults.

        Raises:
            ConfigurationError: On a missing repository path, bad dates or a
                malformed tracker string
        """
        if not repo_path.exists():
            raise ConfigurationError(f"Repository path does not exist: {repo_path}")
        if not repo_path.is_dir():
            raise ConfigurationError(
                f"Repository path is not a directory: {repo_path}"
            )

        try:
            start, end = parse_date_range(from_date, to_date)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        glob = path_glob or default_path_glob()
        if not glob.strip():
            raise ConfigurationError("Path glob must not be empty")

        owner, name = parse_tracker(tracker or default_tracker())

        return cls(
            repo_path=repo_path,
            path_glob=glob,
            from_date=start,
            to_date=end,
            tracker_owner=owner,
            tracker_name=name,
            cache_dir=Path(cache_dir or default_cache_dir()),
            github_token=github_token or os.getenv("GITHUB_TOKEN"),
            refresh_cache=refresh_cache,
            verbose=verbose,
        )
