"""Scan git history for deleted crash test files using GitPython."""

import logging
from collections.abc import Iterator
from datetime import date, datetime, timezone
from pathlib import Path
from types import TracebackType

import git
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from git.objects import Commit

from ..errors import RepositoryError
from .extract import (
    extract_issue_number,
    extract_pr_number,
    glob_base_dir,
    matches_path_glob,
    normalize_path_glob,
)
from .models import DeletionEvent

logger = logging.getLogger(__name__)

DEFAULT_PATH_GLOB = "tests/crashes/*.rs"
PROGRESS_INTERVAL = 1000


def commit_date(commit: Commit) -> date:
    """Return the UTC calendar date of a commit's committer timestamp.

    Raises:
        RepositoryError: If the timestamp cannot be represented as a date
    """
    try:
        return datetime.fromtimestamp(commit.committed_date, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError) as e:
        raise RepositoryError(
            f"Invalid timestamp {commit.committed_date!r} on commit {commit.hexsha}"
        ) from e


class CrashHistoryScanner:
    """Walks first-parent history and reports deleted crash test files."""

    def __init__(self, repo_path: str | Path, path_glob: str = DEFAULT_PATH_GLOB):
        """Open the repository for scanning.

        Args:
            repo_path: Path to the repository working tree
            path_glob: Pathspec selecting crash test files

        Raises:
            RepositoryError: If the path is not a git repository
        """
        self.repo_path = Path(repo_path)
        self.path_glob = normalize_path_glob(path_glob)
        self.commits_scanned = 0

        try:
            self.repo = git.Repo(self.repo_path)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise RepositoryError(
                f"Failed to open git repository at {self.repo_path}"
            ) from e

    def __enter__(self) -> "CrashHistoryScanner":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release git subprocesses held by the repository."""
        self.repo.close()

    def _first_parent_history(self) -> Iterator[Commit]:
        """Yield commits from HEAD along the first-parent chain, newest first."""
        try:
            commits = self.repo.iter_commits("HEAD", first_parent=True)
        except (GitCommandError, ValueError) as e:
            raise RepositoryError(
                f"Failed to resolve HEAD in {self.repo_path}"
            ) from e

        while True:
            try:
                commit = next(commits)
            except StopIteration:
                return
            except (GitCommandError, ValueError) as e:
                raise RepositoryError(
                    f"Failed to walk commit history in {self.repo_path}"
                ) from e
            yield commit

    def _deleted_paths(self, commit: Commit) -> list[str]:
        """List matching paths removed by a commit relative to its first parent."""
        parent = commit.parents[0]
        try:
            diff_index = parent.diff(commit, paths=self.path_glob, no_renames=True)
        except (GitCommandError, ValueError) as e:
            raise RepositoryError(f"Failed to diff commit {commit.hexsha}") from e

        return [
            diff.a_path
            for diff in diff_index.iter_change_type("D")
            if diff.a_path is not None
        ]

    def iter_deletions(
        self, from_date: date | None = None, to_date: date | None = None
    ) -> Iterator[DeletionEvent]:
        """Lazily yield deletion events in traversal order.

        History is walked newest to oldest, so the first commit older than
        ``from_date`` ends the walk. Commits newer than ``to_date`` are
        skipped individually.

        Args:
            from_date: Inclusive start date
            to_date: Inclusive end date

        Yields:
            One DeletionEvent per deleted path with a parseable issue number
        """
        self.commits_scanned = 0

        for commit in self._first_parent_history():
            self.commits_scanned += 1
            if self.commits_scanned % PROGRESS_INTERVAL == 0:
                logger.info("Scanned %d commits...", self.commits_scanned)

            committed_on = commit_date(commit)

            if from_date is not None and committed_on < from_date:
                logger.debug(
                    "Commit %s (%s) predates %s, stopping",
                    commit.hexsha[:8],
                    committed_on,
                    from_date,
                )
                break

            if to_date is not None and committed_on > to_date:
                continue

            if not commit.parents:
                continue

            deleted_paths = self._deleted_paths(commit)
            if not deleted_paths:
                continue

            message = commit.message
            if isinstance(message, bytes):
                message = message.decode("utf-8", errors="replace")
            pr_number = extract_pr_number(message)

            for path in deleted_paths:
                issue_number = extract_issue_number(path)
                if issue_number is None:
                    logger.debug("Skipping %s: no issue number in filename", path)
                    continue

                yield DeletionEvent(
                    file_path=path,
                    issue_number=issue_number,
                    commit_sha=commit.hexsha,
                    commit_date=committed_on,
                    pr_number=pr_number,
                )

        if self.commits_scanned >= PROGRESS_INTERVAL:
            logger.info("Scanned %d commits total", self.commits_scanned)

    def scan(
        self, from_date: date | None = None, to_date: date | None = None
    ) -> list[DeletionEvent]:
        """Collect all deletion events within the date range."""
        return list(self.iter_deletions(from_date=from_date, to_date=to_date))

    def list_current_files(self) -> list[str]:
        """List files matching the glob in the HEAD tree, sorted by path.

        Raises:
            RepositoryError: If HEAD or its tree cannot be read
        """
        try:
            tree = self.repo.head.commit.tree
        except (GitCommandError, ValueError) as e:
            raise RepositoryError(
                f"Failed to read HEAD tree in {self.repo_path}"
            ) from e

        base_dir = glob_base_dir(self.path_glob)
        if base_dir:
            try:
                tree = tree / base_dir
            except KeyError:
                return []

        if tree.type == "blob":
            candidates = [tree.path]
        else:
            candidates = [
                item.path for item in tree.traverse() if item.type == "blob"
            ]

        return sorted(
            path for path in candidates if matches_path_glob(path, self.path_glob)
        )


def scan_deleted_files(
    repo_path: str | Path,
    path_glob: str = DEFAULT_PATH_GLOB,
    from_date: date | None = None,
    to_date: date | None = None,
) -> list[DeletionEvent]:
    """Scan a repository's first-parent history for deleted crash tests."""
    with CrashHistoryScanner(repo_path, path_glob) as scanner:
        return scanner.scan(from_date=from_date, to_date=to_date)


def list_current_files(
    repo_path: str | Path, path_glob: str = DEFAULT_PATH_GLOB
) -> list[str]:
    """List crash test files currently present at HEAD."""
    with CrashHistoryScanner(repo_path, path_glob) as scanner:
        return scanner.list_current_files()
