"""Test configuration and fixtures."""

import calendar
from datetime import date
from pathlib import Path

import git
import pytest


def git_timestamp(day: date) -> str:
    """Format noon UTC on a day in git's internal '<epoch> <offset>' form."""
    epoch = calendar.timegm(day.timetuple()) + 12 * 3600
    return f"{epoch} +0000"


class RepoBuilder:
    """Builds small git histories for scanner tests."""

    def __init__(self, path: Path):
        self.path = path
        self.repo = git.Repo.init(path)
        with self.repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")
            config.set_value("commit", "gpgsign", "false")

    def add(self, *paths: str, content: str = "fn main() {}\n") -> None:
        for rel_path in paths:
            file_path = self.path / rel_path
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content)
        self.repo.index.add(list(paths))

    def remove(self, *paths: str) -> None:
        self.repo.index.remove(list(paths), working_tree=True)

    def commit(
        self,
        message: str,
        day: date,
        parents: list[git.Commit] | None = None,
        head: bool = True,
    ) -> git.Commit:
        stamp = git_timestamp(day)
        return self.repo.index.commit(
            message,
            parent_commits=parents,
            head=head,
            author_date=stamp,
            commit_date=stamp,
        )


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Create an empty git repository in a temporary directory."""
    return RepoBuilder(tmp_path / "repo")


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Temporary directory for the open-issue cache."""
    return tmp_path / "cache"
