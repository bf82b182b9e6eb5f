"""Tests for the first-parent history scanner."""

from datetime import date
from pathlib import Path
from unittest.mock import Mock

import pytest
from conftest import RepoBuilder

from crash_audit.errors import RepositoryError
from crash_audit.history.scanner import (
    CrashHistoryScanner,
    commit_date,
    list_current_files,
    scan_deleted_files,
)


@pytest.fixture
def dated_history(repo_builder: RepoBuilder) -> RepoBuilder:
    """History with one crash test deleted per commit.

    Newest first: 3.rs (2024-07-01), 2.rs (2024-03-01), 1.rs (2023-12-31),
    then the root commit adding all three (2023-12-01).
    """
    repo_builder.add("tests/crashes/1.rs", "tests/crashes/2.rs", "tests/crashes/3.rs")
    repo_builder.commit("Add crash tests", date(2023, 12, 1))
    repo_builder.remove("tests/crashes/1.rs")
    repo_builder.commit("Auto merge of #11 - a:fix-1, r=b", date(2023, 12, 31))
    repo_builder.remove("tests/crashes/2.rs")
    repo_builder.commit("Auto merge of #22 - a:fix-2, r=b", date(2024, 3, 1))
    repo_builder.remove("tests/crashes/3.rs")
    repo_builder.commit("Fix the third crash", date(2024, 7, 1))
    return repo_builder


class TestCrashHistoryScanner:
    """Test CrashHistoryScanner class."""

    def test_not_a_repository(self, tmp_path: Path) -> None:
        """Test that a plain directory raises RepositoryError."""
        with pytest.raises(RepositoryError, match="Failed to open git repository"):
            CrashHistoryScanner(tmp_path)

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(RepositoryError):
            CrashHistoryScanner(tmp_path / "missing")

    def test_repository_without_commits(self, repo_builder: RepoBuilder) -> None:
        with pytest.raises(RepositoryError):
            scan_deleted_files(repo_builder.path)

    def test_scan_all_history(self, dated_history: RepoBuilder) -> None:
        """Test that deletions come back newest first with metadata."""
        events = scan_deleted_files(dated_history.path)

        assert [e.file_path for e in events] == [
            "tests/crashes/3.rs",
            "tests/crashes/2.rs",
            "tests/crashes/1.rs",
        ]
        assert [e.issue_number for e in events] == [3, 2, 1]
        assert [e.pr_number for e in events] == [None, 22, 11]
        assert [e.commit_date for e in events] == [
            date(2024, 7, 1),
            date(2024, 3, 1),
            date(2023, 12, 31),
        ]
        head_sha = dated_history.repo.head.commit.hexsha
        assert events[0].commit_sha == head_sha
        assert events[0].short_sha == head_sha[:8]

    def test_from_date_stops_walk(self, dated_history: RepoBuilder) -> None:
        """Test that a commit before from_date is excluded and ends the walk."""
        with CrashHistoryScanner(dated_history.path) as scanner:
            events = scanner.scan(from_date=date(2024, 1, 1))

            # 2024-07-01, 2024-03-01, then 2023-12-31 stops the walk before
            # the root commit is visited
            assert scanner.commits_scanned == 3

        assert [e.issue_number for e in events] == [3, 2]

    def test_from_date_is_inclusive(self, dated_history: RepoBuilder) -> None:
        events = scan_deleted_files(dated_history.path, from_date=date(2023, 12, 31))
        assert [e.issue_number for e in events] == [3, 2, 1]

    def test_to_date_skips_newer_commits(self, dated_history: RepoBuilder) -> None:
        """Test that commits after to_date are skipped but the walk continues."""
        events = scan_deleted_files(dated_history.path, to_date=date(2024, 6, 1))
        assert [e.issue_number for e in events] == [2, 1]

    def test_to_date_is_inclusive(self, dated_history: RepoBuilder) -> None:
        events = scan_deleted_files(dated_history.path, to_date=date(2024, 3, 1))
        assert [e.issue_number for e in events] == [2, 1]

    def test_date_range(self, dated_history: RepoBuilder) -> None:
        events = scan_deleted_files(
            dated_history.path, from_date=date(2024, 1, 1), to_date=date(2024, 6, 1)
        )
        assert [e.issue_number for e in events] == [2]

    def test_early_stop_assumes_newest_first_order(
        self, repo_builder: RepoBuilder
    ) -> None:
        """Test that an out-of-order old commit hides in-range commits behind it.

        The walk stops at the first commit older than from_date. A commit
        further down the chain is never reached, even if its own date is in
        range. Changing the traversal order requires replacing the early stop
        with a full-range filter.
        """
        repo_builder.add("tests/crashes/1.rs", "tests/crashes/2.rs")
        repo_builder.commit("Add crash tests", date(2024, 1, 1))
        repo_builder.remove("tests/crashes/1.rs")
        repo_builder.commit("In range but behind an old commit", date(2024, 2, 1))
        repo_builder.remove("tests/crashes/2.rs")
        repo_builder.commit("Backdated commit", date(2023, 6, 1))

        events = scan_deleted_files(repo_builder.path, from_date=date(2024, 1, 1))

        assert events == []

    def test_multiple_deletions_in_one_commit(self, repo_builder: RepoBuilder) -> None:
        """Test that each deleted path produces its own event."""
        repo_builder.add(
            "tests/crashes/100.rs",
            "tests/crashes/100-other.rs",
            "tests/crashes/200-foo.rs",
        )
        repo_builder.commit("Add crash tests", date(2024, 1, 1))
        repo_builder.remove(
            "tests/crashes/100.rs",
            "tests/crashes/100-other.rs",
            "tests/crashes/200-foo.rs",
        )
        commit = repo_builder.commit(
            "Auto merge of #4242 - a:b, r=c", date(2024, 2, 1)
        )

        events = scan_deleted_files(repo_builder.path)

        assert sorted(e.file_path for e in events) == [
            "tests/crashes/100-other.rs",
            "tests/crashes/100.rs",
            "tests/crashes/200-foo.rs",
        ]
        assert {e.commit_sha for e in events} == {commit.hexsha}
        assert {e.pr_number for e in events} == {4242}

    def test_ignores_unparseable_and_unmatched_paths(
        self, repo_builder: RepoBuilder
    ) -> None:
        """Test that only matching files with issue numbers are reported."""
        repo_builder.add(
            "tests/crashes/foo.rs",
            "tests/crashes/7.txt",
            "tests/ui/8.rs",
            "src/9.rs",
            "tests/crashes/10.rs",
        )
        repo_builder.commit("Add files", date(2024, 1, 1))
        repo_builder.remove(
            "tests/crashes/foo.rs",
            "tests/crashes/7.txt",
            "tests/ui/8.rs",
            "src/9.rs",
            "tests/crashes/10.rs",
        )
        repo_builder.commit("Remove files", date(2024, 1, 2))

        events = scan_deleted_files(repo_builder.path)

        assert [e.file_path for e in events] == ["tests/crashes/10.rs"]

    def test_additions_and_modifications_are_ignored(
        self, repo_builder: RepoBuilder
    ) -> None:
        repo_builder.add("tests/crashes/1.rs")
        repo_builder.commit("Add", date(2024, 1, 1))
        repo_builder.add("tests/crashes/1.rs", content="// changed\n")
        repo_builder.add("tests/crashes/2.rs")
        repo_builder.commit("Modify and add", date(2024, 1, 2))

        assert scan_deleted_files(repo_builder.path) == []

    def test_rename_counts_as_deletion(self, repo_builder: RepoBuilder) -> None:
        """Test that renames are not folded into a single rename entry."""
        repo_builder.add("tests/crashes/10.rs")
        repo_builder.commit("Add", date(2024, 1, 1))
        repo_builder.remove("tests/crashes/10.rs")
        repo_builder.add("tests/crashes/10-renamed.rs")
        repo_builder.commit("Rename", date(2024, 1, 2))

        events = scan_deleted_files(repo_builder.path)

        assert [e.file_path for e in events] == ["tests/crashes/10.rs"]

    def test_root_commit_is_not_diffed(self, repo_builder: RepoBuilder) -> None:
        repo_builder.add("tests/crashes/1.rs")
        repo_builder.commit("Initial", date(2024, 1, 1))

        with CrashHistoryScanner(repo_builder.path) as scanner:
            assert scanner.scan() == []
            assert scanner.commits_scanned == 1

    def test_follows_first_parent_only(self, repo_builder: RepoBuilder) -> None:
        """Test that side-branch commits are not visited.

        The deletion made on the side branch is attributed to the merge
        commit, where it enters the first-parent chain.
        """
        repo_builder.add("tests/crashes/100.rs", "tests/crashes/300.rs")
        root = repo_builder.commit("Add crash tests", date(2024, 1, 1))

        repo_builder.remove("tests/crashes/300.rs")
        side = repo_builder.commit(
            "Side branch fix", date(2024, 1, 2), parents=[root], head=False
        )

        repo_builder.add("tests/crashes/300.rs", "tests/crashes/500.rs")
        main = repo_builder.commit("Mainline work", date(2024, 1, 3))

        repo_builder.remove("tests/crashes/300.rs")
        merge = repo_builder.commit(
            "Auto merge of #77 - a:side, r=b", date(2024, 1, 4), parents=[main, side]
        )

        events = scan_deleted_files(repo_builder.path)

        assert len(events) == 1
        assert events[0].file_path == "tests/crashes/300.rs"
        assert events[0].commit_sha == merge.hexsha
        assert events[0].pr_number == 77
        assert side.hexsha not in {e.commit_sha for e in events}

    def test_custom_path_glob(self, repo_builder: RepoBuilder) -> None:
        repo_builder.add("tests/crashes/1.rs", "tests/ice/2.rs")
        repo_builder.commit("Add", date(2024, 1, 1))
        repo_builder.remove("tests/crashes/1.rs", "tests/ice/2.rs")
        repo_builder.commit("Remove", date(2024, 1, 2))

        events = scan_deleted_files(repo_builder.path, path_glob="tests/ice/*.rs")

        assert [e.file_path for e in events] == ["tests/ice/2.rs"]

    def test_dot_relative_glob_agrees_with_listing(
        self, repo_builder: RepoBuilder
    ) -> None:
        """Test that scan and listing read a './' glob the same way."""
        repo_builder.add("tests/crashes/1.rs", "tests/crashes/1-b.rs")
        repo_builder.commit("Add", date(2024, 1, 1))
        repo_builder.remove("tests/crashes/1.rs")
        repo_builder.commit("Remove", date(2024, 1, 2))
        glob = "./tests/crashes/*.rs"

        with CrashHistoryScanner(repo_builder.path, glob) as scanner:
            assert scanner.path_glob == "tests/crashes/*.rs"
            events = scanner.scan()
            current = scanner.list_current_files()

        assert [e.file_path for e in events] == ["tests/crashes/1.rs"]
        assert current == ["tests/crashes/1-b.rs"]

    def test_iter_deletions_is_lazy(self, dated_history: RepoBuilder) -> None:
        """Test that events are produced one commit at a time."""
        with CrashHistoryScanner(dated_history.path) as scanner:
            deletions = scanner.iter_deletions()
            first = next(deletions)

            assert first.issue_number == 3
            assert scanner.commits_scanned == 1


class TestCommitDate:
    """Test commit timestamp conversion."""

    def test_utc_date(self) -> None:
        # 2023-12-31 23:59:59 UTC
        commit = Mock(committed_date=1704067199, hexsha="a" * 40)
        assert commit_date(commit) == date(2023, 12, 31)

    def test_invalid_timestamp(self) -> None:
        """Test that an unrepresentable timestamp fails with the commit SHA."""
        commit = Mock(committed_date=10**20, hexsha="b" * 40)
        with pytest.raises(RepositoryError, match="b" * 40):
            commit_date(commit)


class TestListCurrentFiles:
    """Test listing crash tests present at HEAD."""

    def test_lists_matching_files_sorted(self, repo_builder: RepoBuilder) -> None:
        repo_builder.add(
            "tests/crashes/200-bar.rs",
            "tests/crashes/100.rs",
            "tests/crashes/notes.md",
            "tests/crashes/nested/300.rs",
            "tests/ui/400.rs",
        )
        repo_builder.commit("Add", date(2024, 1, 1))

        assert list_current_files(repo_builder.path) == [
            "tests/crashes/100.rs",
            "tests/crashes/200-bar.rs",
            "tests/crashes/nested/300.rs",
        ]

    def test_missing_directory(self, repo_builder: RepoBuilder) -> None:
        repo_builder.add("src/lib.rs")
        repo_builder.commit("Add", date(2024, 1, 1))

        assert list_current_files(repo_builder.path) == []

    def test_reflects_head_after_deletions(self, dated_history: RepoBuilder) -> None:
        assert list_current_files(dated_history.path) == []

    def test_repository_without_commits(self, repo_builder: RepoBuilder) -> None:
        with pytest.raises(RepositoryError, match="Failed to read HEAD tree"):
            list_current_files(repo_builder.path)
