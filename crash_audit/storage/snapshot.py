"""Open-issue snapshots backed by the cache with a remote fallback."""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .cache import IssueCache

logger = logging.getLogger(__name__)

SnapshotSource = Literal["cache", "remote"]


class OpenIssueSnapshot(BaseModel):
    """Open issue numbers captured at a single point in time."""

    model_config = ConfigDict(frozen=True)

    issue_numbers: frozenset[int] = Field(..., description="Open issue numbers")
    captured_at: datetime = Field(..., description="Capture time (UTC)")
    source: SnapshotSource = Field(..., description="Where the snapshot came from")

    def age(self, now: datetime | None = None) -> timedelta:
        """Staleness of the snapshot, for display only."""
        now = now or datetime.now(timezone.utc)
        captured_at = self.captured_at
        if captured_at.tzinfo is None:
            captured_at = captured_at.replace(tzinfo=timezone.utc)
        return max(now - captured_at, timedelta(0))


class SnapshotProvider:
    """Chooses between the cached snapshot and a fresh fetch.

    The cache never expires on its own; a refresh only happens when asked for
    or when no cache exists yet.
    """

    def __init__(self, cache: IssueCache, fetch_issues: Callable[[], Iterable[int]]):
        """Initialize the provider.

        Args:
            cache: Cache holding the last fetched snapshot
            fetch_issues: Callable returning all currently open issue numbers.
                Expected to raise TrackerFetchError on failure.
        """
        self.cache = cache
        self.fetch_issues = fetch_issues

    def _refresh(self) -> OpenIssueSnapshot:
        issue_numbers = self.fetch_issues()
        cached = self.cache.save(issue_numbers)
        return OpenIssueSnapshot(
            issue_numbers=cached.to_set(),
            captured_at=cached.timestamp,
            source="remote",
        )

    def get_snapshot(self, force_refresh: bool = False) -> OpenIssueSnapshot:
        """Return the current open-issue snapshot.

        Args:
            force_refresh: Ignore any existing cache and fetch from the tracker

        Raises:
            TrackerFetchError: If a fetch is needed and fails
            CacheError: If the cache cannot be read or written
        """
        if force_refresh:
            logger.debug("Refreshing open-issue cache")
            return self._refresh()

        if self.cache.exists():
            cached = self.cache.load()
            logger.debug("Loaded %d open issues from cache", cached.issue_count)
            return OpenIssueSnapshot(
                issue_numbers=cached.to_set(),
                captured_at=cached.timestamp,
                source="cache",
            )

        logger.debug("No cache at %s, fetching open issues", self.cache.path)
        return self._refresh()
