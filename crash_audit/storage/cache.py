"""Cache of open issue numbers stored as JSON."""

import json
import logging
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from ..errors import CacheError

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = ".cache"
CACHE_FILE = "open_issues.json"


class CachedIssues(BaseModel):
    """Open issue numbers as persisted in the cache file."""

    timestamp: datetime = Field(
        ..., description="When the issues were fetched (UTC)"
    )
    issue_count: int = Field(..., ge=0, description="Number of cached issues")
    issue_numbers: list[int] = Field(
        default_factory=list, description="Sorted, deduplicated issue numbers"
    )

    def to_set(self) -> frozenset[int]:
        return frozenset(self.issue_numbers)

    def age(self, now: datetime | None = None) -> timedelta:
        """Time elapsed since the cache was written, never negative."""
        now = now or datetime.now(timezone.utc)
        timestamp = self.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return max(now - timestamp, timedelta(0))


class IssueCache:
    """Manages the open-issue cache file."""

    def __init__(self, cache_dir: str | Path = DEFAULT_CACHE_DIR):
        """Initialize the cache.

        Args:
            cache_dir: Directory holding the cache file. Created on first save.
        """
        self.cache_dir = Path(cache_dir)

    @property
    def path(self) -> Path:
        return self.cache_dir / CACHE_FILE

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> CachedIssues:
        """Load cached issue numbers.

        Raises:
            CacheError: If the file is missing, unreadable or malformed
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            return CachedIssues.model_validate(data)
        except OSError as e:
            raise CacheError(f"Failed to read cache file {self.path}") from e
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            raise CacheError(f"Failed to parse cache file {self.path}") from e

    def save(
        self, issue_numbers: Iterable[int], timestamp: datetime | None = None
    ) -> CachedIssues:
        """Write issue numbers to the cache, replacing any previous content.

        Args:
            issue_numbers: Open issue numbers
            timestamp: Capture time, defaults to now (UTC)

        Returns:
            The record that was written
        """
        numbers = sorted(set(issue_numbers))
        cached = CachedIssues(
            timestamp=timestamp or datetime.now(timezone.utc),
            issue_count=len(numbers),
            issue_numbers=numbers,
        )

        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(cached.model_dump_json(indent=2))
        except OSError as e:
            raise CacheError(f"Failed to write cache file {self.path}") from e

        logger.info("Cached %d open issues to %s", cached.issue_count, self.path)
        return cached

    def clear(self) -> bool:
        """Delete the cache file. Returns True if a file was removed."""
        if not self.exists():
            return False
        try:
            self.path.unlink()
        except OSError as e:
            raise CacheError(f"Failed to delete cache file {self.path}") from e
        return True

