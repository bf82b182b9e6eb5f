"""Local persistence of open-issue snapshots."""

from .cache import CachedIssues, IssueCache
from .snapshot import OpenIssueSnapshot, SnapshotProvider

__all__ = ["CachedIssues", "IssueCache", "OpenIssueSnapshot", "SnapshotProvider"]
