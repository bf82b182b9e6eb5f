"""Correlation of deleted crash tests with tracker state."""

from .correlation import (
    classify_deletions,
    needing_attention,
    partially_deleted,
    summarize,
)
from .models import AuditSummary, ClassificationStatus, IssueClassification

__all__ = [
    "AuditSummary",
    "ClassificationStatus",
    "IssueClassification",
    "classify_deletions",
    "needing_attention",
    "partially_deleted",
    "summarize",
]
