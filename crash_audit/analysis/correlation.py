"""Correlate deleted crash tests with the set of open issues."""

import logging
from collections.abc import Iterable, Set

from ..history.extract import extract_issue_number
from ..history.models import DeletionEvent
from .models import AuditSummary, ClassificationStatus, IssueClassification

logger = logging.getLogger(__name__)


def group_by_issue(events: Iterable[DeletionEvent]) -> dict[int, list[DeletionEvent]]:
    """Group deletion events by issue number, keeping traversal order per group."""
    groups: dict[int, list[DeletionEvent]] = {}
    for event in events:
        groups.setdefault(event.issue_number, []).append(event)
    return groups


def count_remaining_files(current_files: Iterable[str]) -> dict[int, int]:
    """Count files still present for each issue number.

    Any present file counts, whatever its history. A test deleted and later
    recreated under the same issue number therefore makes the issue partial.
    """
    counts: dict[int, int] = {}
    for path in current_files:
        issue_number = extract_issue_number(path)
        if issue_number is not None:
            counts[issue_number] = counts.get(issue_number, 0) + 1
    return counts


def classify_status(
    issue_number: int, remaining_count: int, open_issues: Set[int]
) -> ClassificationStatus:
    """Pick the bucket for one issue. Remaining files take precedence."""
    if remaining_count > 0:
        return ClassificationStatus.PARTIALLY_DELETED
    if issue_number in open_issues:
        return ClassificationStatus.FULLY_DELETED_OPEN
    return ClassificationStatus.FULLY_DELETED_CLOSED


def classify_deletions(
    events: Iterable[DeletionEvent],
    open_issues: Set[int],
    current_files: Iterable[str],
) -> dict[int, IssueClassification]:
    """Classify every issue that appears in at least one deletion event.

    Args:
        events: Deletion events from the history scan
        open_issues: Issue numbers currently open in the tracker
        current_files: Crash test paths present at HEAD

    Returns:
        Mapping of issue number to classification, ordered by issue number
    """
    groups = group_by_issue(events)
    remaining = count_remaining_files(current_files)

    classifications: dict[int, IssueClassification] = {}
    for issue_number in sorted(groups):
        remaining_count = remaining.get(issue_number, 0)
        status = classify_status(issue_number, remaining_count, open_issues)
        logger.debug(
            "Issue #%d: %d deleted, %d remaining -> %s",
            issue_number,
            len(groups[issue_number]),
            remaining_count,
            status.value,
        )
        classifications[issue_number] = IssueClassification(
            issue_number=issue_number,
            deletions=groups[issue_number],
            remaining_count=remaining_count,
            status=status,
        )

    return classifications


def filter_by_status(
    classifications: dict[int, IssueClassification], status: ClassificationStatus
) -> list[IssueClassification]:
    """Return the classifications in one bucket, in issue order."""
    return [c for c in classifications.values() if c.status is status]


def needing_attention(
    classifications: dict[int, IssueClassification],
) -> list[IssueClassification]:
    return filter_by_status(classifications, ClassificationStatus.FULLY_DELETED_OPEN)


def partially_deleted(
    classifications: dict[int, IssueClassification],
) -> list[IssueClassification]:
    return filter_by_status(classifications, ClassificationStatus.PARTIALLY_DELETED)


def summarize(
    classifications: dict[int, IssueClassification], total_open_issues: int
) -> AuditSummary:
    """Accumulate per-bucket issue and file totals for reporting."""
    summary = AuditSummary(total_open_issues=total_open_issues)
    for classification in classifications.values():
        summary.issue_counts[classification.status] += 1
        summary.file_counts[classification.status] += classification.deleted_count
        summary.total_deleted_files += classification.deleted_count
    return summary
