"""Pydantic models for correlation results."""

from enum import Enum

from pydantic import BaseModel, Field

from ..history.models import DeletionEvent


class ClassificationStatus(str, Enum):
    """Outcome of reconciling an issue's deleted crash tests with its state."""

    FULLY_DELETED_OPEN = "fully_deleted_open"
    FULLY_DELETED_CLOSED = "fully_deleted_closed"
    PARTIALLY_DELETED = "partially_deleted"


class IssueClassification(BaseModel):
    """All deletions recorded for one issue and the resulting status."""

    issue_number: int = Field(..., description="Issue number shared by the files")
    deletions: list[DeletionEvent] = Field(
        ..., description="Deletion events in traversal order"
    )
    remaining_count: int = Field(
        ..., ge=0, description="Files for this issue still present at HEAD"
    )
    status: ClassificationStatus = Field(..., description="Classification bucket")

    @property
    def needs_attention(self) -> bool:
        """True when every crash test is gone but the issue is still open."""
        return self.status is ClassificationStatus.FULLY_DELETED_OPEN

    @property
    def deleted_count(self) -> int:
        return len(self.deletions)


class AuditSummary(BaseModel):
    """Aggregate statistics over one audit run."""

    total_deleted_files: int = Field(0, description="Deletion events across issues")
    total_open_issues: int = Field(0, description="Open issues in the tracker")
    issue_counts: dict[ClassificationStatus, int] = Field(
        default_factory=lambda: {status: 0 for status in ClassificationStatus}
    )
    file_counts: dict[ClassificationStatus, int] = Field(
        default_factory=lambda: {status: 0 for status in ClassificationStatus}
    )

    @property
    def total_issues(self) -> int:
        return sum(self.issue_counts.values())

    def percentage(self, count: int) -> float:
        """Express a file count as a percentage of all deleted files."""
        if self.total_deleted_files == 0:
            return 0.0
        return count / self.total_deleted_files * 100
