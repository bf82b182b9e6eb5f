"""Pydantic models for history scan results."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class DeletionEvent(BaseModel):
    """A crash test file removed between a commit and its first parent.

    Created once per deleted path during the history walk and never mutated.
    """

    model_config = ConfigDict(frozen=True)

    file_path: str = Field(..., description="Repository-relative path of the file")
    issue_number: int = Field(..., description="Issue number derived from filename")
    commit_sha: str = Field(..., description="Full SHA of the deleting commit")
    commit_date: date = Field(..., description="UTC date of the commit timestamp")
    pr_number: int | None = Field(
        None, description="PR number from an 'Auto merge of #N' commit message"
    )

    @property
    def short_sha(self) -> str:
        """Abbreviated commit SHA for display."""
        return self.commit_sha[:8]
