"""Render audit results as a text report."""

from rich.console import Console
from rich.rule import Rule
from rich.table import Table

from ..analysis.correlation import needing_attention, partially_deleted
from ..analysis.models import AuditSummary, ClassificationStatus, IssueClassification
from ..config import DEFAULT_TRACKER
from ..history.models import DeletionEvent


class ReportRenderer:
    """Prints classified deletions grouped by what needs doing."""

    def __init__(
        self, console: Console | None = None, tracker: str = DEFAULT_TRACKER
    ):
        self.console = console or Console()
        self.tracker = tracker

    def issue_url(self, issue_number: int) -> str:
        return f"https://github.com/{self.tracker}/issues/{issue_number}"

    def pull_url(self, pr_number: int) -> str:
        return f"https://github.com/{self.tracker}/pull/{pr_number}"

    def _deletion_line(self, event: DeletionEvent) -> str:
        line = (
            f"    {event.file_path} deleted in {event.short_sha} "
            f"({event.commit_date.isoformat()})"
        )
        if event.pr_number is not None:
            line += f" via {self.pull_url(event.pr_number)}"
        return line

    def render_needing_attention(self, issues: list[IssueClassification]) -> None:
        self.console.print(
            "⚠️  [bold yellow]Out-of-sync issues "
            "(crash tests deleted but issue still open):[/bold yellow]"
        )
        self.console.print()
        for classification in issues:
            self.console.print(f"  • Issue #{classification.issue_number}")
            for event in classification.deletions:
                self.console.print(
                    self._deletion_line(event), markup=False, highlight=False
                )
            self.console.print(
                f"    {self.issue_url(classification.issue_number)}", highlight=False
            )
            self.console.print()

    def render_partially_deleted(self, issues: list[IssueClassification]) -> None:
        self.console.print(
            "🔶 [bold]Partially cleaned issues (some crash tests remain):[/bold]"
        )
        self.console.print()
        for classification in issues:
            self.console.print(
                f"  • Issue #{classification.issue_number}: "
                f"{classification.deleted_count} deleted, "
                f"{classification.remaining_count} remaining"
            )
            for event in classification.deletions:
                self.console.print(
                    self._deletion_line(event), markup=False, highlight=False
                )
            self.console.print()

    def render_summary(self, summary: AuditSummary) -> None:
        table = Table(title="Summary")
        table.add_column("Category", style="cyan")
        table.add_column("Issues", justify="right", style="green")
        table.add_column("Deleted files", justify="right", style="yellow")
        table.add_column("% of files", justify="right")

        rows = [
            ("⚠️  Issues still open", ClassificationStatus.FULLY_DELETED_OPEN),
            ("✅ Issues properly closed", ClassificationStatus.FULLY_DELETED_CLOSED),
            ("🔶 Partially deleted", ClassificationStatus.PARTIALLY_DELETED),
        ]
        for label, status in rows:
            files = summary.file_counts[status]
            table.add_row(
                label,
                str(summary.issue_counts[status]),
                str(files),
                f"{summary.percentage(files):.1f}%",
            )

        self.console.print(Rule())
        self.console.print(f"Total deleted crash tests: {summary.total_deleted_files}")
        self.console.print(
            f"Total open issues in {self.tracker}: {summary.total_open_issues}"
        )
        self.console.print(table)
        self.console.print(Rule())

    def render_recommendation(self, summary: AuditSummary) -> None:
        out_of_sync = summary.issue_counts[ClassificationStatus.FULLY_DELETED_OPEN]
        partial = summary.issue_counts[ClassificationStatus.PARTIALLY_DELETED]

        if out_of_sync == 0:
            self.console.print(
                "\n✅ All fully deleted crash tests have properly closed issues!"
            )
        else:
            self.console.print(
                f"\n⚠️  Found {out_of_sync} out-of-sync issue(s) that need attention."
            )
            self.console.print("\nThese issues should either:")
            self.console.print(
                "  1. Be reopened (if the crash test was removed by mistake)"
            )
            self.console.print("  2. Be closed (if the issue is actually fixed)")

        if partial:
            self.console.print(
                f"\n🔶 {partial} issue(s) still have crash tests in the tree; "
                "check whether the remaining tests are still needed."
            )

    def render(
        self,
        classifications: dict[int, IssueClassification],
        summary: AuditSummary,
    ) -> None:
        """Print the full report."""
        attention = needing_attention(classifications)
        partial = partially_deleted(classifications)

        if attention:
            self.render_needing_attention(attention)
        if partial:
            self.render_partially_deleted(partial)

        self.render_summary(summary)
        self.render_recommendation(summary)
