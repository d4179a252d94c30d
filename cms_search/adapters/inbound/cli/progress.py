"""Rich rendering of bulk sync progress and tallies."""

from rich.console import Console
from rich.table import Table

from ....core.domain import BatchReindexReport


class SyncProgress:
    """Per-content-type and total tallies for a full CMS sync."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self.reports: list[BatchReindexReport] = []

    def start_content_type(self, content_type: str) -> None:
        self.console.print(f"\n[bold cyan]Syncing {content_type}[/]")

    def add(self, report: BatchReindexReport) -> None:
        self.reports.append(report)
        self.console.print(
            f"  [green]{report.succeeded} indexed[/], "
            f"[yellow]{report.skipped} skipped[/], "
            f"[red]{report.failed} failed[/], "
            f"[magenta]{report.images_analyzed} images analyzed[/]"
        )
        for error in report.errors[:3]:
            self.console.print(f"  [dim red]{error.get('uid')}: {error.get('error')}[/]")

    def finish(self) -> None:
        """Print the summary table."""
        table = Table(title="Sync Summary", show_lines=False)
        table.add_column("Content type", style="cyan")
        table.add_column("Entries", justify="right")
        table.add_column("Indexed", justify="right", style="green")
        table.add_column("Skipped", justify="right", style="yellow")
        table.add_column("Failed", justify="right", style="red")
        table.add_column("Images analyzed", justify="right", style="magenta")
        table.add_column("Success rate", justify="right")

        totals = BatchReindexReport(content_type="Total", locale="")
        for report in self.reports:
            table.add_row(*self._row(report))
            totals.total += report.total
            totals.succeeded += report.succeeded
            totals.skipped += report.skipped
            totals.failed += report.failed
            totals.images_analyzed += report.images_analyzed

        if len(self.reports) > 1:
            table.add_section()
            table.add_row(*self._row(totals), style="bold")

        self.console.print()
        self.console.print(table)

    @staticmethod
    def _row(report: BatchReindexReport) -> list[str]:
        return [
            report.content_type,
            str(report.total),
            str(report.succeeded),
            str(report.skipped),
            str(report.failed),
            str(report.images_analyzed),
            f"{report.success_rate:.1f}%",
        ]
