"""Rich rendering of job records for the CLI."""

from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.table import Table

from podpace.models.job import JobRecord, JobStatus
from podpace.utils.progress import speaker_table

console = Console()

STATUS_STYLES = {
    JobStatus.READY_FOR_INPUT: "bold yellow",
    JobStatus.COMPLETE: "bold green",
    JobStatus.FAILED: "bold red",
}


def _status_text(status: JobStatus) -> str:
    style = STATUS_STYLES.get(status, "cyan")
    return f"[{style}]{status.value}[/{style}]"


def _updated(record: JobRecord) -> str:
    if not record.updated_at:
        return "—"
    return datetime.fromtimestamp(record.updated_at / 1000).strftime("%Y-%m-%d %H:%M:%S")


def print_job(record: JobRecord) -> None:
    """Detailed view of a single job."""
    console.print(f"\n[bold]Job {record.job_id}[/bold]")
    console.print(f"File: {record.original_filename or '—'}")
    console.print(f"Status: {_status_text(record.status)}")
    console.print(f"[dim]Updated {_updated(record)}[/dim]")

    if record.speakers:
        console.print()
        console.print(speaker_table(record.speakers))
    if record.targets:
        wanted = ", ".join(f"{t.id}={t.target_wpm:g}" for t in record.targets)
        console.print(f"Targets: {wanted}")
    if record.output_file_path:
        console.print(f"Output: [green]{record.output_file_path}[/green]")
    if record.error:
        console.print(f"Error: [red]{record.error}[/red]")
    console.print()


def jobs_table(records: list[JobRecord]) -> Table:
    """One row per job, most recently updated first."""
    table = Table(title="Jobs", show_lines=True)
    table.add_column("Job", style="bold")
    table.add_column("File")
    table.add_column("Status")
    table.add_column("Updated")
    table.add_column("Notes")

    for record in sorted(records, key=lambda r: r.updated_at, reverse=True):
        notes = ""
        if record.error:
            notes = f"[red]{record.error[:60]}[/red]"
        elif record.output_file_path:
            notes = record.output_file_path
        table.add_row(
            record.job_id[:8],
            record.original_filename or "—",
            _status_text(record.status),
            _updated(record),
            notes,
        )
    return table
