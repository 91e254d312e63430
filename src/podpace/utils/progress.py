"""Progress reporting utilities using Rich."""

from __future__ import annotations

from datetime import datetime

from rich.console import Console
from rich.table import Table

console = Console(stderr=True)


def _ts() -> str:
    return datetime.now().strftime("%H:%M:%S")


def log(message: str, *, style: str = "bold") -> None:
    """Log a timestamped message."""
    console.print(f"[dim]\\[{_ts()}][/dim] {message}", style=style, highlight=False)


def log_step(step: str, message: str) -> None:
    """Log a processing step."""
    console.print(
        f"[dim]\\[{_ts()}][/dim] [bold cyan]{step}[/bold cyan] {message}",
        highlight=False,
    )


def log_success(message: str) -> None:
    """Log a success message."""
    log(f"[green]✓[/green] {message}", style="")


def log_warning(message: str) -> None:
    """Log a warning message."""
    log(f"[yellow]⚠[/yellow] {message}", style="")


def log_error(message: str) -> None:
    """Log an error message."""
    log(f"[red]✗[/red] {message}", style="")


def job_label(job_id: str) -> str:
    """Step label used for every job-scoped log line."""
    return f"Job {job_id[:8]}"


def speaker_table(speakers: list, *, title: str = "Speaking Rate") -> Table:
    """Render SpeakerWPM entries as a table."""
    table = Table(title=title, show_lines=True)
    table.add_column("Speaker", style="bold")
    table.add_column("WPM", justify="right")
    table.add_column("Words", justify="right")
    table.add_column("Spoken", justify="right")

    for speaker in speakers:
        mins = int(speaker.total_duration_s) // 60
        secs = int(speaker.total_duration_s) % 60
        table.add_row(
            speaker.id,
            str(speaker.avg_wpm),
            str(speaker.total_words),
            f"{mins}m{secs:02d}s",
        )
    return table
