"""podpace status — show job state."""

from __future__ import annotations

import click

from podpace.cli.render import console, jobs_table, print_job
from podpace.ledger.base import JobNotFoundError
from podpace.ledger.codec import LedgerError
from podpace.pipeline.jobs import job_status
from podpace.pipeline.runtime import open_ledger
from podpace.utils.progress import log_error


@click.command()
@click.argument("job_id", required=False)
@click.pass_obj
def status_cmd(settings, job_id: str | None) -> None:
    """Show one job in detail, or list all jobs."""
    ledger = open_ledger(settings)

    if job_id is None:
        records = ledger.list_jobs()
        if not records:
            console.print("[dim]No jobs.[/dim]")
            return
        console.print(jobs_table(records))
        return

    try:
        record = job_status(ledger, job_id)
    except JobNotFoundError:
        log_error(f"Job not found: {job_id}")
        raise SystemExit(1)
    except LedgerError as e:
        log_error(f"Cannot read job {job_id}: {e}")
        raise SystemExit(1)

    print_job(record)
