"""podpace resume — finish jobs left unfinished by a previous run."""

from __future__ import annotations

import click

from podpace.cli.render import console, jobs_table
from podpace.pipeline.runtime import build_dispatcher, open_ledger
from podpace.utils.progress import log


@click.command()
@click.pass_obj
def resume_cmd(settings) -> None:
    """Re-dispatch every job that is not COMPLETE, FAILED or READY_FOR_INPUT."""
    ledger = open_ledger(settings)

    with build_dispatcher(settings, ledger) as dispatcher:
        futures = dispatcher.resume()
        records = [f.result() for f in futures]

    records = [r for r in records if r is not None]
    if not records:
        log("Nothing to resume")
        return
    console.print(jobs_table(records))
