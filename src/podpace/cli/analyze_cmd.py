"""podpace analyze — submit audio files for speaker analysis."""

from __future__ import annotations

import click

from podpace.asr.base import TranscriptionError
from podpace.cli.render import print_job
from podpace.pipeline.jobs import UploadValidationError, create_job
from podpace.pipeline.runtime import build_dispatcher, open_ledger
from podpace.utils.progress import log_error, log_success


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option(
    "--queue-only",
    is_flag=True,
    help="Create the jobs without running analysis (run later with `podpace resume`)",
)
@click.pass_obj
def analyze_cmd(settings, files: tuple[str, ...], queue_only: bool) -> None:
    """Create a job per FILE and run diarized analysis."""
    ledger = open_ledger(settings)

    tasks = []
    for path in files:
        try:
            tasks.append(create_job(ledger, path, settings.storage))
        except UploadValidationError as e:
            log_error(str(e))
    if not tasks:
        raise SystemExit(1)
    if queue_only:
        for task in tasks:
            log_success(f"Queued {task.original_filename} as job {task.job_id}")
        return

    try:
        dispatcher = build_dispatcher(settings, ledger, require_asr=True)
    except TranscriptionError as e:
        log_error(f"Cannot start analysis: {e}")
        raise SystemExit(1)

    with dispatcher:
        futures = [dispatcher.submit_analyze(task) for task in tasks]
        results = [f.result() for f in futures if f is not None]

    failed = False
    for record in results:
        if record is None:
            continue
        print_job(record)
        failed = failed or record.error is not None
    if failed:
        raise SystemExit(1)
