"""podpace adjust — normalize speakers of an analyzed job."""

from __future__ import annotations

import click

from podpace.cli.render import print_job
from podpace.ledger.base import JobNotFoundError
from podpace.models.job import JobStatus
from podpace.models.timeline import Target
from podpace.pipeline.jobs import AdjustRequestError, request_adjust
from podpace.pipeline.runtime import build_dispatcher, open_ledger
from podpace.utils.progress import log_error


def parse_target(value: str) -> Target:
    """Parse ``SPEAKER=WPM`` (e.g. ``Speaker_A=150``)."""
    speaker, sep, wpm = value.partition("=")
    if not sep or not speaker.strip():
        raise click.BadParameter(f"expected SPEAKER=WPM, got {value!r}")
    try:
        target_wpm = float(wpm)
    except ValueError:
        raise click.BadParameter(f"WPM must be a number, got {wpm!r}")
    if target_wpm <= 0:
        raise click.BadParameter(f"WPM must be positive, got {wpm!r}")
    return Target(id=speaker.strip(), target_wpm=target_wpm)


def _targets_callback(ctx, param, values: tuple[str, ...]) -> list[Target]:
    return [parse_target(v) for v in values]


@click.command()
@click.argument("job_id")
@click.option(
    "--target", "-t",
    "targets",
    multiple=True,
    required=True,
    callback=_targets_callback,
    help="Target rate as SPEAKER=WPM; repeat for each speaker",
)
@click.pass_obj
def adjust_cmd(settings, job_id: str, targets: list[Target]) -> None:
    """Adjust speakers of JOB_ID toward their target WPM and rebuild the audio."""
    ledger = open_ledger(settings)

    try:
        task = request_adjust(ledger, job_id, targets)
    except JobNotFoundError:
        log_error(f"Job not found: {job_id}")
        raise SystemExit(1)
    except AdjustRequestError as e:
        log_error(str(e))
        raise SystemExit(1)

    with build_dispatcher(settings, ledger, analysis=False) as dispatcher:
        future = dispatcher.submit_adjust(task)
        record = future.result() if future is not None else ledger.get(job_id)

    if record is None:
        log_error(f"Job {job_id} disappeared from the ledger")
        raise SystemExit(1)
    print_job(record)
    if record.status != JobStatus.COMPLETE:
        raise SystemExit(1)
