"""Job submission: accept uploads, request adjustments, read status."""

from __future__ import annotations

import shutil
import uuid
from collections.abc import Callable, Sequence
from pathlib import Path

from podpace.ledger.base import (
    InvalidTransitionError,
    JobLedger,
    JobNotFoundError,
    StaleStatusError,
)
from podpace.models.config import StorageConfig
from podpace.models.job import AdjustTask, AnalyzeTask, JobRecord, JobStatus
from podpace.models.timeline import Target
from podpace.utils.ffprobe import AudioInfo, ProbeError, probe_audio
from podpace.utils.progress import job_label, log_step, log_warning

ADJUSTABLE_STATES = frozenset({JobStatus.READY_FOR_INPUT, JobStatus.FAILED})


class UploadValidationError(ValueError):
    """The submitted file is missing, empty or not audio."""


class AdjustRequestError(ValueError):
    """The job cannot accept an adjustment request right now."""


def create_job(
    ledger: JobLedger,
    source: Path | str,
    storage: StorageConfig | None = None,
    *,
    original_filename: str | None = None,
    probe: Callable[..., AudioInfo] = probe_audio,
) -> AnalyzeTask:
    """Validate an audio file, store a copy and create a PENDING job.

    Returns the analyze task to hand to the dispatcher. Nothing is written
    to the ledger when validation fails.
    """
    storage = storage or StorageConfig()
    source = Path(source)

    if not source.is_file():
        raise UploadValidationError(f"No valid audio file uploaded: {source}")
    if source.stat().st_size == 0:
        raise UploadValidationError(f"Uploaded file is empty: {source.name}")
    try:
        info = probe(source, binary=storage.ffprobe_binary)
    except (ProbeError, FileNotFoundError) as e:
        raise UploadValidationError(f"Invalid audio file {source.name}: {e}") from e

    job_id = str(uuid.uuid4())
    original_filename = original_filename or source.name

    upload_dir = Path(storage.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    dest = upload_dir / f"{job_id}{source.suffix.lower()}"
    shutil.copy2(source, dest)

    ledger.create(job_id, original_filename=original_filename, file_path=str(dest))
    log_step(
        job_label(job_id),
        f"Created for {original_filename} ({info.duration_seconds:.1f}s, {info.codec or 'unknown codec'})",
    )
    return AnalyzeTask(job_id=job_id, file_path=str(dest), original_filename=original_filename)


def job_status(ledger: JobLedger, job_id: str) -> JobRecord:
    """Current ledger record for ``job_id``."""
    record = ledger.get(job_id)
    if record is None:
        raise JobNotFoundError(f"Job {job_id} not found")
    return record


def request_adjust(
    ledger: JobLedger,
    job_id: str,
    targets: Sequence[Target],
) -> AdjustTask:
    """Queue an adjustment for an analyzed (or previously failed) job.

    Targets are stored and any previous error is cleared in the same write
    that moves the job to QUEUED_FOR_ADJUSTMENT. The write only happens if
    the job is still in the status checked here, so two concurrent requests
    cannot both queue it.
    """
    record = job_status(ledger, job_id)
    label = job_label(job_id)

    if record.status not in ADJUSTABLE_STATES:
        raise AdjustRequestError(
            f"Job status is {record.status.value}, cannot start/retry adjustment"
        )
    if not targets:
        raise AdjustRequestError("Invalid adjustment targets provided")
    if not record.has_analysis:
        raise AdjustRequestError("Job has no analysis results; it must be analyzed again")
    if not record.file_path or not record.original_filename:
        raise AdjustRequestError("Job record is missing its file information")

    known = {speaker.id for speaker in record.speakers or []}
    for target in targets:
        if target.id not in known:
            log_warning(f"{label} target {target.id} matches no analyzed speaker")

    if record.status == JobStatus.FAILED:
        log_step(label, f"Retrying adjustment (previous error: {record.error})")

    try:
        ledger.transition(
            job_id, JobStatus.QUEUED_FOR_ADJUSTMENT,
            expected={record.status},
            targets=list(targets),
            error=None,
        )
    except (InvalidTransitionError, StaleStatusError) as e:
        raise AdjustRequestError(str(e)) from e

    return AdjustTask(
        job_id=job_id,
        file_path=record.file_path,
        original_filename=record.original_filename,
        targets=list(targets),
    )
