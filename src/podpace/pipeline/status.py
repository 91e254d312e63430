"""Best-effort job status writes used by the coordinators."""

from __future__ import annotations

from typing import Any

from podpace.ledger.base import JobLedger
from podpace.ledger.codec import LedgerError
from podpace.models.job import JobRecord, JobStatus
from podpace.utils.progress import job_label, log_error, log_step


def update_job_status(
    ledger: JobLedger,
    job_id: str,
    status: JobStatus,
    **fields: Any,
) -> JobRecord | None:
    """Write ``status`` and ``fields`` atomically.

    Ledger failures (including rejected transitions and storage errors) are
    logged, not raised: a lost status update only delays visibility, it must
    not abort the job.
    Returns the new record, or None if the write did not happen.
    """
    label = job_label(job_id)
    log_step(label, f"Status → {status.value}")
    try:
        return ledger.transition(job_id, status, **fields)
    except (LedgerError, OSError) as e:
        log_error(f"{label} failed to update status to {status.value}: {e}")
        return None


def failure_message(exc: BaseException) -> str:
    """Message stored in the ledger ``error`` field."""
    message = str(exc).strip()
    return message or type(exc).__name__
