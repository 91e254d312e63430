"""Job ledger interface and the shared transition protocol."""

from __future__ import annotations

import threading
import time
from collections.abc import Collection
from typing import Any, Protocol

from podpace.ledger.codec import LedgerDataError, LedgerError, apply_updates, decode_record
from podpace.models.job import JobRecord, JobStatus, can_transition
from podpace.utils.progress import log_warning


class JobNotFoundError(LedgerError):
    """No record exists for the job id."""


class InvalidTransitionError(LedgerError):
    """The requested status change is not in the transition table."""

    def __init__(self, job_id: str, current: JobStatus, requested: JobStatus):
        self.job_id = job_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Job {job_id}: transition {current.value} → {requested.value} not allowed"
        )


class StaleStatusError(LedgerError):
    """The job left the status the caller based its decision on."""

    def __init__(self, job_id: str, current: JobStatus, requested: JobStatus):
        self.job_id = job_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Job {job_id}: status changed to {current.value} before {requested.value} could be set"
        )


class JobLedger(Protocol):
    """Persistent store of job status and stage data."""

    def create(self, job_id: str, **fields: Any) -> JobRecord: ...
    def get(self, job_id: str) -> JobRecord | None: ...
    def transition(
        self,
        job_id: str,
        status: JobStatus,
        *,
        expected: Collection[JobStatus] | None = None,
        **fields: Any,
    ) -> JobRecord: ...
    def list_jobs(self) -> list[JobRecord]: ...


def now_ms() -> int:
    return int(time.time() * 1000)


class BaseLedger:
    """Read-modify-write logic shared by all ledger backends.

    Backends store a flat ``dict[str, str]`` per job and must replace it
    atomically in ``_write``. Writes to one job id are serialized by a per-job
    lock; different job ids never contend. Storage failures from the hooks
    surface as ``LedgerError``.
    """

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # Storage hooks -----------------------------------------------------

    def _read(self, job_id: str) -> dict[str, str] | None:
        raise NotImplementedError

    def _write(self, job_id: str, fields: dict[str, str]) -> None:
        raise NotImplementedError

    def _job_ids(self) -> list[str]:
        raise NotImplementedError

    # Protocol ------------------------------------------------------------

    def _lock(self, job_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(job_id)
            if lock is None:
                lock = self._locks[job_id] = threading.Lock()
            return lock

    def _load(self, job_id: str) -> dict[str, str] | None:
        try:
            return self._read(job_id)
        except UnicodeDecodeError as e:
            raise LedgerDataError(f"Job {job_id}: ledger record is not valid UTF-8") from e
        except OSError as e:
            raise LedgerError(f"Job {job_id}: read failed: {e}") from e

    def _store(self, job_id: str, fields: dict[str, str]) -> JobRecord:
        # Validate before persisting so a bad update never reaches readers.
        record = decode_record(job_id, fields)
        try:
            self._write(job_id, fields)
        except OSError as e:
            raise LedgerError(f"Job {job_id}: write failed: {e}") from e
        return record

    def create(self, job_id: str, **fields: Any) -> JobRecord:
        """Create a PENDING record. Fails if the job already exists."""
        with self._lock(job_id):
            if self._load(job_id) is not None:
                raise LedgerError(f"Job {job_id} already exists")
            raw = apply_updates({}, fields)
            raw["status"] = JobStatus.PENDING.value
            raw["updatedAt"] = str(now_ms())
            return self._store(job_id, raw)

    def get(self, job_id: str) -> JobRecord | None:
        raw = self._load(job_id)
        if raw is None:
            return None
        return decode_record(job_id, raw)

    def transition(
        self,
        job_id: str,
        status: JobStatus,
        *,
        expected: Collection[JobStatus] | None = None,
        **fields: Any,
    ) -> JobRecord:
        """Set ``status`` and ``fields`` in a single atomic write.

        ``expected`` restricts the statuses the job may be in when the write
        happens; the check runs under the job's lock.

        Raises:
            JobNotFoundError: the job does not exist.
            StaleStatusError: the job is not in one of ``expected``.
            InvalidTransitionError: the move is not in the transition table.
        """
        status = JobStatus(status)
        with self._lock(job_id):
            raw = self._load(job_id)
            if raw is None:
                raise JobNotFoundError(f"Job {job_id} not found")

            current = decode_record(job_id, raw).status
            if expected is not None and current not in expected:
                raise StaleStatusError(job_id, current, status)
            if not can_transition(current, status):
                raise InvalidTransitionError(job_id, current, status)

            updated = apply_updates(raw, fields)
            updated["status"] = status.value
            updated["updatedAt"] = str(now_ms())
            return self._store(job_id, updated)

    def list_jobs(self) -> list[JobRecord]:
        """All decodable records. Unreadable ones are reported and skipped."""
        try:
            job_ids = self._job_ids()
        except OSError as e:
            raise LedgerError(f"Cannot list ledger records: {e}") from e

        records: list[JobRecord] = []
        for job_id in job_ids:
            try:
                record = self.get(job_id)
            except LedgerError as e:
                log_warning(f"Skipping unreadable ledger record: {e}")
                continue
            if record is not None:
                records.append(record)
        return records
