"""In-process ledger, used by tests and single-shot CLI runs."""

from __future__ import annotations

import threading

from podpace.ledger.base import BaseLedger


class MemoryLedger(BaseLedger):
    """Keeps each job's field map in a dict. Not persistent."""

    def __init__(self) -> None:
        super().__init__()
        self._records: dict[str, dict[str, str]] = {}
        self._guard = threading.Lock()

    def _read(self, job_id: str) -> dict[str, str] | None:
        with self._guard:
            fields = self._records.get(job_id)
            return dict(fields) if fields is not None else None

    def _write(self, job_id: str, fields: dict[str, str]) -> None:
        with self._guard:
            self._records[job_id] = dict(fields)

    def _job_ids(self) -> list[str]:
        with self._guard:
            return list(self._records)

    def raw(self, job_id: str) -> dict[str, str] | None:
        """Stored field map for a job, as a copy."""
        return self._read(job_id)
