"""File-backed ledger: one JSON field map per job, replaced atomically."""

from __future__ import annotations

import json
import re
from pathlib import Path

from podpace.ledger.base import BaseLedger
from podpace.ledger.codec import LedgerDataError, LedgerError
from podpace.utils.io import read_json, write_json

_JOB_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class FileLedger(BaseLedger):
    """Stores ``<root>/<job_id>.json``.

    Each write goes to a temp file that is fsynced and renamed over the
    record, so a crash or a concurrent reader never sees a partial update.
    """

    def __init__(self, root: Path | str):
        super().__init__()
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, job_id: str) -> Path:
        if not _JOB_ID_RE.match(job_id):
            raise LedgerError(f"Invalid job id: {job_id!r}")
        return self.root / f"{job_id}.json"

    def _read(self, job_id: str) -> dict[str, str] | None:
        path = self._path(job_id)
        if not path.exists():
            return None
        try:
            data = read_json(path)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise LedgerDataError(f"Job {job_id}: ledger file is corrupt") from e
        except OSError as e:
            raise LedgerError(f"Job {job_id}: cannot read {path}: {e}") from e
        if not isinstance(data, dict):
            raise LedgerDataError(f"Job {job_id}: ledger file is not a field map")
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, job_id: str, fields: dict[str, str]) -> None:
        write_json(self._path(job_id), fields)

    def _job_ids(self) -> list[str]:
        return sorted(p.stem for p in self.root.glob("*.json"))
