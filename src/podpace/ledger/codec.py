"""Field encoding for ledger records.

A record is a flat map of field name to string, the same shape as a Redis
hash: scalars are stored as-is, lists of models as JSON arrays, and ``None``
removes the field. Records are validated when decoded.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from podpace.models.job import JobRecord

JSON_FIELDS = frozenset({"speakers", "diarizationSegments", "targets"})


class LedgerError(Exception):
    """Base class for ledger failures."""


class LedgerDataError(LedgerError):
    """A stored record does not match its schema."""


def field_name(attr: str) -> str:
    """Ledger field name for a JobRecord attribute (``output_file_path`` → ``outputFilePath``)."""
    info = JobRecord.model_fields.get(attr)
    if info is None:
        raise ValueError(f"Unknown ledger field: {attr}")
    return info.alias or attr


def encode_value(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return json.dumps([
            v.model_dump(mode="json") if isinstance(v, BaseModel) else v
            for v in value
        ])
    if isinstance(value, BaseModel):
        return json.dumps(value.model_dump(mode="json"))
    return str(value)


def apply_updates(fields: dict[str, str], updates: dict[str, Any]) -> dict[str, str]:
    """Return a copy of ``fields`` with attribute ``updates`` encoded and applied."""
    merged = dict(fields)
    for attr, value in updates.items():
        name = field_name(attr)
        if name == "jobId":
            raise ValueError("jobId cannot be updated")
        if value is None:
            merged.pop(name, None)
        else:
            merged[name] = encode_value(value)
    return merged


def decode_record(job_id: str, fields: dict[str, str]) -> JobRecord:
    """Validate a raw field map into a JobRecord.

    Raises:
        LedgerDataError: if a JSON field is malformed or a value fails validation.
    """
    data: dict[str, Any] = {"jobId": job_id}
    for name, raw in fields.items():
        if name in JSON_FIELDS:
            try:
                data[name] = json.loads(raw)
            except (TypeError, json.JSONDecodeError) as e:
                raise LedgerDataError(f"Job {job_id}: field '{name}' is not valid JSON") from e
        else:
            data[name] = raw

    try:
        return JobRecord.model_validate(data)
    except ValidationError as e:
        raise LedgerDataError(f"Job {job_id}: invalid record: {e}") from e
