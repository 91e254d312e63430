"""Transcript data models returned by the hosted ASR service."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class TranscriptStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class Word(BaseModel):
    """A single transcribed word with timing in milliseconds."""

    text: str
    start: int
    end: int
    speaker: str | None = None
    confidence: float | None = None


class Utterance(BaseModel):
    """Contiguous speech attributed to one speaker (or none)."""

    speaker: str | None = None
    start: int
    end: int
    text: str = ""
    words: list[Word] = Field(default_factory=list)

    @property
    def duration_ms(self) -> int:
        return self.end - self.start


class TranscriptResult(BaseModel):
    """Polled transcript state. ``utterances`` is populated once completed."""

    id: str
    status: str
    error: str | None = None
    text: str | None = None
    utterances: list[Utterance] | None = None

    @property
    def is_pending(self) -> bool:
        return self.status not in (TranscriptStatus.COMPLETED, TranscriptStatus.ERROR)
