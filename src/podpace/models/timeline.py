"""Speaker rate and timeline models."""

from __future__ import annotations

from pydantic import BaseModel, Field

SPEAKER_ID_PREFIX = "Speaker_"


def speaker_id_for(label: str | None) -> str | None:
    """Map a diarization label (e.g. ``A``) to its stable speaker id."""
    if label is None:
        return None
    return f"{SPEAKER_ID_PREFIX}{label}"


class SpeakerWPM(BaseModel):
    """Average speaking rate for one diarized speaker."""

    id: str  # e.g. Speaker_A
    avg_wpm: int
    total_words: int = 0
    total_duration_s: float = 0.0


class Segment(BaseModel):
    """A span of the source timeline, in milliseconds."""

    speaker: str | None = None  # raw label, None for no identified speaker
    start: int
    end: int

    @property
    def duration_ms(self) -> int:
        return self.end - self.start

    @property
    def speaker_id(self) -> str | None:
        return speaker_id_for(self.speaker)


class Target(BaseModel):
    """User-requested speaking rate for one speaker."""

    id: str
    target_wpm: float = Field(gt=0)


class TempoDecision(BaseModel):
    """Resolved tempo for one segment. Always recomputed, never persisted."""

    factor: float = 1.0
    stretch: bool = False
