"""Base protocol for hosted transcription/diarization services."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from podpace.models.transcript import TranscriptResult


class TranscriptionError(RuntimeError):
    """Base class for ASR collaborator failures."""


class TranscriptionFailedError(TranscriptionError):
    """The service reported an error status for the transcript."""


class TranscriptionTimeoutError(TranscriptionError):
    """Polling gave up before the transcript completed."""


class TranscriptionProvider(Protocol):
    """Upload audio, submit a diarized transcription job and wait for it."""

    name: str

    def upload(self, audio_path: Path) -> str: ...

    def submit(self, audio_url: str) -> str: ...

    def wait(self, transcript_id: str) -> TranscriptResult: ...
