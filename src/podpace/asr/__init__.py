"""Hosted ASR collaborators."""

from podpace.asr.assemblyai import AssemblyAIClient, build_assemblyai_client
from podpace.asr.base import (
    TranscriptionError,
    TranscriptionFailedError,
    TranscriptionProvider,
    TranscriptionTimeoutError,
)

__all__ = [
    "AssemblyAIClient",
    "TranscriptionError",
    "TranscriptionFailedError",
    "TranscriptionProvider",
    "TranscriptionTimeoutError",
    "build_assemblyai_client",
]
