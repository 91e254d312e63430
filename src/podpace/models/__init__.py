"""Pydantic data models for PodPace."""

from podpace.models.config import AdjustConfig, AnalyzeConfig, Settings, StorageConfig
from podpace.models.job import AdjustTask, AnalyzeTask, JobRecord, JobStatus
from podpace.models.timeline import Segment, SpeakerWPM, Target, TempoDecision
from podpace.models.transcript import TranscriptResult, Utterance, Word

__all__ = [
    "AdjustConfig",
    "AdjustTask",
    "AnalyzeConfig",
    "AnalyzeTask",
    "JobRecord",
    "JobStatus",
    "Segment",
    "Settings",
    "SpeakerWPM",
    "StorageConfig",
    "Target",
    "TempoDecision",
    "TranscriptResult",
    "Utterance",
    "Word",
]
