"""Job state machine and ledger record models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from podpace.models.timeline import Segment, SpeakerWPM, Target


class JobStatus(str, Enum):
    """Closed set of job states, in pipeline order."""

    PENDING = "PENDING"
    PROCESSING_UPLOAD_CLOUD = "PROCESSING_UPLOAD_CLOUD"
    PROCESSING_CLOUD_ANALYSIS = "PROCESSING_CLOUD_ANALYSIS"
    PROCESSING_WPM_CALCULATION = "PROCESSING_WPM_CALCULATION"
    READY_FOR_INPUT = "READY_FOR_INPUT"
    QUEUED_FOR_ADJUSTMENT = "QUEUED_FOR_ADJUSTMENT"
    PROCESSING_ADJUSTMENT = "PROCESSING_ADJUSTMENT"
    PROCESSING_RECONSTRUCTION = "PROCESSING_RECONSTRUCTION"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETE, JobStatus.FAILED)


TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.PROCESSING_UPLOAD_CLOUD, JobStatus.FAILED}),
    JobStatus.PROCESSING_UPLOAD_CLOUD: frozenset({JobStatus.PROCESSING_CLOUD_ANALYSIS, JobStatus.FAILED}),
    JobStatus.PROCESSING_CLOUD_ANALYSIS: frozenset({JobStatus.PROCESSING_WPM_CALCULATION, JobStatus.FAILED}),
    JobStatus.PROCESSING_WPM_CALCULATION: frozenset({JobStatus.READY_FOR_INPUT, JobStatus.FAILED}),
    JobStatus.READY_FOR_INPUT: frozenset({JobStatus.QUEUED_FOR_ADJUSTMENT, JobStatus.FAILED}),
    JobStatus.QUEUED_FOR_ADJUSTMENT: frozenset({JobStatus.PROCESSING_ADJUSTMENT, JobStatus.FAILED}),
    JobStatus.PROCESSING_ADJUSTMENT: frozenset({JobStatus.PROCESSING_RECONSTRUCTION, JobStatus.FAILED}),
    JobStatus.PROCESSING_RECONSTRUCTION: frozenset({JobStatus.COMPLETE, JobStatus.FAILED}),
    JobStatus.COMPLETE: frozenset(),
    # Retry re-enters the adjust stage only; analysis results are reused.
    JobStatus.FAILED: frozenset({JobStatus.QUEUED_FOR_ADJUSTMENT}),
}

ANALYSIS_STATES = frozenset({
    JobStatus.PENDING,
    JobStatus.PROCESSING_UPLOAD_CLOUD,
    JobStatus.PROCESSING_CLOUD_ANALYSIS,
    JobStatus.PROCESSING_WPM_CALCULATION,
})

ADJUST_STATES = frozenset({
    JobStatus.QUEUED_FOR_ADJUSTMENT,
    JobStatus.PROCESSING_ADJUSTMENT,
    JobStatus.PROCESSING_RECONSTRUCTION,
})


def can_transition(current: JobStatus, new: JobStatus) -> bool:
    """Whether ``current -> new`` is in the table.

    Rewriting the current status is a refresh and is allowed everywhere
    except on a completed job.
    """
    if current == new:
        return current != JobStatus.COMPLETE
    return new in TRANSITIONS[current]


class JobRecord(BaseModel):
    """Decoded view of one job's ledger record."""

    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(alias="jobId")
    status: JobStatus
    updated_at: int = Field(default=0, alias="updatedAt")  # epoch ms
    original_filename: str | None = Field(default=None, alias="originalFilename")
    file_path: str | None = Field(default=None, alias="filePath")
    transcript_id: str | None = Field(default=None, alias="assemblyAiTranscriptId")
    speakers: list[SpeakerWPM] | None = None
    diarization_segments: list[Segment] | None = Field(default=None, alias="diarizationSegments")
    targets: list[Target] | None = None
    output_file_path: str | None = Field(default=None, alias="outputFilePath")
    error: str | None = None

    @property
    def has_analysis(self) -> bool:
        return self.speakers is not None and self.diarization_segments is not None


class AnalyzeTask(BaseModel):
    """Payload consumed by the Analyze coordinator."""

    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(alias="jobId")
    file_path: str = Field(alias="filePath")
    original_filename: str = Field(alias="originalFilename")


class AdjustTask(BaseModel):
    """Payload consumed by the Adjust coordinator.

    Speaker rates and segments are re-read from the ledger, not carried here.
    """

    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(alias="jobId")
    file_path: str = Field(alias="filePath")
    original_filename: str = Field(alias="originalFilename")
    targets: list[Target]
