"""Analyze coordinator: cloud transcription → speaker rates + timeline."""

from __future__ import annotations

from pathlib import Path

from podpace.analysis.timeline import build_timeline
from podpace.analysis.wpm import calculate_wpm
from podpace.asr.base import TranscriptionProvider
from podpace.ledger.base import JobLedger
from podpace.ledger.codec import LedgerError
from podpace.models.config import AnalyzeConfig
from podpace.models.job import ANALYSIS_STATES, AnalyzeTask, JobRecord, JobStatus
from podpace.pipeline.status import failure_message, update_job_status
from podpace.utils.progress import job_label, log_error, log_step, log_success, log_warning

_PIPELINE_ORDER = list(JobStatus)


class AnalyzeCoordinator:
    """Drives one job from PENDING to READY_FOR_INPUT.

    Steps:
    1. Upload the audio to the ASR service
    2. Submit a diarized transcription job (transcript id is stored)
    3. Poll until the transcript completes
    4. Compute per-speaker WPM and the segment timeline
    5. Store both together with READY_FOR_INPUT

    A job that already has a transcript id resumes at step 3. Any failure
    sets the job to FAILED with the causal message; ``run`` never raises.
    """

    name = "analyze"

    def __init__(
        self,
        ledger: JobLedger,
        asr: TranscriptionProvider,
        config: AnalyzeConfig | None = None,
    ):
        self.ledger = ledger
        self.asr = asr
        self.config = config or AnalyzeConfig()

    def run(self, task: AnalyzeTask) -> JobRecord | None:
        job_id = task.job_id
        label = job_label(job_id)

        try:
            record = self.ledger.get(job_id)
        except (LedgerError, OSError) as e:
            log_error(f"{label} cannot read ledger record: {e}")
            return None
        if record is None:
            log_warning(f"{label} not found in ledger; dropping analyze task")
            return None
        if record.status not in ANALYSIS_STATES:
            log_warning(f"{label} is {record.status.value}; analyze task ignored")
            return record

        log_step(label, f"Starting analysis of {task.original_filename}")

        try:
            transcript_id = record.transcript_id
            stage = record.status
            if transcript_id is None:
                stage = self._advance(job_id, stage, JobStatus.PROCESSING_UPLOAD_CLOUD)
                audio_url = self.asr.upload(Path(task.file_path))

                stage = self._advance(job_id, stage, JobStatus.PROCESSING_CLOUD_ANALYSIS)
                transcript_id = self.asr.submit(audio_url)
                self._advance(
                    job_id, stage, JobStatus.PROCESSING_CLOUD_ANALYSIS,
                    transcript_id=transcript_id,
                )
            else:
                log_step(label, f"Resuming transcript {transcript_id}")

            transcript = self.asr.wait(transcript_id)

            update_job_status(self.ledger, job_id, JobStatus.PROCESSING_WPM_CALCULATION)
            utterances = transcript.utterances or []
            if not utterances:
                log_warning(f"{label} transcript contains no utterances")

            speakers = calculate_wpm(utterances)
            segments = build_timeline(utterances, include_gaps=self.config.include_gaps)

            # Status and results land in one write: READY_FOR_INPUT is never
            # visible without its speaker list.
            updated = update_job_status(
                self.ledger, job_id, JobStatus.READY_FOR_INPUT,
                speakers=speakers,
                diarization_segments=segments,
            )
            log_success(
                f"{label} ready for input: {len(speakers)} speaker(s), {len(segments)} segments"
            )
            return updated
        except Exception as e:
            log_error(f"{label} analysis failed: {e}")
            return update_job_status(
                self.ledger, job_id, JobStatus.FAILED, error=failure_message(e),
            )

    def _advance(self, job_id: str, current: JobStatus, status: JobStatus, **fields) -> JobStatus:
        """Move forward to ``status``; a job already past it keeps its status.

        A run resumed without a transcript id re-enters the upload steps from
        whatever analysis status was last stored.
        """
        if _PIPELINE_ORDER.index(current) > _PIPELINE_ORDER.index(status):
            status = current
        update_job_status(self.ledger, job_id, status, **fields)
        return status
