"""Adjust coordinator: tempo-adjust targeted speakers and rebuild the audio."""

from __future__ import annotations

import shutil
from pathlib import Path

from podpace.adjust.reconstruct import reconstruct
from podpace.adjust.segments import SegmentProcessor
from podpace.adjust.tempo import TempoPolicy, TempoResolver
from podpace.audio.base import AudioTools
from podpace.ledger.base import JobLedger
from podpace.ledger.codec import LedgerError
from podpace.models.config import AdjustConfig, StorageConfig
from podpace.models.job import AdjustTask, JobRecord, JobStatus
from podpace.pipeline.status import failure_message, update_job_status
from podpace.utils.progress import job_label, log_error, log_step, log_success, log_warning


class AdjustmentError(RuntimeError):
    """The adjust stage cannot proceed with the stored job data."""


def output_path_for(storage: StorageConfig, config: AdjustConfig, task: AdjustTask) -> Path:
    """``<output_dir>/<job_id>/<original stem>_normalized.<ext>``."""
    stem = Path(task.original_filename).stem or "audio"
    return Path(storage.output_dir) / task.job_id / f"{stem}_normalized.{config.output_extension}"


class AdjustCoordinator:
    """Drives one job from QUEUED_FOR_ADJUSTMENT to COMPLETE.

    Speaker rates and segments are re-read from the ledger so the latest
    analysis is always used. The job's temp directory is removed on every
    exit path. ``run`` never raises; failures end in FAILED.
    """

    name = "adjust"

    def __init__(
        self,
        ledger: JobLedger,
        tools: AudioTools,
        config: AdjustConfig | None = None,
        storage: StorageConfig | None = None,
    ):
        self.ledger = ledger
        self.tools = tools
        self.config = config or AdjustConfig()
        self.storage = storage or StorageConfig()

    @property
    def policy(self) -> TempoPolicy:
        return TempoPolicy(
            noop_threshold=self.config.noop_threshold,
            min_factor=self.config.min_tempo,
            max_factor=self.config.max_tempo,
        )

    def work_dir(self, job_id: str) -> Path:
        return Path(self.storage.temp_dir) / job_id

    def run(self, task: AdjustTask) -> JobRecord | None:
        job_id = task.job_id
        label = job_label(job_id)

        try:
            record = self.ledger.get(job_id)
        except (LedgerError, OSError) as e:
            log_error(f"{label} cannot read ledger record: {e}")
            return update_job_status(self.ledger, job_id, JobStatus.FAILED, error=failure_message(e))
        if record is None:
            log_warning(f"{label} not found in ledger; dropping adjust task")
            return None
        if record.status != JobStatus.QUEUED_FOR_ADJUSTMENT:
            log_warning(f"{label} is {record.status.value}; adjust task ignored")
            return record

        work_dir = self.work_dir(job_id)
        log_step(label, f"Starting adjustment (temp: {work_dir})")

        try:
            update_job_status(self.ledger, job_id, JobStatus.PROCESSING_ADJUSTMENT)
            if not record.has_analysis:
                raise AdjustmentError("Missing analysis data (speakers or segments) in ledger")

            resolver = TempoResolver(record.speakers, task.targets, self.policy)
            processor = SegmentProcessor(
                self.tools,
                resolver,
                workers=self.config.segment_workers,
                label=label,
            )
            paths = processor.process(record.diarization_segments, Path(task.file_path), work_dir)

            update_job_status(self.ledger, job_id, JobStatus.PROCESSING_RECONSTRUCTION)
            output_path = reconstruct(
                paths,
                output_path_for(self.storage, self.config, task),
                self.tools,
                work_dir,
                label=label,
            )

            updated = update_job_status(
                self.ledger, job_id, JobStatus.COMPLETE, output_file_path=str(output_path),
            )
            log_success(f"{label} adjustment complete: {output_path}")
            return updated
        except Exception as e:
            log_error(f"{label} adjustment failed: {e}")
            return update_job_status(
                self.ledger, job_id, JobStatus.FAILED, error=failure_message(e),
            )
        finally:
            self._cleanup(work_dir, label)

    def _cleanup(self, work_dir: Path, label: str) -> None:
        if not work_dir.exists():
            return
        try:
            shutil.rmtree(work_dir)
            log_step(label, f"Removed temp directory {work_dir}")
        except OSError as e:
            log_warning(f"{label} could not remove {work_dir}: {e}")
