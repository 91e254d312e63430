"""Tests for the job dispatcher and ledger-driven resume."""

from __future__ import annotations

import threading

from podpace.models.job import AnalyzeTask, JobStatus
from podpace.models.timeline import Segment, SpeakerWPM, Target
from podpace.pipeline.adjust import AdjustCoordinator
from podpace.pipeline.analyze import AnalyzeCoordinator
from podpace.pipeline.dispatch import JobDispatcher

TARGETS = [Target(id="Speaker_A", target_wpm=120)]


def make_dispatcher(ledger, transcriber, tools, settings) -> JobDispatcher:
    return JobDispatcher(
        ledger,
        AnalyzeCoordinator(ledger, transcriber, settings.analyze),
        AdjustCoordinator(ledger, tools, settings.adjust, settings.storage),
        analyze_workers=2,
        adjust_workers=1,
    )


def seed(ledger, job_id: str, *path: JobStatus, analysis: bool = True, targets=None) -> None:
    ledger.create(job_id, original_filename=f"{job_id}.mp3", file_path=f"/uploads/{job_id}.mp3")
    for status in path:
        fields = {}
        if status == JobStatus.READY_FOR_INPUT and analysis:
            fields = {
                "speakers": [SpeakerWPM(id="Speaker_A", avg_wpm=60)],
                "diarization_segments": [Segment(speaker="A", start=0, end=10_000)],
            }
        if status == JobStatus.QUEUED_FOR_ADJUSTMENT:
            fields = {"targets": targets}
        ledger.transition(job_id, status, **fields)


ANALYZED = (
    JobStatus.PROCESSING_UPLOAD_CLOUD,
    JobStatus.PROCESSING_CLOUD_ANALYSIS,
    JobStatus.PROCESSING_WPM_CALCULATION,
    JobStatus.READY_FOR_INPUT,
)


def test_resume_dispatches_by_status(ledger, transcriber, tools, settings) -> None:
    seed(ledger, "pending")
    seed(ledger, "ready", *ANALYZED)
    seed(ledger, "queued", *ANALYZED, JobStatus.QUEUED_FOR_ADJUSTMENT, targets=TARGETS)
    seed(
        ledger, "interrupted", *ANALYZED,
        JobStatus.QUEUED_FOR_ADJUSTMENT, JobStatus.PROCESSING_ADJUSTMENT, targets=TARGETS,
    )
    seed(ledger, "failed", JobStatus.FAILED)

    with make_dispatcher(ledger, transcriber, tools, settings) as dispatcher:
        futures = dispatcher.resume()
        results = [f.result() for f in futures]

    assert len(results) == 3
    assert ledger.get("pending").status == JobStatus.READY_FOR_INPUT
    assert ledger.get("ready").status == JobStatus.READY_FOR_INPUT
    assert ledger.get("queued").status == JobStatus.COMPLETE
    assert ledger.get("interrupted").status == JobStatus.COMPLETE
    assert ledger.get("interrupted").error is None
    assert ledger.get("failed").status == JobStatus.FAILED


def test_resume_fails_queued_job_without_targets(ledger, transcriber, tools, settings) -> None:
    seed(ledger, "queued", *ANALYZED, JobStatus.QUEUED_FOR_ADJUSTMENT, targets=None)

    with make_dispatcher(ledger, transcriber, tools, settings) as dispatcher:
        assert dispatcher.resume() == []

    record = ledger.get("queued")
    assert record.status == JobStatus.FAILED
    assert "no stored targets" in record.error


def test_duplicate_submission_dropped(ledger, make_transcriber, tools, settings) -> None:
    release = threading.Event()
    started = threading.Event()

    class SlowTranscriber(make_transcriber):
        def wait(self, transcript_id):
            started.set()
            release.wait(timeout=5)
            return super().wait(transcript_id)

    seed(ledger, "job-1")
    task = AnalyzeTask(job_id="job-1", file_path="/uploads/job-1.mp3", original_filename="job-1.mp3")

    with make_dispatcher(ledger, SlowTranscriber(), tools, settings) as dispatcher:
        first = dispatcher.submit_analyze(task)
        started.wait(timeout=5)
        assert dispatcher.in_flight("analyze", "job-1")
        assert dispatcher.submit_analyze(task) is None
        release.set()
        assert first.result().status == JobStatus.READY_FOR_INPUT

    assert not dispatcher.in_flight("analyze", "job-1")


def test_analysis_unavailable_without_provider(ledger, tools, settings) -> None:
    seed(ledger, "job-1")
    dispatcher = JobDispatcher(
        ledger, None, AdjustCoordinator(ledger, tools, settings.adjust, settings.storage),
    )
    with dispatcher:
        assert dispatcher.resume() == []
    assert ledger.get("job-1").status == JobStatus.PENDING
