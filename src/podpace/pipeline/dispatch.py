"""Bounded worker pools for the analyze and adjust stages."""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor

from podpace.ledger.base import JobLedger
from podpace.ledger.codec import LedgerError
from podpace.models.job import (
    ADJUST_STATES,
    ANALYSIS_STATES,
    AdjustTask,
    AnalyzeTask,
    JobRecord,
    JobStatus,
)
from podpace.pipeline.adjust import AdjustCoordinator
from podpace.pipeline.analyze import AnalyzeCoordinator
from podpace.pipeline.jobs import AdjustRequestError, request_adjust
from podpace.utils.progress import job_label, log, log_error, log_warning


class JobDispatcher:
    """Runs coordinator tasks on two independent thread pools.

    Each stage has its own concurrency cap. A job id is never in flight
    twice for the same stage; duplicate submissions are dropped.
    """

    def __init__(
        self,
        ledger: JobLedger,
        analyzer: AnalyzeCoordinator | None,
        adjuster: AdjustCoordinator,
        *,
        analyze_workers: int = 5,
        adjust_workers: int = 2,
    ):
        self.ledger = ledger
        self.analyzer = analyzer
        self.adjuster = adjuster
        self._analyze_pool = ThreadPoolExecutor(analyze_workers, thread_name_prefix="podpace-analyze")
        self._adjust_pool = ThreadPoolExecutor(adjust_workers, thread_name_prefix="podpace-adjust")
        self._inflight: set[tuple[str, str]] = set()
        self._guard = threading.Lock()

    def __enter__(self) -> "JobDispatcher":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown(wait=True)

    def in_flight(self, stage: str, job_id: str) -> bool:
        with self._guard:
            return (stage, job_id) in self._inflight

    def _submit(
        self,
        pool: ThreadPoolExecutor,
        stage: str,
        job_id: str,
        fn: Callable,
        task,
    ) -> Future | None:
        key = (stage, job_id)
        with self._guard:
            if key in self._inflight:
                log_warning(f"{job_label(job_id)} already running {stage}; duplicate task dropped")
                return None
            self._inflight.add(key)

        try:
            future = pool.submit(fn, task)
        except RuntimeError:
            self._release(key)
            raise
        future.add_done_callback(lambda _: self._release(key))
        return future

    def _release(self, key: tuple[str, str]) -> None:
        with self._guard:
            self._inflight.discard(key)

    def submit_analyze(self, task: AnalyzeTask) -> Future | None:
        if self.analyzer is None:
            log_warning(f"{job_label(task.job_id)} analysis unavailable (no ASR provider configured)")
            return None
        return self._submit(self._analyze_pool, "analyze", task.job_id, self.analyzer.run, task)

    def submit_adjust(self, task: AdjustTask) -> Future | None:
        return self._submit(self._adjust_pool, "adjust", task.job_id, self.adjuster.run, task)

    def resume(self) -> list[Future]:
        """Re-dispatch every unfinished job found in the ledger.

        - Analysis states: re-run analysis; a stored transcript id is polled
          rather than re-submitted.
        - QUEUED_FOR_ADJUSTMENT: re-run the adjust stage with stored targets.
        - Jobs interrupted mid-adjustment: marked FAILED, then retried with
          their stored targets (partial temp output is discarded).
        """
        futures: list[Future] = []
        records = self.ledger.list_jobs()
        log(f"Resuming: {len(records)} job(s) in ledger")

        for record in records:
            try:
                future = self._resume_one(record)
            except LedgerError as e:
                log_error(f"{job_label(record.job_id)} could not be resumed: {e}")
                continue
            if future is not None:
                futures.append(future)
        return futures

    def _resume_one(self, record: JobRecord) -> Future | None:
        label = job_label(record.job_id)
        status = record.status

        if status in ANALYSIS_STATES:
            if not record.file_path or not record.original_filename:
                self._fail(record, "Job record is missing its file information")
                return None
            return self.submit_analyze(AnalyzeTask(
                job_id=record.job_id,
                file_path=record.file_path,
                original_filename=record.original_filename,
            ))

        if status == JobStatus.QUEUED_FOR_ADJUSTMENT:
            if not record.targets or not record.file_path or not record.original_filename:
                self._fail(record, "Queued job has no stored targets")
                return None
            return self.submit_adjust(AdjustTask(
                job_id=record.job_id,
                file_path=record.file_path,
                original_filename=record.original_filename,
                targets=record.targets,
            ))

        if status in ADJUST_STATES:
            if self.in_flight("adjust", record.job_id):
                return None
            self._fail(record, f"Interrupted during {status.value}")
            if not record.targets:
                return None
            try:
                task = request_adjust(self.ledger, record.job_id, record.targets)
            except AdjustRequestError as e:
                log_warning(f"{label} not retried: {e}")
                return None
            return self.submit_adjust(task)

        return None

    def _fail(self, record: JobRecord, message: str) -> None:
        log_warning(f"{job_label(record.job_id)} {message}; marking FAILED")
        self.ledger.transition(
            record.job_id, JobStatus.FAILED, expected={record.status}, error=message,
        )

    def shutdown(self, wait: bool = True) -> None:
        self._analyze_pool.shutdown(wait=wait)
        self._adjust_pool.shutdown(wait=wait)
