"""Job lifecycle: submission, coordinators and dispatch."""

from podpace.pipeline.adjust import AdjustCoordinator, AdjustmentError
from podpace.pipeline.analyze import AnalyzeCoordinator
from podpace.pipeline.dispatch import JobDispatcher
from podpace.pipeline.jobs import (
    AdjustRequestError,
    UploadValidationError,
    create_job,
    job_status,
    request_adjust,
)

__all__ = [
    "AdjustCoordinator",
    "AdjustmentError",
    "AnalyzeCoordinator",
    "JobDispatcher",
    "AdjustRequestError",
    "UploadValidationError",
    "create_job",
    "job_status",
    "request_adjust",
]
