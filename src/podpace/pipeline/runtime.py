"""Wire ledger, providers and coordinators from settings."""

from __future__ import annotations

from podpace.asr.assemblyai import build_assemblyai_client
from podpace.asr.base import TranscriptionError, TranscriptionProvider
from podpace.audio.base import AudioTools
from podpace.audio.ffmpeg_rubberband import FFmpegRubberbandTools
from podpace.ledger.base import JobLedger
from podpace.ledger.file import FileLedger
from podpace.models.config import Settings
from podpace.pipeline.adjust import AdjustCoordinator
from podpace.pipeline.analyze import AnalyzeCoordinator
from podpace.pipeline.dispatch import JobDispatcher
from podpace.utils.progress import log_warning


def open_ledger(settings: Settings) -> FileLedger:
    return FileLedger(settings.storage.ledger_dir)


def build_dispatcher(
    settings: Settings,
    ledger: JobLedger,
    *,
    asr: TranscriptionProvider | None = None,
    tools: AudioTools | None = None,
    require_asr: bool = False,
    analysis: bool = True,
) -> JobDispatcher:
    """Create a dispatcher with both coordinators.

    Without an explicit ``asr`` the AssemblyAI client is built from the
    environment. When that fails the analyze stage is disabled, unless
    ``require_asr`` is set, in which case the error propagates. With
    ``analysis=False`` no ASR provider is built at all.
    """
    if asr is None and analysis:
        try:
            asr = build_assemblyai_client(settings.analyze)
        except TranscriptionError as e:
            if require_asr:
                raise
            log_warning(f"Analysis disabled: {e}")

    analyzer = AnalyzeCoordinator(ledger, asr, settings.analyze) if asr is not None else None
    adjuster = AdjustCoordinator(
        ledger,
        tools or FFmpegRubberbandTools(settings.adjust),
        settings.adjust,
        settings.storage,
    )
    return JobDispatcher(
        ledger,
        analyzer,
        adjuster,
        analyze_workers=settings.analyze.workers,
        adjust_workers=settings.adjust.workers,
    )
