"""Extract and tempo-adjust each timeline segment."""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from podpace.adjust.tempo import TempoResolver
from podpace.audio.base import AudioTools
from podpace.models.timeline import Segment
from podpace.utils.ffmpeg import ToolError
from podpace.utils.progress import log_step


class SegmentProcessingError(RuntimeError):
    """A single segment failed; the whole adjustment is aborted."""

    def __init__(self, index: int, message: str):
        self.index = index
        super().__init__(f"Segment {index}: {message}")


def segment_paths(work_dir: Path, index: int) -> tuple[Path, Path]:
    """Input and output intermediate paths for a segment index."""
    return (
        work_dir / f"segment_{index:04d}_input.wav",
        work_dir / f"segment_{index:04d}_output.wav",
    )


class SegmentProcessor:
    """Turns an ordered segment list into an ordered list of audio slices.

    Each segment is extracted to PCM WAV; segments whose resolved tempo is
    outside the no-op threshold are stretched and the unstretched slice is
    removed. Segments with non-positive duration are skipped without any
    tool call.
    """

    def __init__(
        self,
        tools: AudioTools,
        resolver: TempoResolver,
        *,
        workers: int = 1,
        label: str = "Segments",
    ):
        self.tools = tools
        self.resolver = resolver
        self.workers = max(1, workers)
        self.label = label

    def process(self, segments: Sequence[Segment], source: Path, work_dir: Path) -> list[Path]:
        """Process segments and return slice paths in segment order.

        Raises:
            SegmentProcessingError: on the first extraction or stretch failure.
        """
        work_dir.mkdir(parents=True, exist_ok=True)
        pending = [(i, seg) for i, seg in enumerate(segments) if seg.duration_ms > 0]
        skipped = len(segments) - len(pending)
        if skipped:
            log_step(self.label, f"Skipping {skipped} zero-length segment(s)")

        log_step(self.label, f"Processing {len(pending)} segments...")

        if self.workers == 1 or len(pending) <= 1:
            return [self._process_one(i, seg, source, work_dir) for i, seg in pending]

        pool = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="segment")
        try:
            futures = [
                pool.submit(self._process_one, i, seg, source, work_dir)
                for i, seg in pending
            ]
            # Collected in submission order, so output order is segment order.
            paths = [f.result() for f in futures]
        except BaseException:
            pool.shutdown(wait=True, cancel_futures=True)
            raise
        pool.shutdown(wait=True)
        return paths

    def _process_one(self, index: int, segment: Segment, source: Path, work_dir: Path) -> Path:
        input_path, output_path = segment_paths(work_dir, index)
        start_s = segment.start / 1000
        duration_s = segment.duration_ms / 1000

        try:
            self.tools.extract(source, input_path, start_s, duration_s)
        except ToolError as e:
            raise SegmentProcessingError(index, f"extraction failed: {e}") from e

        decision = self.resolver.resolve(segment)
        if not decision.stretch:
            return input_path

        log_step(
            self.label,
            f"Segment {index} ({segment.speaker_id}): tempo {decision.factor:.3f}",
        )
        try:
            self.tools.stretch(input_path, output_path, decision.factor)
        except ToolError as e:
            raise SegmentProcessingError(index, f"stretch failed: {e}") from e

        input_path.unlink(missing_ok=True)
        return output_path


def process_segments(
    segments: Sequence[Segment],
    source: Path,
    work_dir: Path,
    resolver: TempoResolver,
    tools: AudioTools,
    *,
    workers: int = 1,
) -> list[Path]:
    """Functional wrapper around :class:`SegmentProcessor`."""
    return SegmentProcessor(tools, resolver, workers=workers).process(segments, source, work_dir)
