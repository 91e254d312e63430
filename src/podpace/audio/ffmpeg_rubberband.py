"""Audio tools backed by FFmpeg and the Rubber Band CLI."""

from __future__ import annotations

from pathlib import Path

from podpace.models.config import AdjustConfig
from podpace.utils.ffmpeg import concat_from_list, extract_region, stretch_tempo


class FFmpegRubberbandTools:
    """Extract and concatenate with FFmpeg, stretch with Rubber Band."""

    name = "ffmpeg+rubberband"

    def __init__(self, config: AdjustConfig | None = None):
        self.config = config or AdjustConfig()

    def extract(self, source: Path, output: Path, start_s: float, duration_s: float) -> None:
        extract_region(
            source,
            output,
            start=start_s,
            duration=duration_s,
            sample_rate=self.config.sample_rate,
            channels=self.config.channels,
            binary=self.config.ffmpeg_binary,
        )

    def stretch(self, input_path: Path, output: Path, tempo: float) -> None:
        stretch_tempo(input_path, output, tempo, binary=self.config.rubberband_binary)

    def concatenate(self, list_path: Path, output: Path) -> None:
        concat_from_list(
            list_path,
            output,
            codec=self.config.output_codec,
            bitrate_kbps=self.config.output_bitrate_kbps,
            binary=self.config.ffmpeg_binary,
        )
