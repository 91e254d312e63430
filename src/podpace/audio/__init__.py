"""External audio tool adapters."""

from podpace.audio.base import AudioTools
from podpace.audio.ffmpeg_rubberband import FFmpegRubberbandTools

__all__ = ["AudioTools", "FFmpegRubberbandTools"]
