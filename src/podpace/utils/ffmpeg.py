"""FFmpeg and Rubber Band command builders and runners."""

from __future__ import annotations

import subprocess
from pathlib import Path


class ToolError(Exception):
    """Raised when an external audio tool exits with a non-zero status."""

    tool = "tool"

    def __init__(self, cmd: list[str], returncode: int, stderr: str):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"{self.tool} failed (rc={returncode}): {stderr[:500]}")


class FFmpegError(ToolError):
    """Raised when an FFmpeg command fails."""

    tool = "FFmpeg"


class RubberbandError(ToolError):
    """Raised when a Rubber Band command fails."""

    tool = "Rubberband"


def _run(cmd: list[str], error_cls: type[ToolError]) -> subprocess.CompletedProcess:
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise error_cls(cmd, 127, f"executable not found: {cmd[0]}") from e
    if result.returncode != 0:
        raise error_cls(cmd, result.returncode, result.stderr or "")
    return result


def run_ffmpeg(args: list[str], *, binary: str = "ffmpeg") -> subprocess.CompletedProcess:
    """Run an FFmpeg command with standard options."""
    cmd = [binary, "-y", "-hide_banner", "-loglevel", "error"] + args
    return _run(cmd, FFmpegError)


def run_rubberband(args: list[str], *, binary: str = "rubberband") -> subprocess.CompletedProcess:
    """Run a Rubber Band command."""
    return _run([binary] + args, RubberbandError)


def extract_region(
    input_path: Path | str,
    output_path: Path | str,
    start: float,
    duration: float,
    *,
    sample_rate: int = 44100,
    channels: int = 1,
    binary: str = "ffmpeg",
) -> None:
    """Extract a time region from an audio file as 16-bit PCM WAV."""
    run_ffmpeg([
        "-ss", f"{start:.3f}",
        "-i", str(input_path),
        "-t", f"{duration:.3f}",
        "-vn",
        "-acodec", "pcm_s16le",
        "-ar", str(sample_rate),
        "-ac", str(channels),
        str(output_path),
    ], binary=binary)


def stretch_tempo(
    input_path: Path | str,
    output_path: Path | str,
    tempo: float,
    *,
    binary: str = "rubberband",
) -> None:
    """Change tempo by a multiplicative factor with pitch held constant."""
    if tempo <= 0:
        raise ValueError(f"Tempo factor must be positive, got {tempo}")
    run_rubberband([
        "--tempo", f"{tempo:.6f}",
        str(input_path),
        str(output_path),
    ], binary=binary)


def concat_from_list(
    list_path: Path | str,
    output_path: Path | str,
    *,
    codec: str = "libmp3lame",
    bitrate_kbps: int = 192,
    binary: str = "ffmpeg",
) -> None:
    """Concatenate the files named in an FFmpeg concat list and encode them."""
    run_ffmpeg([
        "-f", "concat",
        "-safe", "0",
        "-i", str(list_path),
        "-c:a", codec,
        "-b:a", f"{bitrate_kbps}k",
        str(output_path),
    ], binary=binary)
