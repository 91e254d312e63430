"""FFprobe wrapper for upload validation."""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass
from pathlib import Path


@dataclass
class AudioInfo:
    """Audio stream metadata extracted via FFprobe."""

    path: str
    duration_seconds: float
    sample_rate: int
    channels: int
    codec: str
    format_name: str


class ProbeError(Exception):
    """Raised when a file cannot be probed or carries no audio stream."""


def probe_audio(path: Path | str, *, binary: str = "ffprobe") -> AudioInfo:
    """Probe an audio file with FFprobe and return metadata."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Audio file not found: {path}")

    try:
        result = subprocess.run(
            [
                binary,
                "-v", "quiet",
                "-print_format", "json",
                "-show_format",
                "-show_streams",
                str(path),
            ],
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise ProbeError(f"executable not found: {binary}") from e

    if result.returncode != 0:
        raise ProbeError(f"ffprobe could not read {path.name} (rc={result.returncode})")

    try:
        data = json.loads(result.stdout or "{}")
    except json.JSONDecodeError as e:
        raise ProbeError(f"Unparseable ffprobe output for {path.name}") from e

    audio_stream = next(
        (s for s in data.get("streams", []) if s.get("codec_type") == "audio"),
        None,
    )
    if audio_stream is None:
        raise ProbeError(f"No audio stream found in: {path.name}")

    fmt = data.get("format", {})

    return AudioInfo(
        path=str(path),
        duration_seconds=float(fmt.get("duration", audio_stream.get("duration", 0)) or 0),
        sample_rate=int(audio_stream.get("sample_rate", 0) or 0),
        channels=int(audio_stream.get("channels", 0) or 0),
        codec=audio_stream.get("codec_name", ""),
        format_name=fmt.get("format_name", ""),
    )
