"""Base protocol for the external audio tools."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class AudioTools(Protocol):
    """Extraction, pitch-preserving stretch and concatenation.

    Implementations raise ``podpace.utils.ffmpeg.ToolError`` on failure.
    """

    name: str

    def extract(self, source: Path, output: Path, start_s: float, duration_s: float) -> None: ...

    def stretch(self, input_path: Path, output: Path, tempo: float) -> None: ...

    def concatenate(self, list_path: Path, output: Path) -> None: ...
