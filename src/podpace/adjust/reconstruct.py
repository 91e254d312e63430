"""Concatenate processed segment slices into the final output file."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from podpace.audio.base import AudioTools
from podpace.utils.ffmpeg import ToolError
from podpace.utils.progress import log_step

CONCAT_LIST_NAME = "concat_list.txt"


class ReconstructionError(RuntimeError):
    """Raised when the output file cannot be assembled."""


def _quote(path: Path) -> str:
    # concat demuxer syntax: single quotes, embedded quote written as '\''
    return "'" + str(path.resolve()).replace("'", "'\\''") + "'"


def write_concat_list(paths: Sequence[Path], list_path: Path) -> None:
    """Write an FFmpeg concat list naming ``paths`` in order."""
    list_path.write_text(
        "\n".join(f"file {_quote(Path(p))}" for p in paths) + "\n",
        encoding="utf-8",
    )


def reconstruct(
    paths: Sequence[Path],
    output_path: Path,
    tools: AudioTools,
    work_dir: Path,
    *,
    label: str = "Reconstruct",
) -> Path:
    """Concatenate ``paths`` in the given order into ``output_path``.

    The concat list and every input slice are deleted afterwards, whether
    or not concatenation succeeded.
    """
    list_path = work_dir / CONCAT_LIST_NAME
    try:
        if not paths:
            raise ReconstructionError("No audio segments to concatenate")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        write_concat_list(paths, list_path)

        log_step(label, f"Concatenating {len(paths)} segments → {output_path.name}")
        try:
            tools.concatenate(list_path, output_path)
        except ToolError as e:
            raise ReconstructionError(f"Concatenation failed: {e}") from e
    finally:
        list_path.unlink(missing_ok=True)
        for path in paths:
            Path(path).unlink(missing_ok=True)

    return output_path
