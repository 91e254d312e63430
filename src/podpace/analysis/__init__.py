"""Speaker rate calculation and timeline construction."""

from podpace.analysis.timeline import build_timeline
from podpace.analysis.wpm import calculate_wpm, count_words

__all__ = ["build_timeline", "calculate_wpm", "count_words"]
