"""Average words-per-minute per diarized speaker."""

from __future__ import annotations

import math
import unicodedata
from collections.abc import Iterable

from podpace.models.timeline import SpeakerWPM, speaker_id_for
from podpace.models.transcript import Utterance


def _strip_punctuation(token: str) -> str:
    return "".join(ch for ch in token if not unicodedata.category(ch).startswith("P"))


def count_words(text: str) -> int:
    """Count whitespace-separated words, ignoring punctuation-only tokens."""
    return sum(1 for token in text.split() if _strip_punctuation(token))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_wpm(utterances: Iterable[Utterance]) -> list[SpeakerWPM]:
    """Compute one SpeakerWPM per distinct non-null speaker label.

    Word counts and utterance durations are summed per speaker; utterances
    without a speaker label are ignored. A speaker with no accumulated
    duration reports 0 WPM. Output follows first-appearance order.
    """
    stats: dict[str, list[int]] = {}  # label -> [words, duration_ms]

    for utt in utterances:
        if utt.speaker is None:
            continue
        entry = stats.setdefault(utt.speaker, [0, 0])
        entry[0] += count_words(utt.text)
        entry[1] += utt.end - utt.start

    results: list[SpeakerWPM] = []
    for label, (words, duration_ms) in stats.items():
        if duration_ms > 0:
            avg_wpm = _round_half_up(words / (duration_ms / 1000 / 60))
        else:
            avg_wpm = 0
        results.append(SpeakerWPM(
            id=speaker_id_for(label),
            avg_wpm=avg_wpm,
            total_words=words,
            total_duration_s=round(duration_ms / 1000, 2),
        ))

    return results
