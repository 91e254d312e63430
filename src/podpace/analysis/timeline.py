"""Build the processing timeline from diarized utterances."""

from __future__ import annotations

from collections.abc import Sequence

from podpace.models.timeline import Segment
from podpace.models.transcript import Utterance


def build_timeline(
    utterances: Sequence[Utterance],
    *,
    include_gaps: bool = False,
) -> list[Segment]:
    """Project utterances onto an ordered list of segments.

    One segment per utterance, carrying the raw speaker label and bounds.
    With ``include_gaps`` a speakerless segment is also emitted for every
    stretch of audio not covered by an utterance (including the lead-in
    from 0), so silence survives reconstruction unchanged.

    Raises:
        ValueError: if utterance start times decrease.
    """
    segments: list[Segment] = []
    covered_until = 0
    previous_start: int | None = None

    for utt in utterances:
        if previous_start is not None and utt.start < previous_start:
            raise ValueError(
                f"Utterances out of order: start {utt.start}ms after {previous_start}ms"
            )
        previous_start = utt.start

        if include_gaps and utt.start > covered_until:
            segments.append(Segment(speaker=None, start=covered_until, end=utt.start))

        segments.append(Segment(speaker=utt.speaker, start=utt.start, end=utt.end))
        covered_until = max(covered_until, utt.end)

    return segments
