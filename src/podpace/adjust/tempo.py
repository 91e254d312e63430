"""Resolve per-segment tempo factors from speaker rates and targets."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from podpace.models.timeline import Segment, SpeakerWPM, Target, TempoDecision

NOOP_THRESHOLD = 0.01


@dataclass(frozen=True)
class TempoPolicy:
    """Stretch policy.

    ``noop_threshold``: factors within this distance of 1.0 skip the stretch tool.
    ``min_factor`` / ``max_factor``: optional clamps, unset by default.
    """

    noop_threshold: float = NOOP_THRESHOLD
    min_factor: float | None = None
    max_factor: float | None = None

    def clamp(self, factor: float) -> float:
        if self.min_factor is not None:
            factor = max(self.min_factor, factor)
        if self.max_factor is not None:
            factor = min(self.max_factor, factor)
        return factor


def resolve_tempo(
    segment: Segment,
    speakers: Iterable[SpeakerWPM],
    targets: Iterable[Target],
    policy: TempoPolicy | None = None,
) -> TempoDecision:
    """Tempo for one segment. See :class:`TempoResolver` for repeated use."""
    return TempoResolver(speakers, targets, policy).resolve(segment)


class TempoResolver:
    """Resolves tempo decisions for the segments of one job."""

    def __init__(
        self,
        speakers: Iterable[SpeakerWPM],
        targets: Iterable[Target],
        policy: TempoPolicy | None = None,
    ):
        self._original = {s.id: s.avg_wpm for s in speakers}
        self._target = {t.id: t.target_wpm for t in targets}
        self.policy = policy or TempoPolicy()

    def factor_for(self, speaker_id: str | None) -> float:
        """``target / original`` for the speaker, or 1.0 if either is missing or non-positive."""
        if speaker_id is None or speaker_id not in self._target:
            return 1.0
        original = self._original.get(speaker_id)
        target = self._target[speaker_id]
        if not original or not target or original <= 0 or target <= 0:
            return 1.0
        return self.policy.clamp(target / original)

    def resolve(self, segment: Segment) -> TempoDecision:
        factor = self.factor_for(segment.speaker_id)
        stretch = abs(factor - 1.0) > self.policy.noop_threshold
        return TempoDecision(factor=factor, stretch=stretch)
