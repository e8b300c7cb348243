"""Keyword-counting sentiment heuristic.

Each cue in the lexicon counts at most once, by substring presence in the
case-folded text. The side with more cues wins; ties (including no cues at all)
are neutral.
"""

from __future__ import annotations

from dataclasses import dataclass

from .contracts import (
    CONFIDENCE_NO_CREDENTIAL,
    CONFIDENCE_TIE,
    DEFAULT_LEXICON,
    ConfidenceMode,
    KeywordLexicon,
    Label,
)


@dataclass(frozen=True)
class HeuristicScore:
    label: Label
    positive_count: int
    negative_count: int

    @property
    def ratio_confidence(self) -> float:
        total = self.positive_count + self.negative_count
        # 0/0 is a policy choice, not a ratio.
        if total == 0 or self.positive_count == self.negative_count:
            return CONFIDENCE_TIE
        return max(self.positive_count, self.negative_count) / total


def _count_cues(text: str, cues: frozenset[str]) -> int:
    return sum(1 for cue in cues if cue in text)


def score_text(text: str, lexicon: KeywordLexicon = DEFAULT_LEXICON) -> HeuristicScore:
    normalized = (text or "").casefold()
    positive = _count_cues(normalized, lexicon.positive)
    negative = _count_cues(normalized, lexicon.negative)

    if positive > negative:
        label = Label.POSITIVE
    elif negative > positive:
        label = Label.NEGATIVE
    else:
        label = Label.NEUTRAL

    return HeuristicScore(label=label, positive_count=positive, negative_count=negative)


def classify_heuristic(
    text: str,
    *,
    lexicon: KeywordLexicon = DEFAULT_LEXICON,
    mode: ConfidenceMode = ConfidenceMode.RATIO,
    fixed_confidence: float = CONFIDENCE_NO_CREDENTIAL,
) -> tuple[Label, float]:
    """Return ``(label, confidence)`` for *text*. Never raises."""
    score = score_text(text, lexicon)
    if mode == ConfidenceMode.FIXED:
        return score.label, fixed_confidence
    return score.label, score.ratio_confidence
