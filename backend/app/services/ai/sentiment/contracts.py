"""Contracts for sentiment classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Label(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


VALID_LABELS = frozenset(label.value for label in Label)


class ConfidenceMode(str, Enum):
    """How the heuristic reports confidence when no remote provider is configured."""

    FIXED = "fixed"
    RATIO = "ratio"


class ClassificationPath(str, Enum):
    NO_CREDENTIAL = "no_credential"
    ACCEPTED = "accepted"
    FALLBACK = "fallback"


# Sentinel confidences per classification path.
CONFIDENCE_ACCEPTED = 0.95
CONFIDENCE_NO_CREDENTIAL = 0.8
CONFIDENCE_FALLBACK = 0.5
CONFIDENCE_TIE = 0.5

DEFAULT_MAX_BATCH_SIZE = 50


@dataclass(frozen=True)
class KeywordLexicon:
    """Two disjoint cue sets matched as lowercase substrings."""

    positive: frozenset[str]
    negative: frozenset[str]

    def __post_init__(self) -> None:
        overlap = self.positive & self.negative
        if overlap:
            msg = f"Lexicon cues cannot be both positive and negative: {sorted(overlap)}"
            raise ValueError(msg)


DEFAULT_LEXICON = KeywordLexicon(
    positive=frozenset(
        {"good", "great", "excellent", "amazing", "wonderful", "love", "happy", "awesome", "fantastic"}
    ),
    negative=frozenset(
        {"bad", "terrible", "awful", "hate", "horrible", "sad", "angry", "worst", "disappointed"}
    ),
)


@dataclass(frozen=True)
class ClassificationResult:
    """Immutable sentiment classification for one text."""

    text: str
    label: Label
    confidence: float  # 0.0–1.0
    source: ClassificationPath = ClassificationPath.NO_CREDENTIAL
    fallback_reason: str | None = None

    def to_dict(self) -> dict:
        return {"text": self.text, "sentiment": self.label.value, "score": self.confidence}


@dataclass(frozen=True)
class BatchSummary:
    total: int
    positive: int
    negative: int
    neutral: int


class SentimentBatchError(ValueError):
    """Batch rejected before any item was classified."""


class EmptyBatch(SentimentBatchError):
    def __init__(self) -> None:
        super().__init__("Texts array is required")


class BatchTooLarge(SentimentBatchError):
    def __init__(self, size: int, max_batch_size: int) -> None:
        self.size = size
        self.max_batch_size = max_batch_size
        super().__init__(f"Maximum {max_batch_size} texts allowed per batch")
