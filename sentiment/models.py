"""
Sentiment Data Models - Lexicon sentiment structures.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class SentimentLabel(Enum):
    """Qualitative label derived from a lexicon score."""
    STRONGLY_POSITIVE = "Strongly Positive"
    MODERATELY_POSITIVE = "Moderately Positive"
    NEUTRAL = "Neutral"
    MODERATELY_NEGATIVE = "Moderately Negative"
    STRONGLY_NEGATIVE = "Strongly Negative"


@dataclass(frozen=True)
class SentimentResult:
    """
    Output of the lexicon analyzer.

    score: tally / total tokens, rounded to 3 places. In [-1.0, +1.0].
    """
    score: float
    label: SentimentLabel
    token_count: int = 0
    positive_hits: int = 0
    negative_hits: int = 0

    @classmethod
    def neutral(cls) -> "SentimentResult":
        return cls(score=0.0, label=SentimentLabel.NEUTRAL)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "label": self.label.value,
            "token_count": self.token_count,
            "positive_hits": self.positive_hits,
            "negative_hits": self.negative_hits,
        }
