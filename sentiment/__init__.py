"""
Sentiment Package.

Keyword-lexicon sentiment for headline batches.

Modules:
- models: SentimentLabel, SentimentResult
- lexicon: word lists and analyze_sentiment()
"""

from sentiment.lexicon import (
    NEGATIVE_WORDS,
    POSITIVE_WORDS,
    analyze_sentiment,
    label_for_score,
    tokenize,
)
from sentiment.models import SentimentLabel, SentimentResult


__all__ = [
    "NEGATIVE_WORDS",
    "POSITIVE_WORDS",
    "analyze_sentiment",
    "label_for_score",
    "tokenize",
    "SentimentLabel",
    "SentimentResult",
]
