"""
Sentiment - Lexicon Analyzer.

============================================================
RESPONSIBILITY
============================================================
Scores a batch of texts against fixed positive and negative
word lists.

- Lower-cases and splits on non-word characters
- +1 per positive hit, -1 per negative hit
- Normalizes by the total token count across the batch

This is a keyword match, not a language model. It is only
meant to show the direction of headline tone.

============================================================
TOKENS
============================================================
Every piece produced by splitting on \\W+ counts towards the
token total, including the empty pieces left at the edges of
a text that starts or ends with punctuation. Texts that are
empty are skipped entirely.

============================================================
"""

import re
from typing import Iterable, Optional

from sentiment.models import SentimentLabel, SentimentResult


POSITIVE_WORDS = frozenset({
    "growth",
    "positive",
    "gain",
    "improve",
    "success",
    "record",
    "innovation",
    "bullish",
    "strong",
    "up",
    "surge",
    "rally",
})

NEGATIVE_WORDS = frozenset({
    "down",
    "drop",
    "crash",
    "fail",
    "bug",
    "issue",
    "problem",
    "bearish",
    "weak",
    "cut",
    "loss",
    "decline",
})

STRONG_THRESHOLD = 0.05
MODERATE_THRESHOLD = 0.02

_SPLIT_PATTERN = re.compile(r"\W+", re.ASCII)


def tokenize(text: str) -> list[str]:
    """Split lower-cased text on runs of non-word characters."""
    return _SPLIT_PATTERN.split(text.lower())


def label_for_score(score: float) -> SentimentLabel:
    """
    Map a normalized score to its label.

    Boundary values fall to the less extreme label on their side:
    exactly 0.05 is MODERATELY_POSITIVE, exactly 0.02 is NEUTRAL.
    """
    if score > STRONG_THRESHOLD:
        return SentimentLabel.STRONGLY_POSITIVE
    if score > MODERATE_THRESHOLD:
        return SentimentLabel.MODERATELY_POSITIVE
    if score < -STRONG_THRESHOLD:
        return SentimentLabel.STRONGLY_NEGATIVE
    if score < -MODERATE_THRESHOLD:
        return SentimentLabel.MODERATELY_NEGATIVE
    return SentimentLabel.NEUTRAL


def analyze_sentiment(texts: Optional[Iterable[Optional[str]]]) -> SentimentResult:
    """
    Score a batch of texts with the fixed lexicons.

    Args:
        texts: Texts to analyze; None and empty entries are skipped

    Returns:
        SentimentResult with score rounded to 3 decimal places. The
        label is taken from the unrounded ratio.
    """
    tally = 0
    total_tokens = 0
    positive_hits = 0
    negative_hits = 0

    for text in texts or ():
        if not text:
            continue
        tokens = tokenize(text)
        total_tokens += len(tokens)
        for token in tokens:
            if token in POSITIVE_WORDS:
                tally += 1
                positive_hits += 1
            if token in NEGATIVE_WORDS:
                tally -= 1
                negative_hits += 1

    normalized = tally / total_tokens if total_tokens else 0.0
    score = round(normalized, 3)

    return SentimentResult(
        score=score,
        label=label_for_score(normalized),
        token_count=total_tokens,
        positive_hits=positive_hits,
        negative_hits=negative_hits,
    )


__all__ = [
    "POSITIVE_WORDS",
    "NEGATIVE_WORDS",
    "tokenize",
    "label_for_score",
    "analyze_sentiment",
]
