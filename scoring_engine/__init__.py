"""
Scoring Engine Package.

This package turns domain records into the ecosystem health score.

Modules:
- normalization: Range scaling, clamping and rounding
- composite_score: Sub-scores, weights and the composite
"""

from scoring_engine.normalization import (
    clamp,
    clamp_score,
    round_half_up,
    scale_to_100,
)
from scoring_engine.composite_score import (
    CompositeScore,
    CompositeScorer,
    CompositeWeights,
    HealthLabel,
    SubScores,
)


__all__ = [
    "clamp",
    "clamp_score",
    "round_half_up",
    "scale_to_100",
    "CompositeScore",
    "CompositeScorer",
    "CompositeWeights",
    "HealthLabel",
    "SubScores",
]
