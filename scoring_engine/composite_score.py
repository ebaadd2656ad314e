"""
Scoring Engine - Composite Score.

============================================================
RESPONSIBILITY
============================================================
Combines the five domain records into one ecosystem health
score.

- Maps each domain record onto a 0-100 sub-score
- Aggregates sub-scores with fixed weights
- Classifies the result into a qualitative label
- Provides score decomposition for explainability

============================================================
DESIGN PRINCIPLES
============================================================
- Pure and deterministic: same records, same score
- Total: fallback records score like any other record
- Weights always sum to 1.0
- Transparent component contribution

============================================================
SUB-SCORES
============================================================
code   = 0.4 * scale(total_repos, 100..5000)
       + 0.6 * scale(total_stars, 1000..200000)
market = 50 + (dominant_change_24h / 10) * 50
news   = (sentiment_score + 1) * 50
geo    = 0.6 * scale(1 - latency_index, 0..1)
       + 0.4 * (90 if cloud coverage HIGH else 60)
social = scale(engagement_index, 0..1)

Every sub-score and the composite are rounded half up and
clamped to [0, 100].

============================================================
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping

from core.constants import (
    DOMAIN_CODE_ACTIVITY,
    DOMAIN_GEO,
    DOMAIN_MARKET,
    DOMAIN_NEWS,
    DOMAIN_SOCIAL,
)
from core.exceptions import ConfigurationError
from data_ingestion.types import (
    CloudCoverage,
    CodeActivity,
    DomainSet,
    GeoSignal,
    MarketSignal,
    NewsSignal,
    SocialSignal,
)
from scoring_engine.normalization import clamp_score, scale_to_100


WEIGHT_SUM_TOLERANCE = 1e-6

# Code activity ranges
REPO_COUNT_RANGE = (100, 5000)
STAR_COUNT_RANGE = (1000, 200000)
REPO_COUNT_SHARE = 0.4
STAR_COUNT_SHARE = 0.6

# A 10% daily move saturates the market sub-score
MARKET_CHANGE_SATURATION = 10.0

# Geo blend
LATENCY_SHARE = 0.6
CLOUD_SHARE = 0.4
CLOUD_HIGH_SCORE = 90
CLOUD_OTHER_SCORE = 60


# =============================================================
# TYPES
# =============================================================

class HealthLabel(str, Enum):
    """Qualitative band of the composite score."""
    THRIVING = "Ecosystem Thriving"
    HEALTHY = "Healthy"
    WATCH_CLOSELY = "Watch Closely"
    CRITICAL = "Critical"

    @classmethod
    def from_score(cls, score: int) -> "HealthLabel":
        if score >= 80:
            return cls.THRIVING
        if score >= 60:
            return cls.HEALTHY
        if score >= 40:
            return cls.WATCH_CLOSELY
        return cls.CRITICAL


@dataclass(frozen=True)
class CompositeWeights:
    """Domain weights. Must be non-negative and sum to 1.0."""
    code_activity: float = 0.30
    market: float = 0.20
    news: float = 0.20
    geo: float = 0.15
    social: float = 0.15

    def __post_init__(self) -> None:
        for name, weight in self.as_mapping().items():
            if weight < 0:
                raise ConfigurationError(
                    message=f"Weight for {name} must not be negative",
                    config_key=f"weights.{name}",
                    actual_value=weight,
                )

        total = sum(self.as_mapping().values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ConfigurationError(
                message=f"Composite weights must sum to 1.0, got {total:.4f}",
                config_key="weights",
                actual_value=total,
            )

    def as_mapping(self) -> Dict[str, float]:
        return {
            DOMAIN_CODE_ACTIVITY: self.code_activity,
            DOMAIN_MARKET: self.market,
            DOMAIN_NEWS: self.news,
            DOMAIN_GEO: self.geo,
            DOMAIN_SOCIAL: self.social,
        }


@dataclass(frozen=True)
class SubScores:
    """Per-domain sub-scores, each an int in [0, 100]."""
    code_activity: int
    market: int
    news: int
    geo: int
    social: int

    def as_mapping(self) -> Dict[str, int]:
        return {
            DOMAIN_CODE_ACTIVITY: self.code_activity,
            DOMAIN_MARKET: self.market,
            DOMAIN_NEWS: self.news,
            DOMAIN_GEO: self.geo,
            DOMAIN_SOCIAL: self.social,
        }

    def to_dict(self) -> Dict[str, int]:
        return self.as_mapping()


@dataclass(frozen=True)
class CompositeScore:
    """Result of one scoring pass."""
    score: int
    label: HealthLabel
    sub_scores: SubScores
    contributions: Mapping[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "label": self.label.value,
            "sub_scores": self.sub_scores.to_dict(),
            "contributions": dict(self.contributions),
        }


# =============================================================
# SUB-SCORE FUNCTIONS
# =============================================================

def score_code_activity(record: CodeActivity) -> int:
    repos = scale_to_100(record.total_repos, *REPO_COUNT_RANGE)
    stars = scale_to_100(record.total_stars, *STAR_COUNT_RANGE)
    return clamp_score(REPO_COUNT_SHARE * repos + STAR_COUNT_SHARE * stars)


def score_market(record: MarketSignal) -> int:
    return clamp_score(50 + (record.dominant_change_24h / MARKET_CHANGE_SATURATION) * 50)


def score_news(record: NewsSignal) -> int:
    return clamp_score((record.sentiment_score + 1) * 50)


def score_geo(record: GeoSignal) -> int:
    latency = scale_to_100(1 - record.latency_index, 0, 1)
    cloud = CLOUD_HIGH_SCORE if record.cloud_coverage == CloudCoverage.HIGH else CLOUD_OTHER_SCORE
    return clamp_score(LATENCY_SHARE * latency + CLOUD_SHARE * cloud)


def score_social(record: SocialSignal) -> int:
    return scale_to_100(record.engagement_index, 0, 1)


# =============================================================
# SCORER
# =============================================================

class CompositeScorer:
    """
    Aggregates domain records into the composite score.

    ============================================================
    USAGE
    ============================================================
        scorer = CompositeScorer()
        result = scorer.score(domains)
        print(scorer.explain(result))

    ============================================================
    """

    def __init__(self, weights: CompositeWeights = None):
        self.weights = weights or CompositeWeights()

    def sub_scores(self, domains: DomainSet) -> SubScores:
        return SubScores(
            code_activity=score_code_activity(domains.code_activity),
            market=score_market(domains.market),
            news=score_news(domains.news),
            geo=score_geo(domains.geo),
            social=score_social(domains.social),
        )

    def score(self, domains: DomainSet) -> CompositeScore:
        """
        Score one complete DomainSet.

        Args:
            domains: The five domain records of a cycle

        Returns:
            CompositeScore with sub-scores and weighted contributions
        """
        sub_scores = self.sub_scores(domains)
        weights = self.weights.as_mapping()

        contributions = {
            name: weights[name] * value
            for name, value in sub_scores.as_mapping().items()
        }
        composite = clamp_score(sum(contributions.values()))

        return CompositeScore(
            score=composite,
            label=HealthLabel.from_score(composite),
            sub_scores=sub_scores,
            contributions=MappingProxyType(contributions),
        )

    def explain(self, result: CompositeScore) -> str:
        """Human-readable breakdown, largest contribution first."""
        weights = self.weights.as_mapping()
        sub_scores = result.sub_scores.as_mapping()

        lines: List[str] = [f"Composite {result.score}/100 ({result.label.value})"]
        ranked = sorted(result.contributions.items(), key=lambda item: item[1], reverse=True)
        for name, contribution in ranked:
            lines.append(
                f"  {name:<14} {sub_scores[name]:>3} x {weights[name]:.2f} = {contribution:6.2f}"
            )
        return "\n".join(lines)
