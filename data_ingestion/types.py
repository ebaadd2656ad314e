"""
Data Ingestion - Type Definitions.

============================================================
PURPOSE
============================================================
Shared types for the data ingestion layer.

- Configuration dataclasses (one per source)
- Closed domain record types (one per domain)
- Fallback records for degraded sources

============================================================
DESIGN PRINCIPLES
============================================================
- Immutable data structures
- Every record field is always populated
- Fallback values are fixed and documented here
- Serializable for the HTTP transport

============================================================
"""

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from core.constants import (
    DEFAULT_COLLECTOR_TIMEOUT_SECONDS,
    DOMAIN_CODE_ACTIVITY,
    DOMAIN_GEO,
    DOMAIN_MARKET,
    DOMAIN_NEWS,
    DOMAIN_SOCIAL,
)
from sentiment.models import SentimentLabel


# =============================================================
# ENUMS
# =============================================================

class IngestionSource(str, Enum):
    """Identifiers for external sources."""
    GITHUB = "github"
    COINGECKO = "coingecko"
    NEWS_API = "news_api"
    REST_COUNTRIES = "rest_countries"
    JSONPLACEHOLDER = "jsonplaceholder"


class MarketHealth(str, Enum):
    """Direction of the dominant asset."""
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    UNKNOWN = "Unknown"


class TrendLabel(str, Enum):
    """Bucketed 24h move of the dominant asset."""
    STRONG_UPTREND = "Strong Uptrend"
    MILD_UPTREND = "Mild Uptrend"
    SIDEWAYS = "Sideways"
    MILD_PULLBACK = "Mild Pullback"
    SHARP_SELLOFF = "Sharp Sell-off"
    UNKNOWN = "Unknown"


class CloudCoverage(str, Enum):
    """Synthetic cloud coverage flag for the geo domain."""
    HIGH = "High"
    UNKNOWN = "Unknown"


# =============================================================
# CONFIGURATION TYPES
# =============================================================

@dataclass(frozen=True)
class CollectorConfig:
    """Base configuration for all collectors."""
    source_name: str
    enabled: bool = True
    timeout_seconds: float = DEFAULT_COLLECTOR_TIMEOUT_SECONDS
    version: str = "1.0.0"


@dataclass(frozen=True)
class GitHubConfig(CollectorConfig):
    """Configuration for the code activity collector."""
    source_name: str = IngestionSource.GITHUB.value
    api_key: Optional[str] = None
    base_url: str = "https://api.github.com"
    topic: str = "machine-learning"
    per_page: int = 30


@dataclass(frozen=True)
class CoinGeckoConfig(CollectorConfig):
    """Configuration for the market collector."""
    source_name: str = IngestionSource.COINGECKO.value
    api_key: Optional[str] = None
    base_url: str = "https://api.coingecko.com/api/v3"
    tracked_assets: tuple = (
        "bitcoin",
        "ethereum",
        "solana",
        "cardano",
        "polkadot",
        "chainlink",
        "arbitrum",
        "optimism",
    )
    # Candidates for the dominant asset, highest priority first.
    watch_list: tuple = ("bitcoin", "ethereum")


@dataclass(frozen=True)
class NewsApiConfig(CollectorConfig):
    """Configuration for the headline collector."""
    source_name: str = IngestionSource.NEWS_API.value
    api_key: str = ""
    base_url: str = "https://newsapi.org/v2"
    query: str = "software development OR programming OR AI"
    page_size: int = 30
    language: str = "en"


@dataclass(frozen=True)
class TechHub:
    """A city whose weather is watched as a data-center proxy."""
    hub_id: str
    label: str
    query: str


DEFAULT_TECH_HUBS: Tuple[TechHub, ...] = (
    TechHub("newyork", "New York, US", "New York,US"),
    TechHub("berlin", "Berlin, DE", "Berlin,DE"),
    TechHub("bangalore", "Bengaluru, IN", "Bangalore,IN"),
)


@dataclass(frozen=True)
class GeoConfig(CollectorConfig):
    """Configuration for the geo collector."""
    source_name: str = IngestionSource.REST_COUNTRIES.value
    base_url: str = "https://restcountries.com/v3.1"
    region_codes: tuple = ("us", "de", "in")
    # Divisor turning mean country area (km^2) into the latency heuristic.
    area_normalization: float = 10_000_000.0
    weather_api_key: Optional[str] = None
    weather_base_url: str = "https://api.openweathermap.org/data/2.5"
    hubs: Tuple[TechHub, ...] = DEFAULT_TECH_HUBS


@dataclass(frozen=True)
class SocialConfig(CollectorConfig):
    """Configuration for the community chatter collector."""
    source_name: str = IngestionSource.JSONPLACEHOLDER.value
    base_url: str = "https://jsonplaceholder.typicode.com"
    sample_limit: int = 80
    engagement_saturation: int = 5000


# =============================================================
# SERIALIZATION
# =============================================================

def _enum_safe_dict(items) -> Dict[str, Any]:
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in items}


class RecordMixin:
    """Adds JSON-ready serialization to record dataclasses."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self, dict_factory=_enum_safe_dict)


# =============================================================
# CODE ACTIVITY
# =============================================================

@dataclass(frozen=True)
class RepoSummary(RecordMixin):
    name: str
    stars: int
    language: str
    url: str


@dataclass(frozen=True)
class LanguageShare(RecordMixin):
    name: str
    count: int


@dataclass(frozen=True)
class CodeActivity(RecordMixin):
    """Repository activity derived from a ranked repository list."""
    total_repos: int
    total_stars: int
    top_language: str
    trending_repo: str
    top_repos: Tuple[RepoSummary, ...] = ()
    average_stars: int = 0
    language_breakdown: Tuple[LanguageShare, ...] = ()
    degraded: bool = False
    degraded_reason: str = ""

    @classmethod
    def fallback(cls, reason: str = "") -> "CodeActivity":
        return cls(
            total_repos=0,
            total_stars=0,
            top_language="Unknown",
            trending_repo="N/A",
            degraded=True,
            degraded_reason=reason,
        )


# =============================================================
# MARKET
# =============================================================

@dataclass(frozen=True)
class AssetQuote(RecordMixin):
    price: float
    change_24h: float
    change_1h: Optional[float] = None
    change_7d: Optional[float] = None


@dataclass(frozen=True)
class MarketSignal(RecordMixin):
    """
    Dominant-asset view of the tracked market.

    dominant_price is the one field that may be None (fallback).
    major_pairs is frozen into a read-only mapping on construction.
    """
    dominant_asset: str
    dominant_price: Optional[float]
    dominant_change_24h: float
    market_health: MarketHealth
    trend_label: TrendLabel
    major_pairs: Mapping[str, AssetQuote] = field(default_factory=dict)
    tracked_assets: int = 0
    total_market_cap: float = 0.0
    average_change_24h: float = 0.0
    degraded: bool = False
    degraded_reason: str = ""

    def __post_init__(self):
        object.__setattr__(self, "major_pairs", MappingProxyType(dict(self.major_pairs)))

    def to_dict(self) -> Dict[str, Any]:
        data = _enum_safe_dict(
            (f.name, getattr(self, f.name)) for f in fields(self) if f.name != "major_pairs"
        )
        data["major_pairs"] = {
            symbol: quote.to_dict() for symbol, quote in self.major_pairs.items()
        }
        return data

    @classmethod
    def fallback(cls, dominant_asset: str = "BTC", reason: str = "") -> "MarketSignal":
        return cls(
            dominant_asset=dominant_asset,
            dominant_price=None,
            dominant_change_24h=0.0,
            market_health=MarketHealth.UNKNOWN,
            trend_label=TrendLabel.UNKNOWN,
            degraded=True,
            degraded_reason=reason,
        )


# =============================================================
# NEWS
# =============================================================

NO_HEADLINES = "No headlines available."
HEADLINES_UNAVAILABLE = "Headline feed unavailable."


@dataclass(frozen=True)
class Headline(RecordMixin):
    title: str
    source: str
    url: str


@dataclass(frozen=True)
class NewsSignal(RecordMixin):
    """Headline tone over the latest article batch."""
    sentiment_score: float
    label: SentimentLabel
    top_headline: str
    top_headlines: Tuple[Headline, ...] = ()
    recent_headlines: Tuple[Headline, ...] = ()
    article_count: int = 0
    degraded: bool = False
    degraded_reason: str = ""

    @classmethod
    def fallback(cls, reason: str = "", top_headline: str = HEADLINES_UNAVAILABLE) -> "NewsSignal":
        return cls(
            sentiment_score=0.0,
            label=SentimentLabel.NEUTRAL,
            top_headline=top_headline,
            degraded=True,
            degraded_reason=reason,
        )


# =============================================================
# GEO
# =============================================================

DEFAULT_HUB_TEMP_C = 25.0
DEFAULT_HUB_HUMIDITY = 50
DEFAULT_HUB_CONDITION = "Unknown"

# Latency heuristic reported when no region sample is available.
FALLBACK_LATENCY_INDEX = 0.5


@dataclass(frozen=True)
class RegionSample(RecordMixin):
    code: str
    name: str
    population: int
    region: str = "N/A"


@dataclass(frozen=True)
class HubWeather(RecordMixin):
    hub_id: str
    label: str
    temp_c: float
    humidity: int
    condition: str

    @classmethod
    def default_for(cls, hub: TechHub) -> "HubWeather":
        return cls(
            hub_id=hub.hub_id,
            label=hub.label,
            temp_c=DEFAULT_HUB_TEMP_C,
            humidity=DEFAULT_HUB_HUMIDITY,
            condition=DEFAULT_HUB_CONDITION,
        )


@dataclass(frozen=True)
class GeoSignal(RecordMixin):
    """
    Regional sample and synthetic infrastructure indicators.

    latency_index is mean country area over a fixed constant. It is a
    placeholder heuristic, not a network measurement.
    """
    top_region: str
    latency_index: float
    cloud_coverage: CloudCoverage
    sample_regions: Tuple[RegionSample, ...] = ()
    hub_weather: Tuple[HubWeather, ...] = ()
    degraded: bool = False
    degraded_reason: str = ""

    @classmethod
    def fallback(
        cls,
        reason: str = "",
        hubs: Tuple[TechHub, ...] = DEFAULT_TECH_HUBS,
    ) -> "GeoSignal":
        return cls(
            top_region="Unknown",
            latency_index=FALLBACK_LATENCY_INDEX,
            cloud_coverage=CloudCoverage.UNKNOWN,
            hub_weather=tuple(HubWeather.default_for(h) for h in hubs),
            degraded=True,
            degraded_reason=reason,
        )


# =============================================================
# SOCIAL
# =============================================================

@dataclass(frozen=True)
class SocialSignal(RecordMixin):
    """Engagement over a bounded sample of community comments."""
    sample_size: int
    engagement_index: float
    average_comment_length: int
    distinct_threads: int = 0
    degraded: bool = False
    degraded_reason: str = ""

    @classmethod
    def fallback(cls, reason: str = "") -> "SocialSignal":
        return cls(
            sample_size=0,
            engagement_index=0.0,
            average_comment_length=0,
            degraded=True,
            degraded_reason=reason,
        )


# =============================================================
# DOMAIN SET
# =============================================================

@dataclass(frozen=True)
class DomainSet:
    """The five domain records of one cycle."""
    code_activity: CodeActivity
    market: MarketSignal
    news: NewsSignal
    geo: GeoSignal
    social: SocialSignal

    def as_mapping(self) -> Dict[str, RecordMixin]:
        return {
            DOMAIN_CODE_ACTIVITY: self.code_activity,
            DOMAIN_MARKET: self.market,
            DOMAIN_NEWS: self.news,
            DOMAIN_GEO: self.geo,
            DOMAIN_SOCIAL: self.social,
        }

    @property
    def degraded_domains(self) -> Tuple[str, ...]:
        """Names of domains that fell back during the cycle."""
        return tuple(
            name for name, record in self.as_mapping().items()
            if record.degraded
        )

    @classmethod
    def all_fallback(cls, reason: str = "") -> "DomainSet":
        return cls(
            code_activity=CodeActivity.fallback(reason),
            market=MarketSignal.fallback(reason=reason),
            news=NewsSignal.fallback(reason),
            geo=GeoSignal.fallback(reason),
            social=SocialSignal.fallback(reason),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {name: record.to_dict() for name, record in self.as_mapping().items()}
