"""
Data Ingestion Package.

This package handles all data collection for the five domains.
No scoring logic - only data acquisition and derivation of
the closed domain records.

Sub-packages:
- collectors: One collector per external source

Main service:
- ingestion_service: Runs all collectors for one cycle
"""

from data_ingestion.ingestion_service import IngestionService, IngestionServiceConfig
from data_ingestion.collectors import (
    BaseCollector,
    CodeActivityCollector,
    GeoCollector,
    MarketCollector,
    NewsCollector,
    SocialCollector,
)
from data_ingestion.types import (
    IngestionSource,
    MarketHealth,
    TrendLabel,
    CloudCoverage,
    CollectorConfig,
    GitHubConfig,
    CoinGeckoConfig,
    NewsApiConfig,
    GeoConfig,
    SocialConfig,
    CodeActivity,
    MarketSignal,
    NewsSignal,
    GeoSignal,
    SocialSignal,
    DomainSet,
)


__all__ = [
    # Service
    "IngestionService",
    "IngestionServiceConfig",
    # Collectors
    "BaseCollector",
    "CodeActivityCollector",
    "GeoCollector",
    "MarketCollector",
    "NewsCollector",
    "SocialCollector",
    # Types - Enums
    "IngestionSource",
    "MarketHealth",
    "TrendLabel",
    "CloudCoverage",
    # Types - Configs
    "CollectorConfig",
    "GitHubConfig",
    "CoinGeckoConfig",
    "NewsApiConfig",
    "GeoConfig",
    "SocialConfig",
    # Types - Records
    "CodeActivity",
    "MarketSignal",
    "NewsSignal",
    "GeoSignal",
    "SocialSignal",
    "DomainSet",
]
