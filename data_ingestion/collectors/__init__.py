"""
Data Ingestion - Collectors Package.

This package contains the five domain collectors.
Each collector owns exactly one external source.

Collectors:
- code_activity: Repository activity from GitHub search
- market: Crypto market data from CoinGecko
- news: Headline sentiment from NewsAPI
- geo: Region sample and hub weather
- social: Community comment sample
"""

from data_ingestion.collectors.base import BaseCollector
from data_ingestion.collectors.code_activity import CodeActivityCollector
from data_ingestion.collectors.geo import GeoCollector
from data_ingestion.collectors.market import MarketCollector
from data_ingestion.collectors.news import NewsCollector
from data_ingestion.collectors.social import SocialCollector


__all__ = [
    "BaseCollector",
    "CodeActivityCollector",
    "GeoCollector",
    "MarketCollector",
    "NewsCollector",
    "SocialCollector",
]
