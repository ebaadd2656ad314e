"""
Data Ingestion - Ingestion Service.

============================================================
RESPONSIBILITY
============================================================
Runs the five domain collectors for one cycle.

- Builds collectors from configuration
- Fans out all collectors concurrently
- Bounds each collector by a request timeout
- Rejoins into one complete DomainSet

============================================================
DESIGN PRINCIPLES
============================================================
- Failure isolation between sources
- A timed-out or crashed collector yields its fallback record
- The returned DomainSet is always complete

============================================================
"""

import asyncio
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional
from uuid import uuid4

import httpx

from core.constants import (
    ALL_DOMAINS,
    DEFAULT_COLLECTOR_TIMEOUT_SECONDS,
    DOMAIN_CODE_ACTIVITY,
    DOMAIN_GEO,
    DOMAIN_MARKET,
    DOMAIN_NEWS,
    DOMAIN_SOCIAL,
)
from data_ingestion.collectors.base import BaseCollector
from data_ingestion.collectors.code_activity import CodeActivityCollector
from data_ingestion.collectors.geo import GeoCollector
from data_ingestion.collectors.market import MarketCollector
from data_ingestion.collectors.news import NewsCollector
from data_ingestion.collectors.social import SocialCollector
from data_ingestion.types import (
    CoinGeckoConfig,
    DomainSet,
    GeoConfig,
    GitHubConfig,
    NewsApiConfig,
    SocialConfig,
)


# ============================================================
# CONFIGURATION
# ============================================================


def _env_tuple(name: str, default: tuple) -> tuple:
    raw = os.getenv(name)
    if not raw:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass
class IngestionServiceConfig:
    """Configuration for the ingestion service."""

    # Upper bound for one collector, including all of its requests
    collector_timeout_seconds: float = DEFAULT_COLLECTOR_TIMEOUT_SECONDS

    # Collector-specific configs
    github_config: GitHubConfig = field(default_factory=GitHubConfig)
    coingecko_config: CoinGeckoConfig = field(default_factory=CoinGeckoConfig)
    news_api_config: NewsApiConfig = field(default_factory=NewsApiConfig)
    geo_config: GeoConfig = field(default_factory=GeoConfig)
    social_config: SocialConfig = field(default_factory=SocialConfig)

    @classmethod
    def from_env(cls) -> "IngestionServiceConfig":
        """Create configuration from environment variables."""
        timeout = float(os.getenv("COLLECTOR_TIMEOUT_SECONDS", str(DEFAULT_COLLECTOR_TIMEOUT_SECONDS)))

        return cls(
            collector_timeout_seconds=timeout,
            github_config=GitHubConfig(
                timeout_seconds=timeout,
                api_key=os.getenv("GITHUB_TOKEN") or None,
                base_url=os.getenv("GITHUB_API_URL", GitHubConfig.base_url),
                topic=os.getenv("GITHUB_TOPIC", GitHubConfig.topic),
            ),
            coingecko_config=CoinGeckoConfig(
                timeout_seconds=timeout,
                api_key=os.getenv("COINGECKO_API_KEY") or None,
                base_url=os.getenv("COINGECKO_API_URL", CoinGeckoConfig.base_url),
                tracked_assets=_env_tuple("COINGECKO_TRACKED_ASSETS", CoinGeckoConfig.tracked_assets),
                watch_list=_env_tuple("COINGECKO_WATCH_LIST", CoinGeckoConfig.watch_list),
            ),
            news_api_config=NewsApiConfig(
                timeout_seconds=timeout,
                api_key=os.getenv("NEWS_API_KEY", ""),
                base_url=os.getenv("NEWS_API_URL", NewsApiConfig.base_url),
            ),
            geo_config=GeoConfig(
                timeout_seconds=timeout,
                base_url=os.getenv("RESTCOUNTRIES_API_URL", GeoConfig.base_url),
                region_codes=_env_tuple("GEO_REGION_CODES", GeoConfig.region_codes),
                weather_api_key=os.getenv("OPENWEATHER_API_KEY") or None,
                weather_base_url=os.getenv("OPENWEATHER_API_URL", GeoConfig.weather_base_url),
            ),
            social_config=SocialConfig(
                timeout_seconds=timeout,
                base_url=os.getenv("JSONPLACEHOLDER_API_URL", SocialConfig.base_url),
            ),
        )

    def validate(self) -> list:
        """Return a list of configuration problems (empty if valid)."""
        errors = []
        if self.collector_timeout_seconds <= 0:
            errors.append("collector_timeout_seconds must be positive")
        if not self.coingecko_config.watch_list:
            errors.append("coingecko watch_list must not be empty")
        if not self.geo_config.region_codes:
            errors.append("geo region_codes must not be empty")
        if self.geo_config.area_normalization <= 0:
            errors.append("geo area_normalization must be positive")
        if self.social_config.engagement_saturation <= 0:
            errors.append("social engagement_saturation must be positive")
        return errors


# ============================================================
# INGESTION SERVICE
# ============================================================


class IngestionService:
    """
    Runs one concurrent collection across all domains.

    ============================================================
    USAGE
    ============================================================
    ```python
    service = IngestionService(IngestionServiceConfig.from_env())
    domains = await service.run_collection_cycle()
    ```

    ============================================================
    """

    def __init__(
        self,
        config: IngestionServiceConfig,
        collectors: Optional[Dict[str, BaseCollector]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the ingestion service.

        Args:
            config: Service configuration
            collectors: Pre-built collectors keyed by domain (tests)
            transport: httpx transport shared by default collectors
        """
        self._config = config
        self._logger = logging.getLogger("ingestion_service")
        self._collectors: Dict[str, BaseCollector] = collectors or self._build_collectors(transport)

        missing = [d for d in ALL_DOMAINS if d not in self._collectors]
        if missing:
            raise ValueError(f"Missing collectors for domains: {', '.join(missing)}")

        self._run_count = 0
        self._last_run_at: Optional[datetime] = None

    def _build_collectors(
        self,
        transport: Optional[httpx.AsyncBaseTransport],
    ) -> Dict[str, BaseCollector]:
        config = self._config
        return {
            DOMAIN_CODE_ACTIVITY: CodeActivityCollector(config.github_config, transport=transport),
            DOMAIN_MARKET: MarketCollector(config.coingecko_config, transport=transport),
            DOMAIN_NEWS: NewsCollector(config.news_api_config, transport=transport),
            DOMAIN_GEO: GeoCollector(config.geo_config, transport=transport),
            DOMAIN_SOCIAL: SocialCollector(config.social_config, transport=transport),
        }

    # =========================================================
    # COLLECTION EXECUTION
    # =========================================================

    async def run_collection_cycle(self) -> DomainSet:
        """
        Run all collectors concurrently and wait for every result.

        Returns:
            Complete DomainSet; degraded domains carry fallback records
        """
        cycle_id = uuid4().hex[:8]
        self._run_count += 1
        started_at = datetime.now(timezone.utc)

        self._logger.info(f"Starting collection cycle {cycle_id}")

        names = list(self._collectors.keys())
        records = await asyncio.gather(
            *(self._run_collector(name, self._collectors[name]) for name in names)
        )
        by_domain = dict(zip(names, records))

        domains = DomainSet(
            code_activity=by_domain[DOMAIN_CODE_ACTIVITY],
            market=by_domain[DOMAIN_MARKET],
            news=by_domain[DOMAIN_NEWS],
            geo=by_domain[DOMAIN_GEO],
            social=by_domain[DOMAIN_SOCIAL],
        )

        self._last_run_at = datetime.now(timezone.utc)
        duration = (self._last_run_at - started_at).total_seconds()
        degraded = domains.degraded_domains
        self._logger.info(
            f"Collection cycle {cycle_id} completed in {duration:.2f}s. "
            f"Degraded: {', '.join(degraded) if degraded else 'none'}"
        )

        return domains

    async def _run_collector(self, name: str, collector: BaseCollector):
        """Run a single collector with timeout and error isolation."""
        try:
            return await asyncio.wait_for(
                collector.fetch(),
                timeout=self._config.collector_timeout_seconds,
            )
        except asyncio.TimeoutError:
            self._logger.warning(
                f"Collector {name} timed out after {self._config.collector_timeout_seconds}s"
            )
            return collector.fallback(
                f"Timed out after {self._config.collector_timeout_seconds}s"
            )
        except Exception as e:
            self._logger.error(f"Collector {name} failed: {e}")
            return collector.fallback(f"Collector error: {e}")

    # =========================================================
    # HEALTH
    # =========================================================

    def get_health_status(self) -> Dict[str, object]:
        return {
            "run_count": self._run_count,
            "last_run_at": self._last_run_at.isoformat() if self._last_run_at else None,
            "collectors": {
                name: collector.get_health_status()
                for name, collector in self._collectors.items()
            },
        }

    def get_collector(self, name: str) -> Optional[BaseCollector]:
        """Get collector by domain name."""
        return self._collectors.get(name)
