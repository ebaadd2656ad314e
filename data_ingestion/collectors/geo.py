"""
Data Ingestion - Geo Collector.

============================================================
RESPONSIBILITY
============================================================
Collects a fixed sample of country records and tech-hub weather.

- Fetches region records from REST Countries
- Derives a synthetic latency index from mean country area
- Watches current weather at a few tech hubs (OpenWeatherMap)

============================================================
HEURISTICS
============================================================
latency_index = mean(area km^2) / area_normalization

This is a placeholder proxy, not a network measurement. The
cloud coverage flag is HIGH whenever the region sample loads.
Both stand in until real telemetry is wired.

Hub weather is informational only. Each hub falls back to
its default reading on its own and never degrades the domain.

============================================================
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from core.constants import DOMAIN_GEO
from core.exceptions import MalformedPayloadError, SourceError
from data_ingestion.collectors.base import BaseCollector
from data_ingestion.schemas import Country, WeatherResponse
from data_ingestion.types import (
    DEFAULT_HUB_CONDITION,
    DEFAULT_HUB_HUMIDITY,
    DEFAULT_HUB_TEMP_C,
    CloudCoverage,
    GeoConfig,
    GeoSignal,
    HubWeather,
    IngestionSource,
    RegionSample,
    TechHub,
)


class GeoCollector(BaseCollector[GeoSignal]):
    """
    Collector for regional and hub telemetry.

    ============================================================
    WIRING
    ============================================================
    Source: REST Countries /v3.1/alpha (no auth)
    Weather: OpenWeatherMap /data/2.5/weather (optional key)

    ============================================================
    """

    domain = DOMAIN_GEO

    def __init__(
        self,
        config: GeoConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(
            config=config,
            source=IngestionSource.REST_COUNTRIES,
            transport=transport,
        )
        self._geo_config = config
        self._logger = logging.getLogger("collector.rest_countries")

    # =========================================================
    # FETCH - External API Calls
    # =========================================================

    async def fetch_payload(self) -> Dict[str, Any]:
        # Both lookups settle before a failure propagates
        results = await asyncio.gather(
            self._get_json(
                f"{self._geo_config.base_url}/alpha",
                params={"codes": ",".join(self._geo_config.region_codes)},
            ),
            self._fetch_hub_weather(),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

        countries, hubs = results
        return {"countries": countries, "hubs": hubs}

    async def _fetch_hub_weather(self) -> Tuple[HubWeather, ...]:
        hubs = self._geo_config.hubs
        if not self._geo_config.weather_api_key:
            self._logger.debug("OPENWEATHER_API_KEY not set, using default hub readings")
            return tuple(HubWeather.default_for(hub) for hub in hubs)

        readings = await asyncio.gather(*(self._fetch_one_hub(hub) for hub in hubs))
        return tuple(readings)

    async def _fetch_one_hub(self, hub: TechHub) -> HubWeather:
        try:
            payload = await self._get_json(
                f"{self._geo_config.weather_base_url}/weather",
                params={
                    "q": hub.query,
                    "appid": self._geo_config.weather_api_key,
                    "units": "metric",
                },
            )
            weather = self._validate(WeatherResponse, payload)
        except SourceError as e:
            self._logger.warning(f"Hub weather for {hub.hub_id} unavailable: {e.message}")
            return HubWeather.default_for(hub)

        condition = weather.weather[0].main if weather.weather else "Clear"
        return HubWeather(
            hub_id=hub.hub_id,
            label=hub.label,
            temp_c=weather.main.temp if weather.main.temp is not None else DEFAULT_HUB_TEMP_C,
            humidity=weather.main.humidity if weather.main.humidity is not None else DEFAULT_HUB_HUMIDITY,
            condition=condition or DEFAULT_HUB_CONDITION,
        )

    # =========================================================
    # PARSE - Derive GeoSignal
    # =========================================================

    def parse(self, payload: Dict[str, Any]) -> GeoSignal:
        countries: List[Country] = self._validate_list(Country, payload.get("countries"))
        if not countries:
            raise MalformedPayloadError(
                message="Region lookup returned no countries",
                source=self.source_name,
            )

        mean_area = sum(c.area or 0.0 for c in countries) / len(countries)
        latency_index = mean_area / self._geo_config.area_normalization

        most_populous = max(countries, key=lambda c: c.population)
        top_region = most_populous.subregion or most_populous.region or "N/A"

        sample_regions = tuple(
            RegionSample(
                code=c.cca2,
                name=c.name.common,
                population=c.population,
                region=c.region or "N/A",
            )
            for c in countries
        )

        return GeoSignal(
            top_region=top_region,
            latency_index=round(latency_index, 4),
            cloud_coverage=CloudCoverage.HIGH,
            sample_regions=sample_regions,
            hub_weather=payload.get("hubs") or (),
        )

    def fallback(self, reason: str = "") -> GeoSignal:
        return GeoSignal.fallback(reason=reason, hubs=self._geo_config.hubs)
