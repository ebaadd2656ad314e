"""
Shared fixtures for the ecosystem engine tests.

============================================================
PURPOSE
============================================================
- Fixed domain records with known sub-scores
- A stub ingestion service for orchestrator and API tests
- An httpx MockTransport routing by source host

============================================================
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import httpx
import pytest

from core.clock import MockClock
from data_ingestion.types import (
    CloudCoverage,
    CodeActivity,
    DomainSet,
    GeoSignal,
    MarketHealth,
    MarketSignal,
    NewsSignal,
    SocialSignal,
    TrendLabel,
)
from sentiment.models import SentimentLabel


# ============================================================
# DOMAIN RECORDS
# ============================================================

@pytest.fixture
def fixed_point_domains() -> DomainSet:
    """
    Records scoring 37/62/66/47/69, composite 54.
    """
    return DomainSet(
        code_activity=CodeActivity(
            total_repos=1284,
            total_stars=93420,
            top_language="Python",
            trending_repo="huggingface/transformers",
        ),
        market=MarketSignal(
            dominant_asset="BTC",
            dominant_price=65000.0,
            dominant_change_24h=2.34,
            market_health=MarketHealth.BULLISH,
            trend_label=TrendLabel.MILD_UPTREND,
        ),
        news=NewsSignal(
            sentiment_score=0.32,
            label=SentimentLabel.STRONGLY_POSITIVE,
            top_headline="AI growth surge continues",
        ),
        geo=GeoSignal(
            top_region="Southern Asia",
            latency_index=0.82,
            cloud_coverage=CloudCoverage.HIGH,
        ),
        social=SocialSignal(
            sample_size=80,
            engagement_index=0.69,
            average_comment_length=160,
        ),
    )


@pytest.fixture
def mock_clock() -> MockClock:
    return MockClock(datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


# ============================================================
# STUB INGESTION
# ============================================================

class StubIngestion:
    """Returns fixed records; optionally blocks until a gate opens."""

    def __init__(self, domains: DomainSet, gate: Optional[asyncio.Event] = None):
        self.domains = domains
        self.gate = gate
        self.calls = 0

    async def run_collection_cycle(self) -> DomainSet:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        return self.domains

    def get_health_status(self) -> Dict[str, Any]:
        return {"run_count": self.calls}


@pytest.fixture
def make_ingestion(fixed_point_domains) -> Callable[..., StubIngestion]:
    def _make(domains: Optional[DomainSet] = None, gate: Optional[asyncio.Event] = None):
        return StubIngestion(domains or fixed_point_domains, gate=gate)
    return _make


# ============================================================
# HTTP SOURCES
# ============================================================

GITHUB_PAYLOAD = {
    "total_count": 4,
    "items": [
        {
            "name": "transformers",
            "owner": {"login": "huggingface"},
            "stargazers_count": 120000,
            "language": "Python",
            "html_url": "https://github.com/huggingface/transformers",
        },
        {
            "name": "pytorch",
            "owner": {"login": "pytorch"},
            "stargazers_count": 80000,
            "language": "Python",
            "html_url": "https://github.com/pytorch/pytorch",
        },
        {
            "name": "tfjs",
            "owner": {"login": "tensorflow"},
            "stargazers_count": 18000,
            "language": "TypeScript",
            "html_url": "https://github.com/tensorflow/tfjs",
        },
        {
            "name": "notebooks",
            "owner": {"login": "someone"},
            "stargazers_count": None,
            "language": None,
            "html_url": "https://github.com/someone/notebooks",
        },
    ],
}

COINGECKO_PAYLOAD = [
    {
        "id": "bitcoin",
        "symbol": "btc",
        "name": "Bitcoin",
        "current_price": 65000.0,
        "market_cap": 1_280_000_000_000,
        "price_change_percentage_24h": 2.34,
        "price_change_percentage_1h_in_currency": 0.2,
        "price_change_percentage_7d_in_currency": 5.6,
    },
    {
        "id": "ethereum",
        "symbol": "eth",
        "name": "Ethereum",
        "current_price": 3400.0,
        "market_cap": 410_000_000_000,
        "price_change_percentage_24h": 1.1,
    },
    {
        "id": "solana",
        "symbol": "sol",
        "name": "Solana",
        "current_price": 150.0,
        "market_cap": 70_000_000_000,
        "price_change_percentage_24h": 9.0,
    },
]

NEWS_PAYLOAD = {
    "status": "ok",
    "totalResults": 2,
    "articles": [
        {
            "title": "AI growth surge",
            "description": "Record rally",
            "url": "https://example.com/a",
            "source": {"name": "TechCrunch"},
        },
        {
            "title": "Bug causes crash",
            "description": None,
            "url": "https://example.com/b",
            "source": {"name": None},
        },
    ],
}

COUNTRIES_PAYLOAD = [
    {
        "cca2": "US",
        "name": {"common": "United States"},
        "population": 329484123,
        "area": 9372610.0,
        "region": "Americas",
        "subregion": "North America",
    },
    {
        "cca2": "DE",
        "name": {"common": "Germany"},
        "population": 83240525,
        "area": 357114.0,
        "region": "Europe",
        "subregion": "Western Europe",
    },
    {
        "cca2": "IN",
        "name": {"common": "India"},
        "population": 1380004385,
        "area": 3287590.0,
        "region": "Asia",
        "subregion": "Southern Asia",
    },
]

COMMENTS_PAYLOAD = [
    {"postId": 1, "id": 1, "name": "a", "email": "a@x.io", "body": "abcd"},
    {"postId": 1, "id": 2, "name": "b", "email": "b@x.io", "body": "ab"},
    {"postId": 2, "id": 3, "name": "c", "email": "c@x.io", "body": "abc"},
    {"postId": 3, "id": 4, "name": "d", "email": "d@x.io", "body": "a"},
]

DEFAULT_ROUTES: Dict[str, Any] = {
    "api.github.com": GITHUB_PAYLOAD,
    "api.coingecko.com": COINGECKO_PAYLOAD,
    "newsapi.org": NEWS_PAYLOAD,
    "restcountries.com": COUNTRIES_PAYLOAD,
    "jsonplaceholder.typicode.com": COMMENTS_PAYLOAD,
}


@pytest.fixture
def make_transport() -> Callable[..., httpx.MockTransport]:
    """
    Build a MockTransport answering by host.

    Overrides map a host to a JSON payload, an httpx.Response, or a
    callable taking the request. Every request is recorded on
    transport.requests.
    """
    def _make(overrides: Optional[Dict[str, Any]] = None) -> httpx.MockTransport:
        routes = dict(DEFAULT_ROUTES)
        routes.update(overrides or {})
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            route = routes.get(request.url.host)
            if route is None:
                return httpx.Response(404, json={"message": "Not Found"})
            if callable(route):
                return route(request)
            if isinstance(route, httpx.Response):
                return route
            return httpx.Response(200, json=route)

        transport = httpx.MockTransport(handler)
        transport.requests = requests
        return transport

    return _make
