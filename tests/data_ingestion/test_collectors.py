"""
Tests for the domain collectors.

============================================================
PURPOSE
============================================================
Each collector is exercised against an httpx MockTransport.

TEST PRINCIPLES:
- Verify derived record fields from realistic payloads
- Verify every failure kind yields the fallback record
- fetch() never raises for source failures

============================================================
"""

import asyncio

import httpx
import pytest

from data_ingestion.collectors import (
    CodeActivityCollector,
    GeoCollector,
    MarketCollector,
    NewsCollector,
    SocialCollector,
)
from data_ingestion.collectors.market import classify_trend, select_dominant
from data_ingestion.collectors.news import NEWS_KEY_MISSING_HEADLINE
from data_ingestion.schemas import CoinMarket
from data_ingestion.types import (
    HEADLINES_UNAVAILABLE,
    NO_HEADLINES,
    CloudCoverage,
    CoinGeckoConfig,
    GeoConfig,
    GitHubConfig,
    MarketHealth,
    NewsApiConfig,
    SocialConfig,
    TrendLabel,
)
from sentiment import SentimentLabel


def _status(code: int):
    return lambda request: httpx.Response(code, json={"message": "error"})


def _timeout(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectTimeout("timed out", request=request)


def _not_json(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, text="<html>rate limited</html>")


def _raw_json(body: str):
    return lambda request: httpx.Response(
        200, content=body.encode(), headers={"content-type": "application/json"}
    )


# ============================================================
# CODE ACTIVITY
# ============================================================

class TestCodeActivityCollector:

    @pytest.mark.asyncio
    async def test_derives_activity(self, make_transport):
        collector = CodeActivityCollector(GitHubConfig(), transport=make_transport())

        record = await collector.fetch()

        assert record.degraded is False
        assert record.total_repos == 4
        assert record.total_stars == 218000
        assert record.top_language == "Python"
        assert record.trending_repo == "huggingface/transformers"
        assert record.average_stars == 54500
        assert [r.name for r in record.top_repos] == [
            "huggingface/transformers",
            "pytorch/pytorch",
            "tensorflow/tfjs",
        ]
        assert {(s.name, s.count) for s in record.language_breakdown} == {
            ("Python", 2),
            ("TypeScript", 1),
            ("Other", 1),
        }

    @pytest.mark.asyncio
    async def test_request_shape_and_token(self, make_transport):
        transport = make_transport()
        collector = CodeActivityCollector(GitHubConfig(api_key="ghp_test"), transport=transport)

        await collector.fetch()

        request = transport.requests[0]
        assert request.url.path == "/search/repositories"
        assert request.url.params["q"] == "topic:machine-learning"
        assert request.url.params["sort"] == "stars"
        assert request.headers["Authorization"] == "Bearer ghp_test"

    @pytest.mark.asyncio
    async def test_no_token_sends_no_authorization(self, make_transport):
        transport = make_transport()
        collector = CodeActivityCollector(GitHubConfig(), transport=transport)

        await collector.fetch()

        assert "Authorization" not in transport.requests[0].headers

    @pytest.mark.asyncio
    async def test_empty_result_is_not_degraded(self, make_transport):
        transport = make_transport({"api.github.com": {"total_count": 0, "items": []}})
        collector = CodeActivityCollector(GitHubConfig(), transport=transport)

        record = await collector.fetch()

        assert record.degraded is False
        assert record.total_repos == 0
        assert record.top_language == "Unknown"
        assert record.trending_repo == "N/A"
        assert record.average_stars == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("route", [_status(403), _status(500), _timeout, _not_json])
    async def test_failures_yield_fallback(self, make_transport, route):
        transport = make_transport({"api.github.com": route})
        collector = CodeActivityCollector(GitHubConfig(), transport=transport)

        record = await collector.fetch()

        assert record.degraded is True
        assert record.degraded_reason
        assert record.total_repos == 0
        assert record.total_stars == 0
        assert record.top_language == "Unknown"
        assert record.trending_repo == "N/A"

    @pytest.mark.asyncio
    async def test_malformed_payload_yields_fallback(self, make_transport):
        transport = make_transport({"api.github.com": {"items": "not-a-list"}})
        collector = CodeActivityCollector(GitHubConfig(), transport=transport)

        record = await collector.fetch()

        assert record.degraded is True

    @pytest.mark.asyncio
    async def test_disabled_collector_makes_no_request(self, make_transport):
        transport = make_transport()
        collector = CodeActivityCollector(GitHubConfig(enabled=False), transport=transport)

        record = await collector.fetch()

        assert record.degraded is True
        assert transport.requests == []


# ============================================================
# MARKET
# ============================================================

class TestMarketCollector:

    @pytest.mark.asyncio
    async def test_derives_market_signal(self, make_transport):
        collector = MarketCollector(CoinGeckoConfig(), transport=make_transport())

        record = await collector.fetch()

        # solana moves more but is not on the watch-list
        assert record.dominant_asset == "BTC"
        assert record.dominant_price == 65000.0
        assert record.dominant_change_24h == 2.34
        assert record.market_health == MarketHealth.BULLISH
        assert record.trend_label == TrendLabel.MILD_UPTREND
        assert set(record.major_pairs) == {"BTC", "ETH", "SOL"}
        assert record.major_pairs["ETH"].price == 3400.0
        assert record.major_pairs["BTC"].change_1h == 0.2
        assert record.major_pairs["BTC"].change_7d == 5.6
        assert record.tracked_assets == 3
        assert record.total_market_cap == 1_760_000_000_000
        assert record.average_change_24h == pytest.approx(4.1467, abs=1e-4)

    @pytest.mark.asyncio
    async def test_major_pairs_are_read_only(self, make_transport):
        collector = MarketCollector(CoinGeckoConfig(), transport=make_transport())

        record = await collector.fetch()

        with pytest.raises(TypeError):
            record.major_pairs["DOGE"] = record.major_pairs["BTC"]
        assert record.to_dict()["major_pairs"]["ETH"] == {
            "price": 3400.0,
            "change_24h": 1.1,
            "change_1h": None,
            "change_7d": None,
        }
        assert record.to_dict()["market_health"] == "Bullish"

    @pytest.mark.asyncio
    async def test_request_params(self, make_transport):
        transport = make_transport()
        collector = MarketCollector(CoinGeckoConfig(api_key="cg-key"), transport=transport)

        await collector.fetch()

        request = transport.requests[0]
        assert request.url.path.endswith("/coins/markets")
        assert request.url.params["vs_currency"] == "usd"
        assert "bitcoin" in request.url.params["ids"].split(",")
        assert request.url.params["price_change_percentage"] == "1h,24h,7d"
        assert request.headers["x-cg-demo-api-key"] == "cg-key"

    @pytest.mark.asyncio
    async def test_ethereum_dominant_when_it_moves_more(self, make_transport):
        payload = [
            {"id": "bitcoin", "symbol": "btc", "current_price": 1.0, "price_change_percentage_24h": -4.0},
            {"id": "ethereum", "symbol": "eth", "current_price": 2.0, "price_change_percentage_24h": -1.0},
        ]
        collector = MarketCollector(
            CoinGeckoConfig(),
            transport=make_transport({"api.coingecko.com": payload}),
        )

        record = await collector.fetch()

        assert record.dominant_asset == "ETH"
        assert record.market_health == MarketHealth.BEARISH
        assert record.trend_label == TrendLabel.MILD_PULLBACK

    @pytest.mark.asyncio
    async def test_no_watch_list_asset_yields_fallback(self, make_transport):
        payload = [{"id": "solana", "symbol": "sol", "current_price": 150.0, "price_change_percentage_24h": 9.0}]
        collector = MarketCollector(
            CoinGeckoConfig(),
            transport=make_transport({"api.coingecko.com": payload}),
        )

        record = await collector.fetch()

        assert record.degraded is True
        assert record.dominant_asset == "BTC"
        assert record.dominant_price is None
        assert record.market_health == MarketHealth.UNKNOWN
        assert record.trend_label == TrendLabel.UNKNOWN

    @pytest.mark.asyncio
    async def test_rate_limited_yields_fallback(self, make_transport):
        collector = MarketCollector(
            CoinGeckoConfig(),
            transport=make_transport({"api.coingecko.com": _status(429)}),
        )

        record = await collector.fetch()

        assert record.degraded is True
        assert "429" in record.degraded_reason
        assert record.dominant_change_24h == 0.0

    @pytest.mark.asyncio
    async def test_nan_change_yields_fallback(self, make_transport):
        body = '[{"id": "bitcoin", "symbol": "btc", "current_price": 65000.0, "price_change_percentage_24h": NaN}]'
        collector = MarketCollector(
            CoinGeckoConfig(),
            transport=make_transport({"api.coingecko.com": _raw_json(body)}),
        )

        record = await collector.fetch()

        assert record.degraded is True
        assert record.dominant_change_24h == 0.0
        assert record.market_health == MarketHealth.UNKNOWN

    def test_tie_goes_to_priority_asset(self):
        coins = [
            CoinMarket(id="ethereum", symbol="eth", price_change_percentage_24h=1.5),
            CoinMarket(id="bitcoin", symbol="btc", price_change_percentage_24h=1.5),
        ]

        assert select_dominant(coins, ("bitcoin", "ethereum")).id == "bitcoin"

    def test_missing_change_treated_as_zero(self):
        coins = [
            CoinMarket(id="bitcoin", symbol="btc", price_change_percentage_24h=None),
            CoinMarket(id="ethereum", symbol="eth", price_change_percentage_24h=-0.1),
        ]

        assert select_dominant(coins, ("bitcoin", "ethereum")).id == "bitcoin"

    @pytest.mark.parametrize("change,label", [
        (3.01, TrendLabel.STRONG_UPTREND),
        (3.0, TrendLabel.MILD_UPTREND),
        (0.51, TrendLabel.MILD_UPTREND),
        (0.5, TrendLabel.SIDEWAYS),
        (0.0, TrendLabel.SIDEWAYS),
        (-0.5, TrendLabel.SIDEWAYS),
        (-0.51, TrendLabel.MILD_PULLBACK),
        (-3.0, TrendLabel.MILD_PULLBACK),
        (-3.01, TrendLabel.SHARP_SELLOFF),
    ])
    def test_trend_buckets(self, change, label):
        assert classify_trend(change) == label


# ============================================================
# NEWS
# ============================================================

class TestNewsCollector:

    @pytest.mark.asyncio
    async def test_missing_key_makes_no_request(self, make_transport):
        transport = make_transport()
        collector = NewsCollector(NewsApiConfig(api_key=""), transport=transport)

        record = await collector.fetch()

        assert transport.requests == []
        assert record.degraded is True
        assert record.top_headline == NEWS_KEY_MISSING_HEADLINE
        assert record.sentiment_score == 0.0
        assert record.label == SentimentLabel.NEUTRAL

    @pytest.mark.asyncio
    async def test_scores_headlines(self, make_transport):
        transport = make_transport()
        collector = NewsCollector(NewsApiConfig(api_key="news-key"), transport=transport)

        record = await collector.fetch()

        # 4 positive, 2 negative over 9 tokens
        assert record.degraded is False
        assert record.sentiment_score == 0.222
        assert record.label == SentimentLabel.STRONGLY_POSITIVE
        assert record.top_headline == "AI growth surge"
        assert record.article_count == 2
        assert [h.source for h in record.top_headlines] == ["TechCrunch", "Unknown"]
        assert record.recent_headlines == ()
        assert transport.requests[0].headers["X-Api-Key"] == "news-key"

    @pytest.mark.asyncio
    async def test_recent_headlines_follow_the_featured_batch(self, make_transport):
        articles = [
            {"title": f"Release {i}", "url": f"https://example.com/{i}", "source": {"name": "Wire"}}
            for i in range(25)
        ]
        collector = NewsCollector(
            NewsApiConfig(api_key="news-key"),
            transport=make_transport({"newsapi.org": {"status": "ok", "articles": articles}}),
        )

        record = await collector.fetch()

        assert [h.title for h in record.top_headlines] == ["Release 0", "Release 1", "Release 2"]
        assert len(record.recent_headlines) == 15
        assert record.recent_headlines[0].title == "Release 5"
        assert record.recent_headlines[-1].title == "Release 19"
        assert record.to_dict()["recent_headlines"][0]["source"] == "Wire"

    @pytest.mark.asyncio
    async def test_empty_feed(self, make_transport):
        transport = make_transport({"newsapi.org": {"status": "ok", "articles": []}})
        collector = NewsCollector(NewsApiConfig(api_key="news-key"), transport=transport)

        record = await collector.fetch()

        assert record.degraded is False
        assert record.top_headline == NO_HEADLINES
        assert record.sentiment_score == 0.0
        assert record.label == SentimentLabel.NEUTRAL

    @pytest.mark.asyncio
    async def test_error_status_in_body_yields_fallback(self, make_transport):
        transport = make_transport({
            "newsapi.org": {"status": "error", "code": "apiKeyInvalid", "message": "bad key"},
        })
        collector = NewsCollector(NewsApiConfig(api_key="news-key"), transport=transport)

        record = await collector.fetch()

        assert record.degraded is True
        assert record.top_headline == HEADLINES_UNAVAILABLE
        assert record.label == SentimentLabel.NEUTRAL

    @pytest.mark.asyncio
    async def test_unauthorized_yields_fallback(self, make_transport):
        transport = make_transport({"newsapi.org": _status(401)})
        collector = NewsCollector(NewsApiConfig(api_key="news-key"), transport=transport)

        record = await collector.fetch()

        assert record.degraded is True
        assert record.top_headline == HEADLINES_UNAVAILABLE


# ============================================================
# GEO
# ============================================================

class TestGeoCollector:

    @pytest.mark.asyncio
    async def test_derives_geo_signal(self, make_transport):
        transport = make_transport()
        collector = GeoCollector(GeoConfig(), transport=transport)

        record = await collector.fetch()

        assert record.degraded is False
        assert record.latency_index == 0.4339
        assert record.top_region == "Southern Asia"
        assert record.cloud_coverage == CloudCoverage.HIGH
        assert [r.code for r in record.sample_regions] == ["US", "DE", "IN"]
        assert transport.requests[0].url.params["codes"] == "us,de,in"

    @pytest.mark.asyncio
    async def test_hub_defaults_without_weather_key(self, make_transport):
        transport = make_transport()
        collector = GeoCollector(GeoConfig(), transport=transport)

        record = await collector.fetch()

        assert [h.hub_id for h in record.hub_weather] == ["newyork", "berlin", "bangalore"]
        assert all(h.temp_c == 25.0 and h.humidity == 50 for h in record.hub_weather)
        assert all(r.url.host == "restcountries.com" for r in transport.requests)

    @pytest.mark.asyncio
    async def test_hub_weather_falls_back_per_hub(self, make_transport):
        def weather(request: httpx.Request) -> httpx.Response:
            if request.url.params["q"] == "Berlin,DE":
                return httpx.Response(200, json={
                    "main": {"temp": 12.5, "humidity": 70},
                    "weather": [{"main": "Clouds"}],
                })
            return httpx.Response(500)

        transport = make_transport({"api.openweathermap.org": weather})
        collector = GeoCollector(GeoConfig(weather_api_key="ow-key"), transport=transport)

        record = await collector.fetch()

        hubs = {h.hub_id: h for h in record.hub_weather}
        assert record.degraded is False
        assert hubs["berlin"].temp_c == 12.5
        assert hubs["berlin"].condition == "Clouds"
        assert hubs["newyork"].temp_c == 25.0
        assert hubs["bangalore"].condition == "Unknown"

    @pytest.mark.asyncio
    async def test_empty_region_list_yields_fallback(self, make_transport):
        collector = GeoCollector(
            GeoConfig(),
            transport=make_transport({"restcountries.com": []}),
        )

        record = await collector.fetch()

        assert record.degraded is True
        assert record.latency_index == 0.5
        assert record.cloud_coverage == CloudCoverage.UNKNOWN
        assert len(record.hub_weather) == 3

    @pytest.mark.asyncio
    async def test_not_found_yields_fallback(self, make_transport):
        collector = GeoCollector(
            GeoConfig(),
            transport=make_transport({"restcountries.com": _status(404)}),
        )

        record = await collector.fetch()

        assert record.degraded is True
        assert record.top_region == "Unknown"

    @pytest.mark.asyncio
    async def test_weather_requests_settle_before_fallback(self, make_transport):
        completed = []

        async def slow_weather(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(0.05)
            completed.append(request.url.params["q"])
            return httpx.Response(200, json={"main": {"temp": 10.0, "humidity": 40}})

        collector = GeoCollector(
            GeoConfig(weather_api_key="ow-key"),
            transport=make_transport({
                "restcountries.com": _status(500),
                "api.openweathermap.org": slow_weather,
            }),
        )

        record = await collector.fetch()

        assert record.degraded is True
        assert len(completed) == 3

    @pytest.mark.asyncio
    async def test_infinite_area_yields_fallback(self, make_transport):
        body = '[{"cca2": "US", "name": {"common": "United States"}, "population": 1, "area": 1e400, "region": "Americas"}]'
        collector = GeoCollector(
            GeoConfig(),
            transport=make_transport({"restcountries.com": _raw_json(body)}),
        )

        record = await collector.fetch()

        assert record.degraded is True
        assert record.latency_index == 0.5


# ============================================================
# SOCIAL
# ============================================================

class TestSocialCollector:

    @pytest.mark.asyncio
    async def test_derives_engagement(self, make_transport):
        transport = make_transport()
        collector = SocialCollector(SocialConfig(), transport=transport)

        record = await collector.fetch()

        assert record.degraded is False
        assert record.sample_size == 4
        assert record.engagement_index == pytest.approx(4 / 5000)
        # 10 / 4 = 2.5 rounds half up
        assert record.average_comment_length == 3
        assert record.distinct_threads == 3
        assert transport.requests[0].url.params["_limit"] == "80"

    @pytest.mark.asyncio
    async def test_engagement_saturates(self, make_transport):
        collector = SocialCollector(
            SocialConfig(engagement_saturation=2),
            transport=make_transport(),
        )

        record = await collector.fetch()

        assert record.engagement_index == 1.0

    @pytest.mark.asyncio
    async def test_empty_sample(self, make_transport):
        collector = SocialCollector(
            SocialConfig(),
            transport=make_transport({"jsonplaceholder.typicode.com": []}),
        )

        record = await collector.fetch()

        assert record.degraded is False
        assert record.sample_size == 0
        assert record.average_comment_length == 0

    @pytest.mark.asyncio
    async def test_connection_error_yields_fallback(self, make_transport):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        collector = SocialCollector(
            SocialConfig(),
            transport=make_transport({"jsonplaceholder.typicode.com": refuse}),
        )

        record = await collector.fetch()

        assert record.degraded is True
        assert record.engagement_index == 0.0
