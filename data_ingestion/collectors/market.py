"""
Data Ingestion - Market Collector.

============================================================
RESPONSIBILITY
============================================================
Collects crypto market data from the CoinGecko API.

- Fetches price, market cap and 24h change for tracked coins
- Picks the dominant asset from a fixed watch-list
- Buckets the dominant move into a trend label

============================================================
DOMINANT ASSET
============================================================
The watch-list entry with the greatest 24h % change wins.
On a tie the entry listed first (the priority asset) wins.
Watch-list coins missing from the feed are skipped; a feed
with no watch-list coin at all is a malformed payload.

============================================================
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from core.constants import DOMAIN_MARKET
from core.exceptions import MalformedPayloadError
from data_ingestion.collectors.base import BaseCollector
from data_ingestion.schemas import CoinMarket
from data_ingestion.types import (
    AssetQuote,
    CoinGeckoConfig,
    IngestionSource,
    MarketHealth,
    MarketSignal,
    TrendLabel,
)


# Symbols used for the fallback dominant asset.
PRIORITY_SYMBOLS: Dict[str, str] = {
    "bitcoin": "BTC",
    "ethereum": "ETH",
}


def classify_trend(change_24h: float) -> TrendLabel:
    """Bucket a 24h % change into a trend label."""
    if change_24h > 3:
        return TrendLabel.STRONG_UPTREND
    if change_24h > 0.5:
        return TrendLabel.MILD_UPTREND
    if change_24h < -3:
        return TrendLabel.SHARP_SELLOFF
    if change_24h < -0.5:
        return TrendLabel.MILD_PULLBACK
    return TrendLabel.SIDEWAYS


def classify_health(change_24h: float) -> MarketHealth:
    return MarketHealth.BULLISH if change_24h >= 0 else MarketHealth.BEARISH


def select_dominant(coins: List[CoinMarket], watch_list: tuple) -> Optional[CoinMarket]:
    """Pick the watch-list coin with the greatest 24h change."""
    by_id = {coin.id: coin for coin in coins}
    dominant: Optional[CoinMarket] = None
    for coin_id in watch_list:
        coin = by_id.get(coin_id)
        if coin is None:
            continue
        if dominant is None or coin.change_24h > dominant.change_24h:
            dominant = coin
    return dominant


class MarketCollector(BaseCollector[MarketSignal]):
    """
    Collector for CoinGecko market data.

    ============================================================
    WIRING
    ============================================================
    Source: CoinGecko API (REST) /coins/markets
    Auth: optional demo API key header

    ============================================================
    """

    domain = DOMAIN_MARKET

    def __init__(
        self,
        config: CoinGeckoConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(
            config=config,
            source=IngestionSource.COINGECKO,
            transport=transport,
        )
        self._cg_config = config
        self._logger = logging.getLogger("collector.coingecko")

    # =========================================================
    # FETCH - External API Call
    # =========================================================

    async def fetch_payload(self) -> Any:
        headers: Dict[str, str] = {}
        if self._cg_config.api_key:
            # x-cg-demo-api-key for the free tier
            headers["x-cg-demo-api-key"] = self._cg_config.api_key

        return await self._get_json(
            f"{self._cg_config.base_url}/coins/markets",
            params={
                "vs_currency": "usd",
                "ids": ",".join(self._cg_config.tracked_assets),
                "order": "market_cap_desc",
                "sparkline": "false",
                "price_change_percentage": "1h,24h,7d",
            },
            headers=headers,
        )

    # =========================================================
    # PARSE - Derive MarketSignal
    # =========================================================

    def parse(self, payload: Any) -> MarketSignal:
        coins = self._validate_list(CoinMarket, payload)

        dominant = select_dominant(coins, self._cg_config.watch_list)
        if dominant is None:
            raise MalformedPayloadError(
                message=f"No watch-list asset in feed ({', '.join(self._cg_config.watch_list)})",
                source=self.source_name,
            )

        change = dominant.change_24h
        major_pairs = {
            coin.symbol.upper(): AssetQuote(
                price=coin.current_price or 0.0,
                change_24h=coin.change_24h,
                change_1h=coin.price_change_percentage_1h_in_currency,
                change_7d=coin.price_change_percentage_7d_in_currency,
            )
            for coin in coins
        }
        average_change = sum(c.change_24h for c in coins) / len(coins)

        return MarketSignal(
            dominant_asset=dominant.symbol.upper(),
            dominant_price=dominant.current_price,
            dominant_change_24h=change,
            market_health=classify_health(change),
            trend_label=classify_trend(change),
            major_pairs=major_pairs,
            tracked_assets=len(coins),
            total_market_cap=sum(c.market_cap or 0.0 for c in coins),
            average_change_24h=round(average_change, 4),
        )

    def fallback(self, reason: str = "") -> MarketSignal:
        priority = self._cg_config.watch_list[0] if self._cg_config.watch_list else "bitcoin"
        symbol = PRIORITY_SYMBOLS.get(priority, priority.upper())
        return MarketSignal.fallback(dominant_asset=symbol, reason=reason)
