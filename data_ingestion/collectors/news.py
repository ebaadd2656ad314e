"""
Data Ingestion - News Collector.

============================================================
RESPONSIBILITY
============================================================
Collects tech headlines from NewsAPI and scores their tone.

- Fetches the latest article batch for the configured query
- Runs the lexicon analyzer over title + description
- Keeps the first three articles as top headlines

============================================================
CONFIGURATION
============================================================
NewsAPI requires a key. Without one the collector does not
call out; it returns a neutral record whose top headline says
the key is missing. This is a configuration state, not a
fetch failure.

============================================================
"""

import logging
from typing import Any, Optional

import httpx

from core.constants import DOMAIN_NEWS
from core.exceptions import ConfigurationMissingError, SourceUnavailableError
from data_ingestion.collectors.base import BaseCollector
from data_ingestion.schemas import NewsArticle, NewsResponse
from data_ingestion.types import (
    NO_HEADLINES,
    Headline,
    IngestionSource,
    NewsApiConfig,
    NewsSignal,
)
from sentiment import analyze_sentiment


TOP_HEADLINE_COUNT = 3
# Articles 6-20 of the batch form the recent list
RECENT_HEADLINE_START = 5
RECENT_HEADLINE_END = 20
NEWS_KEY_SETTING = "NEWS_API_KEY"
NEWS_KEY_MISSING_HEADLINE = f"{NEWS_KEY_SETTING} is not configured; headline sentiment is disabled."


class NewsCollector(BaseCollector[NewsSignal]):
    """
    Collector for headline sentiment.

    ============================================================
    WIRING
    ============================================================
    Source: NewsAPI /v2/everything
    Auth: required API key

    ============================================================
    """

    domain = DOMAIN_NEWS

    def __init__(
        self,
        config: NewsApiConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(
            config=config,
            source=IngestionSource.NEWS_API,
            transport=transport,
        )
        self._news_config = config
        self._logger = logging.getLogger("collector.news_api")

    @property
    def is_configured(self) -> bool:
        return bool(self._news_config.api_key)

    # =========================================================
    # FETCH - External API Call
    # =========================================================

    async def fetch_payload(self) -> Any:
        if not self.is_configured:
            raise ConfigurationMissingError(
                message=f"{NEWS_KEY_SETTING} is not configured",
                source=self.source_name,
                setting=NEWS_KEY_SETTING,
            )

        return await self._get_json(
            f"{self._news_config.base_url}/everything",
            params={
                "q": self._news_config.query,
                "sortBy": "publishedAt",
                "pageSize": self._news_config.page_size,
                "language": self._news_config.language,
            },
            headers={"X-Api-Key": self._news_config.api_key},
        )

    # =========================================================
    # PARSE - Derive NewsSignal
    # =========================================================

    def parse(self, payload: Any) -> NewsSignal:
        response = self._validate(NewsResponse, payload)

        # NewsAPI reports some failures with a 200 and status=error
        if response.status != "ok":
            raise SourceUnavailableError(
                message=f"NewsAPI returned status={response.status}",
                source=self.source_name,
            )

        articles = response.articles
        result = analyze_sentiment([article.text for article in articles])

        top_headlines = tuple(_headline(a) for a in articles[:TOP_HEADLINE_COUNT])
        recent_headlines = tuple(_headline(a) for a in articles[RECENT_HEADLINE_START:RECENT_HEADLINE_END])
        top_headline = top_headlines[0].title if top_headlines and top_headlines[0].title else NO_HEADLINES

        return NewsSignal(
            sentiment_score=result.score,
            label=result.label,
            top_headline=top_headline,
            top_headlines=top_headlines,
            recent_headlines=recent_headlines,
            article_count=len(articles),
        )

    def fallback(self, reason: str = "") -> NewsSignal:
        return NewsSignal.fallback(reason)

    def unconfigured(self, error: ConfigurationMissingError) -> NewsSignal:
        return NewsSignal.fallback(
            reason=error.message,
            top_headline=NEWS_KEY_MISSING_HEADLINE,
        )


def _headline(article: NewsArticle) -> Headline:
    return Headline(
        title=article.title or "",
        source=(article.source.name if article.source and article.source.name else "Unknown"),
        url=article.url or "",
    )
