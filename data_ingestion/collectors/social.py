"""
Data Ingestion - Social Collector.

============================================================
RESPONSIBILITY
============================================================
Collects a bounded sample of community comments and measures
engagement.

- engagement_index = min(sample_size / saturation, 1)
- average_comment_length = mean body length, rounded
- distinct_threads = number of distinct posts in the sample

The sample comes from JSONPlaceholder, a stand-in for real
community chatter.

============================================================
"""

import logging
from typing import Any, Optional

import httpx

from core.constants import DOMAIN_SOCIAL
from data_ingestion.collectors.base import BaseCollector
from data_ingestion.schemas import Comment
from data_ingestion.types import IngestionSource, SocialConfig, SocialSignal
from scoring_engine.normalization import round_half_up


class SocialCollector(BaseCollector[SocialSignal]):
    """Collector for community engagement."""

    domain = DOMAIN_SOCIAL

    def __init__(
        self,
        config: SocialConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(
            config=config,
            source=IngestionSource.JSONPLACEHOLDER,
            transport=transport,
        )
        self._social_config = config
        self._logger = logging.getLogger("collector.jsonplaceholder")

    async def fetch_payload(self) -> Any:
        return await self._get_json(
            f"{self._social_config.base_url}/comments",
            params={"_limit": self._social_config.sample_limit},
        )

    def parse(self, payload: Any) -> SocialSignal:
        comments = self._validate_list(Comment, payload)

        sample_size = len(comments)
        engagement_index = min(sample_size / self._social_config.engagement_saturation, 1.0)

        if sample_size:
            total_length = sum(len(c.body or "") for c in comments)
            average_length = round_half_up(total_length / sample_size)
        else:
            average_length = 0

        return SocialSignal(
            sample_size=sample_size,
            engagement_index=engagement_index,
            average_comment_length=average_length,
            distinct_threads=len({c.post_id for c in comments}),
        )

    def fallback(self, reason: str = "") -> SocialSignal:
        return SocialSignal.fallback(reason)
