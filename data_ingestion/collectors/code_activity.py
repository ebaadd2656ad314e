"""
Data Ingestion - Code Activity Collector.

============================================================
RESPONSIBILITY
============================================================
Collects repository activity from the GitHub search API.

- Fetches the top repositories for a topic, ranked by stars
- Derives totals, top language and the trending repository
- Falls back to zero counts on any failure

============================================================
DATA FLOW
============================================================
1. GET /search/repositories?q=topic:<topic>&sort=stars
2. Validate against GitHubSearchResponse
3. Derive CodeActivity

============================================================
"""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional

import httpx

from core.constants import DOMAIN_CODE_ACTIVITY
from data_ingestion.collectors.base import BaseCollector
from data_ingestion.schemas import GitHubRepo, GitHubSearchResponse
from data_ingestion.types import (
    CodeActivity,
    GitHubConfig,
    IngestionSource,
    LanguageShare,
    RepoSummary,
)
from scoring_engine.normalization import round_half_up


TOP_REPO_COUNT = 3
LANGUAGE_BREAKDOWN_SIZE = 6


class CodeActivityCollector(BaseCollector[CodeActivity]):
    """
    Collector for code-hosting activity.

    ============================================================
    WIRING
    ============================================================
    Source: GitHub REST search API
    Auth: optional bearer token (raises the rate limit)

    ============================================================
    """

    domain = DOMAIN_CODE_ACTIVITY

    def __init__(
        self,
        config: GitHubConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(
            config=config,
            source=IngestionSource.GITHUB,
            transport=transport,
        )
        self._gh_config = config
        self._logger = logging.getLogger("collector.github")

    # =========================================================
    # FETCH - External API Call
    # =========================================================

    async def fetch_payload(self) -> Any:
        """Fetch the ranked repository list."""
        headers: Dict[str, str] = {"Accept": "application/vnd.github+json"}
        if self._gh_config.api_key:
            headers["Authorization"] = f"Bearer {self._gh_config.api_key}"

        return await self._get_json(
            f"{self._gh_config.base_url}/search/repositories",
            params={
                "q": f"topic:{self._gh_config.topic}",
                "sort": "stars",
                "order": "desc",
                "per_page": self._gh_config.per_page,
            },
            headers=headers,
        )

    # =========================================================
    # PARSE - Derive CodeActivity
    # =========================================================

    def parse(self, payload: Any) -> CodeActivity:
        response = self._validate(GitHubSearchResponse, payload)
        return self.derive(response.items)

    @staticmethod
    def derive(repos: List[GitHubRepo]) -> CodeActivity:
        """
        Derive activity figures from a ranked repository list.

        The first repository is the highest ranked.
        """
        total_repos = len(repos)
        total_stars = sum(repo.stars for repo in repos)

        if repos:
            top = repos[0]
            top_language = top.language or "Unknown"
            trending_repo = top.full_name
        else:
            top_language = "Unknown"
            trending_repo = "N/A"

        top_repos = tuple(
            RepoSummary(
                name=repo.full_name,
                stars=repo.stars,
                language=repo.language or "Other",
                url=repo.html_url,
            )
            for repo in repos[:TOP_REPO_COUNT]
        )

        counts = Counter(repo.language or "Other" for repo in repos)
        language_breakdown = tuple(
            LanguageShare(name=name, count=count)
            for name, count in counts.most_common(LANGUAGE_BREAKDOWN_SIZE)
        )

        average_stars = round_half_up(total_stars / total_repos) if total_repos else 0

        return CodeActivity(
            total_repos=total_repos,
            total_stars=total_stars,
            top_language=top_language,
            trending_repo=trending_repo,
            top_repos=top_repos,
            average_stars=average_stars,
            language_breakdown=language_breakdown,
        )

    def fallback(self, reason: str = "") -> CodeActivity:
        return CodeActivity.fallback(reason)
