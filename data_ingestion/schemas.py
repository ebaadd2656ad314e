"""
Pydantic schemas for external source payloads.

Only the fields the collectors read are declared; everything else in
the response is ignored. A payload that fails validation is treated as
a malformed payload by the collector.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, allow_inf_nan=False)


# =======================
# GITHUB SEARCH
# =======================

class GitHubOwner(_Payload):
    login: str


class GitHubRepo(_Payload):
    name: str
    owner: GitHubOwner
    stargazers_count: Optional[int] = 0
    language: Optional[str] = None
    html_url: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner.login}/{self.name}"

    @property
    def stars(self) -> int:
        return self.stargazers_count or 0


class GitHubSearchResponse(_Payload):
    items: List[GitHubRepo] = Field(default_factory=list)


# =======================
# COINGECKO MARKETS
# =======================

class CoinMarket(_Payload):
    id: str
    symbol: str
    name: str = ""
    current_price: Optional[float] = None
    market_cap: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
    price_change_percentage_1h_in_currency: Optional[float] = None
    price_change_percentage_7d_in_currency: Optional[float] = None

    @property
    def change_24h(self) -> float:
        return self.price_change_percentage_24h or 0.0


# =======================
# NEWSAPI
# =======================

class ArticleSource(_Payload):
    name: Optional[str] = None


class NewsArticle(_Payload):
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    source: Optional[ArticleSource] = None

    @property
    def text(self) -> str:
        return f"{self.title or ''} {self.description or ''}"


class NewsResponse(_Payload):
    status: str = "ok"
    articles: List[NewsArticle] = Field(default_factory=list)


# =======================
# REST COUNTRIES
# =======================

class CountryName(_Payload):
    common: str


class Country(_Payload):
    cca2: str = ""
    name: CountryName
    population: int = 0
    area: Optional[float] = 0.0
    region: str = ""
    subregion: Optional[str] = None


# =======================
# OPENWEATHERMAP
# =======================

class WeatherMain(_Payload):
    temp: Optional[float] = None
    humidity: Optional[int] = None


class WeatherCondition(_Payload):
    main: str = "Clear"


class WeatherResponse(_Payload):
    main: WeatherMain = Field(default_factory=WeatherMain)
    weather: List[WeatherCondition] = Field(default_factory=list)


# =======================
# JSONPLACEHOLDER
# =======================

class Comment(_Payload):
    id: int
    post_id: int = Field(alias="postId")
    body: Optional[str] = ""
