"""GNews search provider."""

import logging
import os

import httpx

from evidence_ledger.data import Article
from evidence_ledger.http import RetryPolicy, request_with_retry
from evidence_ledger.search.base import build_query, parse_datetime, truncate

GNEWS_API_URL = "https://gnews.io/api/v4/search"

logger = logging.getLogger(__name__)


class GNewsProvider:
    """Search for news articles using the GNews API.

    Args:
        api_key: GNews API key (defaults to GNEWS_API_KEY env var).
        lang: Language code for results (default: "en").
        timeout: HTTP timeout in seconds.
        retry: Retry policy for transient failures.
    """

    name = "gnews"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        lang: str = "en",
        timeout: float = 30.0,
        retry: RetryPolicy | None = None,
    ) -> None:
        self._api_key = api_key or os.environ.get("GNEWS_API_KEY")
        if not self._api_key:
            raise ValueError("GNews API key required. Pass api_key or set GNEWS_API_KEY env var.")
        self._lang = lang
        self._timeout = timeout
        self._retry = retry

    async def search(self, organization_name: str, *, max_results: int = 10) -> list[Article]:
        params: dict[str, str | int] = {
            "q": build_query(organization_name),
            "token": self._api_key,  # type: ignore[dict-item]
            "lang": self._lang,
            "max": min(max_results, 100),  # GNews max is 100
            "sortby": "publishedAt",
        }
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await request_with_retry(
                client, "GET", GNEWS_API_URL, params=params, policy=self._retry
            )
        data = response.json()

        articles: list[Article] = []
        for item in data.get("articles", []):
            articles.append(
                Article(
                    title=item.get("title") or "",
                    url=item.get("url") or "",
                    source_name=(item.get("source") or {}).get("name") or "GNews",
                    summary=item.get("description") or truncate(item.get("content")),
                    published_at=parse_datetime(item.get("publishedAt")),
                    raw_payload=item,
                )
            )
        logger.debug("GNews returned %d articles for %s", len(articles), organization_name)
        return articles
