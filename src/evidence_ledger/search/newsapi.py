"""NewsAPI.org provider."""

import os

import httpx

from evidence_ledger.data import Article
from evidence_ledger.http import RetryPolicy, request_with_retry
from evidence_ledger.search.base import build_query, parse_datetime, truncate

NEWSAPI_URL = "https://newsapi.org/v2/everything"


class NewsAPIProvider:
    """Search the NewsAPI ``everything`` endpoint.

    Args:
        api_key: NewsAPI key (defaults to NEWSAPI_KEY env var).
        language: Language filter.
        timeout: HTTP timeout in seconds.
        retry: Retry policy for transient failures.
    """

    name = "newsapi"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        language: str = "en",
        timeout: float = 30.0,
        retry: RetryPolicy | None = None,
    ) -> None:
        self._api_key = api_key or os.environ.get("NEWSAPI_KEY")
        if not self._api_key:
            raise ValueError("NewsAPI key required. Pass api_key or set NEWSAPI_KEY env var.")
        self._language = language
        self._timeout = timeout
        self._retry = retry

    async def search(self, organization_name: str, *, max_results: int = 10) -> list[Article]:
        params: dict[str, str | int] = {
            "q": build_query(organization_name),
            "apiKey": self._api_key,  # type: ignore[dict-item]
            "sortBy": "publishedAt",
            "pageSize": min(max_results, 100),
            "language": self._language,
        }
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await request_with_retry(
                client, "GET", NEWSAPI_URL, params=params, policy=self._retry
            )
        data = response.json()

        return [
            Article(
                title=item.get("title") or "",
                url=item.get("url") or "",
                source_name=(item.get("source") or {}).get("name") or "NewsAPI",
                summary=item.get("description") or truncate(item.get("content")),
                published_at=parse_datetime(item.get("publishedAt")),
                raw_payload=item,
            )
            for item in data.get("articles", [])
        ]
