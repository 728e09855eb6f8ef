"""New York Times Article Search provider."""

import os

import httpx

from evidence_ledger.data import Article
from evidence_ledger.http import RetryPolicy, request_with_retry
from evidence_ledger.search.base import build_query, parse_datetime, truncate

NYT_API_URL = "https://api.nytimes.com/svc/search/v2/articlesearch.json"


class NYTProvider:
    """Search the NYT Article Search API.

    The API returns at most 10 documents per page, so ``max_results`` above
    10 has no effect.

    Args:
        api_key: NYT API key (defaults to NYT_API_KEY env var).
        timeout: HTTP timeout in seconds.
        retry: Retry policy for transient failures.
    """

    name = "nyt"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        timeout: float = 30.0,
        retry: RetryPolicy | None = None,
    ) -> None:
        self._api_key = api_key or os.environ.get("NYT_API_KEY")
        if not self._api_key:
            raise ValueError("NYT API key required. Pass api_key or set NYT_API_KEY env var.")
        self._timeout = timeout
        self._retry = retry

    async def search(self, organization_name: str, *, max_results: int = 10) -> list[Article]:
        params = {
            "q": build_query(organization_name),
            "api-key": self._api_key,
            "sort": "newest",
            "fl": "headline,abstract,web_url,pub_date,source,lead_paragraph",
        }
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await request_with_retry(
                client, "GET", NYT_API_URL, params=params, policy=self._retry
            )
        docs = (response.json().get("response") or {}).get("docs") or []

        articles: list[Article] = []
        for doc in docs[:max_results]:
            articles.append(
                Article(
                    title=(doc.get("headline") or {}).get("main") or "",
                    url=doc.get("web_url") or "",
                    source_name="The New York Times",
                    summary=doc.get("abstract") or truncate(doc.get("lead_paragraph")),
                    published_at=parse_datetime(doc.get("pub_date")),
                    raw_payload=doc,
                )
            )
        return articles
