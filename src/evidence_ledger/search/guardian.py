"""The Guardian content API provider."""

import os

import httpx

from evidence_ledger.data import Article
from evidence_ledger.http import RetryPolicy, request_with_retry
from evidence_ledger.search.base import build_query, parse_datetime, truncate

GUARDIAN_API_URL = "https://content.guardianapis.com/search"


class GuardianProvider:
    """Search The Guardian's content API.

    Args:
        api_key: Guardian API key (defaults to GUARDIAN_API_KEY env var).
        timeout: HTTP timeout in seconds.
        retry: Retry policy for transient failures.
    """

    name = "guardian"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        timeout: float = 30.0,
        retry: RetryPolicy | None = None,
    ) -> None:
        self._api_key = api_key or os.environ.get("GUARDIAN_API_KEY")
        if not self._api_key:
            raise ValueError(
                "Guardian API key required. Pass api_key or set GUARDIAN_API_KEY env var."
            )
        self._timeout = timeout
        self._retry = retry

    async def search(self, organization_name: str, *, max_results: int = 10) -> list[Article]:
        params: dict[str, str | int] = {
            "q": build_query(organization_name),
            "api-key": self._api_key,
            "show-fields": "headline,trailText,bodyText",
            "page-size": min(max_results, 50),
            "order-by": "newest",
        }
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await request_with_retry(
                client, "GET", GUARDIAN_API_URL, params=params, policy=self._retry
            )
        results = (response.json().get("response") or {}).get("results", [])

        articles: list[Article] = []
        for item in results:
            fields = item.get("fields") or {}
            articles.append(
                Article(
                    title=fields.get("headline") or item.get("webTitle") or "",
                    url=item.get("webUrl") or "",
                    source_name="The Guardian",
                    summary=fields.get("trailText") or truncate(fields.get("bodyText")),
                    published_at=parse_datetime(item.get("webPublicationDate")),
                    raw_payload=item,
                )
            )
        return articles
