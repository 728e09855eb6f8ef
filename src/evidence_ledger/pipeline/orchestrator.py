"""Concurrent fan-out to article providers with per-provider isolation."""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypeGuard

import httpx

from evidence_ledger.data import Article
from evidence_ledger.http import is_retryable
from evidence_ledger.search.base import ArticleProvider
from evidence_ledger.url import canonicalize

logger = logging.getLogger(__name__)


class ProviderState(StrEnum):
    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ProviderStatus:
    """Outcome of one provider call within an orchestration run."""

    name: str
    state: ProviderState
    fetched: int = 0
    capped_from: int | None = None
    failures: int = 0
    error: str | None = None


@dataclass
class ProviderHealth:
    """Consecutive-failure counts for the lifetime of one run.

    A provider at or above ``threshold`` failures is skipped until a new
    ``ProviderHealth`` is created. A success resets the provider's count.
    """

    threshold: int = 3
    failures: dict[str, int] = field(default_factory=dict)

    def should_skip(self, name: str) -> bool:
        return self.failures.get(name, 0) >= self.threshold

    def record_failure(self, name: str) -> int:
        self.failures[name] = self.failures.get(name, 0) + 1
        return self.failures[name]

    def record_success(self, name: str) -> None:
        self.failures.pop(name, None)


def _is_rejected(result: object) -> TypeGuard[httpx.HTTPStatusError]:
    return isinstance(result, httpx.HTTPStatusError) and not is_retryable(
        result.response.status_code
    )


class SourceOrchestrator:
    """Fetch articles about an organization from every provider concurrently.

    Each provider call gets its own timeout and result cap. One provider's
    exception never aborts the others; it is logged, counted against the
    provider's health, and reported in the returned status list. A final
    4xx (anything but 429) is reported as skipped and not counted.

    Args:
        providers: Providers to fan out to.
        max_per_provider: Maximum articles kept from each provider.
        failure_threshold: Consecutive failures after which a provider is skipped.
        timeout_seconds: Per-call timeout.
    """

    def __init__(
        self,
        providers: list[ArticleProvider],
        *,
        max_per_provider: int = 10,
        failure_threshold: int = 3,
        timeout_seconds: float = 8.0,
    ) -> None:
        self._providers = providers
        self._max_per_provider = max_per_provider
        self._failure_threshold = failure_threshold
        self._timeout = timeout_seconds

    @property
    def providers(self) -> list[ArticleProvider]:
        return list(self._providers)

    def new_health(self) -> ProviderHealth:
        return ProviderHealth(threshold=self._failure_threshold)

    async def fetch_all(
        self,
        organization_name: str,
        *,
        health: ProviderHealth | None = None,
    ) -> tuple[list[Article], list[ProviderStatus]]:
        """Fetch, cap, and merge articles from all providers.

        Args:
            organization_name: Organization to search for.
            health: Failure counts to share across several calls of one batch
                run. A fresh map is used when omitted.

        Returns:
            Tuple of (articles deduplicated by canonical URL, one status per provider).
            When two providers return the same article the first provider's copy wins.
        """
        health = health or self.new_health()

        active: list[ArticleProvider] = []
        statuses: dict[str, ProviderStatus] = {}
        for provider in self._providers:
            if health.should_skip(provider.name):
                logger.info(
                    f"Skipping {provider.name}: "
                    f"{health.failures[provider.name]} consecutive failures"
                )
                statuses[provider.name] = ProviderStatus(
                    name=provider.name,
                    state=ProviderState.SKIPPED,
                    failures=health.failures[provider.name],
                )
            else:
                active.append(provider)

        results = await asyncio.gather(
            *(self._fetch_one(p, organization_name) for p in active),
            return_exceptions=True,
        )

        per_provider: dict[str, list[Article]] = {}
        for provider, result in zip(active, results, strict=True):
            if _is_rejected(result):
                error = f"HTTP {result.response.status_code}"
                logger.info(f"Skipping {provider.name}: {error}")
                statuses[provider.name] = ProviderStatus(
                    name=provider.name,
                    state=ProviderState.SKIPPED,
                    failures=health.failures.get(provider.name, 0),
                    error=error,
                )
                continue
            if isinstance(result, BaseException):
                count = health.record_failure(provider.name)
                error = str(result) or type(result).__name__
                logger.warning(f"{provider.name} error ({count} fails): {error}")
                statuses[provider.name] = ProviderStatus(
                    name=provider.name,
                    state=ProviderState.FAILED,
                    failures=count,
                    error=error,
                )
                continue

            health.record_success(provider.name)
            capped = result[: self._max_per_provider]
            capped_from = len(result) if len(result) > self._max_per_provider else None
            suffix = f" (capped from {capped_from})" if capped_from is not None else ""
            logger.info(f"Fetched {len(capped)} from {provider.name}{suffix}")
            per_provider[provider.name] = capped
            statuses[provider.name] = ProviderStatus(
                name=provider.name,
                state=ProviderState.OK,
                fetched=len(capped),
                capped_from=capped_from,
            )

        # Dedup in provider order, not completion order
        seen_urls: set[str] = set()
        articles: list[Article] = []
        for provider in self._providers:
            for article in per_provider.get(provider.name, []):
                key = canonicalize(article.url)
                if key in seen_urls:
                    continue
                seen_urls.add(key)
                articles.append(article)

        return articles, [statuses[p.name] for p in self._providers]

    async def _fetch_one(self, provider: ArticleProvider, organization_name: str) -> list[Article]:
        return await asyncio.wait_for(
            provider.search(organization_name, max_results=self._max_per_provider),
            timeout=self._timeout,
        )
