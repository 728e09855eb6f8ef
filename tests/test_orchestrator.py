"""Tests for SourceOrchestrator."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from evidence_ledger.data import Article
from evidence_ledger.pipeline import ProviderHealth, ProviderState, SourceOrchestrator


class FakeProvider:
    """Provider returning canned articles, or raising, or hanging."""

    def __init__(
        self,
        name: str,
        articles: list[Article] | None = None,
        *,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.name = name
        self._articles = articles or []
        self._error = error
        self._delay = delay
        self.calls = 0
        self.requested: int | None = None

    async def search(self, organization_name: str, *, max_results: int = 10) -> list[Article]:
        self.calls += 1
        self.requested = max_results
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return list(self._articles)


def _articles(prefix: str, count: int) -> list[Article]:
    return [
        Article(title=f"{prefix} {i}", url=f"https://{prefix}.com/{i}", source_name=prefix)
        for i in range(count)
    ]


class TestIsolation:
    """One provider's failure never aborts the others."""

    async def test_failed_provider_reported(self, caplog: pytest.LogCaptureFixture):
        good = FakeProvider("good", _articles("good", 2))
        bad = FakeProvider("bad", error=RuntimeError("quota exceeded"))
        orchestrator = SourceOrchestrator([bad, good])

        articles, statuses = await orchestrator.fetch_all("Acme")

        assert len(articles) == 2
        assert [s.name for s in statuses] == ["bad", "good"]
        assert statuses[0].state == ProviderState.FAILED
        assert statuses[0].error == "quota exceeded"
        assert statuses[0].failures == 1
        assert statuses[1].state == ProviderState.OK
        assert statuses[1].fetched == 2
        assert "bad error (1 fails): quota exceeded" in caplog.text

    async def test_timeout_counts_as_failure(self):
        slow = FakeProvider("slow", _articles("slow", 1), delay=1.0)
        fast = FakeProvider("fast", _articles("fast", 1))
        orchestrator = SourceOrchestrator([slow, fast], timeout_seconds=0.05)

        articles, statuses = await orchestrator.fetch_all("Acme")

        assert [a.source_name for a in articles] == ["fast"]
        assert statuses[0].state == ProviderState.FAILED
        assert statuses[0].error == "TimeoutError"

    async def test_all_providers_failing_yields_empty(self):
        orchestrator = SourceOrchestrator(
            [FakeProvider("a", error=ValueError("x")), FakeProvider("b", error=ValueError("y"))]
        )
        articles, statuses = await orchestrator.fetch_all("Acme")
        assert articles == []
        assert all(s.state == ProviderState.FAILED for s in statuses)


class TestCaps:
    """Tests for per-provider caps."""

    async def test_results_capped(self, caplog: pytest.LogCaptureFixture):
        caplog.set_level("INFO")
        provider = FakeProvider("big", _articles("big", 25))
        orchestrator = SourceOrchestrator([provider], max_per_provider=10)

        articles, [status] = await orchestrator.fetch_all("Acme")

        assert len(articles) == 10
        assert provider.requested == 10
        assert status.fetched == 10
        assert status.capped_from == 25
        assert "Fetched 10 from big (capped from 25)" in caplog.text

    async def test_uncapped_status(self):
        orchestrator = SourceOrchestrator([FakeProvider("p", _articles("p", 3))])
        _, [status] = await orchestrator.fetch_all("Acme")
        assert status.capped_from is None


def _status_error(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://api.example.com/search")
    response = httpx.Response(code, request=request)
    return httpx.HTTPStatusError(f"HTTP {code}", request=request, response=response)


class TestRejectedRequests:
    """A final 4xx skips the provider for this call without tripping the breaker."""

    async def test_forbidden_is_skipped(self, caplog: pytest.LogCaptureFixture):
        caplog.set_level("INFO")
        rejected = FakeProvider("rejected", error=_status_error(403))
        good = FakeProvider("good", _articles("good", 1))
        orchestrator = SourceOrchestrator([rejected, good], failure_threshold=1)
        health = orchestrator.new_health()

        articles, statuses = await orchestrator.fetch_all("Acme", health=health)

        assert len(articles) == 1
        assert statuses[0].state == ProviderState.SKIPPED
        assert statuses[0].error == "HTTP 403"
        assert statuses[0].failures == 0
        assert health.failures == {}
        assert "Skipping rejected: HTTP 403" in caplog.text

        await orchestrator.fetch_all("Acme", health=health)
        assert rejected.calls == 2

    async def test_rate_limit_counts_as_failure(self):
        limited = FakeProvider("limited", error=_status_error(429))
        orchestrator = SourceOrchestrator([limited])
        health = orchestrator.new_health()

        _, [status] = await orchestrator.fetch_all("Acme", health=health)

        assert status.state == ProviderState.FAILED
        assert health.failures == {"limited": 1}


class TestCircuitBreaker:
    """Providers that keep failing are skipped for the rest of the run."""

    async def test_skipped_after_threshold(self):
        bad = FakeProvider("bad", error=RuntimeError("down"))
        orchestrator = SourceOrchestrator([bad], failure_threshold=3)
        health = orchestrator.new_health()

        for _ in range(3):
            _, [status] = await orchestrator.fetch_all("Acme", health=health)
            assert status.state == ProviderState.FAILED

        _, [status] = await orchestrator.fetch_all("Acme", health=health)
        assert status.state == ProviderState.SKIPPED
        assert status.failures == 3
        assert bad.calls == 3

    async def test_fresh_run_resets(self):
        bad = FakeProvider("bad", error=RuntimeError("down"))
        orchestrator = SourceOrchestrator([bad], failure_threshold=1)
        health = orchestrator.new_health()
        await orchestrator.fetch_all("Acme", health=health)
        await orchestrator.fetch_all("Acme", health=health)
        assert bad.calls == 1

        await orchestrator.fetch_all("Acme")
        assert bad.calls == 2

    def test_success_resets_count(self):
        health = ProviderHealth(threshold=3)
        health.record_failure("p")
        health.record_failure("p")
        health.record_success("p")
        assert health.record_failure("p") == 1
        assert not health.should_skip("p")


class TestDeduplication:
    """Tests for cross-provider deduplication."""

    async def test_first_provider_wins(self):
        shared = "https://example.com/story"
        first = FakeProvider(
            "first", [Article(title="First copy", url=shared + "?utm_source=a", source_name="A")]
        )
        second = FakeProvider(
            "second",
            [
                Article(title="Second copy", url=shared + "/", source_name="B"),
                Article(title="Unique", url="https://example.com/other", source_name="B"),
            ],
            delay=0.0,
        )
        orchestrator = SourceOrchestrator([first, second])

        articles, statuses = await orchestrator.fetch_all("Acme")

        assert [a.title for a in articles] == ["First copy", "Unique"]
        assert statuses[1].fetched == 2
