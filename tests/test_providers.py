"""Tests for the upstream article providers."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from evidence_ledger.data import Article
from evidence_ledger.search import GNewsProvider, GuardianProvider, NewsAPIProvider, NYTProvider
from evidence_ledger.search.base import ISSUE_KEYWORDS, build_query, parse_datetime


def _mock_response(data: dict) -> MagicMock:
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = data
    mock_response.raise_for_status = MagicMock()
    return mock_response


def _patch_request(monkeypatch: pytest.MonkeyPatch, data: dict) -> dict[str, Any]:
    """Route httpx.AsyncClient.request to a canned response and record the call."""
    captured: dict[str, Any] = {}

    async def mock_request(self, method, url, **kwargs):
        captured["method"] = method
        captured["url"] = url
        captured["params"] = kwargs.get("params", {})
        return _mock_response(data)

    monkeypatch.setattr(httpx.AsyncClient, "request", mock_request)
    return captured


@pytest.mark.parametrize(
    ("provider_cls", "env_var"),
    [
        (GNewsProvider, "GNEWS_API_KEY"),
        (GuardianProvider, "GUARDIAN_API_KEY"),
        (NewsAPIProvider, "NEWSAPI_KEY"),
        (NYTProvider, "NYT_API_KEY"),
    ],
)
class TestApiKeys:
    """Every provider needs a key, from the argument or the environment."""

    def test_init_requires_api_key(self, provider_cls, env_var, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv(env_var, raising=False)
        with pytest.raises(ValueError, match="key required"):
            provider_cls()

    def test_init_uses_env_var(self, provider_cls, env_var, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(env_var, "env-key")
        provider = provider_cls()
        assert provider._api_key == "env-key"


class TestGNewsProvider:
    """Tests for GNewsProvider."""

    @pytest.fixture
    def mock_response_data(self) -> dict:
        """Sample GNews API response."""
        return {
            "totalArticles": 2,
            "articles": [
                {
                    "title": "Acme recalls toys",
                    "url": "https://example.com/article1",
                    "source": {"name": "Example News"},
                    "publishedAt": "2026-02-01T10:00:00Z",
                    "description": "Description 1",
                },
                {
                    "title": "Acme faces lawsuit",
                    "url": "https://example.com/article2",
                    "source": {},
                    "publishedAt": "not a date",
                    "content": "x" * 500,
                },
            ],
        }

    async def test_search_returns_articles(
        self, mock_response_data: dict, monkeypatch: pytest.MonkeyPatch
    ):
        captured = _patch_request(monkeypatch, mock_response_data)
        provider = GNewsProvider(api_key="test-key")

        articles = await provider.search("Acme", max_results=5)

        assert len(articles) == 2
        assert all(isinstance(a, Article) for a in articles)
        assert articles[0].source_name == "Example News"
        assert articles[0].published_at == datetime(2026, 2, 1, 10, 0, tzinfo=UTC)
        assert articles[0].raw_payload == mock_response_data["articles"][0]
        assert articles[1].source_name == "GNews"
        assert articles[1].published_at is None
        assert len(articles[1].summary) == 300

        assert captured["method"] == "GET"
        assert captured["params"]["token"] == "test-key"
        assert captured["params"]["max"] == 5
        assert captured["params"]["q"] == build_query("Acme")

    async def test_max_results_capped_at_100(self, monkeypatch: pytest.MonkeyPatch):
        captured = _patch_request(monkeypatch, {"articles": []})
        await GNewsProvider(api_key="k").search("Acme", max_results=500)
        assert captured["params"]["max"] == 100

    async def test_empty_response(self, monkeypatch: pytest.MonkeyPatch):
        _patch_request(monkeypatch, {})
        assert await GNewsProvider(api_key="k").search("Acme") == []


class TestGuardianProvider:
    """Tests for GuardianProvider."""

    async def test_search_maps_fields(self, monkeypatch: pytest.MonkeyPatch):
        captured = _patch_request(
            monkeypatch,
            {
                "response": {
                    "results": [
                        {
                            "webTitle": "Fallback title",
                            "webUrl": "https://www.theguardian.com/business/acme",
                            "webPublicationDate": "2026-02-01T10:00:00Z",
                            "fields": {"headline": "Acme boycott grows", "trailText": "Trail"},
                        },
                        {
                            "webTitle": "Only web title",
                            "webUrl": "https://www.theguardian.com/business/acme-2",
                        },
                    ]
                }
            },
        )

        articles = await GuardianProvider(api_key="k").search("Acme", max_results=80)

        assert [a.title for a in articles] == ["Acme boycott grows", "Only web title"]
        assert articles[0].summary == "Trail"
        assert articles[0].source_name == "The Guardian"
        assert captured["params"]["page-size"] == 50


class TestNewsAPIProvider:
    """Tests for NewsAPIProvider."""

    async def test_search_maps_fields(self, monkeypatch: pytest.MonkeyPatch):
        captured = _patch_request(
            monkeypatch,
            {
                "status": "ok",
                "articles": [
                    {
                        "title": "Acme strike enters second week",
                        "url": "https://news.example.com/strike",
                        "source": {"id": None, "name": "Example Wire"},
                        "description": "Workers walked out",
                        "publishedAt": "2026-02-03T08:30:00Z",
                    }
                ],
            },
        )

        [article] = await NewsAPIProvider(api_key="k", language="de").search("Acme")

        assert article.title == "Acme strike enters second week"
        assert article.source_name == "Example Wire"
        assert article.summary == "Workers walked out"
        assert captured["params"]["language"] == "de"
        assert captured["params"]["apiKey"] == "k"


class TestNYTProvider:
    """Tests for NYTProvider."""

    async def test_search_truncates_to_max_results(self, monkeypatch: pytest.MonkeyPatch):
        docs = [
            {
                "headline": {"main": f"Acme story {i}"},
                "web_url": f"https://www.nytimes.com/2026/02/0{i}/acme.html",
                "abstract": "",
                "lead_paragraph": "Lead paragraph",
                "pub_date": "2026-02-01T10:00:00Z",
            }
            for i in range(1, 6)
        ]
        _patch_request(monkeypatch, {"response": {"docs": docs}})

        articles = await NYTProvider(api_key="k").search("Acme", max_results=3)

        assert len(articles) == 3
        assert articles[0].title == "Acme story 1"
        assert articles[0].summary == "Lead paragraph"
        assert articles[0].source_name == "The New York Times"


async def test_http_error_propagates(monkeypatch: pytest.MonkeyPatch):
    """A 4xx is final and surfaces to the orchestrator as an exception."""

    async def mock_request(self, method, url, **kwargs):
        return httpx.Response(403, request=httpx.Request(method, url))

    monkeypatch.setattr(httpx.AsyncClient, "request", mock_request)
    with pytest.raises(httpx.HTTPStatusError):
        await GNewsProvider(api_key="k").search("Acme")


@pytest.mark.parametrize(
    ("provider_cls", "payload"),
    [
        (GNewsProvider, {"articles": [{"title": None, "url": None, "source": None}]}),
        (NewsAPIProvider, {"articles": [{"title": None, "url": None, "source": None}]}),
        (
            GuardianProvider,
            {"response": {"results": [{"webTitle": None, "webUrl": None, "fields": None}]}},
        ),
        (NYTProvider, {"response": {"docs": [{"headline": {"main": None}, "web_url": None}]}}),
    ],
)
async def test_null_fields_map_to_empty_strings(
    provider_cls, payload: dict, monkeypatch: pytest.MonkeyPatch
):
    _patch_request(monkeypatch, payload)

    [article] = await provider_cls(api_key="k").search("Acme")

    assert article.title == ""
    assert article.url == ""
    assert article.summary == ""
    assert article.published_at is None


def test_build_query_appends_issue_keywords():
    assert build_query("Acme") == f"Acme AND ({ISSUE_KEYWORDS})"


def test_parse_datetime():
    assert parse_datetime("2026-02-01T10:00:00Z") == datetime(2026, 2, 1, 10, 0, tzinfo=UTC)
    assert parse_datetime("2026-02-01T10:00:00") == datetime(2026, 2, 1, 10, 0, tzinfo=UTC)
    assert parse_datetime(None) is None
    assert parse_datetime("yesterday") is None
