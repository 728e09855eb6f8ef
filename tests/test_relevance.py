"""Tests for RelevanceScorer."""

from __future__ import annotations

from evidence_ledger.classifier import RELEVANCE_MIN_ACCEPTED, RelevanceScorer, normalize_relevance
from evidence_ledger.data import Article


def _article(title: str, summary: str = "", url: str = "https://example.com/a") -> Article:
    return Article(title=title, url=url, source_name="Example", summary=summary)


class TestRelevanceScorer:
    """Tests for RelevanceScorer."""

    def test_name_in_title(self):
        scorer = RelevanceScorer()
        assert scorer.score(_article("Acme Corp fined by regulator"), "Acme Corp") == 16

    def test_name_in_summary_only(self):
        scorer = RelevanceScorer()
        article = _article("Regulator issues fines", summary="Acme Corp among those fined")
        assert scorer.score(article, "Acme Corp") == 12

    def test_name_missing_is_below_acceptance(self):
        scorer = RelevanceScorer()
        score = scorer.score(_article("Unrelated story"), "Acme Corp")
        assert score == 4
        assert score < RELEVANCE_MIN_ACCEPTED

    def test_official_domain_is_maximal(self):
        scorer = RelevanceScorer()
        article = _article("Inspection results", url="https://www.osha.gov/enforcement/1")
        assert scorer.score(article, "Acme Corp") == 20

    def test_match_is_accent_and_case_insensitive(self):
        scorer = RelevanceScorer()
        assert scorer.score(_article("NESTLÉ recalls cereal"), "Nestle") == 16

    def test_scores_are_clamped(self):
        scorer = RelevanceScorer(title_score=50, unmatched_score=-5)
        assert scorer.score(_article("Acme news"), "Acme") == 20
        assert scorer.score(_article("Other news"), "Acme") == 0


def test_normalize_relevance():
    assert normalize_relevance(20) == 1.0
    assert normalize_relevance(11) == 0.55
    assert normalize_relevance(0) == 0.0
