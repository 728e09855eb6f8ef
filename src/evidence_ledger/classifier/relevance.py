"""Relevance scoring of an article against the organization it was fetched for."""

from evidence_ledger.classifier.keywords import OFFICIAL_DOMAINS
from evidence_ledger.classifier.rules import normalize_text
from evidence_ledger.data import Article
from evidence_ledger.url import extract_domain

RELEVANCE_MIN_SCORE = 0
RELEVANCE_MAX_SCORE = 20
RELEVANCE_MIN_ACCEPTED = 11


def normalize_relevance(raw: int) -> float:
    """Convert a raw 0-20 relevance score to 0-1."""
    return round(raw / RELEVANCE_MAX_SCORE, 4)


class RelevanceScorer:
    """Score how strongly an article is about a given organization (0-20).

    Args:
        official_score: Score for articles from regulator domains.
        title_score: Score when the organization name is in the title.
        summary_score: Score when the name only appears in the summary.
        unmatched_score: Score when the name does not appear at all.
    """

    def __init__(
        self,
        *,
        official_score: int = RELEVANCE_MAX_SCORE,
        title_score: int = 16,
        summary_score: int = 12,
        unmatched_score: int = 4,
    ) -> None:
        self._official_score = official_score
        self._title_score = title_score
        self._summary_score = summary_score
        self._unmatched_score = unmatched_score

    def score(self, article: Article, organization_name: str) -> int:
        domain = extract_domain(article.url)
        if domain and any(d in domain for d in OFFICIAL_DOMAINS):
            result = self._official_score
        else:
            name = normalize_text(organization_name).strip()
            if name and name in normalize_text(article.title):
                result = self._title_score
            elif name and name in normalize_text(article.summary):
                result = self._summary_score
            else:
                result = self._unmatched_score
        return max(RELEVANCE_MIN_SCORE, min(RELEVANCE_MAX_SCORE, result))
