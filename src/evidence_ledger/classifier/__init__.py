from evidence_ledger.classifier.keywords import (
    CATEGORY_KEYWORDS,
    NEGATIVE_GUARDS,
    KeywordDictionary,
    normalize_category,
)
from evidence_ledger.classifier.relevance import (
    RELEVANCE_MIN_ACCEPTED,
    RelevanceScorer,
    normalize_relevance,
)
from evidence_ledger.classifier.rules import KeywordClassifier, normalize_text, source_credibility

__all__ = [
    "CATEGORY_KEYWORDS",
    "KeywordClassifier",
    "KeywordDictionary",
    "NEGATIVE_GUARDS",
    "RELEVANCE_MIN_ACCEPTED",
    "RelevanceScorer",
    "normalize_category",
    "normalize_relevance",
    "normalize_text",
    "source_credibility",
]
