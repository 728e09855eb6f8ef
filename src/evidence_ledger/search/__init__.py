from evidence_ledger.search.base import ArticleProvider
from evidence_ledger.search.gnews import GNewsProvider
from evidence_ledger.search.guardian import GuardianProvider
from evidence_ledger.search.newsapi import NewsAPIProvider
from evidence_ledger.search.nyt import NYTProvider

__all__ = [
    "ArticleProvider",
    "GNewsProvider",
    "GuardianProvider",
    "NYTProvider",
    "NewsAPIProvider",
]
