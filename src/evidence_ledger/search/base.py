import logging
from datetime import UTC, datetime
from typing import Protocol

from evidence_ledger.data import Article

logger = logging.getLogger(__name__)

# Keyword filter appended to every organization query.
ISSUE_KEYWORDS = "lawsuit OR recall OR boycott OR scandal OR controversy OR discrimination"

SUMMARY_MAX_CHARS = 300


class ArticleProvider(Protocol):
    """Interface for an upstream news or records provider."""

    name: str

    async def search(self, organization_name: str, *, max_results: int = 10) -> list[Article]:
        """Fetch recent articles about an organization.

        Args:
            organization_name: Display name of the organization.
            max_results: Upper bound on returned articles.

        Returns:
            Normalized articles, newest first.
        """
        ...


def build_query(organization_name: str) -> str:
    return f"{organization_name} AND ({ISSUE_KEYWORDS})"


def parse_datetime(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp, returning None when absent or invalid."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def truncate(text: str | None, limit: int = SUMMARY_MAX_CHARS) -> str:
    return (text or "")[:limit]
