"""Merge-or-create resolution of classified articles against the event ledger."""

import logging
import re
import uuid
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from urllib.parse import urlsplit

from evidence_ledger.classifier.relevance import RELEVANCE_MAX_SCORE, RELEVANCE_MIN_ACCEPTED
from evidence_ledger.data import (
    Article,
    Category,
    Classification,
    Event,
    EventSource,
    Orientation,
    RegulatorRecord,
    Severity,
    Verification,
)
from evidence_ledger.store.base import ConstraintViolation, EventStore
from evidence_ledger.url import canonicalize, registrable_domain, title_fingerprint

logger = logging.getLogger(__name__)

QUOTE_MAX_CHARS = 280

_TOKEN = re.compile(r"\w+")


class Action(StrEnum):
    SKIP = "skip"
    MERGE = "merge"
    CREATE = "create"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one article against the ledger."""

    action: Action
    event_id: str | None = None
    reason: str = ""
    upgraded: bool = False


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _has_host(url: str) -> bool:
    try:
        return bool(urlsplit(url).hostname)
    except ValueError:
        return False


def significant_tokens(title: str | None) -> set[str]:
    """Lower-cased word tokens longer than three characters."""
    return {t for t in _TOKEN.findall((title or "").lower()) if len(t) > 3}


def title_similarity(a: str | None, b: str | None) -> float:
    """Jaccard index over the significant tokens of two titles."""
    tokens_a = significant_tokens(a)
    tokens_b = significant_tokens(b)
    union = tokens_a | tokens_b
    if not union:
        return 0.0
    return len(tokens_a & tokens_b) / len(union)


def regulator_impact(record: RegulatorRecord) -> int:
    """Tiered labor impact (-1 to -5) of an enforcement record."""
    impact = -1
    if record.serious_violations >= 1:
        impact = -2
    if record.serious_violations >= 3 or record.penalty >= 25_000:
        impact = -3
    if record.repeat_violations >= 1 or record.willful_violations >= 1:
        impact = -4
    if record.willful_violations >= 2 or record.penalty >= 100_000:
        impact = -5
    return impact


def regulator_severity(record: RegulatorRecord) -> Severity:
    if record.willful_violations or record.fatalities:
        return Severity.SEVERE
    if record.serious_violations or record.repeat_violations:
        return Severity.MODERATE
    return Severity.MINOR


def describe_record(record: RegulatorRecord) -> tuple[str, str]:
    """Title and description for a record, generated when the record has none."""
    count = record.serious_violations + record.willful_violations + record.repeat_violations
    plural = "s" if count != 1 else ""
    title = record.title or f"{record.agency} Inspection: {count} violation{plural} found"
    if record.description:
        return (title, record.description)

    description = f"{record.agency} inspection found {count} violation(s)"
    if record.serious_violations:
        description += f" including {record.serious_violations} serious"
    if record.willful_violations:
        description += f", {record.willful_violations} willful"
    if record.repeat_violations:
        description += f", {record.repeat_violations} repeat"
    if record.penalty:
        description += f". Total penalty: ${record.penalty:,.0f}"
    return (title, description + ".")


class CorroborationEngine:
    """Decide whether an article is a duplicate, new evidence for an existing
    Event, or a new Event.

    Verification only ever moves up: ``unverified`` to ``corroborated`` when an
    Event collects enough sources, and ``official`` only through
    ``record_official``.

    Args:
        store: The event store.
        window_days: Half-width of the candidate window around the publish date.
        similarity_threshold: Minimum title Jaccard index (exclusive) to merge.
        min_sources: Source count at which an Event becomes corroborated.
        relevance_min: Minimum raw relevance (0-20) for an article to be accepted.
        skip_noise: Reject articles classified as noise.
    """

    def __init__(
        self,
        store: EventStore,
        *,
        window_days: int = 3,
        similarity_threshold: float = 0.6,
        min_sources: int = 2,
        relevance_min: int = RELEVANCE_MIN_ACCEPTED,
        skip_noise: bool = True,
    ) -> None:
        self._store = store
        self._window = timedelta(days=window_days)
        self._similarity_threshold = similarity_threshold
        self._min_sources = min_sources
        self._relevance_min = relevance_min
        self._skip_noise = skip_noise

    async def resolve(
        self,
        organization_id: str,
        article: Article,
        classification: Classification,
        relevance_raw: int,
        *,
        dry_run: bool = False,
    ) -> Resolution:
        """Merge the article into an existing Event, create a new one, or skip it.

        Args:
            organization_id: Organization the article was fetched for.
            article: The normalized article.
            classification: Classifier output for the article.
            relevance_raw: Relevance of the article to the organization (0-20).
            dry_run: Make every decision but write nothing.

        Returns:
            The Resolution; ``event_id`` is set for merges, creates and duplicates.

        Raises:
            StoreError: If the store fails for any reason other than a
                uniqueness conflict.
        """
        if classification.is_noise and self._skip_noise:
            logger.info("Skipping noise: %s", article.title)
            return Resolution(Action.SKIP, reason="noise")
        if relevance_raw < self._relevance_min:
            logger.info("Skipping low relevance (%d): %s", relevance_raw, article.title)
            return Resolution(Action.SKIP, reason="low_relevance")

        canonical_url = canonicalize(article.url)
        if not _has_host(canonical_url):
            logger.info("Skipping article with unusable url %r", article.url)
            return Resolution(Action.SKIP, reason="invalid_url")

        existing = await self._store.find_source(organization_id, canonical_url)
        if existing is not None:
            logger.debug("Already known: %s", canonical_url)
            return Resolution(Action.SKIP, event_id=existing.event_id, reason="duplicate_url")

        published = _as_utc(article.published_at) if article.published_at else datetime.now(tz=UTC)
        candidate, similarity = await self._best_candidate(
            organization_id, classification.category, article.title, published
        )

        if candidate is not None:
            if dry_run:
                logger.info(
                    "[DRYRUN] Would merge %r into event %s (similarity %.2f)",
                    article.title,
                    candidate.event_id,
                    similarity,
                )
                return Resolution(Action.MERGE, event_id=candidate.event_id, reason="dry_run")
            return await self._merge(candidate, article, canonical_url, published)

        if dry_run:
            logger.info(
                "[DRYRUN] Would insert: %s (relevance=%d, category=%s)",
                article.title,
                relevance_raw,
                classification.category,
            )
            return Resolution(Action.CREATE, reason="dry_run")

        event = Event(
            event_id=str(uuid.uuid4()),
            organization_id=organization_id,
            category=classification.category,
            title=article.title,
            description=article.summary,
            source_url=canonical_url,
            occurred_at=published,
            category_code=classification.category_code,
            secondary_categories=tuple(str(c) for c in classification.secondary_categories),
            severity=classification.severity,
            orientation=classification.orientation,
            verification=Verification.UNVERIFIED,
            category_impacts=dict(classification.impact_by_category),
            confidence=classification.confidence,
            credibility=classification.credibility,
            is_irrelevant=classification.is_noise,
            relevance_raw=relevance_raw,
            created_at=datetime.now(tz=UTC),
        )
        return await self._create(event, article, canonical_url)

    async def record_official(
        self,
        organization_id: str,
        record: RegulatorRecord,
        *,
        dry_run: bool = False,
    ) -> Resolution:
        """Ingest a regulator enforcement record as an ``official`` Event.

        A record whose URL is already on file upgrades the owning Event to
        ``official`` instead of creating a second one.
        """
        canonical_url = canonicalize(record.url)
        existing = await self._store.find_source(organization_id, canonical_url)
        if existing is not None:
            event = await self._store.get_event(existing.event_id)
            upgraded = False
            if event is not None and event.verification != Verification.OFFICIAL and not dry_run:
                await self._store.update_event(
                    replace(
                        event, verification=event.verification.upgrade_to(Verification.OFFICIAL)
                    )
                )
                logger.info("Upgraded event %s to official from %s", event.event_id, record.agency)
                upgraded = True
            return Resolution(
                Action.SKIP, event_id=existing.event_id, reason="duplicate_url", upgraded=upgraded
            )

        title, description = describe_record(record)
        if dry_run:
            logger.info("[DRYRUN] Would insert official event: %s", title)
            return Resolution(Action.CREATE, reason="dry_run")

        impacts = {c: 0.0 for c in Category}
        impacts[record.category] = float(regulator_impact(record))
        event = Event(
            event_id=str(uuid.uuid4()),
            organization_id=organization_id,
            category=record.category,
            title=title,
            description=description,
            source_url=canonical_url,
            occurred_at=_as_utc(record.occurred_at),
            severity=regulator_severity(record),
            orientation=Orientation.NEGATIVE,
            verification=Verification.OFFICIAL,
            category_impacts=impacts,
            confidence=1.0,
            credibility=1.0,
            relevance_raw=RELEVANCE_MAX_SCORE,
            created_at=datetime.now(tz=UTC),
        )
        article = Article(
            title=title,
            url=record.url,
            source_name=record.agency,
            summary=description,
            published_at=record.occurred_at,
        )
        return await self._create(event, article, canonical_url)

    async def _best_candidate(
        self,
        organization_id: str,
        category: Category,
        title: str,
        published: datetime,
    ) -> tuple[Event | None, float]:
        candidates = await self._store.find_events(
            organization_id,
            category=category,
            start=published - self._window,
            end=published + self._window,
        )
        best: Event | None = None
        best_score = 0.0
        for event in candidates:
            score = title_similarity(title, event.title)
            # strict comparison keeps the earliest-created event on ties
            if score > best_score:
                best, best_score = event, score
        if best is None or best_score <= self._similarity_threshold:
            return (None, best_score)
        return (best, best_score)

    async def _merge(
        self,
        event: Event,
        article: Article,
        canonical_url: str,
        published: datetime,
    ) -> Resolution:
        source = self._build_source(
            event.event_id, article, canonical_url, published, is_primary=False
        )
        try:
            await self._store.insert_source(source)
        except ConstraintViolation as e:
            logger.info("Duplicate source on event %s (%s), skipping", event.event_id, e.constraint)
            return Resolution(Action.SKIP, event_id=event.event_id, reason="constraint_violation")

        upgraded = False
        sources = await self._store.list_sources(event.event_id)
        if len(sources) >= self._min_sources and event.verification == Verification.UNVERIFIED:
            await self._store.update_event(
                replace(
                    event, verification=event.verification.upgrade_to(Verification.CORROBORATED)
                )
            )
            upgraded = True
            logger.info(
                "Auto-upgraded: %d independent sources, event %s is now corroborated",
                len(sources),
                event.event_id,
            )
        return Resolution(Action.MERGE, event_id=event.event_id, upgraded=upgraded)

    async def _create(
        self,
        event: Event,
        article: Article,
        canonical_url: str,
    ) -> Resolution:
        try:
            await self._store.insert_event(event)
        except ConstraintViolation as e:
            logger.info("Race on %s (%s), treating as existing", canonical_url, e.constraint)
            return Resolution(Action.SKIP, reason="constraint_violation")

        source = self._build_source(
            event.event_id,
            article,
            canonical_url,
            event.occurred_at,
            is_primary=True,
        )
        try:
            await self._store.insert_source(source)
        except ConstraintViolation as e:
            logger.info("Primary source already recorded for %s (%s)", event.event_id, e.constraint)
        return Resolution(Action.CREATE, event_id=event.event_id)

    @staticmethod
    def _build_source(
        event_id: str,
        article: Article,
        canonical_url: str,
        published: datetime,
        *,
        is_primary: bool,
    ) -> EventSource:
        return EventSource(
            source_id=str(uuid.uuid4()),
            event_id=event_id,
            source_name=article.source_name,
            canonical_url=canonical_url,
            registrable_domain=registrable_domain(canonical_url),
            title_fingerprint=title_fingerprint(article.title, article.summary),
            quote=article.summary[:QUOTE_MAX_CHARS],
            source_date=published,
            is_primary=is_primary,
        )
