"""News ingestion: fetch, score relevance, classify, corroborate, notify."""

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field

from evidence_ledger.classifier import KeywordClassifier, RelevanceScorer
from evidence_ledger.corroboration import Action, CorroborationEngine
from evidence_ledger.data import Category
from evidence_ledger.notify import NotificationScheduler
from evidence_ledger.pipeline.orchestrator import ProviderHealth, ProviderStatus, SourceOrchestrator
from evidence_ledger.run_logger import RunLogger
from evidence_ledger.store.base import EventStore
from evidence_ledger.url import extract_domain

logger = logging.getLogger(__name__)


async def sum_category_impacts(store: EventStore, event_ids: list[str]) -> dict[Category, float]:
    """Per-category sum of the impacts of the given events (missing ids are ignored)."""
    deltas: dict[Category, float] = defaultdict(float)
    for event_id in event_ids:
        event = await store.get_event(event_id)
        if event is None:
            continue
        for category, impact in event.category_impacts.items():
            deltas[category] += impact
    return dict(deltas)


@dataclass
class IngestReport:
    """Counters for one ingestion run of one organization."""

    scanned: int = 0
    inserted: int = 0
    merged: int = 0
    skipped: int = 0
    rejected: int = 0
    provider_status: list[ProviderStatus] = field(default_factory=list)
    job_key: str | None = None


class IngestionPipeline:
    """Runs one organization's articles through the ledger.

    Flow:
    1. The orchestrator fetches from every provider concurrently
    2. Each article is scored for relevance and classified
    3. The corroboration engine merges, creates, or skips it
    4. If any Event was created or merged, a coalesced notification is scheduled

    Articles are processed sequentially so each resolution sees the effect of
    earlier merges in the same run.

    Args:
        store: Event store.
        orchestrator: Provider fan-out.
        classifier: Keyword classifier.
        engine: Corroboration engine writing to ``store``.
        scheduler: Notification scheduler (None disables notifications).
        relevance: Relevance scorer.
        enabled: When False, ``run`` returns an empty report without fetching.
        run_logger: Optional RunLogger for intermediate result logging.
    """

    def __init__(
        self,
        store: EventStore,
        orchestrator: SourceOrchestrator,
        classifier: KeywordClassifier,
        engine: CorroborationEngine,
        scheduler: NotificationScheduler | None = None,
        relevance: RelevanceScorer | None = None,
        *,
        enabled: bool = True,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._store = store
        self._orchestrator = orchestrator
        self._classifier = classifier
        self._engine = engine
        self._scheduler = scheduler
        self._relevance = relevance or RelevanceScorer()
        self._enabled = enabled
        self._run_logger = run_logger

    async def run(
        self,
        organization_id: str,
        organization_name: str,
        *,
        dry_run: bool = False,
        health: ProviderHealth | None = None,
    ) -> IngestReport:
        """Ingest fresh articles for one organization.

        Args:
            organization_id: Organization the events belong to.
            organization_name: Name used for provider queries and relevance.
            dry_run: Make every decision but write nothing.
            health: Provider failure counts shared across a multi-organization run.

        Returns:
            IngestReport with per-outcome counts and provider statuses.
        """
        if not self._enabled:
            logger.info("News ingestion disabled")
            return IngestReport()

        if self._run_logger:
            self._run_logger.start_run(
                "ingest",
                {
                    "organization_id": organization_id,
                    "organization_name": organization_name,
                    "dry_run": dry_run,
                },
            )

        t0 = time.monotonic()
        articles, statuses = await self._orchestrator.fetch_all(organization_name, health=health)
        if self._run_logger:
            self._run_logger.log_stage(
                stage="fetch",
                component=type(self._orchestrator).__name__,
                input_data=organization_name,
                output_data={"articles": articles, "providers": statuses},
                duration_seconds=time.monotonic() - t0,
            )

        report = IngestReport(scanned=len(articles), provider_status=statuses)
        touched: list[str] = []
        resolutions = []

        t0 = time.monotonic()
        for article in articles:
            relevance_raw = self._relevance.score(article, organization_name)
            classification = self._classifier.classify(
                f"{article.title} {article.summary}",
                source_domain=extract_domain(article.url),
            )
            resolution = await self._engine.resolve(
                organization_id, article, classification, relevance_raw, dry_run=dry_run
            )
            resolutions.append(
                {
                    "url": article.url,
                    "relevance": relevance_raw,
                    "category": classification.category,
                    "action": resolution.action,
                    "reason": resolution.reason,
                }
            )

            if resolution.action is Action.CREATE:
                report.inserted += 1
            elif resolution.action is Action.MERGE:
                report.merged += 1
            elif resolution.reason in ("noise", "low_relevance", "invalid_url"):
                report.rejected += 1
            else:
                report.skipped += 1

            if resolution.action is not Action.SKIP and resolution.event_id:
                touched.append(resolution.event_id)

        if self._run_logger:
            self._run_logger.log_stage(
                stage="resolve",
                component=type(self._engine).__name__,
                input_data=len(articles),
                output_data=resolutions,
                duration_seconds=time.monotonic() - t0,
            )

        if touched and not dry_run and self._scheduler is not None:
            deltas = await sum_category_impacts(self._store, list(dict.fromkeys(touched)))
            job = await self._scheduler.schedule(
                organization_id, deltas, organization_name=organization_name
            )
            report.job_key = job.key if job else None

        logger.info(
            f"Scanned: {report.scanned}, Inserted: {report.inserted}, "
            f"Merged: {report.merged}, Skipped: {report.skipped}, Rejected: {report.rejected}"
        )
        if self._run_logger:
            self._run_logger.finish_run(report)
        return report
