"""Batch reclassification of stored events."""

import logging
import time
from dataclasses import dataclass, field, replace

from evidence_ledger.classifier import KeywordClassifier
from evidence_ledger.data import Event, Orientation
from evidence_ledger.run_logger import RunLogger
from evidence_ledger.store.base import EventStore, StoreUnavailableError
from evidence_ledger.url import extract_domain

logger = logging.getLogger(__name__)


@dataclass
class RecategorizeReport:
    processed: int = 0
    changed_to_positive: int = 0
    changed_to_negative: int = 0
    remained_mixed: int = 0
    errors: int = 0
    organizations_affected: set[str] = field(default_factory=set)


def _is_unscored(event: Event) -> bool:
    return event.orientation == Orientation.MIXED and not any(event.category_impacts.values())


class Recategorizer:
    """Re-run the classifier over events already in the ledger.

    Category, code, secondaries, severity, orientation, impacts and the
    noise flag are rewritten from ``title + description`` and the event's
    source domain. Verification is left alone.

    Args:
        store: Event store.
        classifier: Classifier to apply.
        limit: Maximum events per run, newest first.
        only_mixed_zero: Restrict the run to mixed events with all-zero impacts.
        run_logger: Optional RunLogger for intermediate result logging.
    """

    def __init__(
        self,
        store: EventStore,
        classifier: KeywordClassifier,
        *,
        limit: int = 200,
        only_mixed_zero: bool = False,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._store = store
        self._classifier = classifier
        self._limit = limit
        self._only_mixed_zero = only_mixed_zero
        self._run_logger = run_logger

    async def run(
        self,
        organization_id: str | None = None,
        *,
        dry_run: bool = False,
    ) -> RecategorizeReport:
        """Reclassify stored events.

        Args:
            organization_id: Restrict to one organization (all when None).
            dry_run: Classify and count but write nothing.

        Returns:
            Counts of orientation changes and per-event errors.
        """
        if self._run_logger:
            self._run_logger.start_run(
                "recategorize",
                {
                    "organization_id": organization_id,
                    "dry_run": dry_run,
                    "limit": self._limit,
                    "only_mixed_zero": self._only_mixed_zero,
                },
            )

        events = await self._store.find_events(organization_id)
        if self._only_mixed_zero:
            events = [e for e in events if _is_unscored(e)]
        events = sorted(
            events, key=lambda e: e.created_at or e.occurred_at, reverse=True
        )[: self._limit]

        report = RecategorizeReport()
        if not events:
            logger.info("No events to process")
            if self._run_logger:
                self._run_logger.finish_run(report)
            return report
        logger.info(f"Processing {len(events)} events")

        changes = []
        t0 = time.monotonic()
        for event in events:
            report.processed += 1
            try:
                updated = self._reclassify(event)
            except Exception as e:
                logger.error(f"Error processing {event.event_id}: {e}")
                report.errors += 1
                continue

            if (
                updated.orientation == Orientation.POSITIVE
                and event.orientation != Orientation.POSITIVE
            ):
                report.changed_to_positive += 1
            elif (
                updated.orientation == Orientation.NEGATIVE
                and event.orientation != Orientation.NEGATIVE
            ):
                report.changed_to_negative += 1
            else:
                report.remained_mixed += 1
            changes.append(
                {
                    "event_id": event.event_id,
                    "before": f"{event.category}/{event.orientation}",
                    "after": f"{updated.category}/{updated.orientation}",
                }
            )

            if dry_run:
                logger.info(
                    f"[DRYRUN] Would update {event.event_id}: "
                    f"{event.category}/{event.orientation} -> "
                    f"{updated.category}/{updated.orientation}"
                )
                continue
            try:
                await self._store.update_event(updated)
            except StoreUnavailableError:
                raise
            except Exception as e:
                logger.error(f"Update error for {event.event_id}: {e}")
                report.errors += 1
                continue
            report.organizations_affected.add(event.organization_id)

        if self._run_logger:
            self._run_logger.log_stage(
                stage="reclassify",
                component=type(self._classifier).__name__,
                input_data=len(events),
                output_data=changes,
                duration_seconds=time.monotonic() - t0,
            )

        logger.info(
            f"Processed: {report.processed}, Positive: {report.changed_to_positive}, "
            f"Negative: {report.changed_to_negative}, Mixed: {report.remained_mixed}, "
            f"Errors: {report.errors}"
        )
        if self._run_logger:
            self._run_logger.finish_run(report)
        return report

    def _reclassify(self, event: Event) -> Event:
        result = self._classifier.classify(
            f"{event.title} {event.description}",
            source_domain=extract_domain(event.source_url),
        )
        return replace(
            event,
            category=result.category,
            category_code=result.category_code,
            secondary_categories=tuple(str(c) for c in result.secondary_categories),
            severity=result.severity,
            orientation=result.orientation,
            category_impacts=dict(result.impact_by_category),
            confidence=result.confidence,
            credibility=result.credibility,
            is_irrelevant=result.is_noise,
        )
