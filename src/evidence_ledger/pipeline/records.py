"""Regulator record import: enforcement records from a YAML file become official events."""

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from evidence_ledger.classifier import normalize_category
from evidence_ledger.corroboration import Action, CorroborationEngine
from evidence_ledger.data import Category, RegulatorRecord
from evidence_ledger.notify import NotificationScheduler
from evidence_ledger.pipeline.ingest import sum_category_impacts
from evidence_ledger.run_logger import RunLogger
from evidence_ledger.store.base import EventStore, StoreUnavailableError

logger = logging.getLogger(__name__)


class RegulatorRecordEntry(BaseModel):
    """One record in a records file, tagged with the organization it concerns."""

    model_config = {"frozen": True}

    organization_id: str
    agency: str
    url: str
    occurred_at: datetime
    title: str = ""
    description: str = ""
    category: Category = Category.LABOR
    serious_violations: int = Field(default=0, ge=0)
    willful_violations: int = Field(default=0, ge=0)
    repeat_violations: int = Field(default=0, ge=0)
    fatalities: int = Field(default=0, ge=0)
    penalty: float = Field(default=0.0, ge=0)

    @field_validator("category", mode="before")
    @classmethod
    def normalize(cls, v: object) -> Category:
        return normalize_category(str(v) if v is not None else None)

    @field_validator("occurred_at", mode="before")
    @classmethod
    def date_to_datetime(cls, v: object) -> object:
        # YAML reads a bare 2026-02-10 as a date
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime(v.year, v.month, v.day, tzinfo=UTC)
        return v

    def to_record(self) -> RegulatorRecord:
        return RegulatorRecord(
            agency=self.agency,
            title=self.title,
            url=self.url,
            occurred_at=self.occurred_at,
            description=self.description,
            category=self.category,
            serious_violations=self.serious_violations,
            willful_violations=self.willful_violations,
            repeat_violations=self.repeat_violations,
            fatalities=self.fatalities,
            penalty=self.penalty,
        )


class RegulatorRecordFile(BaseModel):
    model_config = {"frozen": True}

    records: list[RegulatorRecordEntry] = []


def load_records(path: Path | str) -> list[RegulatorRecordEntry]:
    """Load regulator records from a YAML file with a top-level ``records`` list.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        pydantic.ValidationError: If an entry is invalid.
    """
    path = Path(path)
    with path.open() as f:
        raw = yaml.safe_load(f)

    return RegulatorRecordFile.model_validate(raw or {}).records


@dataclass
class RecordsReport:
    """Counters for one records import."""

    processed: int = 0
    inserted: int = 0
    upgraded: int = 0
    skipped: int = 0
    errors: int = 0
    job_keys: list[str] = field(default_factory=list)


class RecordsPipeline:
    """Writes regulator records to the ledger as ``official`` events.

    A record whose URL is already on file upgrades that event instead. Each
    organization with new events gets one coalesced notification.

    Args:
        store: Event store.
        engine: Corroboration engine writing to ``store``.
        scheduler: Notification scheduler (None disables notifications).
        run_logger: Optional RunLogger for intermediate result logging.
    """

    def __init__(
        self,
        store: EventStore,
        engine: CorroborationEngine,
        scheduler: NotificationScheduler | None = None,
        *,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._store = store
        self._engine = engine
        self._scheduler = scheduler
        self._run_logger = run_logger

    async def run(
        self,
        entries: list[RegulatorRecordEntry],
        *,
        dry_run: bool = False,
    ) -> RecordsReport:
        if self._run_logger:
            self._run_logger.start_run("records", {"count": len(entries), "dry_run": dry_run})

        report = RecordsReport()
        created: dict[str, list[str]] = defaultdict(list)
        resolutions = []

        t0 = time.monotonic()
        for entry in entries:
            report.processed += 1
            try:
                resolution = await self._engine.record_official(
                    entry.organization_id, entry.to_record(), dry_run=dry_run
                )
            except StoreUnavailableError:
                raise
            except Exception as e:
                logger.error(f"Error recording {entry.url}: {e}")
                report.errors += 1
                continue

            resolutions.append(
                {
                    "organization_id": entry.organization_id,
                    "url": entry.url,
                    "action": resolution.action,
                    "reason": resolution.reason,
                }
            )
            if resolution.action is Action.CREATE:
                report.inserted += 1
                if resolution.event_id:
                    created[entry.organization_id].append(resolution.event_id)
            elif resolution.upgraded:
                report.upgraded += 1
            else:
                report.skipped += 1

        if self._run_logger:
            self._run_logger.log_stage(
                stage="record",
                component=type(self._engine).__name__,
                input_data=len(entries),
                output_data=resolutions,
                duration_seconds=time.monotonic() - t0,
            )

        if not dry_run and self._scheduler is not None:
            for organization_id, event_ids in created.items():
                deltas = await sum_category_impacts(self._store, event_ids)
                job = await self._scheduler.schedule(organization_id, deltas)
                if job:
                    report.job_keys.append(job.key)

        logger.info(
            f"Processed: {report.processed}, Inserted: {report.inserted}, "
            f"Upgraded: {report.upgraded}, Skipped: {report.skipped}, Errors: {report.errors}"
        )
        if self._run_logger:
            self._run_logger.finish_run(report)
        return report
