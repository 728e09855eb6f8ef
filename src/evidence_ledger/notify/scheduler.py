"""Coalesce score-change notifications into time-bucketed jobs."""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime

from evidence_ledger.classifier.keywords import normalize_category
from evidence_ledger.data import Category, CoalescedJob
from evidence_ledger.store.base import EventStore

logger = logging.getLogger(__name__)

DEFAULT_STAGE = "send_push_for_score_change"


def bucket_start(moment: datetime, bucket_seconds: int = 300) -> int:
    """Epoch seconds of the start of the bucket containing ``moment``."""
    epoch = int(moment.timestamp())
    return epoch - epoch % bucket_seconds


class NotificationScheduler:
    """Decide when to notify about score changes, at most once per bucket.

    Every call within the same bucket for the same organization lands on the
    job keyed ``"<organization_id>:<bucket_start>"``; deltas for a category
    already in the job are summed.

    Args:
        store: Store holding the downstream job queue.
        bucket_seconds: Width of a coalescing bucket.
        stage: Downstream stage name the job is queued under.
    """

    def __init__(
        self,
        store: EventStore,
        *,
        bucket_seconds: int = 300,
        stage: str = DEFAULT_STAGE,
    ) -> None:
        self._store = store
        self._bucket_seconds = bucket_seconds
        self._stage = stage

    def job_key(self, organization_id: str, now: datetime) -> str:
        return f"{organization_id}:{bucket_start(now, self._bucket_seconds)}"

    async def schedule(
        self,
        organization_id: str,
        category_deltas: Mapping[Category | str, float],
        *,
        organization_name: str | None = None,
        now: datetime | None = None,
    ) -> CoalescedJob | None:
        """Upsert the coalesced job for this organization's current bucket.

        Args:
            organization_id: Organization whose scores may have changed.
            category_deltas: Signed impact per category.
            organization_name: Display name carried in the payload.
            now: Scheduling time (defaults to the current time).

        Returns:
            The upserted job, or None when every delta is zero.
        """
        deltas: dict[Category, float] = {}
        for raw_category, delta in category_deltas.items():
            if not delta:
                continue
            category = normalize_category(raw_category)
            deltas[category] = deltas.get(category, 0.0) + delta
        if not any(deltas.values()):
            logger.debug(f"No score change for {organization_id}, nothing to schedule")
            return None

        now = now or datetime.now(tz=UTC)
        key = self.job_key(organization_id, now)

        existing = await self._store.get_job(self._stage, key)
        if existing is not None:
            for item in existing.payload.get("events", []):
                category = normalize_category(item.get("category"))
                deltas[category] = deltas.get(category, 0.0) + item.get("delta", 0.0)
            organization_name = organization_name or existing.payload.get("organization_name")
            logger.debug(f"Coalescing into existing job {key}")

        payload = {
            "organization_id": organization_id,
            "organization_name": organization_name,
            "at": now.isoformat(),
            "events": [
                {"category": category.value, "delta": round(delta, 2)}
                for category, delta in deltas.items()
            ],
        }
        job = await self._store.upsert_job(self._stage, key, payload, not_before=now)
        logger.info(f"Scheduled {self._stage} for {organization_id} ({key})")
        return job
