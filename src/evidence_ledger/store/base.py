"""Persistent store interface for the event ledger."""

from datetime import datetime
from typing import Any, Protocol

from evidence_ledger.data import (
    BaselineInputs24m,
    BaselineInputs90d,
    BrandScore,
    Category,
    CoalescedJob,
    Event,
    EventSource,
)

EVENT_URL_CONSTRAINT = "events_organization_source_url_key"
SOURCE_URL_CONSTRAINT = "event_sources_event_canonical_url_key"


class StoreError(Exception):
    """Base class for store failures."""


class StoreUnavailableError(StoreError):
    """The store cannot be reached; fatal for the current run."""


class ConstraintViolation(StoreError):
    """A write lost a uniqueness race. Callers treat this as "already exists".

    Args:
        constraint: Name of the violated unique constraint.
    """

    def __init__(self, constraint: str, message: str = "") -> None:
        self.constraint = constraint
        super().__init__(message or f"duplicate key violates unique constraint {constraint!r}")


class EventStore(Protocol):
    """Interface for the relational store backing the ledger.

    Unique constraints: one Event per (organization_id, source_url) and one
    EventSource per (event_id, canonical_url). Inserts that would break either
    raise ``ConstraintViolation``.
    """

    async def find_source(self, organization_id: str, canonical_url: str) -> EventSource | None:
        """Find an existing source with this URL on any of the organization's events."""
        ...

    async def find_events(
        self,
        organization_id: str | None = None,
        *,
        category: Category | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Event]:
        """Select events by equality and ``occurred_at`` range predicates.

        Results are ordered by ``created_at`` ascending.
        """
        ...

    async def get_event(self, event_id: str) -> Event | None: ...

    async def list_sources(self, event_id: str) -> list[EventSource]: ...

    async def insert_event(self, event: Event) -> Event: ...

    async def insert_source(self, source: EventSource) -> EventSource: ...

    async def update_event(self, event: Event) -> Event: ...

    async def get_job(self, stage: str, key: str) -> CoalescedJob | None: ...

    async def upsert_job(
        self,
        stage: str,
        key: str,
        payload: dict[str, Any],
        not_before: datetime,
    ) -> CoalescedJob:
        """Insert or replace the job identified by (stage, key)."""
        ...

    async def get_baseline_inputs(
        self, organization_id: str
    ) -> tuple[BaselineInputs24m | None, BaselineInputs90d | None]:
        """Return the 24-month and 90-day aggregate rows for an organization."""
        ...

    async def upsert_brand_score(self, score: BrandScore) -> None: ...

    async def list_organizations(self) -> list[str]: ...
