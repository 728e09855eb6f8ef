"""In-process store with the same uniqueness semantics as the relational store."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from evidence_ledger.data import (
    BaselineInputs24m,
    BaselineInputs90d,
    BrandScore,
    Category,
    CoalescedJob,
    Event,
    EventSource,
)
from evidence_ledger.store.base import (
    EVENT_URL_CONSTRAINT,
    SOURCE_URL_CONSTRAINT,
    ConstraintViolation,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


class StoreSnapshot(BaseModel):
    """Serializable contents of a MemoryStore."""

    organizations: dict[str, str] = Field(default_factory=dict)
    events: list[Event] = Field(default_factory=list)
    sources: list[EventSource] = Field(default_factory=list)
    jobs: list[CoalescedJob] = Field(default_factory=list)
    scores: list[BrandScore] = Field(default_factory=list)
    inputs_24m: list[BaselineInputs24m] = Field(default_factory=list)
    inputs_90d: list[BaselineInputs90d] = Field(default_factory=list)


class MemoryStore:
    """Dictionary-backed ``EventStore``.

    Enforces the ledger's unique constraints on insert and can be persisted
    to and restored from a JSON snapshot file.
    """

    def __init__(self) -> None:
        self._organizations: dict[str, str] = {}
        self._events: dict[str, Event] = {}
        self._event_urls: dict[tuple[str, str], str] = {}
        self._sources: dict[str, list[EventSource]] = {}
        self._jobs: dict[tuple[str, str], CoalescedJob] = {}
        self._scores: dict[str, BrandScore] = {}
        self._inputs_24m: dict[str, BaselineInputs24m] = {}
        self._inputs_90d: dict[str, BaselineInputs90d] = {}

    # -- organizations and aggregates --

    def add_organization(self, organization_id: str, name: str) -> None:
        self._organizations[organization_id] = name

    def organization_name(self, organization_id: str) -> str | None:
        return self._organizations.get(organization_id)

    def set_baseline_inputs(
        self,
        inputs_24m: BaselineInputs24m,
        inputs_90d: BaselineInputs90d | None = None,
    ) -> None:
        self._inputs_24m[inputs_24m.organization_id] = inputs_24m
        if inputs_90d is not None:
            self._inputs_90d[inputs_90d.organization_id] = inputs_90d
        self._organizations.setdefault(inputs_24m.organization_id, inputs_24m.organization_id)

    async def list_organizations(self) -> list[str]:
        ids = set(self._organizations) | {e.organization_id for e in self._events.values()}
        return sorted(ids)

    async def get_baseline_inputs(
        self, organization_id: str
    ) -> tuple[BaselineInputs24m | None, BaselineInputs90d | None]:
        return (self._inputs_24m.get(organization_id), self._inputs_90d.get(organization_id))

    async def upsert_brand_score(self, score: BrandScore) -> None:
        self._scores[score.organization_id] = score

    def get_brand_score(self, organization_id: str) -> BrandScore | None:
        return self._scores.get(organization_id)

    # -- events and sources --

    async def find_source(self, organization_id: str, canonical_url: str) -> EventSource | None:
        for event in self._events.values():
            if event.organization_id != organization_id:
                continue
            for source in self._sources.get(event.event_id, []):
                if source.canonical_url == canonical_url:
                    return source
        return None

    async def find_events(
        self,
        organization_id: str | None = None,
        *,
        category: Category | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Event]:
        matches = [
            e
            for e in self._events.values()
            if (organization_id is None or e.organization_id == organization_id)
            and (category is None or e.category == category)
            and (start is None or e.occurred_at >= start)
            and (end is None or e.occurred_at <= end)
        ]
        return matches

    async def get_event(self, event_id: str) -> Event | None:
        return self._events.get(event_id)

    async def list_sources(self, event_id: str) -> list[EventSource]:
        return list(self._sources.get(event_id, []))

    async def insert_event(self, event: Event) -> Event:
        url_key = (event.organization_id, event.source_url)
        if url_key in self._event_urls or event.event_id in self._events:
            raise ConstraintViolation(EVENT_URL_CONSTRAINT)
        self._events[event.event_id] = event
        self._event_urls[url_key] = event.event_id
        self._sources.setdefault(event.event_id, [])
        return event

    async def insert_source(self, source: EventSource) -> EventSource:
        if source.event_id not in self._events:
            raise KeyError(f"Unknown event: {source.event_id}")
        existing = self._sources.setdefault(source.event_id, [])
        if any(s.canonical_url == source.canonical_url for s in existing):
            raise ConstraintViolation(SOURCE_URL_CONSTRAINT)
        existing.append(source)
        return source

    async def update_event(self, event: Event) -> Event:
        if event.event_id not in self._events:
            raise KeyError(f"Unknown event: {event.event_id}")
        self._events[event.event_id] = event
        return event

    # -- jobs --

    async def get_job(self, stage: str, key: str) -> CoalescedJob | None:
        return self._jobs.get((stage, key))

    async def upsert_job(
        self,
        stage: str,
        key: str,
        payload: dict[str, Any],
        not_before: datetime,
    ) -> CoalescedJob:
        job = CoalescedJob(stage=stage, key=key, payload=payload, not_before=not_before)
        self._jobs[(stage, key)] = job
        return job

    @property
    def jobs(self) -> list[CoalescedJob]:
        return list(self._jobs.values())

    # -- snapshots --

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            organizations=dict(self._organizations),
            events=list(self._events.values()),
            sources=[s for sources in self._sources.values() for s in sources],
            jobs=list(self._jobs.values()),
            scores=list(self._scores.values()),
            inputs_24m=list(self._inputs_24m.values()),
            inputs_90d=list(self._inputs_90d.values()),
        )

    @classmethod
    def from_snapshot(cls, snapshot: StoreSnapshot) -> "MemoryStore":
        store = cls()
        store._organizations = dict(snapshot.organizations)
        for event in snapshot.events:
            store._events[event.event_id] = event
            store._event_urls[(event.organization_id, event.source_url)] = event.event_id
            store._sources.setdefault(event.event_id, [])
        for source in snapshot.sources:
            store._sources.setdefault(source.event_id, []).append(source)
        for job in snapshot.jobs:
            store._jobs[(job.stage, job.key)] = job
        for score in snapshot.scores:
            store._scores[score.organization_id] = score
        for row in snapshot.inputs_24m:
            store._inputs_24m[row.organization_id] = row
        for row in snapshot.inputs_90d:
            store._inputs_90d[row.organization_id] = row
        return store

    @classmethod
    def load(cls, path: Path) -> "MemoryStore":
        """Restore a store from a JSON snapshot; a missing file yields an empty store.

        Raises:
            StoreUnavailableError: If the file exists but cannot be read or parsed.
        """
        if not path.exists():
            logger.info("No snapshot at %s, starting with an empty store", path)
            return cls()
        try:
            snapshot = StoreSnapshot.model_validate_json(path.read_text())
        except (OSError, ValidationError) as e:
            raise StoreUnavailableError(f"Could not load store snapshot {path}: {e}") from e
        return cls.from_snapshot(snapshot)

    def save(self, path: Path) -> Path:
        """Write the store contents to a JSON snapshot."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.snapshot().model_dump_json(indent=2))
        except OSError as e:
            raise StoreUnavailableError(f"Could not write store snapshot {path}: {e}") from e
        return path
