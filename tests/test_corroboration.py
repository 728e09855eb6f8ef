"""Tests for CorroborationEngine."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from evidence_ledger.corroboration import (
    Action,
    CorroborationEngine,
    regulator_impact,
    title_similarity,
)
from evidence_ledger.corroboration.engine import describe_record
from evidence_ledger.data import (
    Article,
    Category,
    Classification,
    Event,
    KeywordCategory,
    Orientation,
    RegulatorRecord,
    Severity,
    Verification,
)
from evidence_ledger.store import ConstraintViolation, MemoryStore

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
TITLE = "Acme fined for unsafe warehouse conditions"
SIMILAR_TITLE = "Acme fined for unsafe warehouse conditions, report"


def _article(
    url: str,
    title: str = TITLE,
    published_at: datetime | None = NOW,
    source_name: str = "Example News",
) -> Article:
    return Article(
        title=title,
        url=url,
        source_name=source_name,
        summary="Regulators cited Acme after an inspection.",
        published_at=published_at,
    )


def _classification(
    category: Category = Category.LABOR, *, is_noise: bool = False
) -> Classification:
    return Classification(
        primary_category=KeywordCategory.NOISE if is_noise else KeywordCategory.LABOR,
        category=category,
        category_code="LABOR.SAFETY",
        confidence=0.7,
        severity=Severity.MODERATE,
        orientation=Orientation.NEGATIVE,
        impact_by_category={category: -4.5},
        is_noise=is_noise,
    )


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def engine(store: MemoryStore) -> CorroborationEngine:
    return CorroborationEngine(store)


class TestDeduplication:
    """Tracking-parameter variants of one URL are one piece of evidence."""

    async def test_tracking_variants_yield_one_event_and_source(
        self, engine: CorroborationEngine, store: MemoryStore
    ):
        first = await engine.resolve(
            "acme", _article("https://example.com/story?utm_source=x"), _classification(), 16
        )
        second = await engine.resolve(
            "acme", _article("https://EXAMPLE.com/story/#top"), _classification(), 16
        )

        assert first.action is Action.CREATE
        assert second.action is Action.SKIP
        assert second.reason == "duplicate_url"
        assert second.event_id == first.event_id

        events = await store.find_events("acme")
        assert len(events) == 1
        assert events[0].source_url == "https://example.com/story"
        assert len(await store.list_sources(events[0].event_id)) == 1

    async def test_created_event_carries_classification(
        self, engine: CorroborationEngine, store: MemoryStore
    ):
        result = await engine.resolve("acme", _article("https://a.com/1"), _classification(), 16)
        assert result.event_id is not None
        event = await store.get_event(result.event_id)
        assert event is not None
        assert event.verification == Verification.UNVERIFIED
        assert event.category == Category.LABOR
        assert event.category_impacts == {Category.LABOR: -4.5}
        assert event.relevance_raw == 16
        assert event.occurred_at == NOW

        [source] = await store.list_sources(result.event_id)
        assert source.is_primary
        assert source.registrable_domain == "a.com"
        assert len(source.title_fingerprint) == 16


class TestMerge:
    """Tests for merging corroborating articles."""

    async def test_second_source_corroborates(
        self, engine: CorroborationEngine, store: MemoryStore
    ):
        created = await engine.resolve("acme", _article("https://a.com/1"), _classification(), 16)
        merged = await engine.resolve(
            "acme",
            _article("https://b.com/2", title=SIMILAR_TITLE, published_at=NOW + timedelta(days=1)),
            _classification(),
            16,
        )

        assert merged.action is Action.MERGE
        assert merged.event_id == created.event_id
        assert merged.upgraded

        assert created.event_id is not None
        event = await store.get_event(created.event_id)
        assert event is not None
        assert event.verification == Verification.CORROBORATED
        sources = await store.list_sources(created.event_id)
        assert len(sources) == 2
        assert [s.is_primary for s in sources] == [True, False]
        assert len(await store.find_events("acme")) == 1

    async def test_outside_window_creates_new_event(
        self, engine: CorroborationEngine, store: MemoryStore
    ):
        await engine.resolve("acme", _article("https://a.com/1"), _classification(), 16)
        later = await engine.resolve(
            "acme",
            _article("https://b.com/2", published_at=NOW + timedelta(days=10)),
            _classification(),
            16,
        )
        assert later.action is Action.CREATE
        assert len(await store.find_events("acme")) == 2

    async def test_other_category_creates_new_event(self, engine: CorroborationEngine):
        await engine.resolve("acme", _article("https://a.com/1"), _classification(), 16)
        result = await engine.resolve(
            "acme", _article("https://b.com/2"), _classification(Category.SOCIAL), 16
        )
        assert result.action is Action.CREATE

    async def test_dissimilar_title_creates_new_event(self, engine: CorroborationEngine):
        await engine.resolve("acme", _article("https://a.com/1"), _classification(), 16)
        result = await engine.resolve(
            "acme",
            _article("https://b.com/2", title="Acme opens distribution center in Ohio"),
            _classification(),
            16,
        )
        assert result.action is Action.CREATE

    async def test_other_organization_never_merges(self, engine: CorroborationEngine):
        await engine.resolve("acme", _article("https://a.com/1"), _classification(), 16)
        result = await engine.resolve("globex", _article("https://a.com/1"), _classification(), 16)
        assert result.action is Action.CREATE


class TestVerification:
    """Verification only moves up, and official only comes from regulator records."""

    @pytest.fixture
    def record(self) -> RegulatorRecord:
        return RegulatorRecord(
            agency="OSHA",
            title=TITLE,
            url="https://www.osha.gov/inspection/123",
            occurred_at=NOW,
            serious_violations=2,
        )

    async def test_record_creates_official_event(
        self, engine: CorroborationEngine, store: MemoryStore, record: RegulatorRecord
    ):
        result = await engine.record_official("acme", record)
        assert result.action is Action.CREATE
        assert result.event_id is not None
        event = await store.get_event(result.event_id)
        assert event is not None
        assert event.verification == Verification.OFFICIAL
        assert event.category_impacts[Category.LABOR] == -2.0
        assert event.credibility == 1.0

    async def test_merge_never_downgrades_official(
        self, engine: CorroborationEngine, store: MemoryStore, record: RegulatorRecord
    ):
        created = await engine.record_official("acme", record)
        merged = await engine.resolve(
            "acme", _article("https://b.com/2", title=SIMILAR_TITLE), _classification(), 16
        )
        assert merged.action is Action.MERGE
        assert not merged.upgraded
        assert created.event_id is not None
        event = await store.get_event(created.event_id)
        assert event is not None
        assert event.verification == Verification.OFFICIAL

    async def test_record_for_known_url_upgrades_to_official(
        self, engine: CorroborationEngine, store: MemoryStore, record: RegulatorRecord
    ):
        created = await engine.resolve("acme", _article(record.url), _classification(), 20)
        result = await engine.record_official("acme", record)
        assert result.action is Action.SKIP
        assert result.upgraded
        assert result.event_id == created.event_id
        assert created.event_id is not None
        event = await store.get_event(created.event_id)
        assert event is not None
        assert event.verification == Verification.OFFICIAL

    async def test_articles_never_produce_official(
        self, engine: CorroborationEngine, store: MemoryStore
    ):
        for i in range(4):
            article = _article(f"https://site{i}.com/x", title=SIMILAR_TITLE)
            await engine.resolve("acme", article, _classification(), 16)
        [event] = await store.find_events("acme")
        assert event.verification == Verification.CORROBORATED


class TestSkips:
    """Tests for rejected articles."""

    async def test_noise_is_skipped(self, engine: CorroborationEngine, store: MemoryStore):
        result = await engine.resolve(
            "acme", _article("https://a.com/1"), _classification(is_noise=True), 16
        )
        assert result.action is Action.SKIP
        assert result.reason == "noise"
        assert await store.find_events() == []

    async def test_low_relevance_is_skipped(self, engine: CorroborationEngine):
        result = await engine.resolve("acme", _article("https://a.com/1"), _classification(), 4)
        assert result.action is Action.SKIP
        assert result.reason == "low_relevance"

    async def test_invalid_url_is_skipped(self, engine: CorroborationEngine):
        result = await engine.resolve("acme", _article("not a url"), _classification(), 16)
        assert result.action is Action.SKIP
        assert result.reason == "invalid_url"

    async def test_constraint_race_treated_as_existing(self):
        class RacingStore(MemoryStore):
            async def insert_event(self, event: Event) -> Event:
                raise ConstraintViolation("events_organization_source_url_key")

        engine = CorroborationEngine(RacingStore())
        result = await engine.resolve("acme", _article("https://a.com/1"), _classification(), 16)
        assert result.action is Action.SKIP
        assert result.reason == "constraint_violation"


class TestDryRun:
    """Dry runs decide but never write."""

    async def test_create_writes_nothing(self, engine: CorroborationEngine, store: MemoryStore):
        result = await engine.resolve(
            "acme", _article("https://a.com/1"), _classification(), 16, dry_run=True
        )
        assert result.action is Action.CREATE
        assert result.reason == "dry_run"
        assert await store.find_events() == []

    async def test_merge_writes_nothing(self, engine: CorroborationEngine, store: MemoryStore):
        created = await engine.resolve("acme", _article("https://a.com/1"), _classification(), 16)
        result = await engine.resolve(
            "acme",
            _article("https://b.com/2", title=SIMILAR_TITLE),
            _classification(),
            16,
            dry_run=True,
        )
        assert result.action is Action.MERGE
        assert result.event_id == created.event_id
        assert created.event_id is not None
        assert len(await store.list_sources(created.event_id)) == 1
        event = await store.get_event(created.event_id)
        assert event is not None
        assert event.verification == Verification.UNVERIFIED


class TestHelpers:
    """Tests for similarity and regulator helpers."""

    def test_title_similarity(self):
        assert title_similarity(TITLE, TITLE) == 1.0
        assert title_similarity(TITLE, "Globex launches rocket") == 0.0
        assert title_similarity("", "") == 0.0
        assert title_similarity(None, TITLE) == 0.0
        # short words are ignored
        assert title_similarity("a to of Acme", "Acme") == 1.0

    @pytest.mark.parametrize(
        ("kwargs", "expected"),
        [
            ({}, -1),
            ({"serious_violations": 1}, -2),
            ({"serious_violations": 3}, -3),
            ({"penalty": 30_000}, -3),
            ({"repeat_violations": 1}, -4),
            ({"willful_violations": 2}, -5),
            ({"penalty": 150_000}, -5),
        ],
    )
    def test_regulator_impact_tiers(self, kwargs: dict, expected: int):
        record = RegulatorRecord(
            agency="OSHA", title="", url="https://osha.gov/x", occurred_at=NOW, **kwargs
        )
        assert regulator_impact(record) == expected

    def test_describe_record_generates_text(self):
        record = RegulatorRecord(
            agency="OSHA",
            title="",
            url="https://osha.gov/x",
            occurred_at=NOW,
            serious_violations=2,
            willful_violations=1,
            penalty=45000,
        )
        title, description = describe_record(record)
        assert title == "OSHA Inspection: 3 violations found"
        assert description == (
            "OSHA inspection found 3 violation(s) including 2 serious, 1 willful. "
            "Total penalty: $45,000."
        )
