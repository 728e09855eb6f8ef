"""Tests for regulator record loading and RecordsPipeline."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from tempfile import NamedTemporaryFile

import pytest
from pydantic import ValidationError

from evidence_ledger.corroboration import CorroborationEngine
from evidence_ledger.data import Article, Category, Classification, KeywordCategory, Verification
from evidence_ledger.notify import NotificationScheduler
from evidence_ledger.pipeline import RecordsPipeline, RegulatorRecordEntry, load_records
from evidence_ledger.run_logger import RunLogger
from evidence_ledger.store import MemoryStore, StoreUnavailableError

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
EXAMPLE_RECORDS = Path(__file__).parent.parent / "configs" / "records.example.yaml"


def _write_yaml(content: str) -> Path:
    with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write(content)
        return Path(f.name)


def _entry(organization_id: str, url: str, **kwargs) -> RegulatorRecordEntry:
    return RegulatorRecordEntry(
        organization_id=organization_id, agency="OSHA", url=url, occurred_at=NOW, **kwargs
    )


ACME_SERIOUS = _entry("acme", "https://www.osha.gov/inspection/1", serious_violations=2)
ACME_FINED = _entry("acme", "https://www.osha.gov/inspection/2", penalty=30_000)
GLOBEX_MINOR = _entry("globex", "https://www.osha.gov/inspection/3")


class TestLoadRecords:
    """Tests for YAML record loading."""

    def test_example_file_loads(self):
        entries = load_records(EXAMPLE_RECORDS)

        assert [e.agency for e in entries] == ["OSHA", "EPA"]
        assert entries[0].occurred_at == datetime(2026, 2, 10, tzinfo=UTC)
        assert entries[1].category == Category.ENVIRONMENT
        assert entries[1].to_record().penalty == 120000

    def test_free_text_category_is_normalized(self):
        path = _write_yaml(
            "records:\n"
            "  - organization_id: acme\n"
            "    agency: OSHA\n"
            "    url: https://www.osha.gov/inspection/9\n"
            "    occurred_at: '2026-02-01T00:00:00Z'\n"
            "    category: Worker Safety\n"
        )
        try:
            [entry] = load_records(path)
        finally:
            path.unlink()
        assert entry.category == Category.LABOR

    def test_empty_file(self):
        path = _write_yaml("")
        try:
            assert load_records(path) == []
        finally:
            path.unlink()

    def test_negative_counts_rejected(self):
        path = _write_yaml(
            "records:\n"
            "  - organization_id: acme\n"
            "    agency: OSHA\n"
            "    url: https://www.osha.gov/inspection/9\n"
            "    occurred_at: 2026-02-01\n"
            "    serious_violations: -1\n"
        )
        try:
            with pytest.raises(ValidationError):
                load_records(path)
        finally:
            path.unlink()

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_records(tmp_path / "missing.yaml")


class TestRecordsPipeline:
    """Tests for RecordsPipeline.run."""

    @pytest.fixture
    def store(self) -> MemoryStore:
        return MemoryStore()

    def _pipeline(self, store: MemoryStore, **kwargs) -> RecordsPipeline:
        return RecordsPipeline(
            store, CorroborationEngine(store), NotificationScheduler(store), **kwargs
        )

    async def test_records_become_official_events(self, store: MemoryStore):
        report = await self._pipeline(store).run([ACME_SERIOUS, ACME_FINED, GLOBEX_MINOR])

        assert report.processed == 3
        assert report.inserted == 3
        assert report.errors == 0
        events = await store.find_events()
        assert {e.verification for e in events} == {Verification.OFFICIAL}
        acme = sorted(e.category_impacts[Category.LABOR] for e in await store.find_events("acme"))
        assert acme == [-3.0, -2.0]

    async def test_one_notification_per_organization(self, store: MemoryStore):
        report = await self._pipeline(store).run([ACME_SERIOUS, ACME_FINED, GLOBEX_MINOR])

        assert len(report.job_keys) == 2
        deltas = {
            job.key.split(":")[0]: {e["category"]: e["delta"] for e in job.payload["events"]}
            for job in store.jobs
        }
        assert deltas == {"acme": {"labor": -5.0}, "globex": {"labor": -1.0}}

    async def test_rerun_skips(self, store: MemoryStore):
        pipeline = self._pipeline(store)
        await pipeline.run([ACME_SERIOUS])
        report = await pipeline.run([ACME_SERIOUS])

        assert report.inserted == 0
        assert report.skipped == 1
        assert report.job_keys == []
        assert len(await store.find_events("acme")) == 1

    async def test_known_article_is_upgraded(self, store: MemoryStore):
        engine = CorroborationEngine(store)
        article = Article(
            title="Acme fined for unsafe warehouse conditions",
            url=ACME_SERIOUS.url,
            source_name="Example",
            published_at=NOW,
        )
        classification = Classification(
            primary_category=KeywordCategory.LABOR,
            category=Category.LABOR,
            category_code="LABOR.SAFETY",
            impact_by_category={Category.LABOR: -2.0},
        )
        created = await engine.resolve("acme", article, classification, 20)

        report = await self._pipeline(store).run([ACME_SERIOUS])

        assert report.upgraded == 1
        assert report.inserted == 0
        assert created.event_id is not None
        event = await store.get_event(created.event_id)
        assert event is not None
        assert event.verification == Verification.OFFICIAL

    async def test_dry_run_writes_nothing(self, store: MemoryStore):
        report = await self._pipeline(store).run([ACME_SERIOUS, GLOBEX_MINOR], dry_run=True)

        assert report.inserted == 2
        assert report.job_keys == []
        assert await store.find_events() == []
        assert store.jobs == []

    async def test_store_outage_propagates(self):
        class DownStore(MemoryStore):
            async def find_source(self, organization_id, canonical_url):
                raise StoreUnavailableError("connection refused")

        store = DownStore()
        with pytest.raises(StoreUnavailableError):
            await self._pipeline(store).run([ACME_SERIOUS])

    async def test_run_log(self, store: MemoryStore, tmp_path: Path):
        run_logger = RunLogger(tmp_path)
        await self._pipeline(store, run_logger=run_logger).run([ACME_SERIOUS])

        assert run_logger.last_log_path is not None
        data = json.loads(run_logger.last_log_path.read_text())
        assert data["pipeline_type"] == "records"
        [stage] = data["stages"]
        assert stage["stage"] == "record"
        assert stage["output"][0]["action"] == "create"
        assert data["summary"]["inserted"] == 1
