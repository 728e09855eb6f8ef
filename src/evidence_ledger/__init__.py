"""Evidence Ledger: news and regulator evidence ingestion, corroboration and scoring."""

from evidence_ledger.classifier import KeywordClassifier, RelevanceScorer
from evidence_ledger.config import EvidenceLedgerConfig, create_from_config, load_config
from evidence_ledger.corroboration import Action, CorroborationEngine, Resolution
from evidence_ledger.data import (
    Article,
    BaselineInputs24m,
    BaselineInputs90d,
    BrandScore,
    Category,
    CategoryBreakdown,
    Classification,
    CoalescedJob,
    Event,
    EventSource,
    KeywordCategory,
    Orientation,
    RegulatorRecord,
    Severity,
    Verification,
)
from evidence_ledger.http import RetryPolicy, request_with_retry
from evidence_ledger.notify import NotificationScheduler
from evidence_ledger.pipeline import (
    IngestionPipeline,
    IngestReport,
    ProviderStatus,
    Recategorizer,
    RecategorizeReport,
    RecordsPipeline,
    RecordsReport,
    SourceOrchestrator,
    load_records,
)
from evidence_ledger.run_logger import RunLogger
from evidence_ledger.scoring import BaselineScoringEngine, BatchReport, ScoringConfig
from evidence_ledger.search import (
    ArticleProvider,
    GNewsProvider,
    GuardianProvider,
    NewsAPIProvider,
    NYTProvider,
)
from evidence_ledger.store import ConstraintViolation, EventStore, MemoryStore, StoreError
from evidence_ledger.url import canonicalize, extract_domain, registrable_domain, title_fingerprint

__all__ = [
    # Models
    "Article",
    "BaselineInputs24m",
    "BaselineInputs90d",
    "BrandScore",
    "Category",
    "CategoryBreakdown",
    "Classification",
    "CoalescedJob",
    "Event",
    "EventSource",
    "KeywordCategory",
    "Orientation",
    "RegulatorRecord",
    "Severity",
    "Verification",
    # Canonicalization
    "canonicalize",
    "extract_domain",
    "registrable_domain",
    "title_fingerprint",
    # Protocols
    "ArticleProvider",
    "EventStore",
    # Providers
    "GNewsProvider",
    "GuardianProvider",
    "NYTProvider",
    "NewsAPIProvider",
    "RetryPolicy",
    "request_with_retry",
    # Classification
    "KeywordClassifier",
    "RelevanceScorer",
    # Corroboration
    "Action",
    "CorroborationEngine",
    "Resolution",
    # Pipelines
    "IngestReport",
    "IngestionPipeline",
    "ProviderStatus",
    "RecategorizeReport",
    "Recategorizer",
    "RecordsPipeline",
    "RecordsReport",
    "SourceOrchestrator",
    "load_records",
    # Scoring
    "BaselineScoringEngine",
    "BatchReport",
    "ScoringConfig",
    # Notifications
    "NotificationScheduler",
    # Store
    "ConstraintViolation",
    "MemoryStore",
    "StoreError",
    # Logging
    "RunLogger",
    # Config
    "EvidenceLedgerConfig",
    "create_from_config",
    "load_config",
]
