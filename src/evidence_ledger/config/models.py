"""Pydantic configuration models for evidence-ledger components."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from evidence_ledger.data import KeywordCategory

# ============================================================
# Provider Configs
# ============================================================


class GuardianProviderConfig(BaseModel):
    """Configuration for GuardianProvider."""

    type: Literal["guardian"] = "guardian"
    timeout_seconds: float = 30.0

    model_config = {"frozen": True}


class NewsAPIProviderConfig(BaseModel):
    """Configuration for NewsAPIProvider."""

    type: Literal["newsapi"] = "newsapi"
    language: str = "en"
    timeout_seconds: float = 30.0

    model_config = {"frozen": True}


class NYTProviderConfig(BaseModel):
    """Configuration for NYTProvider."""

    type: Literal["nyt"] = "nyt"
    timeout_seconds: float = 30.0

    model_config = {"frozen": True}


class GNewsProviderConfig(BaseModel):
    """Configuration for GNewsProvider."""

    type: Literal["gnews"] = "gnews"
    lang: str = "en"
    timeout_seconds: float = 30.0

    model_config = {"frozen": True}


ProviderConfig = Annotated[
    GuardianProviderConfig | NewsAPIProviderConfig | NYTProviderConfig | GNewsProviderConfig,
    Field(discriminator="type"),
]


# ============================================================
# Fetching
# ============================================================


class OrchestratorConfig(BaseModel):
    """Per-provider limits applied by the SourceOrchestrator."""

    max_per_provider: int = 10
    failure_threshold: int = 3
    timeout_seconds: float = 8.0

    model_config = {"frozen": True}


class RetryConfig(BaseModel):
    """Backoff for transient upstream HTTP failures."""

    attempts: int = 5
    base_delay: float = 0.4
    jitter: float = 0.15

    model_config = {"frozen": True}


# ============================================================
# Classification and Corroboration
# ============================================================


class ClassifierConfig(BaseModel):
    """Keyword classifier constants.

    Ingestion and batch recategorization can use different profiles of the
    same classifier by varying these values.
    """

    phrase_score: int = 5
    word_score: int = 2
    secondary_min: int = 4
    confidence_min: float = 0.35
    confidence_max: float = 0.98
    override_confidence: float = 0.85
    guard_penalty: int = -10
    secondary_share: float = 0.4
    mixed_damping: float = 0.3
    default_primary: KeywordCategory = KeywordCategory.SOCIAL

    model_config = {"frozen": True}


class CorroborationConfig(BaseModel):
    """Merge-or-create thresholds."""

    window_days: int = 3
    similarity_threshold: float = 0.6
    corroboration_min_sources: int = 2
    relevance_min: int = 11
    skip_noise: bool = True

    model_config = {"frozen": True}


class RecategorizeConfig(BaseModel):
    """Batch recategorization run limits."""

    limit: int = 200
    only_mixed_zero: bool = False
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)

    model_config = {"frozen": True}


# ============================================================
# Scoring and Notifications
# ============================================================


class ScoringSettings(BaseModel):
    """Weights, caps and thresholds for the baseline scoring engine.

    Keys absent from ``weights`` or ``caps`` fall back to built-in defaults.
    """

    weights: dict[str, float] = Field(default_factory=dict)
    caps: dict[str, float] = Field(default_factory=dict)
    stability: float = 70.0
    jump_warning_threshold: float = 12.0
    anomaly_threshold: float = 15.0

    model_config = {"frozen": True}


class NotificationConfig(BaseModel):
    """Coalescing of score-change notifications."""

    enabled: bool = True
    bucket_seconds: int = 300
    stage: str = "send_push_for_score_change"

    model_config = {"frozen": True}


# ============================================================
# Runtime
# ============================================================


class IngestConfig(BaseModel):
    enabled: bool = True

    model_config = {"frozen": True}


class StoreConfig(BaseModel):
    """Location of the JSON store snapshot."""

    snapshot_path: str = "data/ledger.json"

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Configuration for intermediate pipeline logging."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class EvidenceLedgerConfig(BaseModel):
    """Root configuration for evidence-ledger."""

    providers: list[ProviderConfig] = Field(default_factory=list)
    orchestrator: OrchestratorConfig = Field(default_factory=OrchestratorConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    corroboration: CorroborationConfig = Field(default_factory=CorroborationConfig)
    recategorize: RecategorizeConfig = Field(default_factory=RecategorizeConfig)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    ingest: IngestConfig = Field(default_factory=IngestConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}
