"""Factory functions to create components from configuration."""

import logging
from dataclasses import dataclass
from pathlib import Path

from evidence_ledger.classifier import KeywordClassifier, RelevanceScorer
from evidence_ledger.config.models import (
    ClassifierConfig,
    EvidenceLedgerConfig,
    GNewsProviderConfig,
    GuardianProviderConfig,
    NewsAPIProviderConfig,
    NYTProviderConfig,
    ProviderConfig,
    RetryConfig,
    StoreConfig,
)
from evidence_ledger.corroboration import CorroborationEngine
from evidence_ledger.http import RetryPolicy
from evidence_ledger.notify import NotificationScheduler
from evidence_ledger.pipeline import (
    IngestionPipeline,
    Recategorizer,
    RecordsPipeline,
    SourceOrchestrator,
)
from evidence_ledger.run_logger import RunLogger
from evidence_ledger.scoring import BaselineScoringEngine, ScoringConfig
from evidence_ledger.search import (
    ArticleProvider,
    GNewsProvider,
    GuardianProvider,
    NewsAPIProvider,
    NYTProvider,
)
from evidence_ledger.store import MemoryStore

logger = logging.getLogger(__name__)


def create_retry_policy(config: RetryConfig) -> RetryPolicy:
    return RetryPolicy(
        attempts=config.attempts,
        base_delay=config.base_delay,
        jitter=config.jitter,
    )


def create_provider(config: ProviderConfig, retry: RetryPolicy | None = None) -> ArticleProvider:
    """Create an article provider from config.

    Uses explicit type matching rather than getattr. API keys are read from
    the environment by each provider.
    """
    if isinstance(config, GuardianProviderConfig):
        return GuardianProvider(timeout=config.timeout_seconds, retry=retry)
    if isinstance(config, NewsAPIProviderConfig):
        return NewsAPIProvider(
            language=config.language, timeout=config.timeout_seconds, retry=retry
        )
    if isinstance(config, NYTProviderConfig):
        return NYTProvider(timeout=config.timeout_seconds, retry=retry)
    if isinstance(config, GNewsProviderConfig):
        return GNewsProvider(lang=config.lang, timeout=config.timeout_seconds, retry=retry)
    msg = f"Unknown provider config type: {type(config)}"
    raise ValueError(msg)


def create_orchestrator(config: EvidenceLedgerConfig) -> SourceOrchestrator:
    """Create the orchestrator over every configured provider whose key is available.

    A provider without an API key is left out with a warning rather than
    failing the run.
    """
    retry = create_retry_policy(config.retry)
    providers: list[ArticleProvider] = []
    for provider_config in config.providers:
        try:
            providers.append(create_provider(provider_config, retry))
        except ValueError as e:
            logger.warning(f"Provider {provider_config.type} disabled: {e}")
    return SourceOrchestrator(
        providers,
        max_per_provider=config.orchestrator.max_per_provider,
        failure_threshold=config.orchestrator.failure_threshold,
        timeout_seconds=config.orchestrator.timeout_seconds,
    )


def create_classifier(config: ClassifierConfig) -> KeywordClassifier:
    return KeywordClassifier(
        phrase_score=config.phrase_score,
        word_score=config.word_score,
        secondary_min=config.secondary_min,
        confidence_min=config.confidence_min,
        confidence_max=config.confidence_max,
        override_confidence=config.override_confidence,
        guard_penalty=config.guard_penalty,
        secondary_share=config.secondary_share,
        mixed_damping=config.mixed_damping,
        default_primary=config.default_primary,
    )


def create_store(config: StoreConfig) -> MemoryStore:
    return MemoryStore.load(Path(config.snapshot_path))


@dataclass
class Components:
    """Everything the CLI needs for one invocation."""

    store: MemoryStore
    ingestion: IngestionPipeline
    recategorizer: Recategorizer
    records: RecordsPipeline
    scoring: BaselineScoringEngine
    run_logger: RunLogger | None


def create_from_config(
    config: EvidenceLedgerConfig,
    *,
    store: MemoryStore | None = None,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> Components:
    """Create all components from root config.

    Args:
        config: Root configuration.
        store: Store to use instead of loading ``config.store.snapshot_path``.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.

    Returns:
        Components sharing one store. ``run_logger`` is None if logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    store = store if store is not None else create_store(config.store)

    scheduler = None
    if config.notifications.enabled:
        scheduler = NotificationScheduler(
            store,
            bucket_seconds=config.notifications.bucket_seconds,
            stage=config.notifications.stage,
        )

    engine = CorroborationEngine(
        store,
        window_days=config.corroboration.window_days,
        similarity_threshold=config.corroboration.similarity_threshold,
        min_sources=config.corroboration.corroboration_min_sources,
        relevance_min=config.corroboration.relevance_min,
        skip_noise=config.corroboration.skip_noise,
    )
    ingestion = IngestionPipeline(
        store,
        create_orchestrator(config),
        create_classifier(config.classifier),
        engine,
        scheduler,
        RelevanceScorer(),
        enabled=config.ingest.enabled,
        run_logger=run_logger,
    )
    records = RecordsPipeline(store, engine, scheduler, run_logger=run_logger)
    recategorizer = Recategorizer(
        store,
        create_classifier(config.recategorize.classifier),
        limit=config.recategorize.limit,
        only_mixed_zero=config.recategorize.only_mixed_zero,
        run_logger=run_logger,
    )
    scoring = BaselineScoringEngine(
        store,
        ScoringConfig(
            config.scoring.weights,
            config.scoring.caps,
            stability=config.scoring.stability,
            jump_warning_threshold=config.scoring.jump_warning_threshold,
            anomaly_threshold=config.scoring.anomaly_threshold,
        ),
        run_logger=run_logger,
    )
    return Components(
        store=store,
        ingestion=ingestion,
        recategorizer=recategorizer,
        records=records,
        scoring=scoring,
        run_logger=run_logger,
    )
