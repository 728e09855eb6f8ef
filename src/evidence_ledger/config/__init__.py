"""Configuration module for evidence-ledger."""

from evidence_ledger.config.factory import (
    Components,
    create_classifier,
    create_from_config,
    create_orchestrator,
    create_provider,
    create_store,
)
from evidence_ledger.config.loader import get_default_config_path, load_config
from evidence_ledger.config.models import (
    ClassifierConfig,
    CorroborationConfig,
    EvidenceLedgerConfig,
    GNewsProviderConfig,
    GuardianProviderConfig,
    IngestConfig,
    LoggingConfig,
    NewsAPIProviderConfig,
    NotificationConfig,
    NYTProviderConfig,
    OrchestratorConfig,
    ProviderConfig,
    RecategorizeConfig,
    RetryConfig,
    ScoringSettings,
    StoreConfig,
)

__all__ = [
    "ClassifierConfig",
    "Components",
    "CorroborationConfig",
    "EvidenceLedgerConfig",
    "GNewsProviderConfig",
    "GuardianProviderConfig",
    "IngestConfig",
    "LoggingConfig",
    "NYTProviderConfig",
    "NewsAPIProviderConfig",
    "NotificationConfig",
    "OrchestratorConfig",
    "ProviderConfig",
    "RecategorizeConfig",
    "RetryConfig",
    "ScoringSettings",
    "StoreConfig",
    "create_classifier",
    "create_from_config",
    "create_orchestrator",
    "create_provider",
    "create_store",
    "get_default_config_path",
    "load_config",
]
