from evidence_ledger.pipeline.ingest import IngestionPipeline, IngestReport
from evidence_ledger.pipeline.orchestrator import (
    ProviderHealth,
    ProviderState,
    ProviderStatus,
    SourceOrchestrator,
)
from evidence_ledger.pipeline.recategorize import Recategorizer, RecategorizeReport
from evidence_ledger.pipeline.records import (
    RecordsPipeline,
    RecordsReport,
    RegulatorRecordEntry,
    load_records,
)

__all__ = [
    "IngestReport",
    "IngestionPipeline",
    "ProviderHealth",
    "ProviderState",
    "ProviderStatus",
    "RecategorizeReport",
    "Recategorizer",
    "RecordsPipeline",
    "RecordsReport",
    "RegulatorRecordEntry",
    "SourceOrchestrator",
    "load_records",
]
