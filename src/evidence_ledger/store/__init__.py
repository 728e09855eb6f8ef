from evidence_ledger.store.base import (
    ConstraintViolation,
    EventStore,
    StoreError,
    StoreUnavailableError,
)
from evidence_ledger.store.memory import MemoryStore, StoreSnapshot

__all__ = [
    "ConstraintViolation",
    "EventStore",
    "MemoryStore",
    "StoreError",
    "StoreSnapshot",
    "StoreUnavailableError",
]
