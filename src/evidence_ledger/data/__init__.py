"""Data models for the evidence ledger."""

from evidence_ledger.data.models import (
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

__all__ = [
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
]
