"""Core data models for the evidence ledger."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class Category(StrEnum):
    """The four scoring categories an Event is filed under."""

    LABOR = "labor"
    ENVIRONMENT = "environment"
    POLITICS = "politics"
    SOCIAL = "social"


class KeywordCategory(StrEnum):
    """Keyword dictionary categories used by the classifier.

    These are finer grained than ``Category``; each one maps to a category
    code and from there to one of the four scoring categories.
    """

    PRODUCT_SAFETY = "product_safety"
    LABOR = "labor"
    ENVIRONMENT = "environment"
    POLICY = "policy"
    LEGAL = "legal"
    FINANCIAL = "financial"
    SOCIAL = "social"
    PRIVACY_AI = "privacy_ai"
    HUMAN_RIGHTS_SUPPLY = "human_rights_supply"
    ANTITRUST_TAX = "antitrust_tax"
    NOISE = "noise"


class Severity(StrEnum):
    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"


class Orientation(StrEnum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    MIXED = "mixed"


class Verification(StrEnum):
    """Verification level of an Event, ordered from weakest to strongest."""

    UNVERIFIED = "unverified"
    CORROBORATED = "corroborated"
    OFFICIAL = "official"

    @property
    def rank(self) -> int:
        return _VERIFICATION_ORDER.index(self)

    def upgrade_to(self, other: "Verification") -> "Verification":
        """Return the stronger of the two levels; verification never goes down."""
        return other if other.rank > self.rank else self


_VERIFICATION_ORDER = [Verification.UNVERIFIED, Verification.CORROBORATED, Verification.OFFICIAL]


# ============================================================
# Ingestion
# ============================================================


@dataclass(frozen=True)
class Article:
    """A normalized article produced by an upstream provider.

    Ephemeral: consumed by the classifier and corroboration engine and then
    discarded.
    """

    title: str
    url: str
    source_name: str
    summary: str = ""
    published_at: datetime | None = None
    raw_payload: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class RegulatorRecord:
    """An enforcement record taken directly from a regulator (e.g. an OSHA inspection).

    Records of this kind are the only path that produces ``official`` events.
    """

    agency: str
    title: str
    url: str
    occurred_at: datetime
    description: str = ""
    category: Category = Category.LABOR
    serious_violations: int = 0
    willful_violations: int = 0
    repeat_violations: int = 0
    fatalities: int = 0
    penalty: float = 0.0


@dataclass(frozen=True)
class Classification:
    """Result of classifying one piece of text."""

    primary_category: KeywordCategory
    category: Category
    category_code: str
    secondary_categories: tuple[KeywordCategory, ...] = ()
    confidence: float = 0.35
    severity: Severity = Severity.MINOR
    orientation: Orientation = Orientation.MIXED
    impact_by_category: dict[Category, float] = field(default_factory=dict)
    is_noise: bool = False
    noise_reason: str | None = None
    credibility: float = 0.6


# ============================================================
# Ledger
# ============================================================


@dataclass(frozen=True)
class Event:
    """The canonical record of one real-world occurrence involving an organization."""

    event_id: str
    organization_id: str
    category: Category
    title: str
    source_url: str
    occurred_at: datetime
    description: str = ""
    category_code: str = ""
    secondary_categories: tuple[str, ...] = ()
    severity: Severity = Severity.MINOR
    orientation: Orientation = Orientation.MIXED
    verification: Verification = Verification.UNVERIFIED
    category_impacts: dict[Category, float] = field(default_factory=dict)
    confidence: float = 0.0
    credibility: float = 0.6
    is_irrelevant: bool = False
    relevance_raw: int = 0
    created_at: datetime | None = None


@dataclass(frozen=True)
class EventSource:
    """One article or record providing evidence for an Event."""

    source_id: str
    event_id: str
    source_name: str
    canonical_url: str
    registrable_domain: str | None = None
    title_fingerprint: str = ""
    quote: str = ""
    source_date: datetime | None = None
    is_primary: bool = False
    domain_owner: str | None = None
    domain_kind: str | None = None


@dataclass(frozen=True)
class CoalescedJob:
    """A deduplicated, time-bucketed unit of downstream work."""

    stage: str
    key: str
    payload: dict[str, Any]
    not_before: datetime


# ============================================================
# Scoring
# ============================================================


@dataclass(frozen=True)
class BaselineInputs24m:
    """Aggregated 24-month inputs for one organization."""

    organization_id: str
    labor_violations: int = 0
    labor_fines: float = 0.0
    labor_sentiment: float | None = None
    labor_fatalities: int = 0
    env_actions: int = 0
    env_superfund_active: int = 0
    env_emissions_percentile: float | None = None
    env_certifications: int = 0
    pol_donations: float = 0.0
    pol_dem_donations: float = 0.0
    pol_rep_donations: float = 0.0
    pol_lobbying: float = 0.0
    social_recalls_class1: int = 0
    social_recalls_class2: int = 0
    social_recalls_class3: int = 0
    social_lawsuits: int = 0
    social_sentiment_avg: float = 0.0
    total_events: int = 0
    distinct_sources: int = 0
    events_last_12m: int = 0


@dataclass(frozen=True)
class BaselineInputs90d:
    """Aggregated 90-day inputs for one organization.

    Long-horizon signals (sentiment, emissions, certifications, lobbying,
    superfund) have no 90-day counterpart.
    """

    organization_id: str
    labor_violations: int = 0
    labor_fines: float = 0.0
    labor_fatalities: int = 0
    env_actions: int = 0
    pol_donations: float = 0.0
    pol_dem_donations: float = 0.0
    pol_rep_donations: float = 0.0
    social_recalls_class1: int = 0
    social_recalls_class2: int = 0
    social_recalls_class3: int = 0
    social_lawsuits: int = 0
    total_events: int = 0


@dataclass(frozen=True)
class CategoryBreakdown:
    """Per-category detail stored alongside a BrandScore."""

    component: Category
    base: int
    base_reason: str
    window_delta: int
    value: int
    confidence: int
    evidence_count: int
    inputs: dict[str, float]
    last_updated: datetime


@dataclass(frozen=True)
class BrandScore:
    """Four category scores for one organization, written as a single upsert."""

    organization_id: str
    score_labor: int
    score_environment: int
    score_politics: int
    score_social: int
    breakdown: dict[Category, CategoryBreakdown]
    last_updated: datetime
    window_start: datetime
    window_end: datetime

    def score_for(self, category: Category) -> int:
        return self.breakdown[category].value
