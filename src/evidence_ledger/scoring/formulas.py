"""Deterministic per-category baseline formulas.

Each category starts at a configured baseline (default 70) and adds
individually clamped contributions; the sum is clamped to the category's
``[min, max]`` bounds and rounded. The 90-day variant of each formula drops
the long-horizon terms (sentiment, emissions, certifications, lobbying,
Superfund sites).
"""

import math
from dataclasses import dataclass

from evidence_ledger.data import BaselineInputs24m, BaselineInputs90d, Category
from evidence_ledger.scoring.config import ScoringConfig

Inputs = BaselineInputs24m | BaselineInputs90d

EXPECTED_INPUTS = {
    Category.LABOR: 4,
    Category.ENVIRONMENT: 4,
    Category.POLITICS: 2,
    Category.SOCIAL: 3,
}

NEUTRAL_WORKER_RATING = 3.0
NEUTRAL_EMISSIONS_PERCENTILE = 50.0


@dataclass(frozen=True)
class CategoryResult:
    """Rounded score of one category over one window."""

    score: int
    reason: str
    inputs: dict[str, float]


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _plural(count: int | float, noun: str) -> str:
    return f"{count:g} {noun}{'s' if count > 1 else ''}"


def _money(amount: float) -> str:
    return f"${round_half_up(amount):,}"


def _log_penalty(amount: float, floor: float, multiplier: float, cap: float) -> float:
    """``multiplier * log10(amount / floor)`` once ``amount`` reaches ``floor``, capped."""
    if amount < floor:
        return 0.0
    return max(multiplier * math.log10(max(amount, 1.0) / floor), cap)


def _bounded(config: ScoringConfig, category: Category, total: float) -> int:
    prefix = category.value
    low = config.cap(f"{prefix}.min", 0)
    high = config.cap(f"{prefix}.max", 100)
    return round_half_up(clamp(total, low, high))


def _start(config: ScoringConfig, category: Category) -> float:
    return config.cap(f"{category.value}.start", 70)


def labor_score(inputs: Inputs, config: ScoringConfig) -> CategoryResult:
    violations = inputs.labor_violations
    fines = inputs.labor_fines
    fatalities = inputs.labor_fatalities
    sentiment = NEUTRAL_WORKER_RATING
    if isinstance(inputs, BaselineInputs24m):
        sentiment = inputs.labor_sentiment or NEUTRAL_WORKER_RATING

    violation_term = max(
        config.weight("labor.osha.violation_pt", -6) * violations,
        config.weight("labor.osha.violation_cap", -40),
    )
    fines_term = _log_penalty(
        fines,
        config.weight("labor.fines.log_base", 10000),
        config.weight("labor.fines.multiplier", -5),
        config.weight("labor.fines.cap", -20),
    )
    sentiment_term = clamp(
        (sentiment - NEUTRAL_WORKER_RATING) * config.weight("labor.sentiment.multiplier", 15),
        config.weight("labor.sentiment.cap_neg", -30),
        config.weight("labor.sentiment.cap_pos", 30),
    )
    severe_term = max(
        config.weight("labor.severe.multiplier", -15) * fatalities,
        config.weight("labor.severe.cap", -30),
    )
    score = _bounded(
        config,
        Category.LABOR,
        _start(config, Category.LABOR) + violation_term + fines_term + sentiment_term + severe_term,
    )

    reasons = []
    if violations > 0:
        reasons.append(_plural(violations, "OSHA violation"))
    if fines > 0:
        reasons.append(f"{_money(fines)} in fines")
    if sentiment != NEUTRAL_WORKER_RATING:
        reasons.append(f"worker rating {sentiment:.1f}/5")
    if fatalities > 0:
        reasons.append(_plural(fatalities, "severe incident"))

    return CategoryResult(
        score=score,
        reason=", ".join(reasons) or "No significant labor issues in window",
        inputs={
            "violations": violations,
            "fines": fines,
            "sentiment": sentiment,
            "fatalities": fatalities,
        },
    )


def environment_score(inputs: Inputs, config: ScoringConfig) -> CategoryResult:
    long_horizon = isinstance(inputs, BaselineInputs24m)
    actions = inputs.env_actions
    superfund = 0
    emissions = NEUTRAL_EMISSIONS_PERCENTILE
    certifications = 0
    if isinstance(inputs, BaselineInputs24m):
        superfund = inputs.env_superfund_active
        emissions = inputs.env_emissions_percentile or NEUTRAL_EMISSIONS_PERCENTILE
        certifications = inputs.env_certifications

    epa_term = max(
        config.weight("env.epa.action_pt", -7) * actions,
        config.weight("env.epa.cap", -35),
    )
    superfund_term = max(
        config.weight("env.superfund.site_pt", -10) * superfund,
        config.weight("env.superfund.cap", -30),
    )
    emissions_term = 0.0
    certification_term = 0.0
    if long_horizon:
        emissions_term = clamp(
            config.weight("env.emissions.multiplier", -0.4)
            * (emissions - NEUTRAL_EMISSIONS_PERCENTILE),
            config.weight("env.emissions.cap_neg", -20),
            config.weight("env.emissions.cap_pos", 20),
        )
        certification_term = min(
            config.weight("env.cert.cert_pt", 5) * certifications,
            config.weight("env.cert.cap", 15),
        )
    score = _bounded(
        config,
        Category.ENVIRONMENT,
        _start(config, Category.ENVIRONMENT)
        + epa_term
        + superfund_term
        + emissions_term
        + certification_term,
    )

    reasons = []
    if actions > 0:
        reasons.append(_plural(actions, "EPA action"))
    if superfund > 0:
        reasons.append(_plural(superfund, "Superfund site"))
    if long_horizon and emissions != NEUTRAL_EMISSIONS_PERCENTILE:
        reasons.append(f"emissions {emissions:g}th percentile")
    if long_horizon and certifications > 0:
        reasons.append(_plural(certifications, "certification"))

    return CategoryResult(
        score=score,
        reason=", ".join(reasons) or "No significant environmental issues in window",
        inputs={
            "actions": actions,
            "superfund": superfund,
            "emissions": emissions,
            "certs": certifications,
        },
    )


def politics_score(inputs: Inputs, config: ScoringConfig) -> CategoryResult:
    long_horizon = isinstance(inputs, BaselineInputs24m)
    donations = inputs.pol_donations
    dem = inputs.pol_dem_donations
    rep = inputs.pol_rep_donations
    lobbying = inputs.pol_lobbying if isinstance(inputs, BaselineInputs24m) else 0.0

    partisan_total = dem + rep
    dem_pct = dem / partisan_total * 100 if partisan_total > 0 else 50.0
    tilt_term = max(
        config.weight("pol.tilt.multiplier", -0.5) * abs(dem_pct - 50),
        config.weight("pol.tilt.cap", -25),
    )
    donations_term = _log_penalty(
        donations,
        config.weight("pol.donations.log_base", 100000),
        config.weight("pol.donations.multiplier", -3),
        config.weight("pol.donations.cap", -15),
    )
    lobbying_term = 0.0
    if long_horizon:
        lobbying_term = _log_penalty(
            lobbying,
            config.weight("pol.lobbying.log_base", 250000),
            config.weight("pol.lobbying.multiplier", -2.5),
            config.weight("pol.lobbying.cap", -12.5),
        )
    score = _bounded(
        config,
        Category.POLITICS,
        _start(config, Category.POLITICS) + tilt_term + donations_term + lobbying_term,
    )

    reasons = []
    if partisan_total > 0:
        reasons.append(f"{_money(donations)} donations")
        reasons.append(f"{round_half_up(dem_pct)}% Dem / {round_half_up(100 - dem_pct)}% Rep")
    if long_horizon and lobbying > 0:
        reasons.append(f"{_money(lobbying)} lobbying")

    return CategoryResult(
        score=score,
        reason=", ".join(reasons) or "No political spending in window",
        inputs={
            "donations": donations,
            "demDonations": dem,
            "repDonations": rep,
            "lobbying": lobbying,
        },
    )


def social_score(inputs: Inputs, config: ScoringConfig) -> CategoryResult:
    long_horizon = isinstance(inputs, BaselineInputs24m)
    class1 = inputs.social_recalls_class1
    class2 = inputs.social_recalls_class2
    class3 = inputs.social_recalls_class3
    lawsuits = inputs.social_lawsuits
    sentiment = inputs.social_sentiment_avg if isinstance(inputs, BaselineInputs24m) else 0.0

    recall_term = max(
        config.weight("social.recall.class1_pt", -15) * class1
        + config.weight("social.recall.class2_pt", -8) * class2
        + config.weight("social.recall.class3_pt", -3) * class3,
        config.weight("social.recall.cap", -30),
    )
    lawsuit_term = max(
        config.weight("social.lawsuits.case_pt", -10) * lawsuits,
        config.weight("social.lawsuits.cap", -30),
    )
    sentiment_term = 0.0
    if long_horizon:
        sentiment_term = clamp(
            sentiment * config.weight("social.sentiment.multiplier", 15),
            config.weight("social.sentiment.cap_neg", -15),
            config.weight("social.sentiment.cap_pos", 15),
        )
    score = _bounded(
        config,
        Category.SOCIAL,
        _start(config, Category.SOCIAL) + recall_term + lawsuit_term + sentiment_term,
    )

    reasons = []
    recalls = class1 + class2 + class3
    if recalls > 0:
        reasons.append(_plural(recalls, "recall"))
    if lawsuits > 0:
        reasons.append(_plural(lawsuits, "lawsuit"))
    if long_horizon and sentiment != 0:
        reasons.append(f"news tone {sentiment:+.2f}")

    return CategoryResult(
        score=score,
        reason=", ".join(reasons) or "No significant social issues in window",
        inputs={
            "class1": class1,
            "class2": class2,
            "class3": class3,
            "lawsuits": lawsuits,
            "sentiment": sentiment,
        },
    )


CATEGORY_FORMULAS = {
    Category.LABOR: labor_score,
    Category.ENVIRONMENT: environment_score,
    Category.POLITICS: politics_score,
    Category.SOCIAL: social_score,
}


def present_inputs(inputs: BaselineInputs24m, category: Category) -> int:
    """Count the category's expected 24-month signals that carry information."""
    if category is Category.LABOR:
        return sum(
            [
                inputs.labor_violations > 0,
                inputs.labor_fines > 0,
                inputs.labor_sentiment is not None
                and inputs.labor_sentiment != NEUTRAL_WORKER_RATING,
                inputs.labor_fatalities > 0,
            ]
        )
    if category is Category.ENVIRONMENT:
        return sum(
            [
                inputs.env_actions > 0,
                inputs.env_superfund_active > 0,
                inputs.env_emissions_percentile is not None
                and inputs.env_emissions_percentile != NEUTRAL_EMISSIONS_PERCENTILE,
                inputs.env_certifications > 0,
            ]
        )
    if category is Category.POLITICS:
        return sum([inputs.pol_donations > 0, inputs.pol_lobbying > 0])
    recalls = (
        inputs.social_recalls_class1 + inputs.social_recalls_class2 + inputs.social_recalls_class3
    )
    return sum([recalls > 0, inputs.social_lawsuits > 0, inputs.social_sentiment_avg != 0])


def confidence(inputs: BaselineInputs24m, category: Category, config: ScoringConfig) -> int:
    """Weighted composite of coverage, recency, corroboration and stability (0..100)."""
    coverage = present_inputs(inputs, category) / EXPECTED_INPUTS[category] * 100
    if inputs.total_events > 0:
        recency = inputs.events_last_12m / inputs.total_events * 100
    else:
        recency = 50.0
    corroboration = min(inputs.distinct_sources, 4) / 4 * 100

    composite = (
        config.weight("confidence.coverage.weight", 0.40) * coverage
        + config.weight("confidence.recency.weight", 0.30) * recency
        + config.weight("confidence.corroboration.weight", 0.20) * corroboration
        + config.weight("confidence.stability.weight", 0.10) * config.stability
    )
    return round_half_up(composite)


def window_delta(score_90d: int, score_24m: int, config: ScoringConfig) -> int:
    """Bounded short-window adjustment applied to the 24-month baseline."""
    delta = clamp(
        score_90d - score_24m,
        config.weight("window.delta.cap_neg", -15),
        config.weight("window.delta.cap_pos", 15),
    )
    return round_half_up(delta)
