"""Baseline scoring engine."""

import logging
import time
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime, timedelta

from evidence_ledger.data import (
    BaselineInputs24m,
    BrandScore,
    Category,
    CategoryBreakdown,
)
from evidence_ledger.run_logger import RunLogger
from evidence_ledger.scoring.config import ScoringConfig
from evidence_ledger.scoring.formulas import CATEGORY_FORMULAS, confidence, window_delta
from evidence_ledger.store.base import EventStore, StoreUnavailableError

logger = logging.getLogger(__name__)

SCORE_WINDOW = timedelta(days=90)


@dataclass(frozen=True)
class ScoreAnomaly:
    """A category whose window delta hit the anomaly threshold during a batch run."""

    organization_id: str
    category: Category
    delta: int


@dataclass
class BatchReport:
    scores: list[BrandScore] = field(default_factory=list)
    anomalies: list[ScoreAnomaly] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.scores)


class BaselineScoringEngine:
    """Turns windowed aggregate inputs into four bounded category scores.

    For each category the 24-month score is the published baseline and the
    90-day score moves it by at most the configured delta caps. All four
    categories are computed before the single ``upsert_brand_score`` call.

    Args:
        store: Store providing baseline inputs and receiving scores.
        config: Weights, caps and thresholds for this run.
        run_logger: Optional RunLogger for batch runs.
    """

    def __init__(
        self,
        store: EventStore,
        config: ScoringConfig | None = None,
        *,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._store = store
        self._config = config or ScoringConfig()
        self._run_logger = run_logger

    async def score(self, organization_id: str, *, now: datetime | None = None) -> BrandScore:
        """Compute and persist the BrandScore for one organization.

        Args:
            organization_id: Organization to score.
            now: Timestamp recorded on the score (defaults to the current time).

        Returns:
            The persisted score.
        """
        now = now or datetime.now(tz=UTC)
        inputs_24m, inputs_90d = await self._store.get_baseline_inputs(organization_id)
        if inputs_24m is None:
            logger.info(f"No 24-month inputs for {organization_id}, scoring from empty inputs")
            inputs_24m = BaselineInputs24m(organization_id=organization_id)

        breakdown: dict[Category, CategoryBreakdown] = {}
        for category, formula in CATEGORY_FORMULAS.items():
            long_window = formula(inputs_24m, self._config)
            short_score = (
                formula(inputs_90d, self._config).score
                if inputs_90d is not None
                else long_window.score
            )
            delta = window_delta(short_score, long_window.score, self._config)
            breakdown[category] = CategoryBreakdown(
                component=category,
                base=long_window.score,
                base_reason=long_window.reason,
                window_delta=delta,
                value=long_window.score + delta,
                confidence=confidence(inputs_24m, category, self._config),
                evidence_count=inputs_24m.total_events,
                inputs=long_window.inputs,
                last_updated=now,
            )

        deltas = {category.value: b.window_delta for category, b in breakdown.items()}
        max_jump = max(abs(d) for d in deltas.values())
        if max_jump > self._config.jump_warning_threshold:
            logger.warning(
                f"Large score jump detected for {organization_id}: {max_jump}",
                extra={
                    "organization_id": organization_id,
                    "max_jump": max_jump,
                    "deltas": deltas,
                },
            )

        brand_score = BrandScore(
            organization_id=organization_id,
            score_labor=breakdown[Category.LABOR].value,
            score_environment=breakdown[Category.ENVIRONMENT].value,
            score_politics=breakdown[Category.POLITICS].value,
            score_social=breakdown[Category.SOCIAL].value,
            breakdown=breakdown,
            last_updated=now,
            window_start=now - SCORE_WINDOW,
            window_end=now,
        )
        await self._store.upsert_brand_score(brand_score)
        return brand_score

    async def score_batch(self, organization_ids: list[str] | None = None) -> BatchReport:
        """Score several organizations, isolating per-organization failures.

        Args:
            organization_ids: Organizations to score (defaults to every
                organization the store knows).

        Returns:
            Scores, anomalies (``|window_delta|`` at or above the anomaly
            threshold) and ``"<organization>: <error>"`` strings.

        Raises:
            StoreUnavailableError: If the store goes away mid-run.
        """
        if organization_ids is None:
            organization_ids = await self._store.list_organizations()
        if self._run_logger:
            self._run_logger.start_run("score", {"organization_ids": organization_ids})

        report = BatchReport()
        t0 = time.monotonic()
        for organization_id in organization_ids:
            try:
                brand_score = await self.score(organization_id)
            except StoreUnavailableError:
                raise
            except Exception as e:
                logger.error(f"Scoring failed for {organization_id}: {e}")
                report.errors.append(f"{organization_id}: {e}")
                continue

            report.scores.append(brand_score)
            for category, item in brand_score.breakdown.items():
                if abs(item.window_delta) >= self._config.anomaly_threshold:
                    report.anomalies.append(
                        ScoreAnomaly(organization_id, category, item.window_delta)
                    )

        if self._run_logger:
            self._run_logger.log_stage(
                stage="score",
                component=type(self).__name__,
                input_data=organization_ids,
                output_data=report.scores,
                duration_seconds=time.monotonic() - t0,
            )

        if report.anomalies:
            logger.warning(
                f"{len(report.anomalies)} score anomalies detected",
                extra={"anomalies": [asdict(a) for a in report.anomalies[:5]]},
            )
        logger.info(
            f"Scored {report.processed}/{len(organization_ids)} organizations "
            f"({len(report.errors)} errors)"
        )
        if self._run_logger:
            self._run_logger.finish_run(
                {
                    "processed": report.processed,
                    "anomalies": report.anomalies,
                    "errors": report.errors,
                }
            )
        return report
