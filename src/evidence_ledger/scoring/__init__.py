from evidence_ledger.scoring.config import ScoringConfig
from evidence_ledger.scoring.engine import BaselineScoringEngine, BatchReport, ScoreAnomaly
from evidence_ledger.scoring.formulas import (
    CategoryResult,
    confidence,
    environment_score,
    labor_score,
    politics_score,
    social_score,
    window_delta,
)

__all__ = [
    "BaselineScoringEngine",
    "BatchReport",
    "CategoryResult",
    "ScoreAnomaly",
    "ScoringConfig",
    "confidence",
    "environment_score",
    "labor_score",
    "politics_score",
    "social_score",
    "window_delta",
]
