from evidence_ledger.corroboration.engine import (
    Action,
    CorroborationEngine,
    Resolution,
    regulator_impact,
    title_similarity,
)

__all__ = [
    "Action",
    "CorroborationEngine",
    "Resolution",
    "regulator_impact",
    "title_similarity",
]
