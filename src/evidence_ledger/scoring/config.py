"""Scoring weights and caps with per-key fallbacks."""

import logging
from collections.abc import Mapping

logger = logging.getLogger(__name__)


class ScoringConfig:
    """Flat key to number maps read once per scoring run.

    A missing key never fails a run: lookups fall back to the caller's
    default, and each missing key is reported once at DEBUG level.

    Args:
        weights: Per-term weights, multipliers, floors and caps.
        caps: Category ``start``, ``min`` and ``max`` bounds.
        stability: Constant stability term of the confidence composite.
        jump_warning_threshold: ``|window_delta|`` above which a warning is logged.
        anomaly_threshold: ``|window_delta|`` at or above which batch runs report an anomaly.
    """

    def __init__(
        self,
        weights: Mapping[str, float] | None = None,
        caps: Mapping[str, float] | None = None,
        *,
        stability: float = 70.0,
        jump_warning_threshold: float = 12.0,
        anomaly_threshold: float = 15.0,
    ) -> None:
        self._weights = dict(weights or {})
        self._caps = dict(caps or {})
        self.stability = stability
        self.jump_warning_threshold = jump_warning_threshold
        self.anomaly_threshold = anomaly_threshold
        self._reported: set[str] = set()

    def weight(self, key: str, default: float) -> float:
        return self._lookup(self._weights, "weight", key, default)

    def cap(self, key: str, default: float) -> float:
        return self._lookup(self._caps, "cap", key, default)

    def _lookup(self, values: dict[str, float], kind: str, key: str, default: float) -> float:
        value = values.get(key)
        if value is not None:
            return value
        if key not in self._reported:
            self._reported.add(key)
            logger.debug(f"Scoring {kind} {key!r} not configured, using default {default}")
        return default
