"""
LRID — Confidence scoring.

    score = base_confidence - Σ penalty(hit.severity), floored, 2 decimals

Level cut-offs come from the instrument's ``confidence_adjustments``
(defaults: HIGH >= 0.80, MEDIUM >= 0.65, else LOW).
"""

from __future__ import annotations

from typing import Iterable

from lrid.schemas.instrument import (
    DEFAULT_PENALTY_BY_SEVERITY,
    ConfidenceConfig,
    Severity,
)
from lrid.schemas.scoring import Confidence, ConfidenceLevel, ConsistencyHit


class ConfidenceScorer:
    PRECISION: int = 2

    @staticmethod
    def penalty_for(severity: str, config: ConfidenceConfig) -> float:
        """Penalty for one hit.  Unknown severities cost the MEDIUM penalty."""
        penalties = config.per_cc_hit_penalty
        key = (severity or "").strip().upper()
        if key in penalties:
            return penalties[key]
        medium = Severity.MEDIUM.value
        return penalties.get(medium, DEFAULT_PENALTY_BY_SEVERITY[medium])

    def score(self, hits: Iterable[ConsistencyHit], config: ConfidenceConfig) -> Confidence:
        raw = config.base_confidence - sum(self.penalty_for(h.severity, config) for h in hits)
        value = round(max(config.floor, raw), self.PRECISION)
        return Confidence(score=value, level=self.level_for(value, config))

    @staticmethod
    def level_for(value: float, config: ConfidenceConfig) -> ConfidenceLevel:
        if value >= config.high_cutoff:
            return ConfidenceLevel.HIGH
        if value >= config.medium_cutoff:
            return ConfidenceLevel.MEDIUM
        return ConfidenceLevel.LOW
