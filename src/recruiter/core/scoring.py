"""Weighted multi-factor scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from ..schemas import Candidate, FactorResult, RoleProfile, ScoringWeights
from .factors import default_factors
from .factors.matching import clamp_score

AUTO_SCORE_REASON = "Auto-scored based on criteria"
MANUAL_SCORE_REASON = "Manual override"


@dataclass(slots=True)
class ScoreResult:
    """Final score with the per-factor breakdown it was computed from."""

    score: int
    breakdown: dict[str, FactorResult] = field(default_factory=dict)

    @property
    def active_factors(self) -> list[str]:
        return list(self.breakdown)


class ScoringEngine:
    """Combine active factors into a 0-100 weighted average.

    A factor takes part only when ``is_active(role)`` is true; the others are
    left out of both the breakdown and the average. The engine never raises
    for missing role data, so candidates without a role still get a
    communication-only score.
    """

    def __init__(self, factors: Iterable[Any] | None = None) -> None:
        self._factors = list(factors) if factors is not None else default_factors()

    @property
    def factor_names(self) -> list[str]:
        return [factor.name for factor in self._factors]

    def score(
        self,
        candidate: Candidate,
        role: RoleProfile | None,
        weights: ScoringWeights,
    ) -> ScoreResult:
        breakdown: dict[str, FactorResult] = {}
        weighted_sum = 0.0
        total_weight = 0

        for factor in self._factors:
            if not factor.is_active(role):
                continue
            payload = dict(factor.evaluate(candidate, role))
            sub_score = clamp_score(payload.pop("score", 0))
            weight = weights.get(factor.name)
            breakdown[factor.name] = FactorResult(score=sub_score, weight=weight, **payload)
            weighted_sum += sub_score * weight
            total_weight += weight

        final = clamp_score(weighted_sum / total_weight) if total_weight > 0 else 0
        return ScoreResult(score=final, breakdown=breakdown)
