"""Bulk scoring of candidates that have no score yet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

import pendulum

from ..errors import NotFound
from ..schemas import Candidate, RoleProfile, ScoringWeights
from .scoring import ScoringEngine

BATCH_SCORE_REASON = "Auto-scored (batch)"

RoleLookup = Callable[[str], "RoleProfile | None"]
Updater = Callable[[str, Callable[[Candidate], Candidate]], Candidate]


@dataclass(slots=True)
class BatchOutcome:
    scored: list[Candidate] = field(default_factory=list)
    skipped: int = 0

    @property
    def count(self) -> int:
        return len(self.scored)


class BatchScorer:
    """Drive the scoring engine over every unscored candidate.

    Candidates with any score, including 0, are skipped, so repeated runs
    are no-ops once everything is scored. When ``update`` is supplied the
    unscored check is repeated inside the store's per-id critical section.
    """

    def __init__(
        self,
        engine: ScoringEngine,
        *,
        now_provider: Callable[[], Any] | None = None,
    ) -> None:
        self._engine = engine
        self._now_provider = now_provider or (lambda: pendulum.now("UTC"))

    def score_if_unscored(
        self,
        candidate: Candidate,
        role: RoleProfile | None,
        weights: ScoringWeights,
    ) -> Candidate | None:
        if candidate.is_scored:
            return None
        result = self._engine.score(candidate, role, weights)
        return candidate.model_copy(
            update={
                "score": result.score,
                "score_breakdown": result.breakdown,
                "score_reason": BATCH_SCORE_REASON,
                "updated_at": self._now_provider(),
            }
        )

    def run(
        self,
        candidates: Iterable[Candidate],
        role_lookup: RoleLookup,
        weights: ScoringWeights,
        *,
        update: Updater | None = None,
    ) -> BatchOutcome:
        outcome = BatchOutcome()
        for candidate in candidates:
            if candidate.is_scored:
                outcome.skipped += 1
                continue
            role = role_lookup(candidate.project_id) if candidate.project_id else None
            if update is None:
                scored = self.score_if_unscored(candidate, role, weights)
            else:
                scored = self._score_in_place(candidate.id, role, weights, update)
            if scored is None:
                outcome.skipped += 1
            else:
                outcome.scored.append(scored)
        return outcome

    def _score_in_place(
        self,
        candidate_id: str,
        role: RoleProfile | None,
        weights: ScoringWeights,
        update: Updater,
    ) -> Candidate | None:
        scored: list[Candidate] = []

        def mutate(current: Candidate) -> Candidate:
            result = self.score_if_unscored(current, role, weights)
            if result is None:
                return current
            scored.append(result)
            return result

        try:
            update(candidate_id, mutate)
        except NotFound:
            return None
        return scored[0] if scored else None
