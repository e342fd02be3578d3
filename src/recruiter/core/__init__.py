"""Core scoring and pipeline components."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

# NOTE: keep imports explicit for export clarity.
from .batch import BATCH_SCORE_REASON, BatchOutcome, BatchScorer
from .factors import (
    CommunicationFactor,
    CultureFitFactor,
    EducationFactor,
    ExperienceFactor,
    SkillsMatchFactor,
)
from .scoring import AUTO_SCORE_REASON, MANUAL_SCORE_REASON, ScoreResult, ScoringEngine
from .stages import PipelineStateMachine, StageSet


@runtime_checkable
class Factor(Protocol):
    """Scoring dimension contract used by ``ScoringEngine``."""

    name: str

    def is_active(self, role: Any) -> bool:
        """Return True when the role carries the data this factor needs."""

    def evaluate(self, candidate: Any, role: Any) -> dict:
        """Return ``{"score": 0..100, **diagnostics}`` for the candidate."""


__all__ = [
    "Factor",
    "ScoringEngine",
    "ScoreResult",
    "AUTO_SCORE_REASON",
    "MANUAL_SCORE_REASON",
    "PipelineStateMachine",
    "StageSet",
    "BatchScorer",
    "BatchOutcome",
    "BATCH_SCORE_REASON",
    "SkillsMatchFactor",
    "ExperienceFactor",
    "EducationFactor",
    "CultureFitFactor",
    "CommunicationFactor",
]
