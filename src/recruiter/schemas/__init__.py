"""Pydantic schema definitions for roles, candidates and scoring weights."""

from __future__ import annotations

from .candidate import Candidate, CandidateDraft, FactorResult, StageTransition
from .role import (
    DEFAULT_STAGES,
    REJECTED_STAGE,
    ExperienceLevel,
    RoleProfile,
    RoleStatus,
)
from .weights import FACTOR_NAMES, ScoringWeights

__all__ = [
    "Candidate",
    "CandidateDraft",
    "FactorResult",
    "StageTransition",
    "RoleProfile",
    "RoleStatus",
    "ExperienceLevel",
    "DEFAULT_STAGES",
    "REJECTED_STAGE",
    "ScoringWeights",
    "FACTOR_NAMES",
]
