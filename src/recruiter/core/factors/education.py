"""Education preference factor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...schemas import Candidate, RoleProfile
from .matching import candidate_corpus, clamp_score, match_terms


@dataclass
class EducationConfig:
    matched_score: int = 80
    unmatched_score: int = 35
    fallback_terms: list[str] = field(
        default_factory=lambda: ["degree", "university", "bachelor", "master"]
    )


class EducationFactor:
    """Check for the preferred education or any generic degree wording."""

    name = "education"

    def __init__(self, *, config: EducationConfig | None = None) -> None:
        self._config = config or EducationConfig()

    def is_active(self, role: RoleProfile | None) -> bool:
        return bool(role and role.education_preference)

    def evaluate(self, candidate: Candidate, role: RoleProfile) -> dict[str, Any]:
        preference = role.education_preference
        terms = [preference, *self._config.fallback_terms]
        matched = bool(match_terms(candidate_corpus(candidate), terms))
        score = self._config.matched_score if matched else self._config.unmatched_score
        return {
            "score": clamp_score(score),
            "preference": preference,
            "matched": matched,
        }
