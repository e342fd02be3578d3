"""Required-skill coverage factor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...schemas import Candidate, RoleProfile
from .matching import candidate_corpus, match_terms, ratio_score


@dataclass
class SkillsMatchConfig:
    """Configuration for required-skill matching."""

    include_name: bool = True


class SkillsMatchFactor:
    """Share of the role's required skills mentioned by the candidate."""

    name = "skillsMatch"

    def __init__(self, *, config: SkillsMatchConfig | None = None) -> None:
        self._config = config or SkillsMatchConfig()

    def is_active(self, role: RoleProfile | None) -> bool:
        return bool(role and role.required_skills)

    def evaluate(self, candidate: Candidate, role: RoleProfile) -> dict[str, Any]:
        corpus = candidate_corpus(candidate, include_name=self._config.include_name)
        matched = match_terms(corpus, role.required_skills)
        total = len(role.required_skills)
        return {
            "score": ratio_score(len(matched), total),
            "matched": matched,
            "total": total,
        }
