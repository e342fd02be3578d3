"""Culture-fit criteria coverage factor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...schemas import Candidate, RoleProfile
from .matching import candidate_corpus, match_terms, ratio_score


@dataclass
class CultureFitConfig:
    include_name: bool = False


class CultureFitFactor:
    name = "cultureFit"

    def __init__(self, *, config: CultureFitConfig | None = None) -> None:
        self._config = config or CultureFitConfig()

    def is_active(self, role: RoleProfile | None) -> bool:
        return bool(role and role.culture_fit_criteria)

    def evaluate(self, candidate: Candidate, role: RoleProfile) -> dict[str, Any]:
        corpus = candidate_corpus(candidate, include_name=self._config.include_name)
        criteria = role.culture_fit_criteria
        matched = match_terms(corpus, criteria)
        return {
            "score": ratio_score(len(matched), len(criteria)),
            "matched": matched,
            "total": len(criteria),
        }
