"""Seniority keyword factor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...schemas import Candidate, RoleProfile
from .matching import candidate_corpus, clamp_score, match_terms


def _default_level_keywords() -> dict[str, list[str]]:
    return {
        "junior": ["junior", "0-2 years", "entry", "graduate"],
        "mid": ["mid", "3-5 years", "intermediate"],
        "senior": ["senior", "5+ years", "7+ years", "lead", "staff"],
        "lead": ["lead", "principal", "staff", "10+ years", "director", "head"],
    }


@dataclass
class ExperienceConfig:
    """Keyword lists per level and the scores for a hit or a miss."""

    matched_score: int = 85
    unmatched_score: int = 40
    level_keywords: dict[str, list[str]] | None = None

    def __post_init__(self) -> None:
        defaults = _default_level_keywords()
        if self.level_keywords:
            defaults.update(
                {level.lower(): list(words) for level, words in self.level_keywords.items()}
            )
        self.level_keywords = defaults


class ExperienceFactor:
    """Award a fixed score when the resume mentions the role's seniority."""

    name = "experience"

    def __init__(self, *, config: ExperienceConfig | None = None) -> None:
        self._config = config or ExperienceConfig()

    def is_active(self, role: RoleProfile | None) -> bool:
        return bool(role and role.experience_level)

    def evaluate(self, candidate: Candidate, role: RoleProfile) -> dict[str, Any]:
        level = role.experience_level.value
        keywords = self._config.level_keywords.get(level, [])
        hits = match_terms(candidate_corpus(candidate), keywords)
        matched = bool(hits)
        score = self._config.matched_score if matched else self._config.unmatched_score
        return {
            "score": clamp_score(score),
            "level": level,
            "matched": matched,
        }
