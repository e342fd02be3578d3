"""Communication keyword factor; active for every candidate."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...schemas import Candidate, RoleProfile
from .matching import candidate_corpus, clamp_score, match_terms


@dataclass
class CommunicationConfig:
    keywords: list[str] = field(
        default_factory=lambda: [
            "communication",
            "presentation",
            "writing",
            "public speaking",
            "leadership",
            "teamwork",
            "collaboration",
            "mentoring",
        ]
    )
    base_score: int = 20
    per_match: int = 20


class CommunicationFactor:
    name = "communication"

    def __init__(self, *, config: CommunicationConfig | None = None) -> None:
        self._config = config or CommunicationConfig()

    def is_active(self, role: RoleProfile | None) -> bool:
        return True

    def evaluate(self, candidate: Candidate, role: RoleProfile | None) -> dict[str, Any]:
        matched = match_terms(candidate_corpus(candidate), self._config.keywords)
        raw = self._config.base_score + self._config.per_match * len(matched)
        return {
            "score": clamp_score(min(100, raw)),
            "matched": matched,
        }
