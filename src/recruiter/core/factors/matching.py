"""Text helpers shared by the keyword-based factors."""

from __future__ import annotations

import math
from typing import Iterable

from ...schemas import Candidate


def candidate_corpus(candidate: Candidate, *, include_name: bool = False) -> str:
    """Lower-cased searchable text: resume, notes and optionally the name."""
    parts = [candidate.resume_text, candidate.notes]
    if include_name:
        parts.append(candidate.name)
    return " ".join(part or "" for part in parts).lower()


def match_terms(corpus: str, terms: Iterable[str]) -> list[str]:
    """Return the terms found as case-insensitive substrings of ``corpus``."""
    return [term for term in terms if term and term.lower() in corpus]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def clamp_score(value: float) -> int:
    return min(max(round_half_up(value), 0), 100)


def ratio_score(matched: int, total: int) -> int:
    if total <= 0:
        return 0
    return clamp_score(100 * matched / total)
