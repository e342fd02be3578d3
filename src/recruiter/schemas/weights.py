"""Scoring weight set shared by the engine and the configuration source."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping

import structlog

from ..errors import InvalidWeight

FACTOR_NAMES: tuple[str, ...] = (
    "skillsMatch",
    "experience",
    "education",
    "cultureFit",
    "communication",
)

DEFAULT_WEIGHT = 5
MIN_WEIGHT = 1
MAX_WEIGHT = 10

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ScoringWeights:
    """Integer weight per factor name; missing factors weigh ``DEFAULT_WEIGHT``."""

    values: dict[str, int] = field(default_factory=dict)

    def get(self, factor: str) -> int:
        return self.values.get(factor, DEFAULT_WEIGHT)

    def as_dict(self) -> dict[str, int]:
        return {name: self.get(name) for name in FACTOR_NAMES}

    @classmethod
    def from_mapping(
        cls,
        raw: Mapping[str, Any] | None,
        *,
        strict: bool = False,
    ) -> "ScoringWeights":
        """Build a weight set from loosely typed configuration.

        Unknown keys are ignored. ``None`` and ``0`` count as unset. Values
        outside ``[MIN_WEIGHT, MAX_WEIGHT]`` are clamped, or rejected with
        ``InvalidWeight`` when ``strict`` is set.
        """
        values: dict[str, int] = {}
        for name in FACTOR_NAMES:
            value = (raw or {}).get(name)
            if value is None or value == 0:
                continue
            if isinstance(value, bool):
                raise InvalidWeight(name, value, "not a number")
            try:
                weight = math.floor(float(value) + 0.5)
            except (TypeError, ValueError, OverflowError) as exc:
                raise InvalidWeight(name, value, "not a number") from exc
            if MIN_WEIGHT <= weight <= MAX_WEIGHT:
                values[name] = weight
                continue
            if strict:
                raise InvalidWeight(name, value)
            clamped = min(max(weight, MIN_WEIGHT), MAX_WEIGHT)
            logger.warning("weights.clamped", factor=name, value=value, clamped=clamped)
            values[name] = clamped
        return cls(values=values)


__all__ = [
    "ScoringWeights",
    "FACTOR_NAMES",
    "DEFAULT_WEIGHT",
    "MIN_WEIGHT",
    "MAX_WEIGHT",
]
