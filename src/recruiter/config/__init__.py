"""Configuration management utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Protocol, runtime_checkable

import yaml

from ..schemas.weights import ScoringWeights

DEFAULT_WEIGHTS: dict[str, int] = {
    "skillsMatch": 8,
    "experience": 7,
    "education": 5,
    "cultureFit": 6,
    "communication": 5,
}

SCORING_CONFIG_NAME = "scoring-criteria"


class ConfigManager:
    """Simple YAML-backed configuration loader."""

    def __init__(self, base_path: str | Path):
        self._base_path = Path(base_path)

    def path_for(self, name: str) -> Path:
        return self._base_path / f"{name}.yaml"

    def load(self, name: str, default: Any = None) -> Any:
        """Load a YAML configuration by name without file extension."""
        path = self.path_for(name)
        if not path.exists():
            return default
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle)
        return default if loaded is None else loaded

    def save(self, name: str, payload: Any) -> Path:
        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(payload, handle, sort_keys=False, allow_unicode=True)
        return path


@runtime_checkable
class WeightsSource(Protocol):
    """Read-through provider of the current scoring weights."""

    def get_weights(self) -> ScoringWeights:
        """Return the weights in effect right now."""


class StaticWeightsSource:
    """Fixed weights, e.g. from a settings file or a test."""

    def __init__(self, weights: Mapping[str, Any] | None = None, *, strict: bool = False):
        self._raw = dict(weights if weights is not None else DEFAULT_WEIGHTS)
        self._strict = strict

    def get_weights(self) -> ScoringWeights:
        return ScoringWeights.from_mapping(self._raw, strict=self._strict)


class YamlWeightsSource:
    """Weights stored under ``weights:`` in ``scoring-criteria.yaml``.

    The file is read on every call so edits apply to the next score.
    """

    def __init__(self, manager: ConfigManager, *, strict: bool = False):
        self._manager = manager
        self._strict = strict

    def load_raw(self) -> dict[str, Any]:
        document = self._manager.load(SCORING_CONFIG_NAME, default={})
        if not isinstance(document, dict):
            raise ValueError(f"{SCORING_CONFIG_NAME}.yaml must be a YAML object")
        weights = document.get("weights")
        return dict(DEFAULT_WEIGHTS if weights is None else weights)

    def get_weights(self) -> ScoringWeights:
        return ScoringWeights.from_mapping(self.load_raw(), strict=self._strict)

    def save_weights(self, weights: Mapping[str, Any]) -> ScoringWeights:
        validated = ScoringWeights.from_mapping(weights, strict=self._strict)
        self._manager.save(SCORING_CONFIG_NAME, {"weights": validated.as_dict()})
        return validated


__all__ = [
    "ConfigManager",
    "WeightsSource",
    "StaticWeightsSource",
    "YamlWeightsSource",
    "DEFAULT_WEIGHTS",
]
