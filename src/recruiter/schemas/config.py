"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FactorSettings(BaseModel):
    skills: dict[str, Any] | None = None
    experience: dict[str, Any] | None = None
    education: dict[str, Any] | None = None
    culture_fit: dict[str, Any] | None = None
    communication: dict[str, Any] | None = None

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    data_dir: str | None = None
    weights: dict[str, float] | None = None
    strict_weights: bool = False
    strict_stages: bool = True
    log_level: str = "INFO"
    factors: FactorSettings = Field(default_factory=FactorSettings)

    model_config = ConfigDict(extra="forbid")

    def to_settings(self) -> dict[str, Any]:
        """Flatten into the mapping accepted by ``create_container``."""
        settings: dict[str, Any] = {
            "core": {
                "strict_weights": self.strict_weights,
                "strict_stages": self.strict_stages,
            }
        }
        if self.data_dir:
            settings["core"]["data_dir"] = self.data_dir
        if self.weights:
            settings["core"]["weights"] = dict(self.weights)
        factor_settings = self.factors.model_dump(exclude_none=True)
        if factor_settings:
            settings["factors"] = factor_settings
        return settings


def load_config(raw: Any) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValueError("Config must be a mapping")
    return AppConfig.model_validate(raw)
