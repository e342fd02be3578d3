from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .role import new_id, utcnow


class StageTransition(BaseModel):
    """One immutable entry of a candidate's stage history."""

    stage: str
    from_stage: str | None = Field(default=None, alias="from")
    timestamp: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class FactorResult(BaseModel):
    """Per-factor score with factor-specific diagnostics kept as extra fields."""

    score: int = Field(ge=0, le=100)
    weight: int

    model_config = ConfigDict(extra="allow")


class CandidateDraft(BaseModel):
    """Caller-supplied fields for a candidate that does not exist yet."""

    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    resume_text: str = ""
    notes: str = ""
    source: str = "manual"
    project_id: str = ""
    role: str = ""
    stage: str | None = None

    model_config = ConfigDict(extra="ignore")


class Candidate(BaseModel):
    """Tracked person with score and append-only stage history.

    Instances are produced by ``PipelineStateMachine.admit``; ``stage`` and
    ``stage_history`` change afterwards only through ``move_stage``.
    """

    id: str = Field(default_factory=new_id)
    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    resume_text: str = ""
    notes: str = ""
    source: str = "manual"
    project_id: str = ""
    role: str = ""
    stage: str
    score: int | None = Field(default=None, ge=0, le=100)
    score_breakdown: dict[str, FactorResult] | None = None
    score_reason: str | None = None
    stage_history: list[StageTransition] = Field(min_length=1)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime | None = None

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="after")
    def _check_history(self) -> "Candidate":
        if self.stage_history[0].from_stage is not None:
            raise ValueError("first stage history entry must not have a 'from' stage")
        if self.stage_history[-1].stage != self.stage:
            raise ValueError(
                f"stage {self.stage!r} does not match last history entry "
                f"{self.stage_history[-1].stage!r}"
            )
        return self

    @property
    def is_scored(self) -> bool:
        return self.score is not None

    def to_record(self) -> dict[str, Any]:
        """JSON-ready representation used by stores and CLI output."""
        return self.model_dump(mode="json", by_alias=True)
