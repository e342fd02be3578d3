from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

import pendulum
from pydantic import BaseModel, ConfigDict, Field, field_validator

REJECTED_STAGE = "Rejected"

DEFAULT_STAGES: tuple[str, ...] = (
    "Sourced",
    "Screening",
    "Phone Screen",
    "Technical",
    "Culture Fit",
    "Offer",
    "Hired",
    REJECTED_STAGE,
)


class ExperienceLevel(str, Enum):
    """Seniority band a role is hiring for."""

    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"


class RoleStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


def utcnow() -> datetime:
    return pendulum.now("UTC")


def new_id() -> str:
    return uuid4().hex


def _dedupe_terms(values: list[str]) -> list[str]:
    """Strip, drop blanks and de-duplicate case-insensitively keeping first spelling."""
    seen: set[str] = set()
    terms: list[str] = []
    for value in values:
        term = str(value).strip()
        if not term or term.lower() in seen:
            continue
        seen.add(term.lower())
        terms.append(term)
    return terms


class RoleProfile(BaseModel):
    """Hiring role with the requirements candidates are scored against."""

    id: str = Field(default_factory=new_id)
    title: str = ""
    department: str = ""
    location: str = ""
    work_type: str = "onsite"
    salary_min: int | None = None
    salary_max: int | None = None
    description: str = ""
    required_skills: list[str] = Field(default_factory=list)
    nice_to_have_skills: list[str] = Field(default_factory=list)
    must_have_qualifications: list[str] = Field(default_factory=list)
    deal_breakers: list[str] = Field(default_factory=list)
    culture_fit_criteria: list[str] = Field(default_factory=list)
    experience_level: ExperienceLevel | None = None
    education_preference: str | None = None
    pipeline_stages: list[str] = Field(default_factory=list)
    status: RoleStatus = RoleStatus.OPEN
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator(
        "required_skills",
        "nice_to_have_skills",
        "must_have_qualifications",
        "deal_breakers",
        "culture_fit_criteria",
        mode="before",
    )
    @classmethod
    def _normalize_terms(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        return _dedupe_terms(list(value))

    @field_validator("experience_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> Any:
        if value is None or isinstance(value, ExperienceLevel):
            return value
        text = str(value).strip().lower()
        return text or None

    @field_validator("education_preference", mode="before")
    @classmethod
    def _blank_preference(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("pipeline_stages", mode="before")
    @classmethod
    def _normalize_stages(cls, value: Any) -> list[str]:
        if value is None:
            return []
        stages: list[str] = []
        for raw in value:
            stage = str(raw).strip()
            if not stage or stage == REJECTED_STAGE or stage in stages:
                continue
            stages.append(stage)
        return stages

    @property
    def is_open(self) -> bool:
        return self.status is RoleStatus.OPEN

    def to_record(self) -> dict[str, Any]:
        """JSON-ready representation used by stores and CLI output."""
        return self.model_dump(mode="json")
