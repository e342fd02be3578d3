"""Scoring factor implementations for the scoring engine."""

from .communication import CommunicationConfig, CommunicationFactor
from .culture_fit import CultureFitConfig, CultureFitFactor
from .education import EducationConfig, EducationFactor
from .experience import ExperienceConfig, ExperienceFactor
from .skills import SkillsMatchConfig, SkillsMatchFactor


def default_factors() -> list:
    """Factors in breakdown order."""
    return [
        SkillsMatchFactor(),
        ExperienceFactor(),
        EducationFactor(),
        CultureFitFactor(),
        CommunicationFactor(),
    ]


__all__ = [
    "SkillsMatchFactor",
    "SkillsMatchConfig",
    "ExperienceFactor",
    "ExperienceConfig",
    "EducationFactor",
    "EducationConfig",
    "CultureFitFactor",
    "CultureFitConfig",
    "CommunicationFactor",
    "CommunicationConfig",
    "default_factors",
]
