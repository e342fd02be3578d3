"""Dependency injection container for the recruiter service."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from dependency_injector import containers, providers

from .activity import ActivityLog
from .config import ConfigManager, StaticWeightsSource, YamlWeightsSource
from .core import (
    BatchScorer,
    CommunicationFactor,
    CultureFitFactor,
    EducationFactor,
    ExperienceFactor,
    PipelineStateMachine,
    ScoringEngine,
    SkillsMatchFactor,
)
from .core.factors import (
    CommunicationConfig,
    CultureFitConfig,
    EducationConfig,
    ExperienceConfig,
    SkillsMatchConfig,
)
from .service import RecruiterService
from .storage import CandidateStore, RoleStore

CANDIDATES_FILE = "candidates.json"
ROLES_FILE = "projects.json"
ACTIVITY_FILE = "activity-log.jsonl"


def data_path(data_dir: str | Path | None, filename: str) -> Path | None:
    if not data_dir:
        return None
    return Path(data_dir) / filename


def build_weights_source(
    data_dir: str | Path | None,
    weights: dict[str, Any] | None,
    strict: bool | None,
) -> Any:
    """Static weights from settings win; otherwise read the data dir's YAML file."""
    strict = bool(strict)
    if weights:
        return StaticWeightsSource(weights, strict=strict)
    if data_dir:
        return YamlWeightsSource(ConfigManager(data_dir), strict=strict)
    return StaticWeightsSource(strict=strict)


class RecruiterContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    candidate_store = providers.Singleton(
        CandidateStore,
        path=providers.Callable(data_path, config.data_dir, CANDIDATES_FILE),
    )
    role_store = providers.Singleton(
        RoleStore,
        path=providers.Callable(data_path, config.data_dir, ROLES_FILE),
    )
    activity_log = providers.Singleton(
        ActivityLog,
        path=providers.Callable(data_path, config.data_dir, ACTIVITY_FILE),
    )

    weights_source = providers.Singleton(
        build_weights_source,
        config.data_dir,
        config.weights,
        config.strict_weights,
    )

    skills_factor = providers.Singleton(SkillsMatchFactor)
    experience_factor = providers.Singleton(ExperienceFactor)
    education_factor = providers.Singleton(EducationFactor)
    culture_fit_factor = providers.Singleton(CultureFitFactor)
    communication_factor = providers.Singleton(CommunicationFactor)

    factors = providers.List(
        skills_factor,
        experience_factor,
        education_factor,
        culture_fit_factor,
        communication_factor,
    )

    scoring_engine = providers.Singleton(ScoringEngine, factors=factors)

    state_machine = providers.Singleton(
        PipelineStateMachine,
        strict=config.strict_stages,
    )

    batch_scorer = providers.Singleton(BatchScorer, engine=scoring_engine)

    service = providers.Singleton(
        RecruiterService,
        candidates=candidate_store,
        roles=role_store,
        engine=scoring_engine,
        machine=state_machine,
        batch_scorer=batch_scorer,
        weights_source=weights_source,
        activity=activity_log,
    )


def create_container(*, settings: dict | None = None) -> RecruiterContainer:
    """Instantiate container with optional overrides."""

    container = RecruiterContainer()

    if not settings:
        return container

    core_settings = settings.get("core", {}) if isinstance(settings, dict) else {}
    if core_settings:
        container.config.override(core_settings)

    factor_settings = settings.get("factors", {}) if isinstance(settings, dict) else {}

    if "skills" in factor_settings:
        skills_config = SkillsMatchConfig(**factor_settings["skills"])
        container.skills_factor.override(
            providers.Singleton(SkillsMatchFactor, config=skills_config)
        )

    if "experience" in factor_settings:
        experience_config = ExperienceConfig(**factor_settings["experience"])
        container.experience_factor.override(
            providers.Singleton(ExperienceFactor, config=experience_config)
        )

    if "education" in factor_settings:
        education_config = EducationConfig(**factor_settings["education"])
        container.education_factor.override(
            providers.Singleton(EducationFactor, config=education_config)
        )

    if "culture_fit" in factor_settings:
        culture_config = CultureFitConfig(**factor_settings["culture_fit"])
        container.culture_fit_factor.override(
            providers.Singleton(CultureFitFactor, config=culture_config)
        )

    if "communication" in factor_settings:
        communication_config = CommunicationConfig(**factor_settings["communication"])
        container.communication_factor.override(
            providers.Singleton(CommunicationFactor, config=communication_config)
        )

    return container
