from __future__ import annotations

import pytest
from pydantic import ValidationError

from recruiter.config import DEFAULT_WEIGHTS, StaticWeightsSource, YamlWeightsSource
from recruiter.container import create_container
from recruiter.errors import InvalidStage
from recruiter.schemas.config import AppConfig, load_config


def test_create_container_with_overrides(tmp_path):
    container = create_container(
        settings={
            "core": {"data_dir": str(tmp_path), "strict_stages": False},
            "factors": {
                "skills": {"include_name": False},
                "experience": {"matched_score": 90},
                "education": {"unmatched_score": 30},
                "communication": {"base_score": 10, "per_match": 15},
            },
        }
    )

    skills = container.skills_factor()
    experience = container.experience_factor()
    education = container.education_factor()
    communication = container.communication_factor()
    machine = container.state_machine()

    assert skills._config.include_name is False
    assert experience._config.matched_score == 90
    assert experience._config.level_keywords["senior"]
    assert education._config.unmatched_score == 30
    assert communication._config.base_score == 10
    assert communication._config.per_match == 15
    assert machine.strict is False
    assert container.candidate_store().path == tmp_path / "candidates.json"
    assert container.role_store().path == tmp_path / "projects.json"
    assert isinstance(container.weights_source(), YamlWeightsSource)


def test_default_container_is_memory_only_and_strict():
    container = create_container()

    assert container.candidate_store().path is None
    assert container.state_machine().strict is True
    assert isinstance(container.weights_source(), StaticWeightsSource)
    assert container.weights_source().get_weights().as_dict() == DEFAULT_WEIGHTS
    assert container.scoring_engine().factor_names == [
        "skillsMatch",
        "experience",
        "education",
        "cultureFit",
        "communication",
    ]


def test_service_wiring_shares_singletons():
    container = create_container(settings={"core": {"weights": {"skillsMatch": 10}}})
    service = container.service()

    role = service.create_role({"id": "R-1", "required_skills": ["React", "TypeScript"]})
    candidate = service.add_candidate(
        {"name": "Ada", "project_id": role.id, "resume_text": "React dashboards"}
    )
    scored = service.score_candidate(candidate.id)

    assert container.role_store().get("R-1") == role
    assert scored.score == 40
    with pytest.raises(InvalidStage):
        service.move_stage(candidate.id, "Backlog")


def test_load_config_validation():
    data = {
        "data_dir": "./var",
        "weights": {"skillsMatch": 9},
        "strict_weights": True,
        "factors": {"culture_fit": {"include_name": True}},
    }
    app_config = load_config(data)
    assert isinstance(app_config, AppConfig)
    settings = app_config.to_settings()
    assert settings["core"]["data_dir"] == "./var"
    assert settings["core"]["weights"]["skillsMatch"] == 9
    assert settings["core"]["strict_weights"] is True
    assert settings["core"]["strict_stages"] is True
    assert settings["factors"] == {"culture_fit": {"include_name": True}}


def test_load_config_defaults_and_rejections():
    assert load_config(None).to_settings() == {
        "core": {"strict_weights": False, "strict_stages": True}
    }
    with pytest.raises(ValueError):
        load_config(["not", "a", "mapping"])
    with pytest.raises(ValidationError):
        load_config({"unknown_key": 1})
