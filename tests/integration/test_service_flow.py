from __future__ import annotations

from pathlib import Path
from typing import Any

import pendulum
import pytest
from pydantic import ValidationError

from recruiter.activity import ActivityLog
from recruiter.config import ConfigManager, StaticWeightsSource, YamlWeightsSource
from recruiter.core import BatchScorer, PipelineStateMachine, ScoringEngine
from recruiter.errors import InvalidStage, NotFound, RecruiterError
from recruiter.service import RecruiterService
from recruiter.storage import CandidateStore, RoleStore


class FakeClock:
    def __init__(self) -> None:
        self.now = pendulum.datetime(2025, 3, 1, 9, 0, tz="UTC")

    def __call__(self) -> pendulum.DateTime:
        return self.now

    def advance(self, **kwargs: Any) -> None:
        self.now = self.now.add(**kwargs)


class ExplodingEngine(ScoringEngine):
    def score(self, candidate, role, weights):
        raise AssertionError("engine must not run for manual overrides")


def build_service(
    tmp_path: Path | None = None,
    *,
    clock: FakeClock | None = None,
    engine: ScoringEngine | None = None,
    weights: dict[str, Any] | None = None,
) -> tuple[RecruiterService, ActivityLog]:
    clock = clock or FakeClock()
    engine = engine or ScoringEngine()
    activity = ActivityLog()
    if tmp_path is not None:
        weights_source: Any = YamlWeightsSource(ConfigManager(tmp_path))
    else:
        weights_source = StaticWeightsSource(weights)
    service = RecruiterService(
        candidates=CandidateStore(),
        roles=RoleStore(),
        engine=engine,
        machine=PipelineStateMachine(now_provider=clock),
        batch_scorer=BatchScorer(engine, now_provider=clock),
        weights_source=weights_source,
        activity=activity,
        now_provider=clock,
    )
    return service, activity


def actions(activity: ActivityLog) -> list[str]:
    return [entry["action"] for entry in reversed(activity.recent())]


def test_score_candidate_against_role():
    service, activity = build_service(weights={"skillsMatch": 10})
    role = service.create_role(
        {"id": "R-001", "title": "Frontend", "required_skills": ["React", "TypeScript"]}
    )
    candidate = service.add_candidate(
        {
            "name": "Jordan Avery",
            "project_id": role.id,
            "resume_text": "Built dashboards in React for four years.",
        }
    )

    scored = service.score_candidate(candidate.id)

    assert scored.score == 40
    assert scored.score_reason == "Auto-scored based on criteria"
    assert scored.score_breakdown["skillsMatch"].score == 50
    assert scored.score_breakdown["communication"].score == 20
    assert service.get_candidate(candidate.id).score == 40
    assert actions(activity) == ["project_created", "candidate_added", "candidate_scored"]
    assert activity.recent(1)[0]["details"]["method"] == "auto"


def test_manual_override_skips_engine_and_keeps_breakdown():
    service, activity = build_service(engine=ExplodingEngine())
    candidate = service.add_candidate({"name": "Sam"})

    scored = service.score_candidate(candidate.id, score=88)

    assert scored.score == 88
    assert scored.score_reason == "Manual override"
    assert scored.score_breakdown is None
    assert activity.recent(1)[0]["details"] == {
        "candidate_id": candidate.id,
        "name": "Sam",
        "score": 88,
        "method": "manual",
    }


def test_manual_override_preserves_existing_breakdown():
    service, _ = build_service()
    candidate = service.add_candidate({"name": "Sam", "resume_text": "teamwork"})
    auto = service.score_candidate(candidate.id)

    manual = service.score_candidate(candidate.id, score=70, reason="Strong referral")

    assert manual.score == 70
    assert manual.score_reason == "Strong referral"
    assert manual.score_breakdown == auto.score_breakdown


@pytest.mark.parametrize("score", [-5, 101])
def test_manual_override_out_of_range_is_rejected(score: int):
    service, _ = build_service()
    candidate = service.add_candidate({"name": "Sam"})

    with pytest.raises(ValidationError):
        service.score_candidate(candidate.id, score=score)
    assert service.get_candidate(candidate.id).score is None


def test_move_stage_records_history_and_activity():
    clock = FakeClock()
    service, activity = build_service(clock=clock)
    role = service.create_role({"id": "R-1", "pipeline_stages": ["Applied", "Interview", "Offer"]})
    candidate = service.add_candidate({"name": "Ada", "project_id": role.id})

    clock.advance(days=4)
    moved = service.move_stage(candidate.id, "Interview")

    assert moved.stage == "Interview"
    assert [entry.stage for entry in moved.stage_history] == ["Applied", "Interview"]
    assert moved.stage_history[-1].timestamp == clock.now
    assert activity.recent(1)[0]["details"] == {
        "candidate_id": candidate.id,
        "name": "Ada",
        "from": "Applied",
        "to": "Interview",
    }
    assert service.stages_for(candidate.id) == ["Applied", "Interview", "Offer", "Rejected"]


def test_invalid_stage_leaves_candidate_unchanged():
    service, activity = build_service()
    role = service.create_role({"id": "R-1", "pipeline_stages": ["Applied", "Offer"]})
    candidate = service.add_candidate({"name": "Ada", "project_id": role.id})

    with pytest.raises(InvalidStage):
        service.move_stage(candidate.id, "Technical")

    stored = service.get_candidate(candidate.id)
    assert stored.stage == "Applied"
    assert len(stored.stage_history) == 1
    assert "stage_change" not in actions(activity)


def test_rejected_is_always_reachable():
    service, _ = build_service()
    role = service.create_role({"id": "R-1", "pipeline_stages": ["Applied", "Offer"]})
    candidate = service.add_candidate({"name": "Ada", "project_id": role.id})

    assert service.move_stage(candidate.id, "Rejected").stage == "Rejected"


def test_batch_score_is_idempotent():
    service, activity = build_service()
    service.add_candidate({"name": "A"})
    service.add_candidate({"name": "B"})
    already = service.add_candidate({"name": "C"})
    service.score_candidate(already.id, score=0)

    assert service.batch_score() == 2
    assert service.batch_score() == 0
    assert service.get_candidate(already.id).score == 0
    assert activity.recent(2)[0]["details"] == {"scored": 0}
    assert activity.recent(2)[1]["details"] == {"scored": 2}


def test_weight_changes_apply_to_next_score(tmp_path: Path):
    service, _ = build_service(tmp_path)
    service.create_role({"id": "R-1", "required_skills": ["Python", "Go"]})
    candidate = service.add_candidate({"name": "Ada", "project_id": "R-1", "resume_text": "Python"})

    before = service.score_candidate(candidate.id)
    service.save_weights({"skillsMatch": 10, "communication": 1})
    after = service.score_candidate(candidate.id)

    # defaults 8/5: (50*8 + 20*5) / 13 = 38.46; then (50*10 + 20*1) / 11 = 47.27
    assert before.score == 38
    assert after.score == 47
    assert service.current_weights().get("skillsMatch") == 10


def test_static_weights_cannot_be_saved():
    service, _ = build_service()

    with pytest.raises(RecruiterError):
        service.save_weights({"skillsMatch": 3})


def test_unknown_ids_raise_not_found():
    service, _ = build_service()

    with pytest.raises(NotFound):
        service.score_candidate("nope")
    with pytest.raises(NotFound):
        service.move_stage("nope", "Screening")
    with pytest.raises(NotFound):
        service.get_role("nope")


def test_deleted_role_does_not_cascade():
    service, activity = build_service()
    role = service.create_role({"id": "R-1", "pipeline_stages": ["Applied", "Offer"]})
    candidate = service.add_candidate({"name": "Ada", "project_id": role.id})

    assert service.delete_role(role.id) is True
    assert service.delete_role(role.id) is False

    orphan = service.get_candidate(candidate.id)
    assert orphan.project_id == "R-1"
    assert service.stages_for(candidate.id)[0] == "Sourced"
    assert service.move_stage(candidate.id, "Screening").stage == "Screening"
    assert "project_deleted" in actions(activity)


def test_update_role_and_candidate():
    clock = FakeClock()
    service, _ = build_service(clock=clock)
    role = service.create_role({"id": "R-1", "title": "Backend"})
    candidate = service.add_candidate({"name": "Ada"})
    clock.advance(hours=1)

    updated_role = service.update_role(role.id, {"title": "Platform", "required_skills": "Go, Rust"})
    updated = service.update_candidate(candidate.id, {"email": "ada@example.com"})

    assert updated_role.title == "Platform"
    assert updated_role.required_skills == ["Go", "Rust"]
    assert updated_role.updated_at == clock.now
    assert updated.email == "ada@example.com"
    assert updated.stage_history == candidate.stage_history
    with pytest.raises(ValueError):
        service.update_role(role.id, {"id": "R-2"})


@pytest.mark.parametrize("field", ["stage", "stage_history", "project_id", "score", "score_breakdown"])
def test_protected_candidate_fields(field: str):
    service, _ = build_service()
    candidate = service.add_candidate({"name": "Ada"})

    with pytest.raises(ValueError):
        service.update_candidate(candidate.id, {field: None})


def test_list_candidates_filters_and_sorts():
    service, _ = build_service()
    service.create_role({"id": "R-1"})
    low = service.add_candidate({"name": "Low", "project_id": "R-1"})
    high = service.add_candidate({"name": "High", "email": "high@example.com", "source": "referral"})
    unscored = service.add_candidate({"name": "Nobody"})
    service.score_candidate(low.id, score=30)
    service.score_candidate(high.id, score=90)

    assert [c.name for c in service.list_candidates(project_id="R-1")] == ["Low"]
    assert [c.name for c in service.list_candidates(source="referral")] == ["High"]
    assert [c.name for c in service.list_candidates(min_score=50)] == ["High"]
    assert [c.name for c in service.list_candidates(max_score=40)] == ["Low", "Nobody"]
    assert [c.name for c in service.list_candidates(search="EXAMPLE.com")] == ["High"]
    assert [c.id for c in service.list_candidates(sort="-score")] == [high.id, low.id, unscored.id]
    assert [c.name for c in service.list_candidates(sort="name")] == ["High", "Low", "Nobody"]


def test_import_candidates_and_dashboard():
    service, _ = build_service()
    service.create_role({"id": "R-1", "pipeline_stages": ["Applied", "Offer"]})
    service.create_role({"id": "R-2", "status": "closed"})

    imported = service.import_candidates(
        [
            {"name": "A", "project_id": "R-1"},
            {"name": "B", "project_id": "R-1", "stage": "Offer"},
            {"name": "C"},
        ]
    )
    service.score_candidate(imported[0].id, score=75)

    summary = service.dashboard(activity_limit=2).to_dict()

    assert {c.source for c in imported} == {"import"}
    assert summary["active_roles"] == 1
    assert summary["total_candidates"] == 3
    assert summary["unscored"] == 2
    assert summary["stage_distribution"] == {"Applied": 1, "Offer": 1, "Sourced": 1}
    assert summary["source_distribution"] == {"import": 3}
    assert [entry["action"] for entry in summary["recent_activity"]] == [
        "candidate_scored",
        "candidates_imported",
    ]
    assert len(service.list_roles("open")) == 1


def test_import_rejects_empty_and_invalid_batches():
    service, _ = build_service()
    service.create_role({"id": "R-1", "pipeline_stages": ["Applied"]})

    with pytest.raises(ValueError):
        service.import_candidates([])
    with pytest.raises(InvalidStage):
        service.import_candidates([{"name": "A"}, {"name": "B", "project_id": "R-1", "stage": "Offer"}])
    assert service.list_candidates() == []


def test_days_in_stage():
    clock = FakeClock()
    service, _ = build_service(clock=clock)
    candidate = service.add_candidate({"name": "Ada"})

    clock.advance(days=2, hours=5)

    assert service.days_in_stage(candidate.id) == 2


def test_delete_candidate_records_activity():
    service, activity = build_service()
    candidate = service.add_candidate({"name": "Ada"})

    assert service.delete_candidate(candidate.id) is True
    assert service.delete_candidate(candidate.id) is False
    with pytest.raises(NotFound):
        service.get_candidate(candidate.id)
    assert actions(activity) == ["candidate_added", "candidate_deleted"]


def test_reassign_moves_to_new_role_initial_stage():
    clock = FakeClock()
    service, activity = build_service(clock=clock)
    service.create_role({"id": "R-1", "pipeline_stages": ["Applied", "Interview"]})
    candidate = service.add_candidate({"name": "Ada"})

    clock.advance(days=1)
    moved = service.reassign(candidate.id, "R-1")

    assert moved.project_id == "R-1"
    assert moved.stage == "Applied"
    assert moved.stage_history[-1].from_stage == "Sourced"
    assert moved.stage_history[-1].timestamp == clock.now
    assert moved.stage in service.stages_for(candidate.id)
    assert service.move_stage(candidate.id, "Interview").stage == "Interview"
    assert activity.recent(2)[1]["details"] == {
        "candidate_id": candidate.id,
        "name": "Ada",
        "from_project": "",
        "to_project": "R-1",
        "from": "Sourced",
        "to": "Applied",
    }


def test_reassign_keeps_stage_shared_by_both_roles():
    service, _ = build_service()
    service.create_role({"id": "R-1", "pipeline_stages": ["Applied", "Offer"]})
    service.create_role({"id": "R-2", "pipeline_stages": ["Screen", "Offer"]})
    candidate = service.add_candidate({"name": "Ada", "project_id": "R-1", "stage": "Offer"})

    moved = service.reassign(candidate.id, "R-2")
    detached = service.reassign(candidate.id, "")

    assert moved.stage == "Offer"
    assert len(moved.stage_history) == 1
    assert detached.project_id == ""
    assert detached.stage == "Offer"


def test_reassign_to_unknown_role_changes_nothing():
    service, _ = build_service()
    candidate = service.add_candidate({"name": "Ada"})

    with pytest.raises(NotFound):
        service.reassign(candidate.id, "missing")
    assert service.get_candidate(candidate.id).project_id == ""


def test_import_rejects_non_object_items():
    service, _ = build_service()

    with pytest.raises(ValueError):
        service.import_candidates([{"name": "A"}, "B"])
    assert service.list_candidates() == []
