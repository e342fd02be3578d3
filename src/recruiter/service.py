"""Applicant tracking operations over stores, engine and state machine."""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Iterable, Mapping

import pendulum
import structlog

from .activity import ActivityRecorder
from .core import (
    AUTO_SCORE_REASON,
    MANUAL_SCORE_REASON,
    BatchScorer,
    PipelineStateMachine,
    ScoringEngine,
)
from .errors import RecruiterError
from .schemas import Candidate, CandidateDraft, RoleProfile, RoleStatus, ScoringWeights
from .storage import CandidateStore, RoleStore

PROTECTED_CANDIDATE_FIELDS = frozenset(
    {
        "id",
        "project_id",
        "stage",
        "stage_history",
        "created_at",
        "score",
        "score_breakdown",
        "score_reason",
    }
)


@dataclass(slots=True)
class DashboardSummary:
    active_roles: int
    total_candidates: int
    unscored: int
    stage_distribution: dict[str, int] = field(default_factory=dict)
    source_distribution: dict[str, int] = field(default_factory=dict)
    recent_activity: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class _NullRecorder:
    def record(self, kind: str, details: dict[str, Any]) -> None:
        return None


class RecruiterService:
    """End-to-end applicant tracking orchestrator.

    Every mutation follows the same shape: resolve the role, run the engine
    or the state machine inside the store's per-id ``update``, then report
    the event to the activity recorder.
    """

    def __init__(
        self,
        *,
        candidates: CandidateStore,
        roles: RoleStore,
        engine: ScoringEngine,
        machine: PipelineStateMachine,
        batch_scorer: BatchScorer,
        weights_source: Any,
        activity: ActivityRecorder | None = None,
        now_provider: Callable[[], Any] | None = None,
    ) -> None:
        self._candidates = candidates
        self._roles = roles
        self._engine = engine
        self._machine = machine
        self._batch = batch_scorer
        self._weights = weights_source
        self._activity = activity or _NullRecorder()
        self._now_provider = now_provider or (lambda: pendulum.now("UTC"))
        self._logger = structlog.get_logger(__name__)

    # Roles

    def create_role(self, data: Mapping[str, Any]) -> RoleProfile:
        role = RoleProfile.model_validate(dict(data))
        self._roles.add(role)
        self._activity.record("project_created", {"project_id": role.id, "title": role.title})
        self._logger.info("role.created", role_id=role.id, title=role.title)
        return role

    def update_role(self, role_id: str, changes: Mapping[str, Any]) -> RoleProfile:
        if "id" in changes and changes["id"] != role_id:
            raise ValueError("role id cannot be changed")

        def mutate(current: RoleProfile) -> RoleProfile:
            merged = {**current.model_dump(), **changes, "updated_at": self._now_provider()}
            return RoleProfile.model_validate(merged)

        role = self._roles.update(role_id, mutate)
        self._activity.record("project_updated", {"project_id": role.id, "title": role.title})
        return role

    def delete_role(self, role_id: str) -> bool:
        role = self._roles.find(role_id)
        removed = self._roles.delete(role_id)
        if removed and role is not None:
            self._activity.record("project_deleted", {"project_id": role_id, "title": role.title})
        return removed

    def get_role(self, role_id: str) -> RoleProfile:
        return self._roles.get(role_id)

    def list_roles(self, status: RoleStatus | str | None = None) -> list[RoleProfile]:
        roles = self._roles.list_all()
        if status is None:
            return roles
        wanted = RoleStatus(status)
        return [role for role in roles if role.status is wanted]

    # Candidates

    def add_candidate(self, data: Mapping[str, Any] | CandidateDraft) -> Candidate:
        draft = data if isinstance(data, CandidateDraft) else CandidateDraft.model_validate(dict(data))
        candidate = self._machine.admit(draft, self._role_for(draft.project_id))
        self._candidates.add(candidate)
        self._activity.record(
            "candidate_added",
            {"candidate_id": candidate.id, "name": candidate.name, "role": candidate.role},
        )
        self._logger.info("candidate.added", candidate_id=candidate.id, stage=candidate.stage)
        return candidate

    def import_candidates(self, items: Iterable[Mapping[str, Any]]) -> list[Candidate]:
        items = list(items)
        if not items:
            raise ValueError("No items to import")
        imported = []
        for idx, item in enumerate(items, start=1):
            if not isinstance(item, Mapping):
                raise ValueError(f"item {idx}: expected an object, got {type(item).__name__}")
            draft = CandidateDraft.model_validate({"source": "import", **item})
            imported.append(self._machine.admit(draft, self._role_for(draft.project_id)))
        self._candidates.add_many(imported)
        self._activity.record("candidates_imported", {"count": len(imported)})
        self._logger.info("candidates.imported", count=len(imported))
        return imported

    def update_candidate(self, candidate_id: str, changes: Mapping[str, Any]) -> Candidate:
        protected = sorted(PROTECTED_CANDIDATE_FIELDS.intersection(changes))
        if protected:
            raise ValueError(
                f"Fields {protected} change only through scoring, stage moves or reassign"
            )

        def mutate(current: Candidate) -> Candidate:
            merged = {**current.model_dump(), **changes, "updated_at": self._now_provider()}
            return Candidate.model_validate(merged)

        return self._candidates.update(candidate_id, mutate)

    def reassign(self, candidate_id: str, project_id: str) -> Candidate:
        """Attach a candidate to another role, or detach it with ``""``.

        A stage outside the new role's stage set is replaced by that role's
        initial stage through a regular history-recording move.
        """
        role = self._roles.get(project_id) if project_id else None
        previous: list[Candidate] = []

        def mutate(current: Candidate) -> Candidate:
            previous.append(current)
            states = self._machine.states_for(role)
            moved = current
            if current.stage not in states:
                moved = self._machine.move_stage(current, states.initial, role)
            return moved.model_copy(
                update={"project_id": project_id, "updated_at": self._now_provider()}
            )

        candidate = self._candidates.update(candidate_id, mutate)
        before = previous[-1]
        self._activity.record(
            "candidate_reassigned",
            {
                "candidate_id": candidate.id,
                "name": candidate.name,
                "from_project": before.project_id,
                "to_project": project_id,
                "from": before.stage,
                "to": candidate.stage,
            },
        )
        self._logger.info(
            "candidate.reassigned",
            candidate_id=candidate.id,
            project_id=project_id,
            stage=candidate.stage,
        )
        return candidate

    def delete_candidate(self, candidate_id: str) -> bool:
        candidate = self._candidates.find(candidate_id)
        removed = self._candidates.delete(candidate_id)
        if removed and candidate is not None:
            self._activity.record(
                "candidate_deleted", {"candidate_id": candidate_id, "name": candidate.name}
            )
        return removed

    def get_candidate(self, candidate_id: str) -> Candidate:
        return self._candidates.get(candidate_id)

    def list_candidates(
        self,
        *,
        project_id: str | None = None,
        stage: str | None = None,
        source: str | None = None,
        min_score: int | None = None,
        max_score: int | None = None,
        search: str | None = None,
        sort: str | None = None,
    ) -> list[Candidate]:
        candidates = self._candidates.list_all()
        if project_id:
            candidates = [c for c in candidates if c.project_id == project_id]
        if stage:
            candidates = [c for c in candidates if c.stage == stage]
        if source:
            candidates = [c for c in candidates if c.source == source]
        if min_score is not None:
            candidates = [c for c in candidates if (c.score or 0) >= min_score]
        if max_score is not None:
            candidates = [c for c in candidates if (c.score or 0) <= max_score]
        if search:
            needle = search.lower()
            candidates = [
                c for c in candidates if needle in f"{c.name} {c.email} {c.role}".lower()
            ]
        if sort:
            descending = sort.startswith("-")
            attribute = sort.lstrip("-")
            # records without a value always sort last
            present = [c for c in candidates if getattr(c, attribute, None) is not None]
            missing = [c for c in candidates if getattr(c, attribute, None) is None]
            present.sort(key=lambda c: _sort_key(getattr(c, attribute)), reverse=descending)
            candidates = present + missing
        return candidates

    # Scoring

    def current_weights(self) -> ScoringWeights:
        return self._weights.get_weights()

    def save_weights(self, weights: Mapping[str, Any]) -> ScoringWeights:
        saver = getattr(self._weights, "save_weights", None)
        if saver is None:
            raise RecruiterError("Scoring weights are fixed by configuration")
        saved = saver(weights)
        self._logger.info("weights.saved", weights=saved.as_dict())
        return saved

    def score_candidate(
        self,
        candidate_id: str,
        *,
        score: int | None = None,
        breakdown: Mapping[str, Any] | None = None,
        reason: str | None = None,
    ) -> Candidate:
        """Auto-score a candidate, or store a manual override when ``score`` is given."""
        if score is not None:
            return self._override_score(candidate_id, score, breakdown, reason)

        weights = self._weights.get_weights()

        def mutate(current: Candidate) -> Candidate:
            result = self._engine.score(current, self._role_for(current.project_id), weights)
            return current.model_copy(
                update={
                    "score": result.score,
                    "score_breakdown": result.breakdown,
                    "score_reason": AUTO_SCORE_REASON,
                    "updated_at": self._now_provider(),
                }
            )

        candidate = self._candidates.update(candidate_id, mutate)
        self._report_scored(candidate, "auto")
        return candidate

    def _override_score(
        self,
        candidate_id: str,
        score: int,
        breakdown: Mapping[str, Any] | None,
        reason: str | None,
    ) -> Candidate:
        def mutate(current: Candidate) -> Candidate:
            merged = current.model_dump()
            merged.update(
                score=score,
                score_reason=reason or MANUAL_SCORE_REASON,
                updated_at=self._now_provider(),
            )
            if breakdown is not None:
                merged["score_breakdown"] = dict(breakdown)
            return Candidate.model_validate(merged)

        candidate = self._candidates.update(candidate_id, mutate)
        self._report_scored(candidate, "manual")
        return candidate

    def _report_scored(self, candidate: Candidate, method: str) -> None:
        self._activity.record(
            "candidate_scored",
            {
                "candidate_id": candidate.id,
                "name": candidate.name,
                "score": candidate.score,
                "method": method,
            },
        )
        self._logger.info(
            "candidate.scored",
            candidate_id=candidate.id,
            score=candidate.score,
            method=method,
        )

    def batch_score(self) -> int:
        weights = self._weights.get_weights()
        outcome = self._batch.run(
            self._candidates.list_all(),
            self._role_for,
            weights,
            update=self._candidates.update,
        )
        self._activity.record("batch_score", {"scored": outcome.count})
        self._logger.info("batch.scored", scored=outcome.count, skipped=outcome.skipped)
        return outcome.count

    # Pipeline

    def move_stage(self, candidate_id: str, stage: str) -> Candidate:
        previous: list[str] = []

        def mutate(current: Candidate) -> Candidate:
            previous.append(current.stage)
            return self._machine.move_stage(current, stage, self._role_for(current.project_id))

        candidate = self._candidates.update(candidate_id, mutate)
        self._activity.record(
            "stage_change",
            {
                "candidate_id": candidate.id,
                "name": candidate.name,
                "from": previous[0],
                "to": candidate.stage,
            },
        )
        self._logger.info(
            "candidate.stage_changed",
            candidate_id=candidate.id,
            from_stage=previous[0],
            to_stage=candidate.stage,
        )
        return candidate

    def days_in_stage(self, candidate_id: str) -> int:
        return self._machine.days_in_current_stage(self._candidates.get(candidate_id))

    def stages_for(self, candidate_id: str) -> list[str]:
        candidate = self._candidates.get(candidate_id)
        return list(self._machine.states_for(self._role_for(candidate.project_id)))

    # Reporting

    def dashboard(self, *, activity_limit: int = 20) -> DashboardSummary:
        candidates = self._candidates.list_all()
        recent = getattr(self._activity, "recent", None)
        return DashboardSummary(
            active_roles=sum(1 for role in self._roles.list_all() if role.is_open),
            total_candidates=len(candidates),
            unscored=sum(1 for c in candidates if not c.is_scored),
            stage_distribution=dict(Counter(c.stage for c in candidates)),
            source_distribution=dict(Counter(c.source or "unknown" for c in candidates)),
            recent_activity=recent(activity_limit) if recent else [],
        )

    def _role_for(self, project_id: str) -> RoleProfile | None:
        if not project_id:
            return None
        return self._roles.find(project_id)


def _sort_key(value: Any) -> tuple[int, Any]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    return (1, str(value or ""))
