"""Pipeline stage state machine with append-only history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator

import pendulum
import structlog

from ..errors import InvalidStage
from ..schemas import (
    DEFAULT_STAGES,
    REJECTED_STAGE,
    Candidate,
    CandidateDraft,
    RoleProfile,
    StageTransition,
)


@dataclass(frozen=True, slots=True)
class StageSet:
    """Ordered, validated set of stages usable for one role."""

    stages: tuple[str, ...]

    @classmethod
    def for_role(cls, role: RoleProfile | None) -> "StageSet":
        if role is None or not role.pipeline_stages:
            return cls(DEFAULT_STAGES)
        return cls((*role.pipeline_stages, REJECTED_STAGE))

    @property
    def initial(self) -> str:
        return self.stages[0]

    def __contains__(self, stage: object) -> bool:
        return stage in self.stages

    def __iter__(self) -> Iterator[str]:
        return iter(self.stages)

    def __len__(self) -> int:
        return len(self.stages)


class PipelineStateMachine:
    """Owns every change to ``Candidate.stage`` and ``Candidate.stage_history``.

    Any stage may follow any other, including itself; each move appends one
    history entry. With ``strict`` (the default) targets outside the role's
    stage set raise ``InvalidStage``; otherwise they are logged and accepted.
    """

    def __init__(
        self,
        *,
        strict: bool | None = None,
        now_provider: Callable[[], Any] | None = None,
    ) -> None:
        self._strict = True if strict is None else strict
        self._now_provider = now_provider or (lambda: pendulum.now("UTC"))
        self._logger = structlog.get_logger(__name__)

    @property
    def strict(self) -> bool:
        return self._strict

    def states_for(self, role: RoleProfile | None) -> StageSet:
        return StageSet.for_role(role)

    def admit(self, draft: CandidateDraft, role: RoleProfile | None) -> Candidate:
        """Create a candidate at its initial stage with a seeded history."""
        states = self.states_for(role)
        stage = draft.stage or states.initial
        self._check(stage, states)
        now = self._now_provider()
        fields = draft.model_dump(exclude={"stage"})
        return Candidate(
            **fields,
            stage=stage,
            stage_history=[StageTransition(stage=stage, from_stage=None, timestamp=now)],
            created_at=now,
        )

    def move_stage(
        self,
        candidate: Candidate,
        target: str,
        role: RoleProfile | None,
    ) -> Candidate:
        """Return a copy of ``candidate`` moved to ``target``."""
        self._check(target, self.states_for(role))
        now = self._now_provider()
        entry = StageTransition(stage=target, from_stage=candidate.stage, timestamp=now)
        return candidate.model_copy(
            update={
                "stage": target,
                "stage_history": [*candidate.stage_history, entry],
                "updated_at": now,
            }
        )

    def days_in_current_stage(self, candidate: Candidate) -> int:
        entered = pendulum.instance(candidate.stage_history[-1].timestamp)
        now = pendulum.instance(self._now_provider())
        if entered >= now:
            return 0
        return now.diff(entered).in_days()

    def _check(self, stage: str, states: StageSet) -> None:
        if stage in states:
            return
        if self._strict:
            raise InvalidStage(stage, states)
        self._logger.warning("stage.unknown", stage=stage, allowed=list(states))
