"""Error taxonomy shared by stores, the state machine and weight loading."""

from __future__ import annotations

from typing import Any, Iterable


class RecruiterError(Exception):
    """Base class for recruiter failures surfaced to callers."""


class NotFound(RecruiterError, KeyError):
    """Raised when a candidate or role id is unknown to its store."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} not found: {record_id!r}")
        self.kind = kind
        self.record_id = record_id

    def __str__(self) -> str:
        return self.args[0]


class InvalidStage(RecruiterError, ValueError):
    """Raised when a transition targets a stage outside the resolved set."""

    def __init__(self, stage: str, allowed: Iterable[str]):
        self.stage = stage
        self.allowed = tuple(allowed)
        super().__init__(
            f"Unknown stage {stage!r}; expected one of: {', '.join(self.allowed)}"
        )


class InvalidWeight(RecruiterError, ValueError):
    """Raised for unusable scoring weights."""

    def __init__(self, factor: str, value: Any, reason: str = "outside [1, 10]"):
        self.factor = factor
        self.value = value
        super().__init__(f"Invalid weight for {factor!r}: {value!r} ({reason})")


__all__ = ["RecruiterError", "NotFound", "InvalidStage", "InvalidWeight"]
