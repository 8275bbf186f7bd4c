"""State containers for the step-flow engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Mapping

from wizard.errors import SubmissionError


class NavigationOutcome(StrEnum):
    """Result of an ``advance()`` or ``submit()`` call."""

    BLOCKED = "blocked"
    ADVANCED = "advanced"
    SUBMITTED = "submitted"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass
class FlowState:
    """Mutable flow state; only the engine writes to it."""

    form_data: dict[str, Any] = field(default_factory=dict)
    active_keys: tuple[str, ...] = ()
    current_index: int = 1
    errors: dict[str, str] = field(default_factory=dict)
    attempted_advance: bool = False
    is_submitting: bool = False
    step_errors: dict[str, dict[str, str]] = field(default_factory=dict)
    submission_error: SubmissionError | None = None

    @property
    def current_key(self) -> str | None:
        if not self.active_keys:
            return None
        return self.active_keys[self.current_index - 1]


@dataclass(frozen=True)
class FlowProgress:
    """Position of the current step within the active steps."""

    current: int
    total: int

    @property
    def ratio(self) -> float:
        if self.total <= 0:
            return 0.0
        return max(0.0, min(1.0, self.current / self.total))

    @property
    def percentage(self) -> int:
        return round(self.ratio * 100)


@dataclass(frozen=True)
class FlowSnapshot:
    """Immutable copy of the observable flow state."""

    current_key: str | None
    current_index: int
    total_steps: int
    form_data: Mapping[str, Any]
    errors: Mapping[str, str]
    attempted_advance: bool
    is_submitting: bool

    @classmethod
    def from_state(cls, state: FlowState) -> "FlowSnapshot":
        return cls(
            current_key=state.current_key,
            current_index=state.current_index,
            total_steps=len(state.active_keys),
            form_data=MappingProxyType(dict(state.form_data)),
            errors=MappingProxyType(dict(state.errors)),
            attempted_advance=state.attempted_advance,
            is_submitting=state.is_submitting,
        )


__all__ = [
    "FlowProgress",
    "FlowSnapshot",
    "FlowState",
    "NavigationOutcome",
]
