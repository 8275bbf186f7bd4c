"""Step definitions, validation results and active-step resolution."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from wizard.errors import ConfigurationError
from wizard.types import FieldErrors, FormData


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one step against the aggregated form data.

    ``is_valid`` is derived from ``errors`` so both can never disagree.
    """

    errors: FieldErrors = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "errors", MappingProxyType(dict(self.errors)))

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def from_errors(cls, errors: Mapping[str, str] | None) -> "ValidationResult":
        """Build a result from ``errors``, dropping entries without a message."""

        cleaned = {name: message for name, message in (errors or {}).items() if message}
        return cls(errors=cleaned)


StepValidator = Callable[[FormData], ValidationResult]
StepPredicate = Callable[[FormData], bool]


@dataclass(frozen=True)
class StepContext:
    """Everything a step renderer receives from the engine.

    ``form_data`` is a live read-only view: callbacks fired after the render
    see every update made through ``set_field`` since.
    """

    form_data: FormData
    errors: FieldErrors
    set_field: Callable[..., None]
    attempted_advance: bool
    step_index: int = 1
    total_steps: int = 1


StepRenderer = Callable[[StepContext], Any]


@dataclass(frozen=True)
class StepDefinition:
    """Metadata + rendering contract for an individual flow step."""

    key: str
    title: str
    render: StepRenderer
    validator: StepValidator | None = None
    skip_when: StepPredicate | None = None
    description: str = ""

    def validate(self, form_data: FormData) -> ValidationResult:
        """Return the validation result for ``form_data`` (always valid without a validator)."""

        if self.validator is None:
            return ValidationResult.ok()
        return self.validator(form_data)

    def should_skip(self, form_data: FormData) -> bool:
        if self.skip_when is None:
            return False
        return bool(self.skip_when(form_data))


def merge_validation_results(*results: ValidationResult) -> ValidationResult:
    """Combine ``results`` into one; later results win on duplicate fields."""

    merged: dict[str, str] = {}
    for result in results:
        merged.update(result.errors)
    return ValidationResult(errors=merged)


def ensure_valid_steps(steps: Sequence[object]) -> tuple[StepDefinition, ...]:
    """Return ``steps`` as a tuple or raise :class:`ConfigurationError`."""

    ordered = tuple(steps)
    if not ordered:
        raise ConfigurationError("A flow needs at least one step definition")
    seen: set[str] = set()
    duplicates: list[str] = []
    for step in ordered:
        if not isinstance(step, StepDefinition):
            raise ConfigurationError(f"Expected StepDefinition, got {type(step).__name__}")
        if not isinstance(step.key, str) or not step.key:
            raise ConfigurationError("Step keys must be non-empty strings")
        if step.key in seen:
            duplicates.append(step.key)
        seen.add(step.key)
    if duplicates:
        listed = ", ".join(sorted(set(duplicates)))
        raise ConfigurationError(f"Duplicate step keys: {listed}")
    return ordered


def resolve_active_step_keys(steps: Sequence[StepDefinition], form_data: FormData) -> tuple[str, ...]:
    """Return the keys of steps not skipped for ``form_data``, in canonical order."""

    return tuple(step.key for step in steps if not step.should_skip(form_data))


def resolve_current_index(current_key: str | None, current_index: int, active_keys: Sequence[str]) -> int:
    """Return the 1-based index to land on after the active steps changed.

    A step that is still active keeps being current. A step that dropped out
    leaves the cursor at ``current_index`` clamped to the new length.
    """

    if current_key is not None and current_key in active_keys:
        return active_keys.index(current_key) + 1
    return max(1, min(current_index, len(active_keys)))


__all__ = [
    "StepContext",
    "StepDefinition",
    "StepPredicate",
    "StepRenderer",
    "StepValidator",
    "ValidationResult",
    "ensure_valid_steps",
    "merge_validation_results",
    "resolve_active_step_keys",
    "resolve_current_index",
]
