from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping, Sequence
from contextlib import AbstractContextManager
from types import MappingProxyType
from typing import Any

from opentelemetry import trace

from utils.logging_context import log_context
from wizard.errors import ConfigurationError, InvalidArgumentError, SubmissionError
from wizard.navigation.state import FlowProgress, FlowSnapshot, FlowState, NavigationOutcome
from wizard.step_registry import (
    StepContext,
    StepDefinition,
    ensure_valid_steps,
    merge_validation_results,
    resolve_active_step_keys,
    resolve_current_index,
)
from wizard.types import FieldErrors, FormData, SubmitCallback

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


UNSET: Any = _Unset()


def coerce_patch(field_or_patch: object, value: object = UNSET) -> dict[str, Any]:
    """Normalise both ``set_field`` calling conventions into a patch mapping."""

    if isinstance(field_or_patch, Mapping):
        invalid = [key for key in field_or_patch if not isinstance(key, str)]
        if invalid:
            raise InvalidArgumentError(f"Field names must be strings, got {invalid!r}")
        return dict(field_or_patch)
    if isinstance(field_or_patch, str):
        if value is UNSET:
            raise InvalidArgumentError(f"Value is required for single field update of '{field_or_patch}'")
        return {field_or_patch: value}
    raise InvalidArgumentError(
        f"Expected a field name or a mapping of fields, got {type(field_or_patch).__name__}"
    )


class StepFlowEngine:
    """Drive a linear sequence of data-entry steps that share one form value.

    Steps may drop out of the sequence depending on the current form data.
    The engine validates the current step before moving forward, re-validates
    every active step before handing the final value to ``on_submit`` and
    never lets a validation or submission failure escape to the caller.
    """

    def __init__(
        self,
        steps: Sequence[StepDefinition],
        initial_data: FormData,
        *,
        on_submit: SubmitCallback,
        flow_id: str = "default",
    ) -> None:
        self._flow_id = flow_id
        self._on_submit = on_submit
        self._steps: tuple[StepDefinition, ...] = ()
        self._step_map: dict[str, StepDefinition] = {}
        self._initial_data: dict[str, Any] = {}
        self._state = FlowState()
        self.initialize(steps, initial_data)

    def initialize(self, steps: Sequence[StepDefinition], initial_data: FormData) -> None:
        """Validate the step list and seed a fresh flow state."""

        ordered = ensure_valid_steps(steps)
        if not isinstance(initial_data, Mapping):
            raise ConfigurationError(
                f"Initial form data must be a mapping, got {type(initial_data).__name__}"
            )
        self._steps = ordered
        self._step_map = {step.key: step for step in ordered}
        self._initial_data = dict(initial_data)
        form_data = dict(initial_data)
        self._state = FlowState(
            form_data=form_data,
            active_keys=resolve_active_step_keys(ordered, form_data),
        )
        with self._log_scope():
            if not self._state.active_keys:
                logger.info("All %d steps are skipped for the initial data", len(ordered))
            else:
                logger.debug(
                    "Initialised flow with active steps: %s",
                    ", ".join(self._state.active_keys),
                )

    def reset(self, initial_data: FormData | None = None) -> None:
        """Discard the current state and start over from ``initial_data``."""

        self.initialize(self._steps, self._initial_data if initial_data is None else initial_data)

    # -- read access -----------------------------------------------------

    @property
    def flow_id(self) -> str:
        return self._flow_id

    @property
    def steps(self) -> tuple[StepDefinition, ...]:
        return self._steps

    @property
    def active_steps(self) -> tuple[StepDefinition, ...]:
        return tuple(self._step_map[key] for key in self._state.active_keys)

    @property
    def current_step(self) -> StepDefinition | None:
        key = self._state.current_key
        return self._step_map[key] if key is not None else None

    @property
    def current_index(self) -> int:
        return self._state.current_index

    @property
    def total_steps(self) -> int:
        return len(self._state.active_keys)

    @property
    def form_data(self) -> FormData:
        return MappingProxyType(self._state.form_data)

    @property
    def errors(self) -> FieldErrors:
        return MappingProxyType(self._state.errors)

    @property
    def attempted_advance(self) -> bool:
        return self._state.attempted_advance

    @property
    def is_submitting(self) -> bool:
        return self._state.is_submitting

    @property
    def is_first_step(self) -> bool:
        return self._state.current_index <= 1

    @property
    def is_last_step(self) -> bool:
        return self._state.current_index >= len(self._state.active_keys)

    @property
    def step_errors(self) -> Mapping[str, FieldErrors]:
        return MappingProxyType(
            {key: MappingProxyType(errors) for key, errors in self._state.step_errors.items()}
        )

    @property
    def failed_step_keys(self) -> tuple[str, ...]:
        """Active steps that failed the last ``submit()`` re-validation, in flow order."""

        return tuple(key for key in self._state.active_keys if key in self._state.step_errors)

    @property
    def submission_error(self) -> SubmissionError | None:
        return self._state.submission_error

    @property
    def progress(self) -> FlowProgress:
        total = len(self._state.active_keys)
        return FlowProgress(current=self._state.current_index if total else 0, total=total)

    def snapshot(self) -> FlowSnapshot:
        return FlowSnapshot.from_state(self._state)

    def render_current(self) -> Any:
        """Invoke the current step's renderer; ``None`` when every step is skipped."""

        step = self.current_step
        if step is None:
            return None
        state = self._state
        context = StepContext(
            form_data=MappingProxyType(state.form_data),
            errors=MappingProxyType(dict(state.errors)),
            set_field=self.set_field,
            attempted_advance=state.attempted_advance,
            step_index=state.current_index,
            total_steps=len(state.active_keys),
        )
        with self._log_scope():
            return step.render(context)

    # -- mutations -------------------------------------------------------

    def set_field(
        self,
        field_or_patch: str | Mapping[str, Any],
        value: Any = UNSET,
        *,
        should_validate: bool = True,
    ) -> None:
        """Merge one field or a patch of fields into the form data."""

        with self._log_scope():
            try:
                patch = coerce_patch(field_or_patch, value)
            except InvalidArgumentError as exc:
                logger.warning("Ignoring form update: %s", exc)
                return

            state = self._state
            previous_key = state.current_key
            state.form_data.update(patch)
            self._refresh_active_steps(previous_key)

            step = self.current_step
            if should_validate and state.attempted_advance and step is not None and step.validator is not None:
                state.errors = dict(step.validate(state.form_data).errors)

    async def advance(self) -> NavigationOutcome:
        """Validate the current step and move forward, submitting after the last step."""

        state = self._state
        step = self.current_step
        if step is None:
            return await self.submit()

        with self._log_scope():
            state.attempted_advance = True
            result = step.validate(state.form_data)
            state.errors = dict(result.errors)
            if not result.is_valid:
                logger.info("Step '%s' has %d validation error(s)", step.key, len(result.errors))
                return NavigationOutcome.BLOCKED
            if state.current_index < len(state.active_keys):
                state.current_index += 1
                state.attempted_advance = False
                state.errors = {}
                logger.info("Advanced from '%s' to '%s'", step.key, state.current_key)
                return NavigationOutcome.ADVANCED

        return await self.submit()

    def retreat(self) -> bool:
        """Move back one step; returns ``False`` on the first step."""

        state = self._state
        if state.current_index <= 1 or not state.active_keys:
            return False
        with self._log_scope():
            state.current_index -= 1
            state.errors = {}
            state.attempted_advance = False
            logger.info("Moved back to '%s'", state.current_key)
        return True

    async def submit(self) -> NavigationOutcome:
        """Re-validate all active steps and hand the form data to ``on_submit``."""

        state = self._state
        with self._log_scope():
            state.attempted_advance = True
            results = {step.key: step.validate(state.form_data) for step in self.active_steps}
            failed = {key: result for key, result in results.items() if not result.is_valid}
            state.step_errors = {key: dict(result.errors) for key, result in failed.items()}
            if failed:
                state.errors = dict(merge_validation_results(*failed.values()).errors)
                logger.info("Submission aborted; invalid steps: %s", ", ".join(failed))
                return NavigationOutcome.REJECTED

            state.errors = {}
            state.submission_error = None
            state.is_submitting = True
            payload = dict(state.form_data)
            logger.info("Submitting flow with %d active step(s)", len(state.active_keys))

        try:
            with tracer.start_as_current_span("wizard.submit") as span:
                span.set_attribute("wizard.flow_id", self._flow_id)
                span.set_attribute("wizard.step_count", len(state.active_keys))
                outcome = self._on_submit(payload)
                if inspect.isawaitable(outcome):
                    await outcome
        except Exception as exc:  # noqa: BLE001 - surfaced through submission_error
            state.submission_error = SubmissionError(self._flow_id, exc)
            with self._log_scope():
                logger.exception("Form submission failed")
            return NavigationOutcome.FAILED
        finally:
            state.is_submitting = False

        with self._log_scope():
            logger.info("Form submission completed")
        return NavigationOutcome.SUBMITTED

    # -- internals -------------------------------------------------------

    def _refresh_active_steps(self, previous_key: str | None) -> None:
        state = self._state
        active = resolve_active_step_keys(self._steps, state.form_data)
        if active == state.active_keys:
            return
        state.active_keys = active
        if not active:
            state.current_index = 1
            state.errors = {}
            state.attempted_advance = False
            logger.info("All steps are skipped for the current form data")
            return
        state.current_index = resolve_current_index(previous_key, state.current_index, active)
        if state.current_key != previous_key:
            state.errors = {}
            state.attempted_advance = False
            logger.info("Step '%s' is no longer active; now on '%s'", previous_key, state.current_key)

    def _log_scope(self) -> AbstractContextManager[None]:
        return log_context(flow_id=self._flow_id, wizard_step=self._state.current_key or "")


__all__ = [
    "StepFlowEngine",
    "UNSET",
    "coerce_patch",
]
