"""Navigation helpers for the step-flow engine."""

from __future__ import annotations

from wizard.navigation.router import StepFlowEngine, coerce_patch
from wizard.navigation.state import FlowProgress, FlowSnapshot, FlowState, NavigationOutcome
from wizard.navigation.ui import (
    discard_engine,
    get_or_create_engine,
    render_flow,
    render_progress,
    render_validation_warnings,
    run_advance,
    session_key,
)

__all__ = [
    "FlowProgress",
    "FlowSnapshot",
    "FlowState",
    "NavigationOutcome",
    "StepFlowEngine",
    "coerce_patch",
    "discard_engine",
    "get_or_create_engine",
    "render_flow",
    "render_progress",
    "render_validation_warnings",
    "run_advance",
    "session_key",
]
