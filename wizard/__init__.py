"""Multi-step form engine: step definitions, navigation and validation."""

from __future__ import annotations

from wizard.errors import ConfigurationError, InvalidArgumentError, SubmissionError, WizardError
from wizard.navigation.router import StepFlowEngine
from wizard.navigation.state import FlowProgress, FlowSnapshot, NavigationOutcome
from wizard.step_registry import (
    StepContext,
    StepDefinition,
    ValidationResult,
    merge_validation_results,
)

__all__ = [
    "ConfigurationError",
    "FlowProgress",
    "FlowSnapshot",
    "InvalidArgumentError",
    "NavigationOutcome",
    "StepContext",
    "StepDefinition",
    "StepFlowEngine",
    "SubmissionError",
    "ValidationResult",
    "WizardError",
    "merge_validation_results",
]
