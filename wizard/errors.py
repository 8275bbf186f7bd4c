"""Exception types for the step-flow engine."""

from __future__ import annotations


class WizardError(Exception):
    """Base exception for step-flow related issues."""


class ConfigurationError(WizardError):
    """Raised when a flow is set up with a malformed step list or initial value."""


class InvalidArgumentError(WizardError):
    """Raised when ``set_field`` is called with an unsupported argument shape.

    The engine catches this error, logs it and ignores the update.
    """


class SubmissionError(WizardError):
    """Wraps a failure raised by the host's submission callback."""

    def __init__(self, flow_id: str, cause: BaseException) -> None:
        super().__init__(f"Submission callback for flow '{flow_id}' failed: {cause}")
        self.flow_id = flow_id
        self.__cause__ = cause


__all__ = [
    "ConfigurationError",
    "InvalidArgumentError",
    "SubmissionError",
    "WizardError",
]
