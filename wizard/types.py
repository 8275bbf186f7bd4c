"""Shared type aliases for the wizard package."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping


# Aggregated value shared by all steps of a flow
FormData = Mapping[str, Any]

# Field name -> human readable message
FieldErrors = Mapping[str, str]

SubmitCallback = Callable[[dict[str, Any]], Awaitable[object] | object]


__all__ = [
    "FieldErrors",
    "FormData",
    "SubmitCallback",
]
