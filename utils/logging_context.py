"""Contextual logging for the quote wizard.

Every log record carries the Streamlit session, the flow and the step it was
emitted from. The values live in context variables so concurrent sessions
served by the same process never see each other's context.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator, Mapping

LOG_FORMAT = (
    "%(asctime)s %(levelname)s [session=%(session_id)s flow=%(flow_id)s step=%(wizard_step)s] "
    "%(name)s: %(message)s"
)
_EMPTY = "-"

_CONTEXT_VARS: Mapping[str, contextvars.ContextVar[str]] = {
    name: contextvars.ContextVar(name, default=_EMPTY) for name in ("session_id", "flow_id", "wizard_step")
}
_base_record_factory = logging.getLogRecordFactory()
_factory_installed = False


def _normalise(value: str | None) -> str:
    if value is None:
        return _EMPTY
    return value.strip() or _EMPTY


def _stamp(record: logging.LogRecord) -> None:
    for name, var in _CONTEXT_VARS.items():
        setattr(record, name, var.get())


class _ContextFilter(logging.Filter):
    """Stamp context fields on records that bypassed the record factory."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 - logging protocol
        if not hasattr(record, "flow_id"):
            _stamp(record)
        return True


def _contextual_record_factory(*args: object, **kwargs: object) -> logging.LogRecord:
    record = _base_record_factory(*args, **kwargs)
    _stamp(record)
    return record


def configure_logging(*, level: int | str | None = None) -> None:
    """Install the contextual format on the root logger.

    Safe to call on every Streamlit rerun; handlers, filters and the record
    factory are only added once. ``level`` is applied when given.
    """

    global _factory_installed

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    if level is not None:
        root.setLevel(level)
    for handler in root.handlers:
        if handler.formatter is None:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
        if not any(isinstance(flt, _ContextFilter) for flt in handler.filters):
            handler.addFilter(_ContextFilter())
    if not _factory_installed:
        logging.setLogRecordFactory(_contextual_record_factory)
        _factory_installed = True


def set_session_id(session_id: str | None) -> None:
    """Bind the Streamlit session for the rest of the script run."""

    configure_logging()
    _CONTEXT_VARS["session_id"].set(_normalise(session_id))


@contextmanager
def log_context(
    *,
    session_id: str | None = None,
    flow_id: str | None = None,
    wizard_step: str | None = None,
) -> Iterator[None]:
    """Override context fields inside the ``with`` block.

    Fields passed as ``None`` keep their current value.
    """

    overrides = {"session_id": session_id, "flow_id": flow_id, "wizard_step": wizard_step}
    tokens = [
        (_CONTEXT_VARS[name], _CONTEXT_VARS[name].set(_normalise(value)))
        for name, value in overrides.items()
        if value is not None
    ]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


__all__ = [
    "LOG_FORMAT",
    "configure_logging",
    "log_context",
    "set_session_id",
]
