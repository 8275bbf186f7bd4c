"""Central configuration for the freight quote wizard.

Values come from the environment (optionally seeded from a ``.env`` file).
``QUOTE_API_BASE_URL`` may also be provided through Streamlit secrets, which
take precedence over the environment.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping

import streamlit as st
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

_TRUTHY_ENV_VALUES: tuple[str, ...] = ("1", "true", "yes", "on")
_LOG_LEVELS: tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

DEFAULT_API_BASE_URL = "http://localhost:8080/api"
DEFAULT_API_TIMEOUT = 10.0


def _is_truthy_flag(value: str | None) -> bool:
    """Return ``True`` when ``value`` matches a truthy environment token."""

    if value is None:
        return False
    return value.strip().lower() in _TRUTHY_ENV_VALUES


def _normalise_timeout(value: object | None, *, default: float = DEFAULT_API_TIMEOUT) -> float:
    """Return a positive timeout value in seconds."""

    if value is None:
        return default
    candidate = value
    if isinstance(candidate, str):
        stripped = candidate.strip()
        if not stripped:
            return default
        try:
            candidate = float(stripped)
        except ValueError:
            logger.warning("Invalid QUOTE_API_TIMEOUT '%s'; using %.1fs", value, default)
            return default
    if not isinstance(candidate, (int, float)) or isinstance(candidate, bool):
        return default
    if candidate <= 0:
        logger.warning("Non-positive QUOTE_API_TIMEOUT '%s'; using %.1fs", value, default)
        return default
    return float(candidate)


def _normalise_log_level(value: str | None) -> str:
    candidate = (value or "").strip().upper()
    if candidate in _LOG_LEVELS:
        return candidate
    return "INFO"


def _read_secret(name: str) -> str:
    try:
        raw = st.secrets[name]
    except Exception:
        return ""
    if isinstance(raw, Mapping):
        return ""
    return str(raw).strip() if raw is not None else ""


def get_api_base_url() -> str:
    """Return the quoting API base URL from secrets, the environment or the default."""

    secret = _read_secret("QUOTE_API_BASE_URL")
    if secret:
        return secret.rstrip("/")
    env_value = (os.getenv("QUOTE_API_BASE_URL") or "").strip()
    if env_value:
        return env_value.rstrip("/")
    return DEFAULT_API_BASE_URL


APP_TITLE = os.getenv("APP_TITLE", "Get a Freight Quote")
APP_SUBTITLE = os.getenv(
    "APP_SUBTITLE",
    "Find the best shipping rates for your cargo in just a few steps",
)
QUOTE_API_BASE_URL = get_api_base_url()
QUOTE_API_TIMEOUT = _normalise_timeout(os.getenv("QUOTE_API_TIMEOUT"))
LOG_LEVEL = _normalise_log_level(os.getenv("LOG_LEVEL"))
DEBUG_MODE = _is_truthy_flag(os.getenv("DEBUG_MODE"))


__all__ = [
    "APP_SUBTITLE",
    "APP_TITLE",
    "DEBUG_MODE",
    "DEFAULT_API_BASE_URL",
    "DEFAULT_API_TIMEOUT",
    "LOG_LEVEL",
    "QUOTE_API_BASE_URL",
    "QUOTE_API_TIMEOUT",
    "get_api_base_url",
]
