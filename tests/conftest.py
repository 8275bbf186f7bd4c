from pathlib import Path
import sys
from typing import Any

import streamlit as st

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quote.models import initial_quote_form  # noqa: E402


class _SessionState(dict[str, Any]):
    """Plain-dict stand-in for ``st.session_state`` outside a Streamlit run."""


@pytest.fixture(autouse=True)
def session_state(monkeypatch: pytest.MonkeyPatch) -> _SessionState:
    """Give every test an empty session state."""

    state = _SessionState()
    monkeypatch.setattr(st, "session_state", state, raising=False)
    return state


@pytest.fixture
def air_quote_form() -> dict[str, Any]:
    """A complete air freight quote form that passes every step's validation."""

    form = initial_quote_form("AIR")
    form.update(
        origin=1,
        destination=2,
        shippingDate="2099-03-12",
        numberOfPackages=3,
        grossWeightKG=12.0,
        volumeCBM=0.5,
        cargoTypeCategory="General Cargo",
        cargoType="Electronics",
    )
    return form
