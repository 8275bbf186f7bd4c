# app.py: freight quote wizard (Streamlit entrypoint)
from __future__ import annotations

from pathlib import Path
import sys
from typing import Any
from uuid import uuid4

import streamlit as st

APP_ROOT = Path(__file__).resolve().parent
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

import config  # noqa: E402
from constants.keys import StateKeys, UIKeys  # noqa: E402
from quote.api import QuoteApiClient  # noqa: E402
from quote.models import QuoteRequirement, initial_quote_form  # noqa: E402
from quote.steps import build_quote_steps  # noqa: E402
from quote.submission import make_quote_submitter  # noqa: E402
from utils.logging_context import configure_logging, set_session_id  # noqa: E402
from utils.telemetry import setup_tracing  # noqa: E402
from wizard import StepFlowEngine  # noqa: E402
from wizard.navigation import discard_engine, get_or_create_engine, render_flow  # noqa: E402

FLOW_ID = "quote"

configure_logging(level=config.LOG_LEVEL)
setup_tracing()

st.set_page_config(page_title=config.APP_TITLE, page_icon="🚢", layout="centered")

if StateKeys.SESSION_ID not in st.session_state:
    st.session_state[StateKeys.SESSION_ID] = uuid4().hex
set_session_id(str(st.session_state[StateKeys.SESSION_ID]))


def _store_quotes(requirement: QuoteRequirement, quotes: list[dict[str, Any]]) -> None:
    st.session_state[StateKeys.QUOTE_REQUIREMENT] = requirement
    st.session_state[StateKeys.QUOTE_RESULTS] = quotes


def _build_engine() -> StepFlowEngine:
    client = QuoteApiClient()
    shipping_type = st.query_params.get("shippingType")
    return StepFlowEngine(
        build_quote_steps(client),
        initial_quote_form(shipping_type),
        on_submit=make_quote_submitter(client, _store_quotes),
        flow_id=FLOW_ID,
    )


def _start_over() -> None:
    discard_engine(FLOW_ID)
    for key in (StateKeys.QUOTE_REQUIREMENT, StateKeys.QUOTE_RESULTS):
        st.session_state.pop(key, None)


def _render_results(requirement: QuoteRequirement, quotes: list[dict[str, Any]]) -> None:
    st.subheader("Available Quotes")
    st.caption(
        f"{requirement.shipping_type} shipment on {requirement.shipping_date.isoformat()} "
        f"({requirement.cargo_type_category} / {requirement.cargo_type})"
    )
    if quotes:
        st.dataframe(quotes, hide_index=True)
    else:
        st.info("No quotes match your requirements. Try another date or route.")
    st.button("Start over", key=UIKeys.START_OVER, on_click=_start_over)


st.title(config.APP_TITLE)
st.caption(config.APP_SUBTITLE)

engine = get_or_create_engine(FLOW_ID, _build_engine)
results = st.session_state.get(StateKeys.QUOTE_RESULTS)
requirement = st.session_state.get(StateKeys.QUOTE_REQUIREMENT)

if results is not None and isinstance(requirement, QuoteRequirement):
    _render_results(requirement, results)
else:
    if engine.submission_error is not None:
        st.error("We couldn't fetch quotes right now. Please try again in a moment.")
        if config.DEBUG_MODE:
            st.exception(engine.submission_error)
    render_flow(engine, submit_label="Get Quotes", loading_label="Searching...")
