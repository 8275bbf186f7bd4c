from __future__ import annotations

import asyncio
import logging
from typing import Callable, Mapping

import streamlit as st

from wizard.navigation.router import StepFlowEngine
from wizard.navigation.state import FlowProgress, NavigationOutcome

logger = logging.getLogger(__name__)

SESSION_PREFIX = "wiz"


def session_key(flow_id: str, name: str) -> str:
    """Return the session-state key for ``name`` within flow ``flow_id``."""

    return f"{SESSION_PREFIX}:{flow_id}:{name}"


def get_or_create_engine(flow_id: str, factory: Callable[[], StepFlowEngine]) -> StepFlowEngine:
    """Return the flow engine stored in the session, creating it on first use."""

    key = session_key(flow_id, "engine")
    engine = st.session_state.get(key)
    if not isinstance(engine, StepFlowEngine):
        engine = factory()
        st.session_state[key] = engine
    return engine


def discard_engine(flow_id: str) -> None:
    st.session_state.pop(session_key(flow_id, "engine"), None)


def run_advance(engine: StepFlowEngine) -> NavigationOutcome:
    """Drive ``engine.advance()`` from Streamlit's synchronous script thread."""

    return asyncio.run(engine.advance())


def render_progress(progress: FlowProgress) -> None:
    if progress.total <= 0:
        return
    st.progress(progress.ratio, text=f"Step {progress.current} of {progress.total}")


def render_validation_warnings(errors: Mapping[str, str]) -> None:
    messages = list(dict.fromkeys(errors.values())) if errors else []
    if not messages:
        return
    bullet_list = "\n".join(f"- {message}" for message in messages)
    st.warning(f"Please fix the following before continuing:\n\n{bullet_list}")


def next_button_label(engine: StepFlowEngine, *, submit_label: str, loading_label: str) -> str:
    if engine.is_submitting:
        return loading_label
    if engine.is_last_step:
        return submit_label
    return "Next ▶"


def render_flow(
    engine: StepFlowEngine,
    *,
    submit_label: str = "Submit",
    loading_label: str = "Processing...",
) -> None:
    """Render progress, the current step and the navigation controls.

    Args:
        engine: The flow to render.
        submit_label: Label of the forward button on the last step.
        loading_label: Label and spinner text while the submission runs.
    """

    render_progress(engine.progress)

    step = engine.current_step
    try:
        engine.render_current()
    except Exception as error:  # noqa: BLE001 - keep navigation usable
        logger.warning("Failed to render step '%s'", step.key if step else "-", exc_info=error)
        st.error("We couldn't render this step. Please edit the fields again or reload the page.")

    if engine.attempted_advance:
        render_validation_warnings(engine.errors)

    previous_col, next_col = st.columns(2)
    with previous_col:
        go_back = st.button(
            "◀ Previous",
            key=session_key(engine.flow_id, "previous"),
            disabled=engine.is_first_step or engine.is_submitting,
        )
    with next_col:
        go_forward = st.button(
            next_button_label(engine, submit_label=submit_label, loading_label=loading_label),
            key=session_key(engine.flow_id, "next"),
            type="primary",
            disabled=engine.is_submitting,
        )

    if go_back:
        engine.retreat()
        st.rerun()
    if go_forward:
        with st.spinner(loading_label):
            outcome = run_advance(engine)
        logger.debug("Forward navigation finished with outcome %s", outcome)
        st.rerun()


__all__ = [
    "discard_engine",
    "get_or_create_engine",
    "next_button_label",
    "render_flow",
    "render_progress",
    "render_validation_warnings",
    "run_advance",
    "session_key",
]
