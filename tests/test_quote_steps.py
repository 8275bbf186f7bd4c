from __future__ import annotations

import streamlit as st

from constants.keys import UIKeys
from quote.models import initial_quote_form
from quote.steps import (
    build_quote_steps,
    cargo_category_callback,
    container_count_callback,
    field_callback,
    shipping_type_callback,
    sync_widget,
)
from wizard import StepContext, StepFlowEngine


class _UnusedClient:
    base_url = "http://api"


async def _noop_submit(_data) -> None:
    return None


def _engine(shipping_type: str | None = None) -> StepFlowEngine:
    return StepFlowEngine(
        build_quote_steps(_UnusedClient()),  # type: ignore[arg-type]
        initial_quote_form(shipping_type),
        on_submit=_noop_submit,
        flow_id="quote",
    )


def _ctx(engine: StepFlowEngine) -> StepContext:
    return StepContext(
        form_data=engine.form_data,
        errors=engine.errors,
        set_field=engine.set_field,
        attempted_advance=engine.attempted_advance,
    )


def _active_keys(engine: StepFlowEngine) -> list[str]:
    return [step.key for step in engine.active_steps]


def test_catalogue_order() -> None:
    assert [step.key for step in _engine().steps] == [
        "shipping-details",
        "locations",
        "containers",
        "packages",
        "cargo-type",
    ]


def test_catalogue_skips_steps_per_shipping_mode() -> None:
    engine = _engine("AIR")
    assert _active_keys(engine) == ["shipping-details", "locations", "packages", "cargo-type"]

    engine.set_field({"shippingType": "WATER", "seaFreightMode": "FCL"})
    assert _active_keys(engine) == ["shipping-details", "locations", "containers", "cargo-type"]

    engine.set_field("seaFreightMode", "LCL")
    assert _active_keys(engine) == ["shipping-details", "locations", "packages", "cargo-type"]

    engine.set_field("seaFreightMode", "")
    assert _active_keys(engine) == ["shipping-details", "locations", "cargo-type"]


def test_sync_widget_mirrors_form_value() -> None:
    sync_widget("widget", "AIR")
    assert st.session_state["widget"] == "AIR"

    sync_widget("widget", None)
    assert st.session_state["widget"] is None


def test_shipping_type_change_resets_dependent_fields() -> None:
    engine = _engine()
    engine.set_field({"shippingType": "WATER", "seaFreightMode": "FCL", "origin": 3, "destination": 4})
    st.session_state[UIKeys.SHIPPING_TYPE] = "AIR"

    shipping_type_callback(_ctx(engine))()

    data = engine.form_data
    assert data["shippingType"] == "AIR"
    assert data["seaFreightMode"] == ""
    assert data["origin"] is None and data["destination"] is None


def test_cargo_category_change_resets_cargo_type() -> None:
    engine = _engine()
    engine.set_field({"cargoTypeCategory": "General Cargo", "cargoType": "Electronics"})
    st.session_state[UIKeys.CARGO_CATEGORY] = "Bulk Cargo"

    cargo_category_callback(_ctx(engine))()

    assert engine.form_data["cargoTypeCategory"] == "Bulk Cargo"
    assert engine.form_data["cargoType"] == ""


def test_container_count_zero_removes_entry() -> None:
    engine = _engine()
    key = f"{UIKeys.CONTAINER_COUNT_PREFIX}7"

    st.session_state[key] = 2
    container_count_callback(_ctx(engine), 7, key)()
    assert engine.form_data["containerCount"] == {7: 2}

    st.session_state[key] = 0
    container_count_callback(_ctx(engine), 7, key)()
    assert engine.form_data["containerCount"] == {}


def test_field_callback_converts_widget_value() -> None:
    engine = _engine()
    st.session_state[UIKeys.GROSS_WEIGHT] = None

    field_callback(_ctx(engine), "grossWeightKG", UIKeys.GROSS_WEIGHT, lambda raw: "" if raw is None else raw)()
    assert engine.form_data["grossWeightKG"] == ""

    st.session_state[UIKeys.GROSS_WEIGHT] = 12.5
    field_callback(_ctx(engine), "grossWeightKG", UIKeys.GROSS_WEIGHT)()
    assert engine.form_data["grossWeightKG"] == 12.5


def test_container_counts_from_one_render_accumulate() -> None:
    engine = _engine()
    ctx = _ctx(engine)
    first, second = f"{UIKeys.CONTAINER_COUNT_PREFIX}1", f"{UIKeys.CONTAINER_COUNT_PREFIX}2"
    st.session_state[first] = 2
    st.session_state[second] = 3

    container_count_callback(ctx, 1, first)()
    container_count_callback(ctx, 2, second)()

    assert engine.form_data["containerCount"] == {1: 2, 2: 3}
