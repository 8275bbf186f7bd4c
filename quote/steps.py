"""Freight quote step catalogue rendered with Streamlit."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Sequence

import streamlit as st

from constants.keys import UIKeys
from quote import validators
from quote.api import QuoteApiClient, QuoteApiError
from quote.models import (
    CARGO_TYPE_CATEGORIES,
    ContainerType,
    Location,
    SeaFreightMode,
    ShippingType,
)
from wizard.step_registry import StepContext, StepDefinition

logger = logging.getLogger(__name__)

_SHIPPING_TYPE_LABELS: dict[str, str] = {
    ShippingType.AIR: "Air Freight - fast delivery via air transport",
    ShippingType.WATER: "Sea Freight - cost-effective ocean shipping",
}
_SEA_MODE_LABELS: dict[str, str] = {
    SeaFreightMode.FCL: "FCL - full container load",
    SeaFreightMode.LCL: "LCL - less than container load",
}


def sync_widget(key: str, value: Any) -> None:
    """Mirror ``value`` from the form data into the widget's session state."""

    if key not in st.session_state or st.session_state[key] != value:
        st.session_state[key] = value


def field_callback(
    ctx: StepContext,
    field: str,
    key: str,
    convert: Callable[[Any], Any] | None = None,
) -> Callable[[], None]:
    """Return an ``on_change`` handler that copies the widget value into ``field``."""

    def _callback() -> None:
        raw = st.session_state.get(key)
        ctx.set_field(field, convert(raw) if convert else raw)

    return _callback


def shipping_type_callback(ctx: StepContext) -> Callable[[], None]:
    """Changing the shipping type invalidates mode and both locations."""

    def _callback() -> None:
        ctx.set_field(
            {
                "shippingType": st.session_state.get(UIKeys.SHIPPING_TYPE) or "",
                "seaFreightMode": "",
                "origin": None,
                "destination": None,
            }
        )

    return _callback


def cargo_category_callback(ctx: StepContext) -> Callable[[], None]:
    def _callback() -> None:
        ctx.set_field(
            {
                "cargoTypeCategory": st.session_state.get(UIKeys.CARGO_CATEGORY) or "",
                "cargoType": "",
            }
        )

    return _callback


def container_count_callback(ctx: StepContext, container_id: int, key: str) -> Callable[[], None]:
    """Update one container count; a zero count removes the entry."""

    def _callback() -> None:
        counts = dict(ctx.form_data.get("containerCount") or {})
        count = int(st.session_state.get(key) or 0)
        if count <= 0:
            counts.pop(container_id, None)
        else:
            counts[container_id] = count
        ctx.set_field("containerCount", counts)

    return _callback


def _show_error(ctx: StepContext, field: str) -> None:
    message = ctx.errors.get(field)
    if message:
        st.error(message)


def _date_to_iso(raw: Any) -> str:
    return raw.isoformat() if isinstance(raw, date) else ""


def _number_or_blank(raw: Any) -> Any:
    return "" if raw is None else raw


def _blank_to_none(raw: Any) -> Any:
    return None if raw in ("", None) else raw


def render_shipping_details(ctx: StepContext) -> None:
    st.subheader("Shipping Details")

    sync_widget(UIKeys.SHIPPING_TYPE, ctx.form_data.get("shippingType") or None)
    st.radio(
        "Shipping type",
        options=list(_SHIPPING_TYPE_LABELS),
        index=None,
        format_func=lambda value: _SHIPPING_TYPE_LABELS.get(value, value),
        key=UIKeys.SHIPPING_TYPE,
        on_change=shipping_type_callback(ctx),
    )
    _show_error(ctx, "shippingType")

    if ctx.form_data.get("shippingType") == ShippingType.WATER:
        sync_widget(UIKeys.SEA_FREIGHT_MODE, ctx.form_data.get("seaFreightMode") or None)
        st.radio(
            "Sea freight mode",
            options=list(_SEA_MODE_LABELS),
            index=None,
            format_func=lambda value: _SEA_MODE_LABELS.get(value, value),
            key=UIKeys.SEA_FREIGHT_MODE,
            horizontal=True,
            on_change=field_callback(ctx, "seaFreightMode", UIKeys.SEA_FREIGHT_MODE, lambda v: v or ""),
        )
        _show_error(ctx, "seaFreightMode")

    sync_widget(UIKeys.SHIPPING_DATE, validators.parse_shipping_date(ctx.form_data.get("shippingDate")))
    st.date_input(
        "Shipping date",
        value=None,
        key=UIKeys.SHIPPING_DATE,
        on_change=field_callback(ctx, "shippingDate", UIKeys.SHIPPING_DATE, _date_to_iso),
    )
    _show_error(ctx, "shippingDate")


@st.cache_data(ttl=300, show_spinner=False)
def _load_locations(_client: QuoteApiClient, base_url: str, location_type: str) -> list[Location]:
    return _client.list_locations(location_type=location_type)


@st.cache_data(ttl=300, show_spinner=False)
def _load_container_types(_client: QuoteApiClient, base_url: str) -> list[ContainerType]:
    return _client.list_container_types()


def _location_select(
    ctx: StepContext,
    *,
    label: str,
    field: str,
    key: str,
    locations: Sequence[Location],
) -> None:
    labels = {location.id: location.label() for location in locations}
    current = ctx.form_data.get(field)
    sync_widget(key, current if current in labels else None)
    st.selectbox(
        label,
        options=list(labels),
        index=None,
        format_func=lambda location_id: labels.get(location_id, str(location_id)),
        placeholder="Select a location...",
        key=key,
        on_change=field_callback(ctx, field, key),
    )
    _show_error(ctx, field)


def make_locations_renderer(client: QuoteApiClient) -> Callable[[StepContext], None]:
    def render_locations(ctx: StepContext) -> None:
        st.subheader("Select Locations")
        location_type = validators.location_type_for(ctx.form_data)
        try:
            locations = _load_locations(client, client.base_url, str(location_type))
        except QuoteApiError as exc:
            logger.warning("Could not load %s locations: %s", location_type, exc)
            st.warning("Locations could not be loaded. Please try again later.")
            locations = []

        origin_col, destination_col = st.columns(2)
        with origin_col:
            _location_select(ctx, label="Origin location", field="origin", key=UIKeys.ORIGIN, locations=locations)
        with destination_col:
            _location_select(
                ctx,
                label="Destination location",
                field="destination",
                key=UIKeys.DESTINATION,
                locations=locations,
            )

    return render_locations


def make_containers_renderer(client: QuoteApiClient) -> Callable[[StepContext], None]:
    def render_containers(ctx: StepContext) -> None:
        st.subheader("Container Selection")
        try:
            container_types = _load_container_types(client, client.base_url)
        except QuoteApiError as exc:
            logger.warning("Could not load container types: %s", exc)
            st.warning("Container types could not be loaded. Please try again later.")
            container_types = []

        counts = ctx.form_data.get("containerCount") or {}
        for container in container_types:
            key = f"{UIKeys.CONTAINER_COUNT_PREFIX}{container.id}"
            sync_widget(key, int(counts.get(container.id, 0)))
            st.number_input(
                f"{container.name} ({container.code})" if container.code else container.name,
                min_value=0,
                step=1,
                value=None,
                key=key,
                help=container.description or None,
                on_change=container_count_callback(ctx, container.id, key),
            )
        st.caption(f"Total containers: {validators.total_containers(ctx.form_data)}")
        _show_error(ctx, "containerCount")

    return render_containers


def render_packages(ctx: StepContext) -> None:
    st.subheader("Package Details")
    for label, field, key, step in (
        ("Number of packages", "numberOfPackages", UIKeys.NUMBER_OF_PACKAGES, 1),
        ("Gross weight (kg)", "grossWeightKG", UIKeys.GROSS_WEIGHT, 0.5),
        ("Volume (CBM)", "volumeCBM", UIKeys.VOLUME, 0.1),
    ):
        sync_widget(key, _blank_to_none(ctx.form_data.get(field)))
        st.number_input(
            label,
            min_value=0 if isinstance(step, int) else 0.0,
            step=step,
            value=None,
            key=key,
            on_change=field_callback(ctx, field, key, _number_or_blank),
        )
        _show_error(ctx, field)


def render_cargo_type(ctx: StepContext) -> None:
    st.subheader("Cargo Type")

    category = ctx.form_data.get("cargoTypeCategory") or None
    sync_widget(UIKeys.CARGO_CATEGORY, category if category in CARGO_TYPE_CATEGORIES else None)
    st.selectbox(
        "Cargo category",
        options=list(CARGO_TYPE_CATEGORIES),
        index=None,
        placeholder="Select category...",
        key=UIKeys.CARGO_CATEGORY,
        on_change=cargo_category_callback(ctx),
    )
    _show_error(ctx, "cargoTypeCategory")

    if category in CARGO_TYPE_CATEGORIES:
        cargo_types = CARGO_TYPE_CATEGORIES[category]
        cargo_type = ctx.form_data.get("cargoType") or None
        sync_widget(UIKeys.CARGO_TYPE, cargo_type if cargo_type in cargo_types else None)
        st.selectbox(
            "Cargo type",
            options=list(cargo_types),
            index=None,
            placeholder="Select cargo type...",
            key=UIKeys.CARGO_TYPE,
            on_change=field_callback(ctx, "cargoType", UIKeys.CARGO_TYPE, lambda v: v or ""),
        )
        _show_error(ctx, "cargoType")


def build_quote_steps(client: QuoteApiClient) -> tuple[StepDefinition, ...]:
    """Return the freight quote flow in canonical order."""

    return (
        StepDefinition(
            key="shipping-details",
            title="Shipping Details",
            render=render_shipping_details,
            validator=validators.validate_shipping_details,
        ),
        StepDefinition(
            key="locations",
            title="Locations",
            render=make_locations_renderer(client),
            validator=validators.validate_locations,
        ),
        StepDefinition(
            key="containers",
            title="Container Selection",
            render=make_containers_renderer(client),
            validator=validators.validate_containers,
            skip_when=validators.skip_container_step,
        ),
        StepDefinition(
            key="packages",
            title="Package Details",
            render=render_packages,
            validator=validators.validate_packages,
            skip_when=validators.skip_package_step,
        ),
        StepDefinition(
            key="cargo-type",
            title="Cargo Type",
            render=render_cargo_type,
            validator=validators.validate_cargo_type,
        ),
    )


__all__ = [
    "build_quote_steps",
    "cargo_category_callback",
    "container_count_callback",
    "field_callback",
    "make_containers_renderer",
    "make_locations_renderer",
    "render_cargo_type",
    "render_packages",
    "render_shipping_details",
    "shipping_type_callback",
    "sync_widget",
]
