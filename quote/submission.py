"""Turn the aggregated quote form into a backend request."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping

from quote.api import QuoteApiClient
from quote.models import QuoteRequirement
from quote.validators import parse_shipping_date

logger = logging.getLogger(__name__)

QuoteResultHandler = Callable[[QuoteRequirement, list[dict[str, Any]]], None]


def _optional_number(raw: Any) -> Any:
    if raw in ("", None):
        return None
    return raw


def build_quote_requirement(form_data: Mapping[str, Any]) -> QuoteRequirement:
    """Map the quote form fields onto a :class:`QuoteRequirement`.

    Raises :class:`pydantic.ValidationError` when mandatory fields are still
    missing, which only happens if the form is submitted around the flow's
    own validation.
    """

    container_count = {
        int(container_id): int(count)
        for container_id, count in (form_data.get("containerCount") or {}).items()
        if count
    }
    return QuoteRequirement(
        origin=form_data.get("origin"),
        destination=form_data.get("destination"),
        shipping_type=form_data.get("shippingType"),
        sea_freight_mode=form_data.get("seaFreightMode") or None,
        shipping_date=parse_shipping_date(form_data.get("shippingDate")),
        number_of_packages=_optional_number(form_data.get("numberOfPackages")),
        gross_weight_kg=_optional_number(form_data.get("grossWeightKG")),
        volume_cbm=_optional_number(form_data.get("volumeCBM")),
        max_transit_days=_optional_number(form_data.get("maxTransitDays")) or None,
        container_count=container_count or None,
        cargo_type_category=form_data.get("cargoTypeCategory") or "",
        cargo_type=form_data.get("cargoType") or "",
    )


def make_quote_submitter(
    client: QuoteApiClient,
    on_success: QuoteResultHandler,
) -> Callable[[dict[str, Any]], Awaitable[None]]:
    """Return the flow's submission callback.

    The blocking HTTP call runs in a worker thread; errors propagate to the
    flow engine, which records them as a submission failure.
    """

    async def _submit(form_data: dict[str, Any]) -> None:
        requirement = build_quote_requirement(form_data)
        logger.info(
            "Requesting quotes for %s shipment %s -> %s",
            requirement.shipping_type,
            requirement.origin,
            requirement.destination,
        )
        quotes = await asyncio.to_thread(client.get_quotes, requirement)
        logger.info("Received %d quote(s)", len(quotes))
        on_success(requirement, quotes)

    return _submit


__all__ = [
    "QuoteResultHandler",
    "build_quote_requirement",
    "make_quote_submitter",
]
