"""Per-step validators and skip predicates for the freight quote flow."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from quote.models import LocationType, SeaFreightMode, ShippingType
from wizard.step_registry import ValidationResult
from wizard.types import FormData


def _today() -> date:
    return date.today()


def parse_shipping_date(raw: Any) -> date | None:
    """Return ``raw`` as a date, or ``None`` unless it is a date or an ISO 8601 date string."""

    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        return None


def _positive_number(raw: Any) -> bool:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return False
    return raw > 0


def validate_shipping_details(form_data: FormData) -> ValidationResult:
    errors: dict[str, str] = {}

    shipping_type = form_data.get("shippingType")
    if not shipping_type:
        errors["shippingType"] = "Shipping type is required"
    if shipping_type == ShippingType.WATER and not form_data.get("seaFreightMode"):
        errors["seaFreightMode"] = "Sea freight mode is required for water shipping"

    raw_date = form_data.get("shippingDate")
    if not raw_date:
        errors["shippingDate"] = "Shipping date is required"
    else:
        shipping_date = parse_shipping_date(raw_date)
        if shipping_date is None:
            errors["shippingDate"] = "Shipping date must be a valid date (YYYY-MM-DD)"
        elif shipping_date < _today():
            errors["shippingDate"] = "Shipping date cannot be in the past"

    return ValidationResult.from_errors(errors)


def validate_locations(form_data: FormData) -> ValidationResult:
    errors: dict[str, str] = {}
    origin = form_data.get("origin")
    destination = form_data.get("destination")

    if not origin:
        errors["origin"] = "Origin location is required"
    if not destination:
        errors["destination"] = "Destination location is required"
    if origin and origin == destination:
        errors["destination"] = "Destination must be different from origin"

    return ValidationResult.from_errors(errors)


def total_containers(form_data: FormData) -> int:
    counts = form_data.get("containerCount") or {}
    return sum(count for count in counts.values() if isinstance(count, int) and count > 0)


def validate_containers(form_data: FormData) -> ValidationResult:
    if total_containers(form_data) == 0:
        return ValidationResult.from_errors(
            {"containerCount": "At least one container is required for FCL shipping"}
        )
    return ValidationResult.ok()


def validate_packages(form_data: FormData) -> ValidationResult:
    errors: dict[str, str] = {}

    if not _positive_number(form_data.get("numberOfPackages")):
        errors["numberOfPackages"] = "Number of packages must be at least 1"
    if not _positive_number(form_data.get("grossWeightKG")):
        errors["grossWeightKG"] = "Gross weight must be greater than 0"
    if not _positive_number(form_data.get("volumeCBM")):
        errors["volumeCBM"] = "Volume must be greater than 0"

    return ValidationResult.from_errors(errors)


def validate_cargo_type(form_data: FormData) -> ValidationResult:
    errors: dict[str, str] = {}

    if not form_data.get("cargoTypeCategory"):
        errors["cargoTypeCategory"] = "Cargo category is required"
    if not form_data.get("cargoType"):
        errors["cargoType"] = "Specific cargo type is required"

    return ValidationResult.from_errors(errors)


def skip_container_step(form_data: FormData) -> bool:
    """Containers are only asked for full-container-load sea freight."""

    return not (
        form_data.get("shippingType") == ShippingType.WATER
        and form_data.get("seaFreightMode") == SeaFreightMode.FCL
    )


def skip_package_step(form_data: FormData) -> bool:
    """Packages are asked for air freight and less-than-container-load sea freight."""

    return (
        form_data.get("shippingType") != ShippingType.AIR
        and form_data.get("seaFreightMode") != SeaFreightMode.LCL
    )


def location_type_for(form_data: FormData) -> LocationType:
    if form_data.get("shippingType") == ShippingType.WATER:
        return LocationType.SEA_PORT
    return LocationType.AIRPORT


__all__ = [
    "location_type_for",
    "parse_shipping_date",
    "skip_container_step",
    "skip_package_step",
    "total_containers",
    "validate_cargo_type",
    "validate_containers",
    "validate_locations",
    "validate_packages",
    "validate_shipping_details",
]
