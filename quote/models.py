"""Domain models for freight quote requests and lookup data."""

from __future__ import annotations

from datetime import date
from enum import StrEnum
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ShippingType(StrEnum):
    AIR = "AIR"
    WATER = "WATER"


class SeaFreightMode(StrEnum):
    FCL = "FCL"
    LCL = "LCL"


class LocationType(StrEnum):
    SEA_PORT = "SEA_PORT"
    AIRPORT = "AIRPORT"
    CITY = "CITY"
    INLAND_PORT = "INLAND_PORT"


class _ApiModel(BaseModel):
    """Base model mapping snake_case attributes to the API's camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Location(_ApiModel):
    id: int
    name: str
    code: str = ""
    country: str = ""
    country_code: str = ""
    type: LocationType | None = None
    is_active: bool = True

    def label(self) -> str:
        """Return a compact label such as ``Hamburg (DEHAM)``."""

        return f"{self.name} ({self.code})" if self.code else self.name


class ContainerType(_ApiModel):
    id: int
    code: str = ""
    name: str
    description: str = ""
    volume_cbm: float | None = Field(default=None, alias="volumeCBM")
    max_gross_weight_kg: float | None = Field(default=None, alias="maxGrossWeightKG")
    max_payload_kg: float | None = Field(default=None, alias="maxPayloadKG")
    is_active: bool = True
    is_refrigerated: bool = False


class QuoteRequirement(_ApiModel):
    """Shipping requirement posted to the quoting backend.

    Optional attributes that are empty are left out of :meth:`to_payload` so
    the backend only sees the fields relevant to the chosen shipping mode.
    """

    origin: int
    destination: int
    shipping_type: ShippingType
    sea_freight_mode: SeaFreightMode | None = None
    shipping_date: date
    number_of_packages: int | None = None
    gross_weight_kg: float | None = Field(default=None, alias="grossWeightKG")
    volume_cbm: float | None = Field(default=None, alias="volumeCBM")
    max_transit_days: int | None = None
    container_count: dict[int, int] | None = None
    cargo_type_category: str
    cargo_type: str

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body expected by ``POST /quotes/get-quotes``."""

        payload = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        if not payload.get("containerCount"):
            payload.pop("containerCount", None)
        return payload


CARGO_TYPE_CATEGORIES: Final[dict[str, tuple[str, ...]]] = {
    "General Cargo": (
        "Electronics",
        "Textiles & Clothing",
        "Furniture & Home Goods",
        "Books & Documents",
        "Sporting Goods",
        "Toys & Games",
        "Other General Cargo",
    ),
    "Food & Beverages": (
        "Fresh Food",
        "Frozen Food",
        "Dry Food Products",
        "Beverages",
        "Perishable Goods",
        "Temperature Controlled",
    ),
    "Industrial Goods": (
        "Machinery & Equipment",
        "Raw Materials",
        "Construction Materials",
        "Automotive Parts",
        "Tools & Hardware",
        "Metal Products",
    ),
    "Chemicals & Hazardous": (
        "Non-Hazardous Chemicals",
        "Hazardous Materials (DG)",
        "Pharmaceuticals",
        "Cosmetics & Personal Care",
        "Cleaning Products",
    ),
    "Bulk Cargo": (
        "Liquid Bulk",
        "Dry Bulk",
        "Grain & Agricultural",
        "Coal & Minerals",
        "Petroleum Products",
    ),
    "Special Cargo": (
        "Oversized/Heavy Lift",
        "Refrigerated",
        "Live Animals",
        "Artwork & Antiques",
        "Medical Equipment",
        "Project Cargo",
    ),
}


def initial_quote_form(shipping_type: str | None = None) -> dict[str, Any]:
    """Return the empty quote form, optionally preselecting ``shipping_type``."""

    preselected = shipping_type if shipping_type in {member.value for member in ShippingType} else ""
    return {
        "origin": None,
        "destination": None,
        "shippingType": preselected,
        "seaFreightMode": "",
        "shippingDate": "",
        "numberOfPackages": "",
        "grossWeightKG": "",
        "volumeCBM": "",
        "maxTransitDays": "",
        "containerCount": {},
        "cargoTypeCategory": "",
        "cargoType": "",
    }


__all__ = [
    "CARGO_TYPE_CATEGORIES",
    "ContainerType",
    "Location",
    "LocationType",
    "QuoteRequirement",
    "SeaFreightMode",
    "ShippingType",
    "initial_quote_form",
]
