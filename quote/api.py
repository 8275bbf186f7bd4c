"""HTTP client for the freight quoting backend."""

from __future__ import annotations

import logging
from typing import Any

import requests

import config
from quote.models import ContainerType, Location, LocationType, QuoteRequirement

logger = logging.getLogger(__name__)

QUOTES_ENDPOINT = "/quotes/get-quotes"
LOCATIONS_ENDPOINT = "/locations"
CONTAINER_TYPES_ENDPOINT = "/container-types"


class QuoteApiError(RuntimeError):
    """Raised when the quoting backend cannot be reached or answers with an error."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def build_api_url(base_url: str, endpoint: str) -> str:
    """Join ``base_url`` and ``endpoint`` with exactly one slash."""

    clean_endpoint = endpoint if endpoint.startswith("/") else f"/{endpoint}"
    return f"{base_url.rstrip('/')}{clean_endpoint}"


class QuoteApiClient:
    """Thin wrapper around the quoting REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or config.QUOTE_API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.QUOTE_API_TIMEOUT
        self._session = session or requests.Session()
        self._session.headers.setdefault("Content-Type", "application/json")

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        url = build_api_url(self.base_url, endpoint)
        logger.debug("API request %s %s", method, url)
        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise QuoteApiError(f"Request to {url} failed: {exc}") from exc
        if not response.ok:
            raise QuoteApiError(
                f"{method} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def get_quotes(self, requirement: QuoteRequirement) -> list[dict[str, Any]]:
        """Return the courier rates matching ``requirement``."""

        data = self._request("POST", QUOTES_ENDPOINT, json=requirement.to_payload())
        if not isinstance(data, list):
            logger.warning("Unexpected quote response type: %s", type(data).__name__)
            return []
        return [item for item in data if isinstance(item, dict)]

    def list_locations(
        self,
        *,
        search: str | None = None,
        country_code: str | None = None,
        location_type: LocationType | None = None,
    ) -> list[Location]:
        params: dict[str, str] = {}
        if search:
            params["search"] = search
        if country_code:
            params["countryCode"] = country_code
        if location_type:
            params["locationType"] = str(location_type)
        data = self._request("GET", LOCATIONS_ENDPOINT, params=params or None)
        return [Location.model_validate(item) for item in data or []]

    def list_container_types(self) -> list[ContainerType]:
        data = self._request("GET", CONTAINER_TYPES_ENDPOINT)
        return [ContainerType.model_validate(item) for item in data or []]


__all__ = [
    "CONTAINER_TYPES_ENDPOINT",
    "LOCATIONS_ENDPOINT",
    "QUOTES_ENDPOINT",
    "QuoteApiClient",
    "QuoteApiError",
    "build_api_url",
]
