from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

import pytest
import requests
import streamlit as st

LOCATIONS = [
    {"id": 1, "name": "Frankfurt", "code": "FRA"},
    {"id": 2, "name": "Shanghai", "code": "PVG"},
]


@pytest.fixture(autouse=True)
def session_state() -> Iterator[None]:
    """AppTest runs need the real Streamlit session state, not the dict stub."""

    st.cache_data.clear()
    yield None
    st.cache_data.clear()


def _response(url: str, status_code: int, payload: Any) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response._content = json.dumps(payload).encode("utf-8")
    return response


class FakeBackend:
    """Answers the quoting API calls made through ``requests.Session``."""

    def __init__(self) -> None:
        self.quotes: list[dict[str, Any]] = [{"id": 99, "price": 10}]
        self.quote_status = 200
        self.quote_requests: list[dict[str, Any]] = []

    def handle(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        if method == "GET" and url.endswith("/locations"):
            return _response(url, 200, LOCATIONS)
        if method == "GET" and url.endswith("/container-types"):
            return _response(url, 200, [])
        if method == "POST" and url.endswith("/quotes/get-quotes"):
            self.quote_requests.append(kwargs.get("json") or {})
            if self.quote_status >= 400:
                return _response(url, self.quote_status, {"detail": "upstream failure"})
            return _response(url, self.quote_status, self.quotes)
        return _response(url, 404, {"detail": "not found"})


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeBackend:
    fake = FakeBackend()

    def _request(self: requests.Session, method: str, url: str, **kwargs: Any) -> requests.Response:
        return fake.handle(method, url, **kwargs)

    monkeypatch.setattr(requests.Session, "request", _request)
    return fake

