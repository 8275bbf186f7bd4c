from __future__ import annotations

import pytest
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_OFF, ParentBased, TraceIdRatioBased

from utils import telemetry
from utils.telemetry import TelemetrySettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "OTEL_EXPORTER_OTLP_ENDPOINT",
        "OTEL_EXPORTER_OTLP_HEADERS",
        "OTEL_EXPORTER_OTLP_TIMEOUT",
        "OTEL_SERVICE_NAME",
        "OTEL_TRACES_CONSOLE",
        "OTEL_TRACES_SAMPLER",
        "OTEL_TRACES_SAMPLER_ARG",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(telemetry, "_configured_provider", None)


def test_defaults_leave_tracing_disabled() -> None:
    settings = TelemetrySettings.from_env()

    assert not settings.enabled
    assert settings.service_name == "freight-quote-wizard"
    assert settings.build_span_processor() is None
    assert isinstance(settings.build_sampler(), ParentBased)
    assert telemetry.setup_tracing(settings) is False


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://collector:4318/v1/traces")
    monkeypatch.setenv("OTEL_EXPORTER_OTLP_HEADERS", "api-key=abc, broken, =x, team = quotes")
    monkeypatch.setenv("OTEL_EXPORTER_OTLP_TIMEOUT", "later")
    monkeypatch.setenv("OTEL_TRACES_SAMPLER", "TraceIdRatio")
    monkeypatch.setenv("OTEL_TRACES_SAMPLER_ARG", "2.5")

    settings = TelemetrySettings.from_env()

    assert settings.enabled
    assert dict(settings.otlp_headers) == {"api-key": "abc", "team": "quotes"}
    assert settings.otlp_timeout is None
    sampler = settings.build_sampler()
    assert isinstance(sampler, TraceIdRatioBased)
    assert sampler.rate == 1.0


def test_unknown_sampler_falls_back(caplog: pytest.LogCaptureFixture) -> None:
    sampler = TelemetrySettings(sampler="sometimes").build_sampler()

    assert isinstance(sampler, ParentBased)
    assert "Unknown OTEL_TRACES_SAMPLER" in caplog.text
    assert TelemetrySettings(sampler="always_off").build_sampler() is ALWAYS_OFF


def test_span_processor_choice() -> None:
    assert isinstance(TelemetrySettings(console=True).build_span_processor(), SimpleSpanProcessor)

    processor = TelemetrySettings(
        otlp_endpoint="http://collector:4318/v1/traces",
        console=True,
    ).build_span_processor()
    assert isinstance(processor, BatchSpanProcessor)
    processor.shutdown()
