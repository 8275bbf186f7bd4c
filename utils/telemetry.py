"""OpenTelemetry bootstrap for the quote wizard.

Tracing stays a no-op unless an exporter is configured:

* ``OTEL_EXPORTER_OTLP_ENDPOINT`` sends spans to a collector over OTLP/HTTP
  (``OTEL_EXPORTER_OTLP_HEADERS`` and ``OTEL_EXPORTER_OTLP_TIMEOUT`` apply).
* ``OTEL_TRACES_CONSOLE`` prints spans to stdout, handy during development.

Sampling follows ``OTEL_TRACES_SAMPLER`` / ``OTEL_TRACES_SAMPLER_ARG``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Mapping

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanProcessor,
)
from opentelemetry.sdk.trace.sampling import (
    ALWAYS_OFF,
    ALWAYS_ON,
    ParentBased,
    Sampler,
    TraceIdRatioBased,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "freight-quote-wizard"
DEFAULT_SAMPLER = "parentbased_traceidratio"

_SAMPLERS: Mapping[str, Callable[[float], Sampler]] = {
    "parentbased_traceidratio": lambda ratio: ParentBased(TraceIdRatioBased(ratio)),
    "traceidratio": TraceIdRatioBased,
    "always_on": lambda _ratio: ALWAYS_ON,
    "always_off": lambda _ratio: ALWAYS_OFF,
}

_configured_provider: TracerProvider | None = None


def _env(name: str) -> str:
    return (os.getenv(name) or "").strip()


def _header_pairs(raw: str) -> dict[str, str]:
    """Turn ``k1=v1,k2=v2`` into a dict, ignoring fragments without a key."""

    pairs: dict[str, str] = {}
    for fragment in raw.split(","):
        name, sep, value = fragment.partition("=")
        if sep and name.strip():
            pairs[name.strip()] = value.strip()
    return pairs


def _ratio(raw: str) -> float:
    if not raw:
        return 1.0
    try:
        return min(1.0, max(0.0, float(raw)))
    except ValueError:
        logger.warning("Ignoring non-numeric OTEL_TRACES_SAMPLER_ARG %r", raw)
        return 1.0


def _seconds(raw: str) -> int | None:
    if not raw:
        return None
    try:
        return int(float(raw))
    except ValueError:
        logger.warning("Ignoring non-numeric OTEL_EXPORTER_OTLP_TIMEOUT %r", raw)
        return None


@dataclass(frozen=True)
class TelemetrySettings:
    """Tracing configuration resolved from ``OTEL_*`` environment variables."""

    otlp_endpoint: str = ""
    otlp_headers: Mapping[str, str] = field(default_factory=dict)
    otlp_timeout: int | None = None
    console: bool = False
    sampler: str = DEFAULT_SAMPLER
    sampler_ratio: float = 1.0
    service_name: str = SERVICE_NAME

    @classmethod
    def from_env(cls) -> "TelemetrySettings":
        return cls(
            otlp_endpoint=_env("OTEL_EXPORTER_OTLP_ENDPOINT"),
            otlp_headers=_header_pairs(_env("OTEL_EXPORTER_OTLP_HEADERS")),
            otlp_timeout=_seconds(_env("OTEL_EXPORTER_OTLP_TIMEOUT")),
            console=_env("OTEL_TRACES_CONSOLE").lower() in {"1", "true", "yes", "on"},
            sampler=_env("OTEL_TRACES_SAMPLER").lower() or DEFAULT_SAMPLER,
            sampler_ratio=_ratio(_env("OTEL_TRACES_SAMPLER_ARG")),
            service_name=_env("OTEL_SERVICE_NAME") or SERVICE_NAME,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.otlp_endpoint) or self.console

    def build_sampler(self) -> Sampler:
        factory = _SAMPLERS.get(self.sampler)
        if factory is None:
            logger.warning("Unknown OTEL_TRACES_SAMPLER %r; using %s", self.sampler, DEFAULT_SAMPLER)
            factory = _SAMPLERS[DEFAULT_SAMPLER]
        return factory(self.sampler_ratio)

    def build_span_processor(self) -> SpanProcessor | None:
        """OTLP wins over the console exporter when both are configured."""

        if self.otlp_endpoint:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

            exporter = OTLPSpanExporter(
                endpoint=self.otlp_endpoint,
                headers=dict(self.otlp_headers) or None,
                timeout=self.otlp_timeout,
            )
            return BatchSpanProcessor(exporter)
        if self.console:
            return SimpleSpanProcessor(ConsoleSpanExporter())
        return None


def setup_tracing(settings: TelemetrySettings | None = None, *, force: bool = False) -> bool:
    """Install a global tracer provider once per process.

    Returns ``True`` when this call installed a provider. Streamlit reruns the
    script on every interaction, so repeated calls are cheap no-ops.
    """

    global _configured_provider

    if _configured_provider is not None and not force:
        return False
    settings = settings or TelemetrySettings.from_env()
    processor = settings.build_span_processor()
    if processor is None:
        logger.debug("Tracing disabled: no span exporter configured")
        return False

    provider = TracerProvider(
        resource=Resource.create({"service.name": settings.service_name}),
        sampler=settings.build_sampler(),
    )
    provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)
    _configured_provider = provider
    logger.info("Tracing enabled for service %r", settings.service_name)
    return True


__all__ = ["TelemetrySettings", "setup_tracing"]
