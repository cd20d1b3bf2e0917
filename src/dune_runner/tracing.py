"""Optional OpenTelemetry spans around API operations."""

import logging
import os
from typing import Any, Awaitable

from dune_runner.config.env import get_env_bool

logger = logging.getLogger(__name__)


def _otel_exporter_configured() -> bool:
    if get_env_bool("OTEL_DISABLE_EXPORTER", False):
        return False
    endpoint = (os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or "").strip()
    traces_endpoint = (os.getenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT") or "").strip()
    if (os.getenv("OTEL_TRACES_EXPORTER") or "").strip().lower() == "none":
        return False
    return bool(endpoint or traces_endpoint)


def trace_enabled() -> bool:
    """Return True when request tracing is enabled or OTEL exporter defaults apply."""
    raw = os.getenv("DUNE_TRACE_REQUESTS")
    if raw is not None:
        try:
            return get_env_bool("DUNE_TRACE_REQUESTS", False) is True
        except ValueError:
            logger.warning("Invalid DUNE_TRACE_REQUESTS value '%s'; tracing disabled.", raw)
            return False
    return _otel_exporter_configured()


async def trace_api_operation(name: str, operation: Awaitable, **attributes: Any):
    """Trace a Dune API operation with OTEL when enabled."""
    if not trace_enabled():
        return await operation

    from opentelemetry import trace

    tracer = trace.get_tracer("dune_runner")
    with tracer.start_as_current_span(name) as span:
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(f"dune.{key}", value)
        try:
            result = await operation
            span.set_attribute("dune.status", "ok")
            return result
        except Exception:
            span.set_attribute("dune.status", "error")
            raise
