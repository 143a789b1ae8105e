"""
OpenTelemetry availability check for wuzevents.

OpenTelemetry is an optional dependency (``pip install wuzevents[telemetry]``).
Everything that traces goes through :func:`create_tracer`, which consults
``OTEL_AVAILABLE`` so callers never import OpenTelemetry directly.
"""

from __future__ import annotations

# Optional OpenTelemetry import - single source of truth
try:
    from opentelemetry import trace  # noqa: F401

    OTEL_AVAILABLE = True
except ImportError:
    OTEL_AVAILABLE = False


def should_trace(enable_tracing: bool) -> bool:
    """
    Determine if tracing should be active.

    Args:
        enable_tracing: Component-level tracing configuration

    Returns:
        True if both tracing is enabled and OpenTelemetry is available
    """
    return enable_tracing and OTEL_AVAILABLE


__all__ = [
    "OTEL_AVAILABLE",
    "should_trace",
]
