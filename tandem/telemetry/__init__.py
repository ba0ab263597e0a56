"""Logging and tracing for tandem.

Usage:
    from tandem.telemetry import init_telemetry, phase_span

    init_telemetry()
    with phase_span("design", "login", "coordinator") as span:
        ...

Environment Variables:
    TANDEM_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    TANDEM_TRACES_EXPORTER: Exporter type (console, none) - default: none
    OTEL_SERVICE_NAME: Service name for traces - default: tandem
    OTEL_SDK_DISABLED: Disable tracing - default: false
"""

from .config import (
    ExporterType,
    TelemetryConfig,
    init_telemetry,
    is_telemetry_enabled,
    shutdown_telemetry,
)
from .spans import get_tracer, phase_span, record_phase_event, workflow_span

__all__ = [
    # Configuration
    "ExporterType",
    "TelemetryConfig",
    "init_telemetry",
    "shutdown_telemetry",
    "is_telemetry_enabled",
    # Spans
    "get_tracer",
    "workflow_span",
    "phase_span",
    "record_phase_event",
]
