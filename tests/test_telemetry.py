"""Tests for telemetry configuration and custom spans."""

import logging

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from tandem.telemetry import (
    TelemetryConfig,
    init_telemetry,
    is_telemetry_enabled,
    phase_span,
    record_phase_event,
    shutdown_telemetry,
    workflow_span,
)
from tandem.telemetry.config import ExporterType


@pytest.fixture
def exporter(monkeypatch):
    """Route tandem spans to an in-memory exporter."""
    memory = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(memory))
    monkeypatch.setattr(
        "tandem.telemetry.spans.get_tracer", lambda: provider.get_tracer("tandem.workflow")
    )
    return memory


class TestTelemetryConfig:
    def test_defaults(self, monkeypatch):
        for name in ("TANDEM_TRACES_EXPORTER", "OTEL_SDK_DISABLED", "TANDEM_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        config = TelemetryConfig.from_env()

        assert config.log_level == "INFO"
        assert config.traces_exporter == ExporterType.NONE
        assert not config.otel_disabled

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TANDEM_TRACES_EXPORTER", "console")
        monkeypatch.setenv("OTEL_SDK_DISABLED", "1")
        monkeypatch.setenv("TANDEM_LOG_LEVEL", "debug")
        monkeypatch.setenv("OTEL_SERVICE_NAME", "tandem-ci")

        config = TelemetryConfig.from_env()

        assert config.traces_exporter == ExporterType.CONSOLE
        assert config.otel_disabled
        assert config.log_level == "DEBUG"
        assert config.service_name == "tandem-ci"

    def test_unknown_exporter_falls_back(self, monkeypatch):
        monkeypatch.setenv("TANDEM_TRACES_EXPORTER", "jaeger")

        assert TelemetryConfig.from_env().traces_exporter == ExporterType.NONE


class TestSpans:
    """Test workflow and phase spans."""

    def test_phase_span_completed(self, exporter):
        with phase_span("design", "login", "coordinator") as span:
            record_phase_event(span, "instruction_saved", path="docs/x.md")

        [finished] = exporter.get_finished_spans()
        assert finished.name == "phase:design"
        assert finished.status.status_code == StatusCode.OK
        assert finished.attributes["phase.status"] == "completed"
        assert finished.attributes["phase.feature"] == "login"
        assert "phase.duration_seconds" in finished.attributes
        assert finished.events[0].name == "instruction_saved"

    def test_phase_span_blocked(self, exporter):
        with pytest.raises(RuntimeError):
            with phase_span("design", "login", "coordinator"):
                raise RuntimeError("boom")

        [finished] = exporter.get_finished_spans()
        assert finished.status.status_code == StatusCode.ERROR
        assert finished.attributes["phase.status"] == "blocked"
        assert [event.name for event in finished.events] == ["exception"]

    def test_workflow_span_attributes(self, exporter):
        with workflow_span("login", "frontend-driven", ["ui-mockup", "integration"]):
            pass

        [finished] = exporter.get_finished_spans()
        assert finished.name == "workflow:frontend-driven"
        assert finished.attributes["workflow.phase_count"] == 2
        assert finished.attributes["workflow.phases"] == "ui-mockup,integration"


class TestInitTelemetry:
    """Test init/shutdown bookkeeping."""

    @pytest.fixture(autouse=True)
    def _restore_logging(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        shutdown_telemetry()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_disabled_tracing(self):
        init_telemetry(TelemetryConfig(otel_disabled=True))

        assert not is_telemetry_enabled()
        assert logging.getLogger().level == logging.INFO

    def test_debug_level(self):
        init_telemetry(TelemetryConfig(log_level="DEBUG", otel_disabled=True))

        assert logging.getLogger("tandem").level == logging.DEBUG
