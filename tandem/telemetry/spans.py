"""Custom spans for workflow and phase-level tracing.

Span Hierarchy:
    workflow_span (root, one per full-workflow traversal)
    └── phase_span (one per run_phase call)
"""

import logging
import time
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Span, StatusCode

logger = logging.getLogger(__name__)


def get_tracer() -> trace.Tracer:
    """Tracer for tandem's custom spans.

    Resolved on every call so a provider installed by ``init_telemetry``
    after import is picked up; with no provider installed the API returns a
    no-op tracer.
    """
    return trace.get_tracer("tandem.workflow")


@contextmanager
def _recorded_span(name: str, attributes: dict[str, Any]) -> Generator[Span, None, None]:
    with get_tracer().start_as_current_span(
        name=name,
        attributes=attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
            span.set_status(StatusCode.OK)
        except Exception as e:
            span.record_exception(e)
            span.set_status(StatusCode.ERROR, str(e))
            raise


@contextmanager
def workflow_span(
    feature: str,
    variant: str,
    phases: list[str] | None = None,
    **attributes: Any,
) -> Generator[Span, None, None]:
    """Create the root span for a full-workflow traversal.

    Args:
        feature: Feature the workflow delivers
        variant: Workflow variant (e.g., "frontend-driven")
        phases: Enabled phases in chain order
        **attributes: Additional span attributes

    Example:
        with workflow_span("login", "frontend-driven") as span:
            span.set_attribute("workflow.skipped_count", 1)
    """
    span_attributes: dict[str, Any] = {
        "workflow.feature": feature,
        "workflow.variant": variant,
    }
    if phases:
        span_attributes["workflow.phase_count"] = len(phases)
        span_attributes["workflow.phases"] = ",".join(phases)
    span_attributes.update(attributes)

    with _recorded_span(f"workflow:{variant}", span_attributes) as span:
        yield span


@contextmanager
def phase_span(
    phase: str,
    feature: str,
    role: str,
    **attributes: Any,
) -> Generator[Span, None, None]:
    """Create a span for one phase execution.

    Records ``phase.status`` (completed/blocked) and ``phase.duration_seconds``
    when the block exits. Exceptions are recorded and re-raised.
    """
    span_attributes: dict[str, Any] = {
        "phase.name": phase,
        "phase.feature": feature,
        "phase.role": role,
    }
    span_attributes.update(attributes)

    start_time = time.time()
    with _recorded_span(f"phase:{phase}", span_attributes) as span:
        try:
            yield span
            span.set_attribute("phase.status", "completed")
        except Exception:
            span.set_attribute("phase.status", "blocked")
            raise
        finally:
            span.set_attribute("phase.duration_seconds", time.time() - start_time)


def record_phase_event(span: Span, event_name: str, **attributes: Any) -> None:
    """Add an event to a phase span (e.g., "instruction_saved")."""
    span.add_event(event_name, attributes={k: str(v) for k, v in attributes.items()})
