"""Full-workflow traversal as a Burr application.

Every enabled phase of the configured chain becomes one Burr action (the
same function bound to the phase's metadata); transitions follow the chain
forward and the application halts after the terminal phase. Disabled
optional phases are not executed but leave a ``skipped`` entry in the
deliverable trail, at their catalog position.
"""

import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from burr.core import ApplicationBuilder, State, action
from burr.lifecycle import PostRunStepHook, PreRunStepHook

from tandem.telemetry import workflow_span

from .phase_registry import ChainConfig, PhaseMetadata, PhaseRegistry, get_phase_registry

logger = logging.getLogger(__name__)

# Called once per enabled phase; the return value is kept in phase_results
PhaseRunner = Callable[[PhaseMetadata, str], Any]


@dataclass(frozen=True)
class PhaseDeliverables:
    """Deliverables recorded for one catalog phase."""

    phase: str
    deliverables: tuple[str, ...]
    skipped: bool = False


@dataclass
class FullWorkflowResult:
    """Outcome of a full traversal."""

    feature: str
    variant: str
    app_id: str
    executed_phases: list[str] = field(default_factory=list)
    trail: list[PhaseDeliverables] = field(default_factory=list)
    phase_results: dict[str, Any] = field(default_factory=dict)
    execution_time: float = 0.0

    @property
    def deliverables(self) -> list[str]:
        """All deliverable lines in catalog order, skipped markers included."""
        return [item for entry in self.trail for item in entry.deliverables]

    @property
    def skipped_phases(self) -> list[str]:
        return [entry.phase for entry in self.trail if entry.skipped]


def skipped_deliverable(phase: PhaseMetadata) -> str:
    return f"{phase.display_name} skipped ({phase.toggle} disabled)"


# =============================================================================
# Burr action and hooks
# =============================================================================


@action(
    reads=["feature", "executed_phases", "phase_results"],
    writes=["executed_phases", "phase_results", "current_phase"],
)
def run_workflow_phase(
    state: State, phase: PhaseMetadata, runner: PhaseRunner | None = None
) -> State:
    """Execute one phase of the traversal (bound per phase)."""
    feature = state["feature"]
    output = runner(phase, feature) if runner is not None else None

    phase_results = dict(state["phase_results"])
    phase_results[phase.name] = output
    return state.update(
        executed_phases=[*state["executed_phases"], phase.name],
        phase_results=phase_results,
        current_phase=phase.name,
    )


@dataclass
class PhaseProgressHook(PostRunStepHook, PreRunStepHook):
    """Logs progress through the chain."""

    phase_order: list[str] = field(default_factory=list)
    on_phase_complete: Callable[[str, int, int], None] | None = None

    def pre_run_step(self, *, action, **kwargs):
        index = self._index(action.name)
        logger.info(f"Starting: {action.name} ({index + 1}/{len(self.phase_order)})")

    def post_run_step(self, *, action, state, result, **kwargs):
        index = self._index(action.name)
        logger.info(f"Completed: {action.name}")
        if self.on_phase_complete:
            self.on_phase_complete(action.name, index, len(self.phase_order))

    def _index(self, action_name: str) -> int:
        return self.phase_order.index(action_name) if action_name in self.phase_order else 0


# =============================================================================
# Builder and runner
# =============================================================================


def build_full_workflow(
    feature: str,
    config: ChainConfig | None = None,
    runner: PhaseRunner | None = None,
    registry: PhaseRegistry | None = None,
    app_id: str | None = None,
    on_phase_complete: Callable[[str, int, int], None] | None = None,
):
    """Build the Burr application traversing the configured chain.

    Returns:
        Tuple of (application, terminal action name)

    Raises:
        ConfigurationError: If the chain is malformed
    """
    config = config or ChainConfig()
    registry = registry or get_phase_registry()
    chain = registry.build_chain(config)

    actions = {
        link.phase.action_name: run_workflow_phase.bind(phase=link.phase, runner=runner)
        for link in chain
    }
    transitions = [
        (link.phase.action_name, registry.get(link.next_phase, config.variant).action_name)
        for link in chain
        if link.next_phase is not None
    ]

    app = (
        ApplicationBuilder()
        .with_actions(**actions)
        .with_transitions(*transitions)
        .with_state(
            feature=feature,
            variant=config.variant.value,
            executed_phases=[],
            phase_results={},
            current_phase="",
        )
        .with_entrypoint(chain[0].phase.action_name)
        .with_hooks(
            PhaseProgressHook(
                phase_order=[link.phase.action_name for link in chain],
                on_phase_complete=on_phase_complete,
            )
        )
        .with_identifiers(app_id=app_id or f"tandem-{uuid.uuid4().hex[:8]}")
        .build()
    )
    return app, chain[-1].phase.action_name


def run_full_workflow(
    feature: str,
    config: ChainConfig | None = None,
    runner: PhaseRunner | None = None,
    registry: PhaseRegistry | None = None,
    on_phase_complete: Callable[[str, int, int], None] | None = None,
) -> FullWorkflowResult:
    """Traverse every enabled phase in chain order.

    Args:
        feature: Feature being delivered
        config: Chain configuration (defaults to ChainConfig())
        runner: Optional callable invoked for each enabled phase, usually
            wrapping WorkflowOrchestrator.run_phase
        registry: Phase registry (defaults to the global one)
        on_phase_complete: Progress callback (phase, index, total)

    Returns:
        FullWorkflowResult with the deliverable trail

    Raises:
        ConfigurationError: If the chain is malformed
        Exception: Whatever ``runner`` raised; later phases do not run
    """
    config = config or ChainConfig()
    registry = registry or get_phase_registry()
    app_id = f"tandem-{uuid.uuid4().hex[:8]}"
    start_time = time.time()

    app, terminal = build_full_workflow(
        feature, config, runner, registry, app_id=app_id, on_phase_complete=on_phase_complete
    )
    enabled = [link.name for link in registry.build_chain(config)]

    with workflow_span(feature, config.variant.value, enabled, **{"session.id": app_id}) as span:
        logger.info("=" * 60)
        logger.info(f"FULL WORKFLOW: {feature} ({config.variant.value})")
        logger.info(f"Phases: {' -> '.join(enabled)}")
        logger.info("=" * 60)

        _, _, final_state = app.run(halt_after=[terminal], inputs={})

        trail = [
            PhaseDeliverables(phase.name, (skipped_deliverable(phase),), skipped=True)
            if not config.is_enabled(phase)
            else PhaseDeliverables(phase.name, tuple(phase.deliverables))
            for phase in registry.phases_for_variant(config.variant)
        ]
        result = FullWorkflowResult(
            feature=feature,
            variant=config.variant.value,
            app_id=app_id,
            executed_phases=list(final_state["executed_phases"]),
            trail=trail,
            phase_results=dict(final_state["phase_results"]),
            execution_time=time.time() - start_time,
        )
        span.set_attribute("workflow.skipped_count", len(result.skipped_phases))
        span.set_attribute("workflow.duration_seconds", result.execution_time)

    logger.info(
        f"Workflow completed: {len(result.executed_phases)} phases, "
        f"{len(result.skipped_phases)} skipped, {result.execution_time:.1f}s"
    )
    return result
