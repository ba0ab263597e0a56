"""Workflow orchestrator: runs one phase with its coordination side effects.

Each ``run_phase`` call follows the same pattern:
1. Resolve the phase (unknown or disabled phases fail before any side
   effect)
2. Persist the phase Instruction (when the phase has an instruction route)
3. Run the caller's work callable
4. Persist the phase Report and, when the outcome carries insights,
   a learning record
5. Persist a preparation Instruction for the successor phase
6. Stage and commit the documents (best effort)

A failure in 2-5 (including the work itself) files a ``blocked`` Report to
the coordinator and re-raises the original exception. Version-control
failures never fail the phase.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from tandem.config import Role
from tandem.coordination.builder import MessageBuilder
from tandem.coordination.store import CoordinationStore
from tandem.persistence.vcs import CommitReport, OperationOutcome, VersionControl
from tandem.telemetry import phase_span, record_phase_event

from .outcome import PhaseOutcome
from .phase_registry import ChainConfig, PhaseMetadata, PhaseRegistry, get_phase_registry
from .phase_routes import (
    blocked_report_request,
    instruction_request,
    preparation_request,
    report_request,
)
from .retrospective import learning_filename, learnings_dir, render_learning_record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkflowContext:
    """Inputs of one phase execution."""

    project_root: Path
    current_phase: str
    feature_name: str
    role: Role = Role.COORDINATOR
    requirements: tuple[str, ...] = ()  # appended to the phase Instruction


@dataclass
class PhaseRunResult:
    """What ``run_phase`` did.

    ``output`` is the work callable's return value, unchanged. Document
    paths are relative to the store root; a path is None when the
    corresponding document was not written.
    """

    phase: str
    feature: str
    output: Any = None
    outcome: PhaseOutcome = field(default_factory=PhaseOutcome)
    instruction_path: str | None = None
    report_path: str | None = None
    learning_path: str | None = None
    preparation_path: str | None = None
    next_phase: str | None = None
    commit: CommitReport | None = None

    @property
    def written_paths(self) -> list[str]:
        paths = [
            self.instruction_path,
            self.report_path,
            self.learning_path,
            self.preparation_path,
        ]
        return [path for path in paths if path]


class WorkflowOrchestrator:
    """Runs phases and records them as coordination documents.

    Usage:
        store = CoordinationStore(FileSystemDocumentStore(root))
        orchestrator = WorkflowOrchestrator(store, vcs=GitVersionControl(root))
        result = orchestrator.run_phase(
            WorkflowContext(root, "design", "login"),
            lambda: PhaseOutcome(summary="Design approved"),
        )
    """

    def __init__(
        self,
        store: CoordinationStore,
        builder: MessageBuilder | None = None,
        vcs: VersionControl | None = None,
        chain_config: ChainConfig | None = None,
        auto_commit: bool = True,
        registry: PhaseRegistry | None = None,
    ):
        self.store = store
        self.builder = builder or MessageBuilder()
        self.vcs = vcs
        self.chain_config = chain_config or ChainConfig()
        self.auto_commit = auto_commit
        self.registry = registry or get_phase_registry()

    # =========================================================================
    # Public API
    # =========================================================================

    def run_phase(self, context: WorkflowContext, work: Callable[[], Any]) -> PhaseRunResult:
        """Run ``work`` as ``context.current_phase``.

        Returns:
            PhaseRunResult with the work's output and the documents written

        Raises:
            ConfigurationError: If the phase is unknown or disabled by the
                chain configuration (nothing is written)
            Exception: Whatever ``work`` or persistence raised, after a
                blocked Report has been attempted
        """
        phase = self.registry.resolve(context.current_phase, self.chain_config.variant)
        successor = self.registry.next_phase(phase.name, self._config_for(phase))
        result = PhaseRunResult(phase=phase.name, feature=context.feature_name)

        logger.info("=" * 60)
        logger.info(f"PHASE: {phase.display_name} ({phase.variant.value})")
        logger.info(f"Feature: {context.feature_name} | Role: {context.role.value}")
        logger.info("=" * 60)

        with phase_span(
            phase.name,
            context.feature_name,
            context.role.value,
            **{"phase.variant": phase.variant.value},
        ) as span:
            try:
                # 1. Pre-phase instruction
                result.instruction_path = self._save_phase_instruction(phase, context)
                if result.instruction_path:
                    record_phase_event(span, "instruction_saved", path=result.instruction_path)

                # 2. Work
                result.output = work()
                result.outcome = PhaseOutcome.coerce(result.output)

                # 3. Report and retrospective
                result.next_phase = successor
                result.report_path = self._save_phase_report(
                    phase, context, result.outcome, result.next_phase
                )
                if result.outcome.has_learnings:
                    result.learning_path = self._save_learning_record(
                        phase, context, result.outcome
                    )

                # 4. Next-phase preparation
                if result.next_phase:
                    result.preparation_path = self._save_preparation(
                        phase, context, result.next_phase
                    )

            except Exception as e:
                logger.error(f"Phase {phase.name} failed for {context.feature_name}: {e}")
                self._file_blocked_report(phase, context, e)
                raise

            # 5. Commit (never fails the phase)
            result.commit = self._commit(phase, context, result)
            if result.commit is not None:
                span.set_attribute("phase.committed", result.commit.committed)

        logger.info(f"Phase {phase.name} completed: {len(result.written_paths)} documents")
        return result

    # =========================================================================
    # Steps
    # =========================================================================

    def _save_phase_instruction(self, phase: PhaseMetadata, context: WorkflowContext) -> str | None:
        request = instruction_request(
            phase,
            context.feature_name,
            self._config_for(phase),
            extra_requirements=list(context.requirements),
        )
        if request is None:
            logger.debug(f"No instruction route for {phase.variant.value}/{phase.name}")
            return None
        return self.store.save_instruction(self.builder.build_instruction(request))

    def _save_phase_report(
        self,
        phase: PhaseMetadata,
        context: WorkflowContext,
        outcome: PhaseOutcome,
        next_phase: str | None,
    ) -> str | None:
        request = report_request(phase, context.feature_name, outcome, next_phase)
        if request is None:
            logger.debug(f"No report route for {phase.variant.value}/{phase.name}")
            return None
        return self.store.save_report(self.builder.build_report(request))

    def _save_learning_record(
        self, phase: PhaseMetadata, context: WorkflowContext, outcome: PhaseOutcome
    ) -> str:
        timestamp = self.builder.clock.now()
        directory = learnings_dir(self.store.docs_dir)
        path = f"{directory}/{learning_filename(timestamp, phase.name, context.feature_name)}"

        self.store.documents.mkdir(directory)
        self.store.documents.write(
            path,
            render_learning_record(
                timestamp, phase.name, context.feature_name, context.role.value, outcome
            ),
        )
        logger.info(f"Captured learning insights: {path}")
        return path

    def _save_preparation(
        self, phase: PhaseMetadata, context: WorkflowContext, next_name: str
    ) -> str | None:
        successor = self.registry.get(next_name, phase.variant)
        request = preparation_request(successor, context.feature_name)
        if request is None:
            return None
        logger.info(f"Preparing {next_name} phase for {context.feature_name}")
        return self.store.save_instruction(self.builder.build_instruction(request))

    def _file_blocked_report(
        self, phase: PhaseMetadata, context: WorkflowContext, error: Exception
    ) -> None:
        """Best effort: a failure here is logged and the original error wins."""
        try:
            request = blocked_report_request(
                phase.name, context.feature_name, context.role, error
            )
            path = self.store.save_report(self.builder.build_report(request))
            logger.info(f"Filed blocked report for {phase.name}: {path}")
        except Exception as report_error:
            logger.warning(
                f"Could not file blocked report for {phase.name}: {report_error}"
            )

    def _commit(
        self, phase: PhaseMetadata, context: WorkflowContext, result: PhaseRunResult
    ) -> CommitReport | None:
        if not self.auto_commit or self.vcs is None:
            return None

        paths = list(dict.fromkeys([*result.outcome.files, *result.written_paths]))
        if not paths:
            logger.debug(f"Nothing to commit for {phase.name} phase")
            return None

        message = self._commit_message(phase, context, result)
        try:
            report = self.vcs.stage_and_commit(paths, message)
        except Exception as e:
            logger.warning(f"Auto-commit failed for {phase.name} phase, workflow continues: {e}")
            subject = message.splitlines()[0]
            return CommitReport(
                commit=OperationOutcome("commit", subject, ok=False, error=str(e))
            )

        for failure in report.failures:
            logger.warning(
                f"Auto-commit {failure.operation} failed for {failure.target}, "
                f"workflow continues: {failure.error}"
            )
        if report.committed:
            logger.info(f"Auto-committed changes for {phase.name} phase")
        return report

    # =========================================================================
    # Helpers
    # =========================================================================

    def _config_for(self, phase: PhaseMetadata) -> ChainConfig:
        if phase.variant is self.chain_config.variant:
            return self.chain_config
        return replace(self.chain_config, variant=phase.variant)

    @staticmethod
    def _commit_message(
        phase: PhaseMetadata, context: WorkflowContext, result: PhaseRunResult
    ) -> str:
        summary = result.outcome.summary or "completed successfully"
        return (
            f"feat({context.feature_name}): {phase.name} phase completed\n"
            f"\n"
            f"- {phase.name} phase: {summary}\n"
            f"- Role: {context.role.value}\n"
            f"- Generated documentation and reports\n"
        )
