"""Phase state machine and workflow orchestration.

Modules:
- phase_registry: phase catalog, ChainConfig, chain construction, next_phase
- phase_routes: per-phase Instruction/Report templates and role routes
- full_workflow: Burr traversal of every enabled phase
- orchestrator: run_phase with pre/post-phase documents and error recovery
"""

from .full_workflow import FullWorkflowResult, PhaseDeliverables, run_full_workflow
from .orchestrator import PhaseRunResult, WorkflowContext, WorkflowOrchestrator
from .outcome import PhaseOutcome
from .phase_registry import (
    ChainConfig,
    ChainLink,
    PhaseMetadata,
    PhaseRegistry,
    WorkflowVariant,
    build_chain,
    get_phase,
    get_phase_registry,
    next_phase,
)

__all__ = [
    # Registry
    "ChainConfig",
    "ChainLink",
    "PhaseMetadata",
    "PhaseRegistry",
    "WorkflowVariant",
    "build_chain",
    "get_phase",
    "get_phase_registry",
    "next_phase",
    # Execution
    "FullWorkflowResult",
    "PhaseDeliverables",
    "PhaseOutcome",
    "PhaseRunResult",
    "WorkflowContext",
    "WorkflowOrchestrator",
    "run_full_workflow",
]
