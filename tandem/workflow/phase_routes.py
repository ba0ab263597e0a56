"""Per-phase message templates.

A phase's route says which role issues its Instruction to which, and which
role reports on it to which. The templates fill the task text, context and
body lists of those messages. Phases without an instruction route get no
pre-phase Instruction; phases without a report route get no phase Report.

Routes:
- Standard: coordinator directs implementer for requirements, design,
  tasks and implementation; implementer directs verifier for quality.
  Reports flow coordinator -> implementer -> verifier -> coordinator.
- Frontend-driven: coordinator directs implementer for every phase and
  files the phase report back to implementer.
- Design-track: no routes; its phases run without coordination documents.
"""

from dataclasses import dataclass

from tandem.config import MessageStatus, Priority, Role
from tandem.coordination.messages import InstructionRequest, ReportRequest

from .outcome import PhaseOutcome
from .phase_registry import ChainConfig, PhaseMetadata, WorkflowVariant


@dataclass(frozen=True)
class PhaseRoute:
    sender: Role
    recipient: Role


@dataclass(frozen=True)
class StandardTemplate:
    """Fixed text for one standard-variant phase."""

    task: str  # {feature} placeholder
    context: str
    requirements: tuple[str, ...]
    completed_items: tuple[str, ...]
    next_actions: tuple[str, ...]


_C, _I, _V = Role.COORDINATOR, Role.IMPLEMENTER, Role.VERIFIER

INSTRUCTION_ROUTES: dict[tuple[WorkflowVariant, str], PhaseRoute] = {
    (WorkflowVariant.STANDARD, "requirements"): PhaseRoute(_C, _I),
    (WorkflowVariant.STANDARD, "design"): PhaseRoute(_C, _I),
    (WorkflowVariant.STANDARD, "tasks"): PhaseRoute(_C, _I),
    (WorkflowVariant.STANDARD, "implementation"): PhaseRoute(_C, _I),
    (WorkflowVariant.STANDARD, "quality"): PhaseRoute(_I, _V),
    (WorkflowVariant.FRONTEND_DRIVEN, "ui-mockup"): PhaseRoute(_C, _I),
    (WorkflowVariant.FRONTEND_DRIVEN, "prototype"): PhaseRoute(_C, _I),
    (WorkflowVariant.FRONTEND_DRIVEN, "user-test"): PhaseRoute(_C, _I),
    (WorkflowVariant.FRONTEND_DRIVEN, "implementation"): PhaseRoute(_C, _I),
    (WorkflowVariant.FRONTEND_DRIVEN, "integration"): PhaseRoute(_C, _I),
}

REPORT_ROUTES: dict[tuple[WorkflowVariant, str], PhaseRoute] = {
    (WorkflowVariant.STANDARD, "requirements"): PhaseRoute(_C, _I),
    (WorkflowVariant.STANDARD, "design"): PhaseRoute(_C, _I),
    (WorkflowVariant.STANDARD, "tasks"): PhaseRoute(_C, _I),
    (WorkflowVariant.STANDARD, "implementation"): PhaseRoute(_I, _V),
    (WorkflowVariant.STANDARD, "quality"): PhaseRoute(_V, _C),
    (WorkflowVariant.FRONTEND_DRIVEN, "ui-mockup"): PhaseRoute(_C, _I),
    (WorkflowVariant.FRONTEND_DRIVEN, "prototype"): PhaseRoute(_C, _I),
    (WorkflowVariant.FRONTEND_DRIVEN, "user-test"): PhaseRoute(_C, _I),
    (WorkflowVariant.FRONTEND_DRIVEN, "implementation"): PhaseRoute(_C, _I),
    (WorkflowVariant.FRONTEND_DRIVEN, "integration"): PhaseRoute(_C, _I),
}

_PLANNING_COMPLETED = ("{phase} phase completed successfully",)
_PLANNING_NEXT = ("Proceed to next phase", "Review and approve output")

STANDARD_TEMPLATES: dict[str, StandardTemplate] = {
    "requirements": StandardTemplate(
        task="Requirements analysis for {feature}",
        context="Analyze and validate requirements for implementation readiness",
        requirements=(
            "Review requirements for completeness",
            "Identify technical constraints",
            "Prepare for design phase",
        ),
        completed_items=_PLANNING_COMPLETED,
        next_actions=_PLANNING_NEXT,
    ),
    "design": StandardTemplate(
        task="Technical design for {feature}",
        context="Create detailed technical design based on approved requirements",
        requirements=(
            "Design system architecture",
            "Define API contracts",
            "Plan implementation approach",
        ),
        completed_items=_PLANNING_COMPLETED,
        next_actions=_PLANNING_NEXT,
    ),
    "tasks": StandardTemplate(
        task="Task planning for {feature}",
        context="Create detailed implementation tasks based on approved design",
        requirements=(
            "Break down design into actionable tasks",
            "Estimate effort and dependencies",
            "Prepare for implementation phase",
        ),
        completed_items=_PLANNING_COMPLETED,
        next_actions=_PLANNING_NEXT,
    ),
    "implementation": StandardTemplate(
        task="Implementation of {feature}",
        context="Implement feature according to approved design",
        requirements=(
            "Follow design specifications",
            "Write comprehensive tests",
            "Document implementation decisions",
        ),
        completed_items=("Implementation completed", "Tests written", "Documentation updated"),
        next_actions=("Quality assessment required", "Run all quality gates"),
    ),
    "quality": StandardTemplate(
        task="Quality assessment for {feature}",
        context="Perform comprehensive quality checks on implementation",
        requirements=(
            "Run all quality gates",
            "Verify requirements traceability",
            "Validate performance benchmarks",
        ),
        completed_items=("Quality gates executed", "Results analyzed"),
        next_actions=("Review quality results", "Approve for deployment"),
    ),
}

FDD_REQUIREMENTS = ("Follow FDD best practices", "Ensure user-centric design")
PREPARATION_REQUIREMENTS = (
    "Review previous phase deliverables",
    "Set up next phase workspace",
    "Coordinate team resources",
)
BLOCKED_NEXT_ACTIONS = ("Review error details", "Apply fixes", "Retry phase execution")


def instruction_route(phase: PhaseMetadata) -> PhaseRoute | None:
    return INSTRUCTION_ROUTES.get((phase.variant, phase.name))


def report_route(phase: PhaseMetadata) -> PhaseRoute | None:
    return REPORT_ROUTES.get((phase.variant, phase.name))


def phase_task(phase: PhaseMetadata, feature: str) -> str:
    """Task text shared by a phase's Instruction and Report."""
    if phase.variant is WorkflowVariant.FRONTEND_DRIVEN:
        return f"FDD {phase.name} phase for {feature}"
    return f"{phase.name} phase for {feature}"


def _frontend_context(phase: PhaseMetadata, config: ChainConfig) -> str:
    context = f"Frontend-Driven Development: {phase.description}"
    context += f"\nUI framework: {config.ui_framework}"
    if config.design_system:
        context += f"\nDesign system: {config.design_system}"
    return context


def instruction_request(
    phase: PhaseMetadata,
    feature: str,
    config: ChainConfig | None = None,
    extra_requirements: list[str] | None = None,
) -> InstructionRequest | None:
    """Pre-phase Instruction for ``phase``, or None when it has no route."""
    route = instruction_route(phase)
    if route is None:
        return None
    config = config or ChainConfig()
    extra = list(extra_requirements or [])

    if phase.variant is WorkflowVariant.STANDARD:
        template = STANDARD_TEMPLATES[phase.name]
        return InstructionRequest(
            sender=route.sender,
            recipient=route.recipient,
            task=template.task.format(feature=feature),
            priority=Priority.HIGH,
            context=template.context,
            requirements=[*template.requirements, *extra],
        )

    return InstructionRequest(
        sender=route.sender,
        recipient=route.recipient,
        task=phase_task(phase, feature),
        priority=Priority.HIGH,
        context=_frontend_context(phase, config),
        requirements=[
            *(f"Create {deliverable}" for deliverable in phase.deliverables),
            *FDD_REQUIREMENTS,
            *extra,
        ],
    )


def report_request(
    phase: PhaseMetadata,
    feature: str,
    outcome: PhaseOutcome,
    next_phase: str | None = None,
) -> ReportRequest | None:
    """Post-phase Report for ``phase``, or None when it has no route."""
    route = report_route(phase)
    if route is None:
        return None

    if phase.variant is WorkflowVariant.STANDARD:
        template = STANDARD_TEMPLATES[phase.name]
        completed = [item.format(phase=phase.name) for item in template.completed_items]
        next_actions = list(template.next_actions)
        notes = outcome.summary
    else:
        completed = list(phase.deliverables)
        next_actions = (
            [f"Proceed to {next_phase} phase"] if next_phase else ["Feature ready for production"]
        )
        notes = outcome.summary or (
            f"Frontend-Driven Development {phase.name} phase completed successfully"
        )

    return ReportRequest(
        sender=route.sender,
        recipient=route.recipient,
        task=phase_task(phase, feature),
        status=MessageStatus.COMPLETED,
        completed_items=completed,
        changed_files=list(outcome.files),
        metrics=dict(outcome.metrics),
        learnings=outcome.learnings,
        next_actions=next_actions,
        notes=notes,
    )


def blocked_report_request(
    phase_name: str, feature: str, role: Role, error: BaseException
) -> ReportRequest:
    """Report filed to the coordinator when a phase fails."""
    return ReportRequest(
        sender=role,
        recipient=Role.COORDINATOR,
        task=f"Blocked: {phase_name} phase for {feature}",
        status=MessageStatus.BLOCKED,
        blocked_items=[f"Error in {phase_name} phase: {error}"],
        next_actions=list(BLOCKED_NEXT_ACTIONS),
        notes=f"{type(error).__name__} raised during the {phase_name} phase",
    )


def preparation_request(next_phase: PhaseMetadata, feature: str) -> InstructionRequest | None:
    """Instruction preparing the successor phase, or None when it has no route."""
    route = instruction_route(next_phase)
    if route is None:
        return None
    label = "FDD " if next_phase.variant is WorkflowVariant.FRONTEND_DRIVEN else ""
    return InstructionRequest(
        sender=route.sender,
        recipient=route.recipient,
        task=f"Prepare for {label}{next_phase.name} phase: {feature}",
        priority=Priority.MEDIUM,
        context=f"Previous phase completed. Ready for {next_phase.name} phase execution.",
        requirements=list(PREPARATION_REQUIREMENTS),
    )
