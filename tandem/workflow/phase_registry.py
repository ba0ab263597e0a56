"""Phase catalog and chain construction.

Single source of truth for phase metadata. Each workflow variant has an
ordered base catalog; a chain is built from the catalog by dropping the
optional phases whose toggle is off and linking the remainder forward.

Workflow Variants:
- STANDARD: requirements -> design -> tasks -> implementation -> quality
- FRONTEND_DRIVEN: ui-mockup -> prototype -> [user-test] -> implementation -> integration
- DESIGN_TRACK: ui-design -> prototype -> component-design -> integration -> testing

Phase names repeat across variants (``prototype``, ``implementation``,
``integration``), so phases are keyed by ``(variant, name)``.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from tandem.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class WorkflowVariant(Enum):
    """Workflow variants, each with its own phase catalog."""

    STANDARD = "standard"
    FRONTEND_DRIVEN = "frontend-driven"
    DESIGN_TRACK = "design-track"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid variant values as strings."""
        return [variant.value for variant in cls]


@dataclass(frozen=True)
class PhaseMetadata:
    """Immutable metadata for a workflow phase."""

    # Identifiers
    name: str  # e.g., "ui-mockup" (kebab-case, used in CLI and documents)
    action_name: str  # e.g., "ui_mockup" (Burr action name)

    # Display information
    display_name: str
    description: str
    deliverables: tuple[str, ...]

    # Chain membership
    variant: WorkflowVariant
    is_optional: bool = False
    toggle: str | None = None  # ChainConfig field that enables an optional phase


@dataclass(frozen=True)
class ChainConfig:
    """Configuration for building a phase chain.

    Defaults apply field by field; override with ``dataclasses.replace``.
    """

    variant: WorkflowVariant = WorkflowVariant.FRONTEND_DRIVEN
    enable_user_testing: bool = False
    enable_prototyping: bool = True
    ui_framework: str = "react"
    design_system: str | None = None

    _ALIASES = {
        "enableUserTesting": "enable_user_testing",
        "enablePrototyping": "enable_prototyping",
        "uiFramework": "ui_framework",
        "designSystem": "design_system",
    }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ChainConfig":
        """Build a config from camelCase or snake_case keys.

        Raises:
            ConfigurationError: On unknown keys or an unknown variant
        """
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = cls._ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(
                    f"Unknown chain option: {key}. Valid options: {sorted(known)}"
                )
            values[name] = value

        if "variant" in values and not isinstance(values["variant"], WorkflowVariant):
            try:
                values["variant"] = WorkflowVariant(values["variant"])
            except ValueError as e:
                raise ConfigurationError(
                    f"Unknown workflow variant: {values['variant']}. "
                    f"Valid variants: {WorkflowVariant.values()}"
                ) from e

        for name in ("enable_user_testing", "enable_prototyping"):
            if name in values and not isinstance(values[name], bool):
                raise ConfigurationError(f"{name} must be a boolean, got {values[name]!r}")

        return cls(**values)

    def is_enabled(self, phase: PhaseMetadata) -> bool:
        if not phase.is_optional or phase.toggle is None:
            return True
        return bool(getattr(self, phase.toggle))


@dataclass(frozen=True)
class ChainLink:
    """One phase of a built chain and the name of its successor."""

    phase: PhaseMetadata
    next_phase: str | None = None

    @property
    def name(self) -> str:
        return self.phase.name

    @property
    def is_terminal(self) -> bool:
        return self.next_phase is None


# =============================================================================
# Phase Definitions
# =============================================================================

_PHASES: list[PhaseMetadata] = [
    # =========================================================================
    # STANDARD
    # =========================================================================
    PhaseMetadata(
        name="requirements",
        action_name="requirements",
        display_name="Requirements",
        description="Analyze and validate requirements for implementation readiness",
        deliverables=("Requirements document", "Technical constraints", "Acceptance criteria"),
        variant=WorkflowVariant.STANDARD,
    ),
    PhaseMetadata(
        name="design",
        action_name="design",
        display_name="Design",
        description="Create detailed technical design based on approved requirements",
        deliverables=("System architecture", "API contracts", "Implementation approach"),
        variant=WorkflowVariant.STANDARD,
    ),
    PhaseMetadata(
        name="tasks",
        action_name="tasks",
        display_name="Tasks",
        description="Create detailed implementation tasks based on approved design",
        deliverables=("Task breakdown", "Effort estimates", "Dependency map"),
        variant=WorkflowVariant.STANDARD,
    ),
    PhaseMetadata(
        name="implementation",
        action_name="implementation",
        display_name="Implementation",
        description="Implement feature according to approved design",
        deliverables=("Feature code", "Comprehensive tests", "Implementation notes"),
        variant=WorkflowVariant.STANDARD,
    ),
    PhaseMetadata(
        name="quality",
        action_name="quality",
        display_name="Quality",
        description="Perform comprehensive quality checks on implementation",
        deliverables=("Quality gate results", "Traceability matrix", "Performance benchmarks"),
        variant=WorkflowVariant.STANDARD,
    ),
    # =========================================================================
    # FRONTEND-DRIVEN
    # =========================================================================
    PhaseMetadata(
        name="ui-mockup",
        action_name="ui_mockup",
        display_name="UI Mockup",
        description="Create UI mockups and wireframes based on user requirements",
        deliverables=(
            "Wireframe designs",
            "UI component breakdown",
            "User interaction flows",
            "Design system components",
        ),
        variant=WorkflowVariant.FRONTEND_DRIVEN,
    ),
    PhaseMetadata(
        name="prototype",
        action_name="prototype",
        display_name="Prototype",
        description="Build interactive prototype for user validation",
        deliverables=(
            "Interactive prototype",
            "Component library",
            "User interaction demos",
            "Technical feasibility analysis",
        ),
        variant=WorkflowVariant.FRONTEND_DRIVEN,
        is_optional=True,
        toggle="enable_prototyping",
    ),
    PhaseMetadata(
        name="user-test",
        action_name="user_test",
        display_name="User Test",
        description="Conduct user testing and gather feedback",
        deliverables=(
            "User testing results",
            "Feedback analysis",
            "UI improvement recommendations",
            "Validated user flows",
        ),
        variant=WorkflowVariant.FRONTEND_DRIVEN,
        is_optional=True,
        toggle="enable_user_testing",
    ),
    PhaseMetadata(
        name="implementation",
        action_name="implementation",
        display_name="Implementation",
        description="Implement production-ready components based on validated designs",
        deliverables=(
            "Production components",
            "Unit tests",
            "Integration tests",
            "Component documentation",
        ),
        variant=WorkflowVariant.FRONTEND_DRIVEN,
    ),
    PhaseMetadata(
        name="integration",
        action_name="integration",
        display_name="Integration",
        description="Integrate components into main application",
        deliverables=(
            "Integrated feature",
            "E2E tests",
            "Performance benchmarks",
            "Deployment documentation",
        ),
        variant=WorkflowVariant.FRONTEND_DRIVEN,
    ),
    # =========================================================================
    # DESIGN-TRACK
    # =========================================================================
    PhaseMetadata(
        name="ui-design",
        action_name="ui_design",
        display_name="UI Design",
        description="Design screens, usability requirements and the design system",
        deliverables=("Screen designs", "Usability requirements", "Wireframes", "Design decisions"),
        variant=WorkflowVariant.DESIGN_TRACK,
    ),
    PhaseMetadata(
        name="prototype",
        action_name="prototype",
        display_name="Prototype",
        description="Build a prototype and plan usability testing against it",
        deliverables=("Prototype specification", "Usability test plan", "Test result record"),
        variant=WorkflowVariant.DESIGN_TRACK,
        is_optional=True,
        toggle="enable_prototyping",
    ),
    PhaseMetadata(
        name="component-design",
        action_name="component_design",
        display_name="Component Design",
        description="Decompose the UI into typed, styled components with state management",
        deliverables=(
            "Component breakdown",
            "Type definitions",
            "Styling specification",
            "State management plan",
            "Component test strategy",
        ),
        variant=WorkflowVariant.DESIGN_TRACK,
    ),
    PhaseMetadata(
        name="integration",
        action_name="integration",
        display_name="Integration",
        description="Integrate components with the backend and the existing system",
        deliverables=("Frontend integration", "API integration", "Data flow verification"),
        variant=WorkflowVariant.DESIGN_TRACK,
    ),
    PhaseMetadata(
        name="testing",
        action_name="testing",
        display_name="Testing",
        description="Verify functionality, quality, usability and performance end to end",
        deliverables=("Unit tests", "E2E tests", "Visual tests", "Performance tests"),
        variant=WorkflowVariant.DESIGN_TRACK,
    ),
]


def validate_chain(links: list[ChainLink]) -> None:
    """Check the structural invariants of a built chain.

    Raises:
        ConfigurationError: If the chain is empty, repeats a phase, links to
            a phase outside the chain, cycles, or has other than one terminal
    """
    if not links:
        raise ConfigurationError("Phase chain is empty")

    names = [link.name for link in links]
    if len(set(names)) != len(names):
        raise ConfigurationError(f"Phase chain repeats a phase: {names}")

    terminals = [link.name for link in links if link.is_terminal]
    if len(terminals) != 1:
        raise ConfigurationError(f"Phase chain must have exactly one terminal phase, got {terminals}")

    by_name = {link.name: link for link in links}
    for link in links:
        if link.next_phase is not None and link.next_phase not in by_name:
            raise ConfigurationError(
                f"Phase '{link.name}' links to '{link.next_phase}', which is not in the chain"
            )

    # Walk from the entry; a forward chain visits every link exactly once
    visited: list[str] = []
    current: str | None = names[0]
    while current is not None:
        if current in visited:
            raise ConfigurationError(f"Phase chain has a cycle at '{current}'")
        visited.append(current)
        current = by_name[current].next_phase
    if len(visited) != len(links):
        raise ConfigurationError(f"Phase chain does not reach every phase: {visited}")


class PhaseRegistry:
    """Registry of phase metadata with lookups by variant and name.

    Usage:
        registry = PhaseRegistry()

        # Full catalog of a variant
        registry.phases_for_variant(WorkflowVariant.STANDARD)

        # Chain for a configuration
        chain = registry.build_chain(ChainConfig(enable_user_testing=True))
        [link.name for link in chain]
    """

    def __init__(self, phases: list[PhaseMetadata] | None = None):
        self._phases = phases or _PHASES
        self._by_key: dict[tuple[WorkflowVariant, str], PhaseMetadata] = {
            (p.variant, p.name): p for p in self._phases
        }

    # =========================================================================
    # Lookup Methods
    # =========================================================================

    def get(self, name: str, variant: WorkflowVariant | None = None) -> PhaseMetadata:
        """Get phase metadata by name.

        With a variant, only that variant's catalog is searched. Without
        one, the first variant (in enum order) defining the phase wins.

        Raises:
            ConfigurationError: If the phase is not found
        """
        if variant is not None:
            phase = self._by_key.get((variant, name))
            if phase is None:
                raise ConfigurationError(
                    f"Unknown phase: {name} for variant {variant.value}. "
                    f"Valid phases: {self.phase_names(variant)}"
                )
            return phase

        for candidate in WorkflowVariant:
            phase = self._by_key.get((candidate, name))
            if phase is not None:
                return phase
        raise ConfigurationError(f"Unknown phase: {name}. Valid phases: {self.phase_names()}")

    def resolve(self, name: str, preferred: WorkflowVariant) -> PhaseMetadata:
        """Get a phase from ``preferred`` if it defines it, else from any variant."""
        phase = self._by_key.get((preferred, name))
        return phase if phase is not None else self.get(name)

    def variants_for(self, name: str) -> list[WorkflowVariant]:
        return [p.variant for p in self._phases if p.name == name]

    # =========================================================================
    # Collection Methods
    # =========================================================================

    def phases_for_variant(
        self, variant: WorkflowVariant, include_optional: bool = True
    ) -> list[PhaseMetadata]:
        """Base catalog of a variant, in catalog order."""
        phases = [p for p in self._phases if p.variant == variant]
        if not include_optional:
            phases = [p for p in phases if not p.is_optional]
        return phases

    def phase_names(self, variant: WorkflowVariant | None = None) -> list[str]:
        """Distinct phase names, in catalog order."""
        phases = self._phases if variant is None else self.phases_for_variant(variant)
        return list(dict.fromkeys(p.name for p in phases))

    # =========================================================================
    # Chains
    # =========================================================================

    def build_chain(self, config: ChainConfig | None = None) -> list[ChainLink]:
        """Build and validate the forward chain for a configuration.

        Raises:
            ConfigurationError: If the resulting chain is malformed
        """
        config = config or ChainConfig()
        enabled = [p for p in self.phases_for_variant(config.variant) if config.is_enabled(p)]

        links = [
            ChainLink(phase=phase, next_phase=enabled[i + 1].name if i + 1 < len(enabled) else None)
            for i, phase in enumerate(enabled)
        ]
        validate_chain(links)
        logger.debug(f"Built {config.variant.value} chain: {[link.name for link in links]}")
        return links

    def skipped_phases(self, config: ChainConfig | None = None) -> list[PhaseMetadata]:
        """Optional phases of the configured variant whose toggle is off."""
        config = config or ChainConfig()
        return [p for p in self.phases_for_variant(config.variant) if not config.is_enabled(p)]

    def next_phase(self, current: str, config: ChainConfig | None = None) -> str | None:
        """Name of the phase after ``current`` in the built chain.

        Returns:
            The successor's name, or None for the terminal phase

        Raises:
            ConfigurationError: If ``current`` is not a phase of the built chain
        """
        config = config or ChainConfig()
        for link in self.build_chain(config):
            if link.name == current:
                return link.next_phase

        if (config.variant, current) in self._by_key:
            raise ConfigurationError(
                f"Phase '{current}' is disabled in the {config.variant.value} chain"
            )
        raise ConfigurationError(
            f"Unknown phase: {current}. Valid phases: {self.phase_names(config.variant)}"
        )

    def __len__(self) -> int:
        return len(self._phases)

    def __iter__(self):
        return iter(self._phases)


# =============================================================================
# Module-level singleton for convenience
# =============================================================================

_registry: PhaseRegistry | None = None


def get_phase_registry() -> PhaseRegistry:
    """Get the global phase registry singleton."""
    global _registry
    if _registry is None:
        _registry = PhaseRegistry()
    return _registry


def build_chain(config: ChainConfig | Mapping[str, Any] | None = None) -> list[ChainLink]:
    """Build the phase chain for a ChainConfig or a plain option mapping."""
    if not isinstance(config, ChainConfig):
        config = ChainConfig.from_mapping(config)
    return get_phase_registry().build_chain(config)


def next_phase(current: str, config: ChainConfig | Mapping[str, Any] | None = None) -> str | None:
    """Name of the phase after ``current``; None when ``current`` is terminal."""
    if not isinstance(config, ChainConfig):
        config = ChainConfig.from_mapping(config)
    return get_phase_registry().next_phase(current, config)


def get_phase(name: str, variant: WorkflowVariant | None = None) -> PhaseMetadata:
    """Get phase metadata by name."""
    return get_phase_registry().get(name, variant)
