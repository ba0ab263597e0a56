"""Centralized configuration constants for Tandem.

Single source of truth for the enumerations shared by every component
(roles, message status, priority) and for the on-disk layout of the
coordination documents.
"""

from enum import Enum

# =============================================================================
# Enums for Type Safety
# =============================================================================


class Role(Enum):
    """Agent roles taking part in the workflow.

    One closed enumeration used by instructions, reports and phase routes.
    """

    COORDINATOR = "coordinator"
    IMPLEMENTER = "implementer"
    VERIFIER = "verifier"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings."""
        return [role.value for role in cls]

    @property
    def directory_name(self) -> str:
        """Capitalized name used for role-addressed document directories."""
        return self.value.capitalize()

    @property
    def display_name(self) -> str:
        return _ROLE_DISPLAY_NAMES[self]


_ROLE_DISPLAY_NAMES = {
    Role.COORDINATOR: "Coordinator (orchestration)",
    Role.IMPLEMENTER: "Implementer (delivery)",
    Role.VERIFIER: "Verifier (quality gate)",
}


class MessageStatus(Enum):
    """Status carried by a Report."""

    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"


class Priority(Enum):
    """Urgency carried by an Instruction."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# =============================================================================
# Document Layout
# =============================================================================

# Root of all coordination documents, relative to the project root
DEFAULT_DOCS_DIR = "docs"

INSTRUCTIONS_DIR = "instructions"
REPORTS_DIR = "reports"

# Retrospective records
LEARNINGS_ROOT = "handover/learnings"
LEARNINGS_DIR = f"{LEARNINGS_ROOT}/technical"

# Prefixes for role-addressed subdirectories (ToImplementer/, FromVerifier/)
INSTRUCTION_DIR_PREFIX = "To"
REPORT_DIR_PREFIX = "From"

DOCUMENT_SUFFIX = ".md"

# =============================================================================
# Message Identity
# =============================================================================

# Sortable minute-resolution timestamp: YYYYMMDDHHmm
TIMESTAMP_FORMAT = "%Y%m%d%H%M"
TIMESTAMP_LENGTH = 12

# Maximum length of the task slug used in document identifiers
SLUG_MAX_LENGTH = 30

# =============================================================================
# Settings File
# =============================================================================

SETTINGS_FILENAME = "tandem.yaml"
