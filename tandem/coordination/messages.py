"""Pydantic models for coordination messages.

Two message kinds travel between roles:

- Instruction: directs one role to perform work for another
- Report: summarizes completed or blocked work from one role to another

Both share ``sender``, ``recipient``, ``task``, ``timestamp`` and ``slug``;
their identity is ``{sender}_to_{recipient}_{timestamp}_{slug}``, which is
also the stem of the persisted document. Optional body fields that are
missing render as fixed placeholder text, so every document has the same
section layout.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tandem.config import DOCUMENT_SUFFIX, MessageStatus, Priority, Role

# =============================================================================
# Placeholder Text
# =============================================================================

PLACEHOLDER_CONTEXT = "No additional context provided"
PLACEHOLDER_REQUIREMENTS = "- No specific requirements listed"
PLACEHOLDER_ACCEPTANCE = "1. Implementation complete\n2. Tests passing\n3. Quality standards met"
PLACEHOLDER_DEADLINE = "To be agreed"
PLACEHOLDER_COMPLETED = "- No completed items"
PLACEHOLDER_IN_PROGRESS = "- No items in progress"
PLACEHOLDER_BLOCKED = "- No blocked items"
PLACEHOLDER_CHANGED_FILES = "- No file changes"
PLACEHOLDER_METRICS = "- No metrics recorded"
PLACEHOLDER_LEARNINGS = "- Nothing noteworthy"
PLACEHOLDER_NEXT_ACTIONS = "1. Await next instruction"
PLACEHOLDER_NOTES = "Generated by the tandem coordination workflow"

_STATUS_LABELS = {
    MessageStatus.COMPLETED: "Completed",
    MessageStatus.IN_PROGRESS: "In progress",
    MessageStatus.BLOCKED: "Blocked",
}

# What the receiving role does once it has finished an instruction
_HANDOFF_TARGETS = {
    Role.COORDINATOR: "project management",
    Role.IMPLEMENTER: "Verifier (quality check)",
    Role.VERIFIER: "Coordinator (result report)",
}


def _numbered(items: list[str]) -> str:
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))


def _bulleted(items: list[str], marker: str = "-") -> str:
    return "\n".join(f"{marker} {item}" for item in items)


# =============================================================================
# Requests
# =============================================================================


class _MessageRequest(BaseModel):
    """Fields every request carries. ``from``/``to`` are accepted as aliases."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    sender: Role = Field(alias="from")
    recipient: Role = Field(alias="to")
    task: str

    @field_validator("task")
    @classmethod
    def _task_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("task must not be empty")
        return value


class InstructionRequest(_MessageRequest):
    """Structured input for building an Instruction."""

    priority: Priority = Priority.MEDIUM
    deadline: str | None = None
    context: str | None = None
    requirements: list[str] = Field(default_factory=list)
    acceptance_criteria: list[str] = Field(default_factory=list, alias="acceptanceCriteria")


class ReportRequest(_MessageRequest):
    """Structured input for building a Report."""

    status: MessageStatus = MessageStatus.COMPLETED
    completed_items: list[str] = Field(default_factory=list, alias="completedItems")
    in_progress_items: list[str] = Field(default_factory=list, alias="inProgressItems")
    blocked_items: list[str] = Field(default_factory=list, alias="blockedItems")
    changed_files: list[str] = Field(default_factory=list, alias="changedFiles")
    metrics: dict[str, Any] = Field(default_factory=dict)
    learnings: list[str] = Field(default_factory=list)
    next_actions: list[str] = Field(default_factory=list, alias="nextActions")
    notes: str | None = None


# =============================================================================
# Messages
# =============================================================================


class CoordinationMessage(BaseModel):
    """Shared shape of Instruction and Report."""

    model_config = ConfigDict(frozen=True)

    sender: Role
    recipient: Role
    task: str
    timestamp: str
    slug: str

    @property
    def identifier(self) -> str:
        """Deterministic identity, also used as the document file stem."""
        return f"{self.sender.value}_to_{self.recipient.value}_{self.timestamp}_{self.slug}"

    @property
    def filename(self) -> str:
        return f"{self.identifier}{DOCUMENT_SUFFIX}"

    @property
    def is_self_addressed(self) -> bool:
        return self.sender is self.recipient


class Instruction(CoordinationMessage):
    """A document directing ``recipient`` to perform work for ``sender``."""

    priority: Priority
    deadline: str | None = None
    context: str | None = None
    requirements: list[str] = Field(default_factory=list)
    acceptance_criteria: list[str] = Field(default_factory=list)

    def to_markdown(self) -> str:
        sender = self.sender.display_name
        recipient = self.recipient.display_name
        return f"""# {self.filename}

## {sender} -> {recipient} Instruction
**From**: {sender}
**To**: {recipient}
**Date**: {self.timestamp}
**Task**: {self.task}
**Priority**: {self.priority.value}

## Task Overview
{self.context or PLACEHOLDER_CONTEXT}

## Requirements
{_numbered(self.requirements) or PLACEHOLDER_REQUIREMENTS}

## Acceptance Criteria
{_numbered(self.acceptance_criteria) or PLACEHOLDER_ACCEPTANCE}

## Schedule
- **Deadline**: {self.deadline or PLACEHOLDER_DEADLINE}
- **Checkpoints**: as needed

## Next Steps
1. Start the work
2. Report progress
3. On completion, report to {_HANDOFF_TARGETS[self.recipient]}

---
*Issued by: {self.sender.value}*
*Priority: {self.priority.value}*
*Generated at: {self.timestamp}*
"""


class Report(CoordinationMessage):
    """A document summarizing work from ``sender`` to ``recipient``."""

    status: MessageStatus
    completed_items: list[str] = Field(default_factory=list)
    in_progress_items: list[str] = Field(default_factory=list)
    blocked_items: list[str] = Field(default_factory=list)
    changed_files: list[str] = Field(default_factory=list)
    metrics: dict[str, Any] = Field(default_factory=dict)
    learnings: list[str] = Field(default_factory=list)
    next_actions: list[str] = Field(default_factory=list)
    notes: str | None = None

    def _metrics_markdown(self) -> str:
        if not self.metrics:
            return PLACEHOLDER_METRICS
        return "\n".join(f"- **{key}**: {value}" for key, value in self.metrics.items())

    def to_markdown(self) -> str:
        sender = self.sender.display_name
        recipient = self.recipient.display_name
        changed_files = [f"`{path}`" for path in self.changed_files]
        return f"""# {self.filename}

## {sender} Report
**From**: {sender}
**To**: {recipient}
**Date**: {self.timestamp}
**Task**: {self.task}
**Status**: {_STATUS_LABELS[self.status]}

## Completed
{_bulleted(self.completed_items, "- [x]") or PLACEHOLDER_COMPLETED}

## In Progress
{_bulleted(self.in_progress_items, "- [ ]") or PLACEHOLDER_IN_PROGRESS}

## Issues / Blocked
{_bulleted(self.blocked_items, "- (!)") or PLACEHOLDER_BLOCKED}

## Changed Files
{_bulleted(changed_files) or PLACEHOLDER_CHANGED_FILES}

## Metrics
{self._metrics_markdown()}

## Learnings
{_bulleted(self.learnings) or PLACEHOLDER_LEARNINGS}

## Next Actions
{_numbered(self.next_actions) or PLACEHOLDER_NEXT_ACTIONS}

## Notes
{self.notes or PLACEHOLDER_NOTES}

---
*Reporter: {self.sender.value}*
*Status: {self.status.value}*
*Generated at: {self.timestamp}*
"""
