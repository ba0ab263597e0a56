"""Coordination message builder.

Builds Instruction and Report messages from structured requests. The
builder is pure apart from the injected clock: the same request and the
same timestamp always produce the same message and identifier.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from tandem.config import SLUG_MAX_LENGTH
from tandem.exceptions import MessageValidationError

from .clock import Clock, SystemClock
from .messages import Instruction, InstructionRequest, Report, ReportRequest

logger = logging.getLogger(__name__)

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")

_RequestT = TypeVar("_RequestT", bound=BaseModel)


def slugify_task(task: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Derive a filesystem-safe slug from a task description.

    Lower-cases, strips every character that is not an ASCII letter, digit
    or whitespace, collapses whitespace runs to a single ``_`` and truncates
    to ``max_length``. Two tasks may share a slug; documents are told apart
    by the timestamp in their identifier, never by a dedup suffix.

    Example:
        slugify_task("Design Phase!!")  # -> "design_phase"
    """
    slug = _NON_ALPHANUMERIC.sub("", task.lower()).strip()
    slug = _WHITESPACE.sub("_", slug)
    return slug[:max_length]


def _coerce(model: type[_RequestT], request: _RequestT | Mapping[str, Any]) -> _RequestT:
    if isinstance(request, model):
        return request
    try:
        return model.model_validate(request)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise MessageValidationError(f"Invalid {model.__name__} ({fields}): {e}") from e


class MessageBuilder:
    """Builds coordination messages stamped by an injected clock.

    Usage:
        builder = MessageBuilder(FixedClock("202601011200"))
        instruction = builder.build_instruction(
            {"from": "coordinator", "to": "implementer", "task": "Design phase"}
        )
        instruction.identifier
        # -> "coordinator_to_implementer_202601011200_design_phase"
    """

    def __init__(self, clock: Clock | None = None):
        self.clock = clock or SystemClock()

    def build_instruction(
        self, request: InstructionRequest | Mapping[str, Any]
    ) -> Instruction:
        """Build an Instruction.

        Raises:
            MessageValidationError: If sender, recipient or task is missing/empty
        """
        req = _coerce(InstructionRequest, request)
        timestamp = self.clock.now()
        return Instruction(
            sender=req.sender,
            recipient=req.recipient,
            task=req.task,
            timestamp=timestamp,
            slug=slugify_task(req.task),
            priority=req.priority,
            deadline=req.deadline,
            context=req.context,
            requirements=list(req.requirements),
            acceptance_criteria=list(req.acceptance_criteria),
        )

    def build_report(self, request: ReportRequest | Mapping[str, Any]) -> Report:
        """Build a Report.

        Raises:
            MessageValidationError: If sender, recipient or task is missing/empty
        """
        req = _coerce(ReportRequest, request)
        timestamp = self.clock.now()
        return Report(
            sender=req.sender,
            recipient=req.recipient,
            task=req.task,
            timestamp=timestamp,
            slug=slugify_task(req.task),
            status=req.status,
            completed_items=list(req.completed_items),
            in_progress_items=list(req.in_progress_items),
            blocked_items=list(req.blocked_items),
            changed_files=list(req.changed_files),
            metrics=dict(req.metrics),
            learnings=list(req.learnings),
            next_actions=list(req.next_actions),
            notes=req.notes,
        )
