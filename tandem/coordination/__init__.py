"""Inter-agent coordination protocol: Instruction and Report documents."""

from .builder import MessageBuilder, slugify_task
from .clock import Clock, FixedClock, SystemClock, format_timestamp
from .messages import (
    CoordinationMessage,
    Instruction,
    InstructionRequest,
    Report,
    ReportRequest,
)
from .store import CoordinationStore, parse_identifier

__all__ = [
    "Clock",
    "CoordinationMessage",
    "CoordinationStore",
    "FixedClock",
    "Instruction",
    "InstructionRequest",
    "MessageBuilder",
    "Report",
    "ReportRequest",
    "SystemClock",
    "format_timestamp",
    "parse_identifier",
    "slugify_task",
]
