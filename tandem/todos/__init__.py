"""Todo rule engine.

Usage:
    from tandem.todos import TodoItem, enhance_todos, validate_todos

    todos = enhance_todos([TodoItem(content="Create instruction doc")])
    assert validate_todos(todos).valid
"""

from .engine import (
    TodoRuleEngine,
    auto_fix,
    enhance_todos,
    requires_commit,
    summarize_todos,
    validate_todos,
)
from .models import (
    RuleViolation,
    TodoItem,
    TodoStatus,
    ValidationResult,
    dump_todos,
    load_todos,
)
from .rules import (
    RULES,
    TRIGGER_KEYWORDS,
    KeywordKind,
    RuleId,
    TodoRule,
    TodoRuleOptions,
    TriggerKeyword,
)

__all__ = [
    "KeywordKind",
    "RULES",
    "RuleId",
    "RuleViolation",
    "TRIGGER_KEYWORDS",
    "TodoItem",
    "TodoRule",
    "TodoRuleEngine",
    "TodoRuleOptions",
    "TodoStatus",
    "TriggerKeyword",
    "ValidationResult",
    "auto_fix",
    "dump_todos",
    "enhance_todos",
    "load_todos",
    "requires_commit",
    "summarize_todos",
    "validate_todos",
]
