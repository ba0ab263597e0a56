"""Todo rule engine: augmentation and validation of todo lists.

The engine never reorders or removes items and never mutates the list it
is given. ``enhance`` repeats the rule pass until no rule fires, because an
item inserted by one rule may itself trigger another (the learning-capture
item is a document-producing task). Each rule adds at most one item and is
satisfied afterwards, so the loop ends after at most ``len(rules) + 1``
passes.
"""

import logging
from collections.abc import Sequence

from .models import RuleViolation, TodoItem, TodoStatus, ValidationResult
from .rules import (
    RULES,
    TRIGGER_KEYWORDS,
    KeywordKind,
    RuleId,
    TodoRule,
    TodoRuleOptions,
    TriggerKeyword,
    keywords_for,
)

logger = logging.getLogger(__name__)


def _any_mentions(todos: Sequence[TodoItem], keywords: Sequence[str]) -> bool:
    return any(todo.mentions(keyword) for todo in todos for keyword in keywords)


class TodoRuleEngine:
    """Applies and checks the todo rules.

    Usage:
        engine = TodoRuleEngine()
        todos = engine.enhance(todos)
        assert engine.validate(todos).valid
    """

    def __init__(
        self,
        options: TodoRuleOptions | None = None,
        rules: Sequence[TodoRule] = RULES,
        keywords: tuple[TriggerKeyword, ...] = TRIGGER_KEYWORDS,
    ):
        self.options = options or TodoRuleOptions()
        self._rules = tuple(rules)
        self._keyword_table = keywords

    # =========================================================================
    # Rule Predicates
    # =========================================================================

    def _keywords(self, rule: RuleId, kind: KeywordKind) -> tuple[str, ...]:
        return keywords_for(rule, kind, self._keyword_table)

    def is_triggered(self, rule: RuleId, todos: Sequence[TodoItem]) -> bool:
        """True when any item contains one of the rule's trigger keywords."""
        return _any_mentions(todos, self._keywords(rule, KeywordKind.TRIGGER))

    def is_satisfied(self, rule: RuleId, todos: Sequence[TodoItem]) -> bool:
        """True when any item already contains one of the rule's satisfiers."""
        return _any_mentions(todos, self._keywords(rule, KeywordKind.SATISFIER))

    def _active_rules(self) -> list[TodoRule]:
        return [rule for rule in self._rules if self.options.is_enabled(rule.rule_id)]

    # =========================================================================
    # Augmentation
    # =========================================================================

    def _insertion_index(self, rule: RuleId, todos: Sequence[TodoItem]) -> int:
        anchors = self._keywords(rule, KeywordKind.ANCHOR)
        if anchors:
            for index, todo in enumerate(todos):
                if any(todo.mentions(anchor) for anchor in anchors):
                    return index
        return len(todos)

    def _apply(self, rule: TodoRule, todos: list[TodoItem]) -> bool:
        """Apply one rule in place on the working copy. Returns True if it fired."""
        if not self.is_triggered(rule.rule_id, todos):
            return False
        if self.is_satisfied(rule.rule_id, todos):
            return False

        index = self._insertion_index(rule.rule_id, todos)
        todos.insert(index, rule.enforcement_item)
        logger.debug(
            f"Rule {rule.rule_id.value} inserted '{rule.enforcement_item.content}' at {index}"
        )
        return True

    def enhance(self, todos: Sequence[TodoItem]) -> list[TodoItem]:
        """Return a copy of ``todos`` with every enabled rule enforced."""
        enhanced = list(todos)
        active = self._active_rules()

        for _ in range(len(active) + 1):
            fired = [rule for rule in active if self._apply(rule, enhanced)]
            if not fired:
                break

        if len(enhanced) != len(todos):
            logger.info(f"Todo list enhanced: {len(todos)} -> {len(enhanced)} items")
        return enhanced

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self, todos: Sequence[TodoItem]) -> ValidationResult:
        """Report every enabled rule whose trigger is present but unmet."""
        violations = [
            RuleViolation(rule=rule.rule_id.value, description=rule.violation_message)
            for rule in self._active_rules()
            if self.is_triggered(rule.rule_id, todos)
            and not self.is_satisfied(rule.rule_id, todos)
        ]
        return ValidationResult(valid=not violations, violations=violations)

    def auto_fix(self, todos: Sequence[TodoItem]) -> list[TodoItem]:
        """Enhance ``todos`` only when validation fails; log what was wrong."""
        validation = self.validate(todos)
        if validation.valid:
            return list(todos)

        logger.warning("Todo list validation failed. Auto-fixing...")
        for violation in validation.violations:
            logger.warning(f"  - {violation.description}")
        return self.enhance(todos)

    def requires_commit(self, todos: Sequence[TodoItem]) -> bool:
        """True when the list contains document-producing work."""
        return self.is_triggered(RuleId.COMMIT_ENFORCEMENT, todos)

    # =========================================================================
    # Reporting
    # =========================================================================

    def summarize(self, todos: Sequence[TodoItem]) -> str:
        """Render a short plain-text summary of the list."""
        counts = {status: 0 for status in TodoStatus}
        for todo in todos:
            counts[todo.status] += 1

        has_docs = self.requires_commit(todos)
        has_commit = _any_mentions(todos, ("git commit",))
        rules_state = (
            "Active" if self.options.is_enabled(RuleId.COMMIT_ENFORCEMENT) else "Disabled"
        )

        return "\n".join(
            [
                "Todo Summary",
                f"├── Completed: {counts[TodoStatus.COMPLETED]}",
                f"├── In Progress: {counts[TodoStatus.IN_PROGRESS]}",
                f"├── Pending: {counts[TodoStatus.PENDING]}",
                f"├── Has Documentation: {'yes' if has_docs else 'no'}",
                f"├── Has Git Commit: {'yes' if has_commit else 'no'}",
                f"└── Enhanced Rules: {rules_state}",
            ]
        )


# =============================================================================
# Convenience functions
# =============================================================================


def enhance_todos(
    todos: Sequence[TodoItem], options: TodoRuleOptions | None = None
) -> list[TodoItem]:
    """Apply the todo rules with the given options."""
    return TodoRuleEngine(options).enhance(todos)


def validate_todos(
    todos: Sequence[TodoItem], options: TodoRuleOptions | None = None
) -> ValidationResult:
    """Validate a todo list against the todo rules."""
    return TodoRuleEngine(options).validate(todos)


def summarize_todos(todos: Sequence[TodoItem], options: TodoRuleOptions | None = None) -> str:
    """Plain-text summary of a todo list."""
    return TodoRuleEngine(options).summarize(todos)


def auto_fix(todos: Sequence[TodoItem], options: TodoRuleOptions | None = None) -> list[TodoItem]:
    """Enhance a todo list only when it violates a rule."""
    return TodoRuleEngine(options).auto_fix(todos)


def requires_commit(todos: Sequence[TodoItem]) -> bool:
    """True when the list contains document-producing work."""
    return TodoRuleEngine().requires_commit(todos)
