"""Rule definitions for the todo rule engine.

Every rule is described as data: an identifier, the item it enforces, and a
table of keywords tagged with the rule they belong to and the part they
play in it:

- TRIGGER:   presence of the keyword in any item makes the rule applicable
- SATISFIER: presence of the keyword in any item means the rule is already met
- ANCHOR:    the enforcement item is inserted before the first item matching it

All matches are case-insensitive substring checks on ``TodoItem.content``.
"""

from dataclasses import dataclass
from enum import Enum

from .models import TodoItem, TodoStatus


class RuleId(Enum):
    """Identifiers of the todo rules, in application order."""

    COMMIT_ENFORCEMENT = "commit-enforcement"
    RETROSPECTIVE_CAPTURE = "retrospective-capture"


class KeywordKind(Enum):
    TRIGGER = "trigger"
    SATISFIER = "satisfier"
    ANCHOR = "anchor"


@dataclass(frozen=True)
class TriggerKeyword:
    """One row of the keyword table."""

    rule: RuleId
    keyword: str
    kind: KeywordKind = KeywordKind.TRIGGER
    locale: str = "en"


@dataclass(frozen=True)
class TodoRuleOptions:
    """Toggles for the todo rules.

    Commit enforcement runs only when both ``enforce_commit`` and
    ``detect_document_creation`` are enabled.
    """

    enforce_commit: bool = True
    detect_document_creation: bool = True
    capture_learnings: bool = True

    def is_enabled(self, rule: RuleId) -> bool:
        if rule is RuleId.COMMIT_ENFORCEMENT:
            return self.enforce_commit and self.detect_document_creation
        if rule is RuleId.RETROSPECTIVE_CAPTURE:
            return self.capture_learnings
        return False


@dataclass(frozen=True)
class TodoRule:
    """Static definition of a rule and the item it inserts."""

    rule_id: RuleId
    enforcement_item: TodoItem
    violation_message: str


_T = KeywordKind.TRIGGER
_S = KeywordKind.SATISFIER
_A = KeywordKind.ANCHOR
_COMMIT = RuleId.COMMIT_ENFORCEMENT
_RETRO = RuleId.RETROSPECTIVE_CAPTURE

TRIGGER_KEYWORDS: tuple[TriggerKeyword, ...] = (
    # Document-producing work must be followed by a commit
    TriggerKeyword(_COMMIT, "instruction"),
    TriggerKeyword(_COMMIT, "指示書", locale="ja"),
    TriggerKeyword(_COMMIT, "report"),
    TriggerKeyword(_COMMIT, "報告書", locale="ja"),
    TriggerKeyword(_COMMIT, "learning"),
    TriggerKeyword(_COMMIT, "学習記録", locale="ja"),
    TriggerKeyword(_COMMIT, "handoff"),
    TriggerKeyword(_COMMIT, "引き継ぎ", locale="ja"),
    TriggerKeyword(_COMMIT, "pattern"),
    TriggerKeyword(_COMMIT, "パターン", locale="ja"),
    TriggerKeyword(_COMMIT, "decision"),
    TriggerKeyword(_COMMIT, "設計判断", locale="ja"),
    TriggerKeyword(_COMMIT, "commit", _S),
    # Substantial work must produce a retrospective record
    TriggerKeyword(_RETRO, "implement"),
    TriggerKeyword(_RETRO, "実装", locale="ja"),
    TriggerKeyword(_RETRO, "fix"),
    TriggerKeyword(_RETRO, "修正", locale="ja"),
    TriggerKeyword(_RETRO, "optimize"),
    TriggerKeyword(_RETRO, "最適化", locale="ja"),
    TriggerKeyword(_RETRO, "refactor"),
    TriggerKeyword(_RETRO, "リファクタ", locale="ja"),
    TriggerKeyword(_RETRO, "design"),
    TriggerKeyword(_RETRO, "設計", locale="ja"),
    TriggerKeyword(_RETRO, "learning", _S),
    TriggerKeyword(_RETRO, "学習", _S, locale="ja"),
    TriggerKeyword(_RETRO, "git commit", _A),
)

RULES: tuple[TodoRule, ...] = (
    TodoRule(
        rule_id=RuleId.COMMIT_ENFORCEMENT,
        enforcement_item=TodoItem(
            content="Git commit documentation changes",
            active_form="Committing documentation changes",
            status=TodoStatus.PENDING,
        ),
        violation_message="Document creation tasks must include git commit task",
    ),
    TodoRule(
        rule_id=RuleId.RETROSPECTIVE_CAPTURE,
        enforcement_item=TodoItem(
            content="Capture learning insights and patterns",
            active_form="Capturing learning insights and patterns",
            status=TodoStatus.PENDING,
        ),
        violation_message="Significant work should include learning capture task",
    ),
)


def keywords_for(
    rule: RuleId,
    kind: KeywordKind,
    table: tuple[TriggerKeyword, ...] = TRIGGER_KEYWORDS,
) -> tuple[str, ...]:
    """Return the keywords of one kind registered for a rule."""
    return tuple(entry.keyword for entry in table if entry.rule is rule and entry.kind is kind)
