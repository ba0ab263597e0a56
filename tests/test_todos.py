"""Tests for the todo rule engine.

Tests cover:
- Commit enforcement and retrospective capture insertion
- Fixed-point enhancement (idempotence, enhance/validate agreement)
- Japanese keywords
- Rule toggles
- Summary, auto-fix and JSON wire format
"""

import json
import logging

import pytest

from tandem.todos import (
    RuleId,
    TodoItem,
    TodoRuleEngine,
    TodoRuleOptions,
    TodoStatus,
    auto_fix,
    dump_todos,
    enhance_todos,
    load_todos,
    requires_commit,
    summarize_todos,
    validate_todos,
)

COMMIT_ITEM = "Git commit documentation changes"
LEARNING_ITEM = "Capture learning insights and patterns"


def todo(content: str, status: str = "pending") -> TodoItem:
    return TodoItem(content=content, active_form=f"Doing: {content}", status=status)


def contents(todos: list[TodoItem]) -> list[str]:
    return [t.content for t in todos]


SAMPLE_LISTS = [
    [],
    [todo("Run linter")],
    [todo("Create instruction doc")],
    [todo("Implement login form")],
    [todo("Write design report"), todo("Git commit changes")],
    [todo("Fix flaky test"), todo("Record learning"), todo("Update handoff notes")],
    [todo("ログイン画面を実装")],
    [todo("指示書を作成")],
]


class TestCommitEnforcement:
    """Document-producing work must end with a commit item."""

    def test_commit_item_appended(self):
        """Test a document task gets the commit item at the end."""
        result = enhance_todos([todo("Create instruction doc")])

        assert contents(result) == ["Create instruction doc", COMMIT_ITEM]
        assert result[-1].status == TodoStatus.PENDING
        assert result[-1].active_form == "Committing documentation changes"

    def test_existing_commit_satisfies_rule(self):
        """Test any item mentioning commit satisfies the rule."""
        todos = [todo("Write status report"), todo("COMMIT everything")]

        assert contents(enhance_todos(todos)) == contents(todos)

    def test_unrelated_list_unchanged(self):
        """Test a list without triggers is returned as-is."""
        todos = [todo("Run linter"), todo("Update dependencies")]

        assert enhance_todos(todos) == todos

    def test_input_not_mutated(self):
        """Test enhance returns a new list and leaves the input alone."""
        todos = [todo("Create instruction doc")]

        enhance_todos(todos)

        assert len(todos) == 1

    def test_japanese_keyword_triggers_commit(self):
        """Test Japanese document keywords trigger the commit rule."""
        result = enhance_todos([todo("指示書を作成")])

        assert contents(result)[-1] == COMMIT_ITEM


class TestRetrospectiveCapture:
    """Substantial work must be followed by a learning-capture item."""

    def test_learning_item_then_commit(self):
        """Test the inserted learning item itself triggers the commit rule."""
        result = enhance_todos([todo("Implement login form")])

        assert contents(result) == ["Implement login form", LEARNING_ITEM, COMMIT_ITEM]

    def test_learning_inserted_before_git_commit(self):
        """Test the learning item goes before the first 'git commit' item."""
        result = enhance_todos([todo("Write design report"), todo("Git commit changes")])

        assert contents(result) == ["Write design report", LEARNING_ITEM, "Git commit changes"]

    def test_existing_learning_satisfies_rule(self):
        """Test an item mentioning learning satisfies the rule."""
        todos = [todo("Refactor parser"), todo("Write learning notes"), todo("git commit")]

        assert contents(enhance_todos(todos)) == contents(todos)

    def test_japanese_keyword_triggers_capture(self):
        """Test Japanese work keywords trigger the capture rule."""
        result = enhance_todos([todo("ログイン画面を実装")])

        assert contents(result) == ["ログイン画面を実装", LEARNING_ITEM, COMMIT_ITEM]


class TestFixedPoint:
    """Enhancement reaches a fixed point that validation accepts."""

    @pytest.mark.parametrize("todos", SAMPLE_LISTS)
    def test_enhance_is_idempotent(self, todos):
        """Test enhancing twice equals enhancing once."""
        once = enhance_todos(todos)

        assert enhance_todos(once) == once

    @pytest.mark.parametrize("todos", SAMPLE_LISTS)
    def test_enhanced_list_validates(self, todos):
        """Test validation accepts every enhanced list."""
        assert validate_todos(enhance_todos(todos)).valid

    @pytest.mark.parametrize("todos", SAMPLE_LISTS)
    def test_enhance_only_inserts(self, todos):
        """Test every original item survives in its original order."""
        result = contents(enhance_todos(todos))
        positions = [result.index(t.content) for t in todos]

        assert positions == sorted(positions)


class TestValidation:
    """Test validate_todos reports unmet rules."""

    def test_missing_commit_reported(self):
        """Test a document task without commit is a violation."""
        result = validate_todos([todo("Create instruction doc")])

        assert not result.valid
        assert [v.rule for v in result.violations] == ["commit-enforcement"]
        assert result.violations[0].description == (
            "Document creation tasks must include git commit task"
        )

    def test_both_rules_reported(self):
        """Test both rules can be violated at once."""
        result = validate_todos([todo("Implement handoff report")])

        assert [v.rule for v in result.violations] == [
            RuleId.COMMIT_ENFORCEMENT.value,
            RuleId.RETROSPECTIVE_CAPTURE.value,
        ]

    def test_empty_list_is_valid(self):
        assert validate_todos([]).valid


class TestRuleOptions:
    """Test rule toggles."""

    def test_commit_enforcement_disabled(self):
        """Test enforce_commit=False skips the commit rule."""
        todos = [todo("Create instruction doc")]
        options = TodoRuleOptions(enforce_commit=False)

        assert enhance_todos(todos, options) == todos
        assert validate_todos(todos, options).valid

    def test_document_detection_disabled(self):
        """Test commit enforcement also needs document detection."""
        options = TodoRuleOptions(detect_document_creation=False)

        assert not options.is_enabled(RuleId.COMMIT_ENFORCEMENT)
        assert enhance_todos([todo("Write report")], options) == [todo("Write report")]

    def test_capture_disabled(self):
        """Test capture_learnings=False skips the retrospective rule."""
        todos = [todo("Implement login form")]

        assert enhance_todos(todos, TodoRuleOptions(capture_learnings=False)) == todos


class TestReporting:
    """Test summary, auto-fix and requires_commit."""

    def test_summary_counts(self):
        """Test the summary counts statuses and detects docs and commits."""
        todos = [
            todo("Create instruction doc", "completed"),
            todo("Implement form", "in_progress"),
            todo("Git commit", "pending"),
        ]

        summary = summarize_todos(todos)

        assert summary.splitlines() == [
            "Todo Summary",
            "├── Completed: 1",
            "├── In Progress: 1",
            "├── Pending: 1",
            "├── Has Documentation: yes",
            "├── Has Git Commit: yes",
            "└── Enhanced Rules: Active",
        ]

    def test_summary_rules_disabled(self):
        summary = summarize_todos([], TodoRuleOptions(enforce_commit=False))

        assert summary.endswith("└── Enhanced Rules: Disabled")

    def test_auto_fix_leaves_valid_list(self, caplog):
        """Test a valid list is returned unchanged without warnings."""
        todos = [todo("Run linter")]

        with caplog.at_level(logging.WARNING):
            assert auto_fix(todos) == todos
        assert caplog.records == []

    def test_auto_fix_enhances_invalid_list(self, caplog):
        """Test an invalid list is enhanced and the violations are logged."""
        with caplog.at_level(logging.WARNING):
            result = auto_fix([todo("Create instruction doc")])

        assert contents(result)[-1] == COMMIT_ITEM
        assert "Document creation tasks must include git commit task" in caplog.text

    def test_requires_commit(self):
        assert requires_commit([todo("Write handoff notes")])
        assert not requires_commit([todo("Run linter")])

    def test_engine_keeps_options(self):
        engine = TodoRuleEngine(TodoRuleOptions(capture_learnings=False))

        assert engine.options.capture_learnings is False


class TestWireFormat:
    """Test JSON load/dump with the activeForm wire name."""

    def test_load_todos(self):
        raw = json.dumps(
            [{"content": "Write report", "activeForm": "Writing report", "status": "in_progress"}]
        )

        todos = load_todos(raw)

        assert todos == [
            TodoItem(content="Write report", active_form="Writing report", status="in_progress")
        ]

    def test_dump_uses_wire_names(self):
        data = json.loads(dump_todos([todo("Write report")]))

        assert data == [
            {"content": "Write report", "activeForm": "Doing: Write report", "status": "pending"}
        ]

    def test_invalid_status_rejected(self):
        with pytest.raises(ValueError):
            load_todos('[{"content": "x", "status": "done"}]')
