"""Tests for command todo lists."""

import pytest

from tandem.commands import CommandOptions, build_command_todos, command_names
from tandem.todos import TodoItem, TodoRuleOptions, TodoStatus, validate_todos


def contents(result):
    return [t.content for t in result.todos]


class TestKnownCommands:
    """Test the todo lists of known commands."""

    def test_spec_design(self):
        """Test a spec phase ends with learning capture and commit."""
        result = build_command_todos("spec-design", "login")

        assert contents(result) == [
            "Generate design specification for login",
            "Create AI instruction document for design phase",
            "Review and validate design completeness",
            "Capture learning insights and patterns",
            "Git commit documentation changes",
        ]
        assert result.should_commit
        assert result.command == "spec-design"

    def test_namespace_prefix_ignored(self):
        prefixed = build_command_todos("kiro:spec-design", "login")

        assert prefixed.command == "spec-design"
        assert contents(prefixed) == contents(build_command_todos("spec-design", "login"))

    def test_existing_items_follow_command_items(self):
        existing = [TodoItem(content="Ping reviewer", active_form="Pinging reviewer")]

        result = build_command_todos("spec-init", "Shop app", existing)

        assert contents(result)[0] == "Initialize project specification: Shop app"
        assert "Ping reviewer" in contents(result)
        assert contents(result).index("Ping reviewer") == 3

    def test_prototype_skipped(self):
        result = build_command_todos(
            "fdd-prototype", "login", options=CommandOptions(skip_prototype=True)
        )

        assert contents(result) == ["Prototype phase skipped for login"]
        assert result.todos[0].status == TodoStatus.COMPLETED

    def test_user_testing_disabled_by_default(self):
        result = build_command_todos("fdd-test", "login")

        assert contents(result) == ["User testing disabled for login"]
        assert result.todos[0].status == TodoStatus.COMPLETED

    def test_user_testing_enabled(self):
        result = build_command_todos(
            "fdd-test", "login", options=CommandOptions(enable_user_testing=True)
        )

        assert contents(result)[0] == "Prepare user testing scenarios for login"

    def test_ui_framework_in_items(self):
        result = build_command_todos("fdd-mockup", "login", options=CommandOptions(ui_framework="vue"))

        assert "Create vue component specifications" in contents(result)

    def test_full_follows_toggles(self):
        default = contents(build_command_todos("fdd-full", "login"))
        trimmed = contents(
            build_command_todos("fdd-full", "login", options=CommandOptions(skip_prototype=True))
        )

        assert "Build interactive prototype using react" in default
        assert "Prepare user testing scenarios for login" not in default
        assert "Build interactive prototype using react" not in trimmed
        assert "Prototype phase skipped for login" not in trimmed

    @pytest.mark.parametrize("command", command_names())
    def test_every_command_list_validates(self, command):
        result = build_command_todos(command, "login")

        assert validate_todos(result.todos).valid

    def test_rule_options_respected(self):
        result = build_command_todos(
            "spec-design", "login", rule_options=TodoRuleOptions(enforce_commit=False)
        )

        assert "Git commit documentation changes" not in contents(result)


class TestUnknownCommands:
    """Unknown commands contribute no items; only the rules apply."""

    def test_rules_applied_to_existing(self):
        existing = [TodoItem(content="Write release report")]

        result = build_command_todos("deploy", "login", existing)

        assert contents(result) == ["Write release report", "Git commit documentation changes"]
        assert result.should_commit

    def test_nothing_to_commit(self):
        existing = [TodoItem(content="Run linter")]

        result = build_command_todos("lint", "login", existing)

        assert contents(result) == ["Run linter"]
        assert not result.should_commit


def test_command_names():
    assert command_names()[:2] == ["spec-init", "spec-requirements"]
    assert "fdd-full" in command_names()
