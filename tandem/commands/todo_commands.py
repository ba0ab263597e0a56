"""Todo lists for workflow commands.

Each command (``spec-design``, ``fdd-mockup``...) contributes a fixed set of
todo items for a feature. The items are prepended to the caller's existing
list and the result goes through the todo rule engine, so every command's
list ends with the commit and learning-capture items the rules require.
Unknown commands contribute nothing and only get the rule-engine pass.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from tandem.todos import TodoItem, TodoRuleEngine, TodoRuleOptions, TodoStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandOptions:
    """Toggles shared by the frontend-driven commands."""

    ui_framework: str = "react"
    enable_user_testing: bool = False
    skip_prototype: bool = False


@dataclass
class CommandTodos:
    """Todo list produced for a command."""

    command: str
    todos: list[TodoItem] = field(default_factory=list)
    should_commit: bool = False


def _todo(content: str, active_form: str, status: TodoStatus = TodoStatus.PENDING) -> TodoItem:
    return TodoItem(content=content, active_form=active_form, status=status)


# =============================================================================
# Spec commands
# =============================================================================


def _spec_phase_todos(phase: str) -> Callable[[str, CommandOptions], list[TodoItem]]:
    def build(feature: str, options: CommandOptions) -> list[TodoItem]:
        return [
            _todo(
                f"Generate {phase} specification for {feature}",
                f"Generating {phase} specification for {feature}",
            ),
            _todo(
                f"Create AI instruction document for {phase} phase",
                f"Creating AI instruction document for {phase} phase",
            ),
            _todo(
                f"Review and validate {phase} completeness",
                f"Reviewing and validating {phase} completeness",
            ),
        ]

    return build


def _spec_impl_todos(feature: str, options: CommandOptions) -> list[TodoItem]:
    return [
        _todo(f"Implement feature: {feature}", f"Implementing feature: {feature}"),
        _todo(f"Write comprehensive tests for {feature}", f"Writing comprehensive tests for {feature}"),
        _todo(f"Update documentation for {feature}", f"Updating documentation for {feature}"),
        _todo("Generate implementation report", "Generating implementation report"),
    ]


def _spec_init_todos(description: str, options: CommandOptions) -> list[TodoItem]:
    return [
        _todo(
            f"Initialize project specification: {description}",
            f"Initializing project specification: {description}",
        ),
        _todo(
            "Create project structure and steering documents",
            "Creating project structure and steering documents",
        ),
        _todo("Set up AI coordination workspace", "Setting up AI coordination workspace"),
    ]


# =============================================================================
# Frontend-driven commands
# =============================================================================


def _fdd_init_todos(feature: str, options: CommandOptions) -> list[TodoItem]:
    return [
        _todo(f"Initialize FDD workspace for {feature}", f"Initializing FDD workspace for {feature}"),
        _todo(
            f"Set up {options.ui_framework} development environment",
            f"Setting up {options.ui_framework} development environment",
        ),
        _todo("Create design system foundation", "Creating design system foundation"),
        _todo("Document FDD workflow process", "Documenting FDD workflow process"),
    ]


def _fdd_mockup_todos(feature: str, options: CommandOptions) -> list[TodoItem]:
    return [
        _todo(f"Create wireframe designs for {feature}", f"Creating wireframe designs for {feature}"),
        _todo("Design UI component breakdown", "Designing UI component breakdown"),
        _todo("Map user interaction flows", "Mapping user interaction flows"),
        _todo(
            f"Create {options.ui_framework} component specifications",
            f"Creating {options.ui_framework} component specifications",
        ),
        _todo("Review and validate UI mockups", "Reviewing and validating UI mockups"),
    ]


def _fdd_prototype_todos(feature: str, options: CommandOptions) -> list[TodoItem]:
    if options.skip_prototype:
        return [
            _todo(
                f"Prototype phase skipped for {feature}",
                f"Skipping prototype phase for {feature}",
                TodoStatus.COMPLETED,
            )
        ]
    return [
        _todo(
            f"Build interactive prototype using {options.ui_framework}",
            f"Building interactive prototype using {options.ui_framework}",
        ),
        _todo("Implement core UI components", "Implementing core UI components"),
        _todo("Create user interaction demonstrations", "Creating user interaction demonstrations"),
        _todo("Test prototype functionality", "Testing prototype functionality"),
        _todo(
            "Document prototype features and limitations",
            "Documenting prototype features and limitations",
        ),
    ]


def _fdd_test_todos(feature: str, options: CommandOptions) -> list[TodoItem]:
    if not options.enable_user_testing:
        return [
            _todo(
                f"User testing disabled for {feature}",
                f"User testing disabled for {feature}",
                TodoStatus.COMPLETED,
            )
        ]
    return [
        _todo(
            f"Prepare user testing scenarios for {feature}",
            f"Preparing user testing scenarios for {feature}",
        ),
        _todo("Conduct user testing sessions", "Conducting user testing sessions"),
        _todo(
            "Analyze user feedback and identify issues",
            "Analyzing user feedback and identifying issues",
        ),
        _todo(
            "Implement UI improvements based on feedback",
            "Implementing UI improvements based on feedback",
        ),
        _todo(
            "Validate improvements with follow-up testing",
            "Validating improvements with follow-up testing",
        ),
    ]


def _fdd_implement_todos(feature: str, options: CommandOptions) -> list[TodoItem]:
    return [
        _todo(
            f"Implement production-ready {options.ui_framework} components",
            f"Implementing production-ready {options.ui_framework} components",
        ),
        _todo(
            "Write comprehensive unit tests for components",
            "Writing comprehensive unit tests for components",
        ),
        _todo("Create integration tests for user flows", "Creating integration tests for user flows"),
        _todo(
            "Implement accessibility features (WCAG compliance)",
            "Implementing accessibility features (WCAG compliance)",
        ),
        _todo("Optimize performance and bundle size", "Optimizing performance and bundle size"),
        _todo(
            "Document component APIs and usage examples",
            "Documenting component APIs and usage examples",
        ),
    ]


def _fdd_integrate_todos(feature: str, options: CommandOptions) -> list[TodoItem]:
    return [
        _todo(
            f"Integrate {feature} components into main application",
            f"Integrating {feature} components into main application",
        ),
        _todo(
            "Configure routing and navigation for new feature",
            "Configuring routing and navigation for new feature",
        ),
        _todo("Implement state management integration", "Implementing state management integration"),
        _todo(
            "Create end-to-end tests for complete user journeys",
            "Creating end-to-end tests for complete user journeys",
        ),
        _todo("Verify cross-browser compatibility", "Verifying cross-browser compatibility"),
        _todo(
            "Prepare deployment documentation and procedures",
            "Preparing deployment documentation and procedures",
        ),
    ]


def _fdd_full_todos(feature: str, options: CommandOptions) -> list[TodoItem]:
    todos = _fdd_init_todos(feature, options) + _fdd_mockup_todos(feature, options)
    if not options.skip_prototype:
        todos += _fdd_prototype_todos(feature, options)
    if options.enable_user_testing:
        todos += _fdd_test_todos(feature, options)
    return todos + _fdd_implement_todos(feature, options) + _fdd_integrate_todos(feature, options)


COMMAND_HANDLERS: dict[str, Callable[[str, CommandOptions], list[TodoItem]]] = {
    "spec-init": _spec_init_todos,
    "spec-requirements": _spec_phase_todos("requirements"),
    "spec-design": _spec_phase_todos("design"),
    "spec-tasks": _spec_phase_todos("tasks"),
    "spec-impl": _spec_impl_todos,
    "fdd-init": _fdd_init_todos,
    "fdd-mockup": _fdd_mockup_todos,
    "fdd-prototype": _fdd_prototype_todos,
    "fdd-test": _fdd_test_todos,
    "fdd-implement": _fdd_implement_todos,
    "fdd-integrate": _fdd_integrate_todos,
    "fdd-full": _fdd_full_todos,
}


def command_names() -> list[str]:
    return list(COMMAND_HANDLERS)


def build_command_todos(
    command: str,
    feature: str,
    existing: Sequence[TodoItem] = (),
    options: CommandOptions | None = None,
    rule_options: TodoRuleOptions | None = None,
) -> CommandTodos:
    """Build the todo list for ``command`` on ``feature``.

    A namespace prefix (``kiro:spec-design``) is ignored.

    Args:
        command: Command name, e.g. "spec-design" or "fdd-prototype"
        feature: Feature name (project description for "spec-init")
        existing: Caller's current todo list, kept after the command's items
        options: Frontend-driven toggles
        rule_options: Todo rule toggles

    Returns:
        CommandTodos with the enhanced list; ``should_commit`` is True for
        known commands and, for unknown ones, when the list has
        document-producing work
    """
    name = command.split(":", 1)[-1]
    options = options or CommandOptions()
    engine = TodoRuleEngine(rule_options)

    handler = COMMAND_HANDLERS.get(name)
    if handler is None:
        logger.debug(f"No todo handler for {command}; applying rules only")
        todos = engine.enhance(existing)
        return CommandTodos(command=name, todos=todos, should_commit=engine.requires_commit(todos))

    logger.info(f"Building todos for {name}: {feature}")
    todos = engine.enhance([*handler(feature, options), *existing])
    return CommandTodos(command=name, todos=todos, should_commit=True)
