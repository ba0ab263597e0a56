"""Command-line entry point.

Usage:
    tandem design login --summary "API contracts agreed" --file docs/design.md
    tandem full login --enable-user-testing
    tandem todos enhance todos.json
    tandem todos command fdd-prototype login
    tandem status

Every phase name is a subcommand. Exit code is 0 on success and 1 when the
phase (or any other command) fails.
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from tandem.commands import CommandOptions, build_command_todos, command_names
from tandem.config import Role
from tandem.coordination import CoordinationStore, MessageBuilder
from tandem.persistence import FileSystemDocumentStore, GitVersionControl
from tandem.settings import TandemSettings, load_settings
from tandem.telemetry import TelemetryConfig, init_telemetry, shutdown_telemetry
from tandem.todos import TodoRuleEngine, dump_todos, load_todos
from tandem.workflow import (
    PhaseOutcome,
    WorkflowContext,
    WorkflowOrchestrator,
    WorkflowVariant,
    get_phase_registry,
    run_full_workflow,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Parser
# =============================================================================


def _add_chain_toggles(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--variant",
        choices=WorkflowVariant.values(),
        help="Workflow variant (default: from tandem.yaml, else frontend-driven)",
    )
    parser.add_argument(
        "--enable-user-testing",
        action="store_true",
        help="Splice the user-test phase into the frontend-driven chain",
    )
    parser.add_argument(
        "--skip-prototype",
        action="store_true",
        help="Drop the prototype phase from the chain",
    )
    parser.add_argument(
        "--no-commit",
        action="store_true",
        help="Do not stage and commit documents after each phase",
    )


def _add_phase_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("feature", help="Feature name")
    parser.add_argument(
        "--role",
        choices=Role.values(),
        default=Role.COORDINATOR.value,
        help="Role executing the phase (default: coordinator)",
    )
    parser.add_argument("--summary", help="One-line summary of the work done")
    parser.add_argument(
        "--file",
        dest="files",
        action="append",
        default=[],
        help="Changed file to include in the report and commit (repeatable)",
    )
    parser.add_argument("--insight", help="Insight worth a learning record")
    parser.add_argument(
        "--requirement",
        dest="requirements",
        action="append",
        default=[],
        help="Extra requirement for the phase instruction (repeatable)",
    )
    _add_chain_toggles(parser)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tandem",
        description="Multi-role workflow orchestration with coordination documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        default=Path("."),
        help="Project root holding tandem.yaml and the docs directory (default: .)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for phase_name in get_phase_registry().phase_names():
        phase_parser = subparsers.add_parser(phase_name, help=f"Record the {phase_name} phase")
        _add_phase_arguments(phase_parser)
        phase_parser.set_defaults(handler=_cmd_phase, phase=phase_name)

    full_parser = subparsers.add_parser("full", help="Run every enabled phase in order")
    full_parser.add_argument("feature", help="Feature name")
    full_parser.add_argument(
        "--role",
        choices=Role.values(),
        default=Role.COORDINATOR.value,
        help="Role executing the phases (default: coordinator)",
    )
    _add_chain_toggles(full_parser)
    full_parser.set_defaults(handler=_cmd_full)

    todos_parser = subparsers.add_parser("todos", help="Check and augment todo lists")
    todos_sub = todos_parser.add_subparsers(dest="todos_command", required=True)
    for name, help_text in (
        ("enhance", "Print the list with the items the rules require"),
        ("validate", "List rule violations; exit 1 when there are any"),
        ("summary", "Print counts per status and rule state"),
    ):
        sub = todos_sub.add_parser(name, help=help_text)
        sub.add_argument("file", help="JSON todo list ('-' for stdin)")
        sub.set_defaults(handler=_cmd_todos)

    command_parser = todos_sub.add_parser("command", help="Todo list for a workflow command")
    command_parser.add_argument("name", help=f"One of: {', '.join(command_names())}")
    command_parser.add_argument("feature", help="Feature name (project description for spec-init)")
    command_parser.add_argument("--ui-framework", default="react")
    command_parser.add_argument("--enable-user-testing", action="store_true")
    command_parser.add_argument("--skip-prototype", action="store_true")
    command_parser.set_defaults(handler=_cmd_command_todos)

    status_parser = subparsers.add_parser("status", help="Show the coordination dashboard")
    status_parser.set_defaults(handler=_cmd_status)

    return parser


# =============================================================================
# Helpers
# =============================================================================


def _settings_from_args(args: argparse.Namespace) -> TandemSettings:
    """tandem.yaml settings with command-line toggles applied on top."""
    settings = load_settings(args.project_root)
    chain = settings.chain
    if getattr(args, "variant", None):
        chain = replace(chain, variant=WorkflowVariant(args.variant))
    if getattr(args, "enable_user_testing", False):
        chain = replace(chain, enable_user_testing=True)
    if getattr(args, "skip_prototype", False):
        chain = replace(chain, enable_prototyping=False)

    settings = replace(settings, chain=chain)
    if getattr(args, "no_commit", False):
        settings = replace(settings, auto_commit=False)
    return settings


def _orchestrator(project_root: Path, settings: TandemSettings) -> WorkflowOrchestrator:
    store = CoordinationStore(FileSystemDocumentStore(project_root), settings.docs_dir)
    return WorkflowOrchestrator(
        store,
        builder=MessageBuilder(),
        vcs=GitVersionControl(project_root),
        chain_config=settings.chain,
        auto_commit=settings.auto_commit,
    )


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


# =============================================================================
# Commands
# =============================================================================


def _cmd_phase(args: argparse.Namespace) -> int:
    settings = _settings_from_args(args)
    orchestrator = _orchestrator(args.project_root, settings)
    outcome = PhaseOutcome(files=args.files, summary=args.summary, insights=args.insight)

    result = orchestrator.run_phase(
        WorkflowContext(
            project_root=args.project_root,
            current_phase=args.phase,
            feature_name=args.feature,
            role=Role(args.role),
            requirements=tuple(args.requirements),
        ),
        lambda: outcome,
    )

    for path in result.written_paths:
        print(f"  wrote {path}")
    if result.next_phase:
        print(f"Next phase: {result.next_phase}")
    else:
        print("Feature ready for production")
    return 0


def _cmd_full(args: argparse.Namespace) -> int:
    settings = _settings_from_args(args)
    orchestrator = _orchestrator(args.project_root, settings)
    role = Role(args.role)

    def run(phase, feature):
        return orchestrator.run_phase(
            WorkflowContext(args.project_root, phase.name, feature, role),
            lambda: PhaseOutcome(summary=f"{phase.display_name} phase recorded"),
        )

    result = run_full_workflow(args.feature, settings.chain, runner=run)

    for entry in result.trail:
        marker = "skipped" if entry.skipped else "done"
        print(f"[{marker}] {entry.phase}")
        for deliverable in entry.deliverables:
            print(f"    - {deliverable}")
    return 0


def _cmd_todos(args: argparse.Namespace) -> int:
    settings = load_settings(args.project_root)
    engine = TodoRuleEngine(settings.todos)
    todos = load_todos(_read_input(args.file))

    if args.todos_command == "enhance":
        print(dump_todos(engine.enhance(todos)))
        return 0

    if args.todos_command == "summary":
        print(engine.summarize(todos))
        return 0

    validation = engine.validate(todos)
    if validation.valid:
        print("Todo list is valid")
        return 0
    for violation in validation.violations:
        print(f"{violation.rule}: {violation.description}")
    return 1


def _cmd_command_todos(args: argparse.Namespace) -> int:
    settings = load_settings(args.project_root)
    options = CommandOptions(
        ui_framework=args.ui_framework,
        enable_user_testing=args.enable_user_testing,
        skip_prototype=args.skip_prototype,
    )
    result = build_command_todos(args.name, args.feature, options=options, rule_options=settings.todos)
    print(dump_todos(result.todos))
    return 0


def _cmd_status(args: argparse.Namespace) -> int:
    settings = load_settings(args.project_root)
    store = CoordinationStore(FileSystemDocumentStore(args.project_root), settings.docs_dir)
    print(store.status_dashboard())
    return 0


# =============================================================================
# CLI Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    telemetry_config = TelemetryConfig.from_env()
    if args.verbose:
        telemetry_config.log_level = "DEBUG"
    init_telemetry(telemetry_config)

    try:
        return args.handler(args)
    except Exception as e:  # Intentional catch-all: top-level CLI boundary
        logger.warning(f"{args.command} failed: {e}")
        return 1
    finally:
        shutdown_telemetry()


if __name__ == "__main__":
    sys.exit(main())
