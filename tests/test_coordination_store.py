"""Tests for CoordinationStore persistence and the status dashboard."""

import pytest

from tandem.config import Role
from tandem.coordination import CoordinationStore, FixedClock, MessageBuilder, parse_identifier
from tandem.exceptions import PersistenceError


def _instruction(builder, task="Design phase", to="implementer"):
    return builder.build_instruction({"from": "coordinator", "to": to, "task": task})


def _report(builder, task="Login form", sender="implementer", to="verifier"):
    return builder.build_report({"from": sender, "to": to, "task": task})


class TestPaths:
    """Test role-addressed directory layout."""

    def test_role_directories(self, store):
        assert store.instructions_dir(Role.IMPLEMENTER) == "docs/instructions/ToImplementer"
        assert store.reports_dir(Role.VERIFIER) == "docs/reports/FromVerifier"

    def test_custom_docs_dir(self, documents):
        store = CoordinationStore(documents, "coordination/")

        assert store.instructions_dir(Role.COORDINATOR) == "coordination/instructions/ToCoordinator"


class TestSaving:
    """Test save_instruction and save_report."""

    def test_instruction_saved_under_recipient(self, store, builder, tmp_path):
        instruction = _instruction(builder)

        path = store.save_instruction(instruction)

        assert path == (
            "docs/instructions/ToImplementer/"
            "coordinator_to_implementer_202601151030_design_phase.md"
        )
        assert (tmp_path / path).read_text(encoding="utf-8") == instruction.to_markdown()

    def test_report_saved_under_sender(self, store, builder, tmp_path):
        path = store.save_report(_report(builder))

        assert path.startswith("docs/reports/FromImplementer/implementer_to_verifier_")
        assert (tmp_path / path).exists()

    def test_same_identifier_overwrites(self, store, builder, tmp_path):
        """Test a repeated identifier replaces the earlier document."""
        store.save_instruction(_instruction(builder))
        store.save_instruction(_instruction(builder))

        assert len(list((tmp_path / "docs/instructions/ToImplementer").iterdir())) == 1


class TestReading:
    """Test listing and reading documents."""

    def test_list_latest_first(self, store):
        early = MessageBuilder(FixedClock("202601010900"))
        late = MessageBuilder(FixedClock("202601021700"))
        store.save_instruction(_instruction(late, "Second task"))
        store.save_instruction(_instruction(early, "First task"))

        assert store.list_instructions(Role.IMPLEMENTER) == [
            "coordinator_to_implementer_202601021700_second_task.md",
            "coordinator_to_implementer_202601010900_first_task.md",
        ]

    def test_non_markdown_ignored(self, store, builder, documents):
        store.save_report(_report(builder))
        documents.write("docs/reports/FromImplementer/notes.txt", "scratch")

        assert len(store.list_reports(Role.IMPLEMENTER)) == 1

    def test_missing_directory_lists_empty(self, store):
        assert store.list_instructions(Role.VERIFIER) == []
        assert store.list_reports(Role.COORDINATOR) == []

    def test_read_back(self, store, builder):
        report = _report(builder)
        store.save_report(report)

        assert store.read_report(Role.IMPLEMENTER, report.filename) == report.to_markdown()

    def test_read_missing_raises(self, store):
        with pytest.raises(PersistenceError):
            store.read_instruction(Role.IMPLEMENTER, "missing.md")


class TestParseIdentifier:
    def test_parse(self):
        assert parse_identifier("coordinator_to_implementer_202601151030_design_phase.md") == {
            "sender": "coordinator",
            "recipient": "implementer",
            "ts": "202601151030",
            "slug": "design_phase",
        }

    def test_unparseable(self):
        assert parse_identifier("notes.md") is None


class TestStatusDashboard:
    """Test the team status dashboard."""

    def test_empty_dashboard(self, store):
        dashboard = store.status_dashboard()

        assert dashboard.startswith("# Team Status Dashboard")
        assert dashboard.count("└── Status: Idle") == 3
        assert dashboard.endswith("## Recent Activity\n- No activity yet")

    def test_active_role(self, store, builder):
        store.save_report(_report(builder))

        dashboard = store.status_dashboard()

        assert (
            "## Implementer (delivery)\n"
            "├── Recent Reports: 1\n"
            "├── Last Activity: 2026-01-15 10:30\n"
            "└── Status: Active"
        ) in dashboard
        assert "- 2026-01-15 10:30 Implementer: login_form" in dashboard

    def test_recent_activity_limit(self, store, builder):
        store.save_report(_report(builder, sender="implementer"))
        store.save_report(_report(builder, sender="verifier", to="coordinator"))

        assert len(store.recent_activity(limit=1)) == 1
