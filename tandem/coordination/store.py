"""Persistence of coordination messages through a DocumentStore.

Instructions addressed to a role live under ``instructions/To<Role>/`` and
reports from a role under ``reports/From<Role>/``, both below ``docs_dir``.
"""

import logging
import re

from tandem.config import (
    DEFAULT_DOCS_DIR,
    DOCUMENT_SUFFIX,
    INSTRUCTION_DIR_PREFIX,
    INSTRUCTIONS_DIR,
    REPORT_DIR_PREFIX,
    REPORTS_DIR,
    Role,
)
from tandem.exceptions import PersistenceError
from tandem.persistence.documents import DocumentStore

from .clock import format_timestamp
from .messages import Instruction, Report

logger = logging.getLogger(__name__)

_IDENTIFIER_PATTERN = re.compile(r"^(?P<sender>[a-z]+)_to_(?P<recipient>[a-z]+)_(?P<ts>\d{12})_(?P<slug>.*)$")


def parse_identifier(filename: str) -> dict[str, str] | None:
    """Split a message filename into sender, recipient, ts and slug."""
    stem = filename.removesuffix(DOCUMENT_SUFFIX)
    match = _IDENTIFIER_PATTERN.match(stem)
    return match.groupdict() if match else None


def _latest_first(filenames: list[str]) -> list[str]:
    def sort_key(name: str) -> tuple[str, str]:
        parts = parse_identifier(name)
        return (parts["ts"] if parts else "", name)

    return sorted(filenames, key=sort_key, reverse=True)


class CoordinationStore:
    """Reads and writes Instruction/Report documents.

    Example:
        store = CoordinationStore(FileSystemDocumentStore(project_root))
        path = store.save_instruction(instruction)
        store.list_instructions(Role.IMPLEMENTER)
    """

    def __init__(self, documents: DocumentStore, docs_dir: str = DEFAULT_DOCS_DIR):
        self.documents = documents
        self.docs_dir = docs_dir.rstrip("/")

    # =========================================================================
    # Paths
    # =========================================================================

    def instructions_dir(self, role: Role) -> str:
        return f"{self.docs_dir}/{INSTRUCTIONS_DIR}/{INSTRUCTION_DIR_PREFIX}{role.directory_name}"

    def reports_dir(self, role: Role) -> str:
        return f"{self.docs_dir}/{REPORTS_DIR}/{REPORT_DIR_PREFIX}{role.directory_name}"

    def instruction_path(self, instruction: Instruction) -> str:
        return f"{self.instructions_dir(instruction.recipient)}/{instruction.filename}"

    def report_path(self, report: Report) -> str:
        return f"{self.reports_dir(report.sender)}/{report.filename}"

    # =========================================================================
    # Writing
    # =========================================================================

    def save_instruction(self, instruction: Instruction) -> str:
        """Persist an instruction under its recipient's directory.

        Returns:
            Store-relative path of the written document

        Raises:
            PersistenceError: If the directory or document cannot be written
        """
        self.documents.mkdir(self.instructions_dir(instruction.recipient))
        path = self.instruction_path(instruction)
        self.documents.write(path, instruction.to_markdown())
        logger.info(
            f"Created {instruction.recipient.value} instruction: {instruction.identifier}"
        )
        return path

    def save_report(self, report: Report) -> str:
        """Persist a report under its sender's directory.

        Raises:
            PersistenceError: If the directory or document cannot be written
        """
        self.documents.mkdir(self.reports_dir(report.sender))
        path = self.report_path(report)
        self.documents.write(path, report.to_markdown())
        logger.info(f"Generated {report.sender.value} report ({report.status.value}): {path}")
        return path

    # =========================================================================
    # Reading
    # =========================================================================

    def _list_documents(self, directory: str) -> list[str]:
        try:
            names = self.documents.list(directory)
        except PersistenceError:
            return []
        return _latest_first([name for name in names if name.endswith(DOCUMENT_SUFFIX)])

    def list_instructions(self, role: Role) -> list[str]:
        """Filenames of instructions addressed to ``role``, latest first."""
        return self._list_documents(self.instructions_dir(role))

    def list_reports(self, role: Role) -> list[str]:
        """Filenames of reports sent by ``role``, latest first."""
        return self._list_documents(self.reports_dir(role))

    def read_instruction(self, role: Role, filename: str) -> str:
        return self.documents.read(f"{self.instructions_dir(role)}/{filename}")

    def read_report(self, role: Role, filename: str) -> str:
        return self.documents.read(f"{self.reports_dir(role)}/{filename}")

    # =========================================================================
    # Dashboard
    # =========================================================================

    def _role_status(self, role: Role) -> str:
        reports = self.list_reports(role)
        last_activity = "None"
        if reports:
            parts = parse_identifier(reports[0])
            last_activity = format_timestamp(parts["ts"]) if parts else "Unknown"

        return "\n".join(
            [
                f"## {role.display_name}",
                f"├── Recent Reports: {len(reports)}",
                f"├── Last Activity: {last_activity}",
                f"└── Status: {'Active' if reports else 'Idle'}",
            ]
        )

    def recent_activity(self, limit: int = 5) -> list[str]:
        """One line per role describing its latest report."""
        activities = []
        for role in Role:
            reports = self.list_reports(role)
            if not reports:
                continue
            parts = parse_identifier(reports[0])
            if parts:
                activities.append(
                    f"- {format_timestamp(parts['ts'])} {role.directory_name}: {parts['slug']}"
                )
            else:
                activities.append(f"- {role.directory_name}: {reports[0]}")
        return activities[:limit]

    def status_dashboard(self) -> str:
        """Markdown overview of report activity per role."""
        lines = ["# Team Status Dashboard", ""]
        lines.extend(self._role_status(role) for role in Role)
        lines.extend(["", "## Recent Activity"])
        lines.extend(self.recent_activity() or ["- No activity yet"])
        return "\n".join(lines)
