"""Version-control collaborator.

Wraps the ``git`` command line through subprocess. Nothing here raises:
each sub-operation returns an ``OperationOutcome`` and a whole commit
attempt is summarized by a ``CommitReport``, so callers can log exactly
which paths failed without aborting the workflow.

Prerequisites:
    git available on PATH and ``repo_root`` inside a work tree
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationOutcome:
    """Result of one best-effort side effect.

    Attributes:
        operation: Operation name ("stage", "commit")
        target: Path or message the operation acted on
        ok: Whether it succeeded
        error: Error text when it failed
    """

    operation: str
    target: str
    ok: bool
    error: str = ""


@dataclass
class CommitReport:
    """Aggregated outcome of staging paths and committing them."""

    staged: list[OperationOutcome] = field(default_factory=list)
    commit: OperationOutcome | None = None

    @property
    def failures(self) -> list[OperationOutcome]:
        outcomes = list(self.staged)
        if self.commit is not None:
            outcomes.append(self.commit)
        return [outcome for outcome in outcomes if not outcome.ok]

    @property
    def committed(self) -> bool:
        return self.commit is not None and self.commit.ok


class VersionControl(ABC):
    """Interface for staging and committing workflow documents."""

    @abstractmethod
    def stage(self, paths: Sequence[str]) -> list[OperationOutcome]:
        """Stage each path independently; one outcome per path."""

    @abstractmethod
    def commit(self, message: str) -> OperationOutcome:
        """Commit staged changes."""

    def stage_and_commit(self, paths: Sequence[str], message: str) -> CommitReport:
        report = CommitReport(staged=self.stage(paths))
        report.commit = self.commit(message)
        return report


class GitVersionControl(VersionControl):
    """Git implementation running commands in ``repo_root``.

    Example:
        vcs = GitVersionControl("/path/to/project")
        report = vcs.stage_and_commit(["docs/reports/"], "docs: phase report")
        if report.failures:
            ...
    """

    def __init__(
        self,
        repo_root: str | Path = ".",
        *,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        timeout: float = 60.0,
    ):
        self.repo_root = Path(repo_root)
        self._runner = runner
        self._timeout = timeout

    def _run(self, operation: str, target: str, args: list[str]) -> OperationOutcome:
        try:
            result = self._runner(
                ["git", *args],
                cwd=self.repo_root,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self._timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            return OperationOutcome(operation, target, ok=False, error=str(e))

        if result.returncode != 0:
            error = (result.stderr or result.stdout or "").strip()
            return OperationOutcome(
                operation, target, ok=False, error=error or f"exit code {result.returncode}"
            )
        return OperationOutcome(operation, target, ok=True)

    def stage(self, paths: Sequence[str]) -> list[OperationOutcome]:
        outcomes = [self._run("stage", path, ["add", "--", path]) for path in paths]
        for outcome in outcomes:
            if not outcome.ok:
                logger.debug(f"git add {outcome.target} failed: {outcome.error}")
        return outcomes

    def commit(self, message: str) -> OperationOutcome:
        summary = message.splitlines()[0] if message else ""
        return self._run("commit", summary, ["commit", "-m", message])
