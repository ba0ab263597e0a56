"""Tests for the document store and git version control collaborators."""

import subprocess
from unittest import mock

import pytest

from tandem.exceptions import PersistenceError
from tandem.persistence import (
    CommitReport,
    FileSystemDocumentStore,
    GitVersionControl,
    OperationOutcome,
)


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(
        args=["git"], returncode=returncode, stdout=stdout, stderr=stderr
    )


class TestFileSystemDocumentStore:
    """Test FileSystemDocumentStore against a temporary directory."""

    def test_write_creates_parents(self, tmp_path):
        store = FileSystemDocumentStore(tmp_path)

        store.write("docs/reports/FromVerifier/r.md", "# Report")

        assert (tmp_path / "docs/reports/FromVerifier/r.md").read_text() == "# Report"

    def test_read_and_exists(self, tmp_path):
        store = FileSystemDocumentStore(tmp_path)
        store.write("a.md", "content")

        assert store.read("a.md") == "content"
        assert store.exists("a.md")
        assert not store.exists("b.md")

    def test_list_sorted(self, tmp_path):
        store = FileSystemDocumentStore(tmp_path)
        store.mkdir("dir")
        store.write("dir/b.md", "")
        store.write("dir/a.md", "")

        assert store.list("dir") == ["a.md", "b.md"]

    def test_read_missing_raises_with_path(self, tmp_path):
        store = FileSystemDocumentStore(tmp_path)

        with pytest.raises(PersistenceError) as exc_info:
            store.read("missing.md")

        assert exc_info.value.path == "missing.md"

    def test_list_missing_raises(self, tmp_path):
        with pytest.raises(PersistenceError):
            FileSystemDocumentStore(tmp_path).list("nowhere")

    def test_write_failure_raises(self, tmp_path):
        """Test a file in place of a directory surfaces as PersistenceError."""
        (tmp_path / "docs").write_text("not a directory")
        store = FileSystemDocumentStore(tmp_path)

        with pytest.raises(PersistenceError):
            store.write("docs/reports/r.md", "x")


class TestGitVersionControl:
    """Test GitVersionControl with a fake subprocess runner."""

    def test_stage_runs_git_add_per_path(self, tmp_path):
        runner = mock.Mock(return_value=_completed())
        vcs = GitVersionControl(tmp_path, runner=runner)

        outcomes = vcs.stage(["docs/reports/", "src/app.py"])

        assert [o.ok for o in outcomes] == [True, True]
        first_call = runner.call_args_list[0]
        assert first_call.args[0] == ["git", "add", "--", "docs/reports/"]
        assert first_call.kwargs["cwd"] == tmp_path

    def test_non_zero_exit_is_failure(self, tmp_path):
        runner = mock.Mock(return_value=_completed(1, stderr="fatal: pathspec did not match\n"))
        vcs = GitVersionControl(tmp_path, runner=runner)

        [outcome] = vcs.stage(["missing.py"])

        assert not outcome.ok
        assert outcome.target == "missing.py"
        assert outcome.error == "fatal: pathspec did not match"

    def test_exit_code_when_no_output(self, tmp_path):
        vcs = GitVersionControl(tmp_path, runner=mock.Mock(return_value=_completed(128)))

        assert vcs.commit("msg").error == "exit code 128"

    @pytest.mark.parametrize(
        "error",
        [OSError("git not found"), subprocess.TimeoutExpired(cmd="git", timeout=60)],
    )
    def test_runner_errors_never_raise(self, tmp_path, error):
        """Test missing git or a timeout becomes a failed outcome."""
        vcs = GitVersionControl(tmp_path, runner=mock.Mock(side_effect=error))

        outcome = vcs.commit("feat(login): design phase completed")

        assert not outcome.ok
        assert outcome.operation == "commit"
        assert outcome.error

    def test_output_decoded_leniently(self, tmp_path):
        """Test git output is decoded with replacement characters, never raising."""
        runner = mock.Mock(return_value=_completed(1, stderr="fatal: caf�"))
        vcs = GitVersionControl(tmp_path, runner=runner)

        outcome = vcs.commit("msg")

        assert runner.call_args.kwargs["errors"] == "replace"
        assert outcome.error == "fatal: caf�"

    def test_commit_target_is_subject_line(self, tmp_path):
        runner = mock.Mock(return_value=_completed())
        vcs = GitVersionControl(tmp_path, runner=runner)

        outcome = vcs.commit("feat(login): done\n\n- details\n")

        assert outcome.target == "feat(login): done"
        assert runner.call_args.args[0] == ["git", "commit", "-m", "feat(login): done\n\n- details\n"]

    def test_stage_and_commit_report(self, tmp_path):
        """Test one failed stage does not stop the commit."""
        runner = mock.Mock(
            side_effect=[_completed(), _completed(1, stderr="bad path"), _completed()]
        )
        vcs = GitVersionControl(tmp_path, runner=runner)

        report = vcs.stage_and_commit(["a.md", "b.md"], "docs: update")

        assert report.committed
        assert [f.target for f in report.failures] == ["b.md"]


class TestCommitReport:
    def test_failed_commit_not_committed(self):
        report = CommitReport(commit=OperationOutcome("commit", "m", ok=False, error="nothing"))

        assert not report.committed
        assert len(report.failures) == 1

    def test_empty_report(self):
        assert CommitReport().failures == []
        assert not CommitReport().committed
