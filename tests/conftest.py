"""Shared test fixtures and helpers.

Centralizes the clock, store and orchestrator wiring used across test files.
"""

from unittest import mock

import pytest

from tandem.config import Role
from tandem.coordination import CoordinationStore, FixedClock, MessageBuilder
from tandem.persistence import (
    CommitReport,
    FileSystemDocumentStore,
    OperationOutcome,
    VersionControl,
)
from tandem.workflow import ChainConfig, WorkflowContext, WorkflowOrchestrator

FIXED_TIMESTAMP = "202601151030"


@pytest.fixture
def clock():
    return FixedClock(FIXED_TIMESTAMP)


@pytest.fixture
def builder(clock):
    return MessageBuilder(clock)


@pytest.fixture
def documents(tmp_path):
    """Filesystem-backed document store rooted in a temporary project."""
    return FileSystemDocumentStore(tmp_path)


@pytest.fixture
def store(documents):
    return CoordinationStore(documents)


@pytest.fixture
def vcs():
    """VersionControl double whose stage/commit always succeed."""
    fake = mock.create_autospec(VersionControl, instance=True)
    fake.stage_and_commit.side_effect = lambda paths, message: CommitReport(
        staged=[OperationOutcome("stage", path, ok=True) for path in paths],
        commit=OperationOutcome("commit", message.splitlines()[0], ok=True),
    )
    return fake


@pytest.fixture
def make_orchestrator(store, builder, vcs):
    """Factory for orchestrators sharing the fixture store, builder and vcs."""

    def _make(**overrides):
        kwargs = {
            "builder": builder,
            "vcs": vcs,
            "chain_config": ChainConfig(),
            "auto_commit": True,
        }
        kwargs.update(overrides)
        return WorkflowOrchestrator(store, **kwargs)

    return _make


@pytest.fixture
def make_context(tmp_path):
    """Factory for WorkflowContext objects rooted in the temporary project."""

    def _make(phase: str, feature: str = "login", role: Role = Role.COORDINATOR):
        return WorkflowContext(
            project_root=tmp_path, current_phase=phase, feature_name=feature, role=role
        )

    return _make
