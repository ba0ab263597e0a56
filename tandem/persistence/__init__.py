"""External collaborators: document persistence and version control."""

from .documents import DocumentStore, FileSystemDocumentStore
from .vcs import CommitReport, GitVersionControl, OperationOutcome, VersionControl

__all__ = [
    "CommitReport",
    "DocumentStore",
    "FileSystemDocumentStore",
    "GitVersionControl",
    "OperationOutcome",
    "VersionControl",
]
