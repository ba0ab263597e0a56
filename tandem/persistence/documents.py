"""Document persistence collaborator.

The orchestration core only talks to ``DocumentStore``. Paths are relative
to the store root and use forward slashes.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from tandem.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class DocumentStore(ABC):
    """Interface for reading and writing coordination documents.

    Every operation raises ``PersistenceError`` on failure.
    """

    @abstractmethod
    def write(self, path: str, content: str) -> None:
        """Write ``content`` to ``path``, creating parent directories."""

    @abstractmethod
    def mkdir(self, path: str) -> None:
        """Create ``path`` and any missing parents."""

    @abstractmethod
    def read(self, path: str) -> str:
        """Return the content stored at ``path``."""

    @abstractmethod
    def list(self, path: str) -> list[str]:
        """Return the entry names directly under ``path``."""

    def exists(self, path: str) -> bool:
        try:
            self.read(path)
        except PersistenceError:
            return False
        return True


class FileSystemDocumentStore(DocumentStore):
    """Stores documents as UTF-8 files below a root directory.

    Directory Structure (with the default docs_dir):
        <root>/
        └── docs/
            ├── instructions/
            │   └── ToImplementer/
            │       └── coordinator_to_implementer_202601011200_design.md
            ├── reports/
            │   └── FromCoordinator/
            └── handover/learnings/technical/
    """

    def __init__(self, root: str | Path = "."):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        return self.root / path

    def write(self, path: str, content: str) -> None:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to write {path}: {e}", path=path) from e
        logger.debug(f"Wrote {target} ({len(content)} chars)")

    def mkdir(self, path: str) -> None:
        try:
            self._resolve(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Failed to create directory {path}: {e}", path=path) from e

    def read(self, path: str) -> str:
        try:
            return self._resolve(path).read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to read {path}: {e}", path=path) from e

    def list(self, path: str) -> list[str]:
        try:
            return sorted(entry.name for entry in self._resolve(path).iterdir())
        except OSError as e:
            raise PersistenceError(f"Failed to list {path}: {e}", path=path) from e

    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()
