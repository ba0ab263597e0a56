"""Project settings loaded from ``tandem.yaml``.

Example tandem.yaml:
    docs_dir: docs
    auto_commit: true
    chain:
      variant: frontend-driven
      enableUserTesting: true
      uiFramework: vue
    todos:
      enforce_commit: true
      capture_learnings: false

Every key is optional; a missing file yields the defaults. The
``TANDEM_AUTO_COMMIT`` environment variable overrides ``auto_commit``.
"""

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from tandem.config import DEFAULT_DOCS_DIR, SETTINGS_FILENAME
from tandem.exceptions import ConfigurationError
from tandem.todos import TodoRuleOptions
from tandem.workflow.phase_registry import ChainConfig

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


@dataclass(frozen=True)
class TandemSettings:
    """All configuration a workflow run needs."""

    chain: ChainConfig = field(default_factory=ChainConfig)
    todos: TodoRuleOptions = field(default_factory=TodoRuleOptions)
    docs_dir: str = DEFAULT_DOCS_DIR
    auto_commit: bool = True


def _todo_options(data: Any) -> TodoRuleOptions:
    if data is None:
        return TodoRuleOptions()
    if not isinstance(data, dict):
        raise ConfigurationError(f"'todos' must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(TodoRuleOptions)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown todo options: {unknown}. Valid options: {sorted(known)}")
    for key, value in data.items():
        if not isinstance(value, bool):
            raise ConfigurationError(f"todos.{key} must be a boolean, got {value!r}")
    return TodoRuleOptions(**data)


def settings_from_mapping(data: dict[str, Any] | None) -> TandemSettings:
    """Build settings from a parsed settings document.

    Raises:
        ConfigurationError: On unknown keys or values of the wrong type
    """
    if not data:
        return TandemSettings()

    known = {f.name for f in fields(TandemSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown settings: {unknown}. Valid settings: {sorted(known)}")

    chain_data = data.get("chain")
    if chain_data is not None and not isinstance(chain_data, dict):
        raise ConfigurationError(f"'chain' must be a mapping, got {type(chain_data).__name__}")

    docs_dir = data.get("docs_dir", DEFAULT_DOCS_DIR)
    if not isinstance(docs_dir, str) or not docs_dir.strip():
        raise ConfigurationError(f"docs_dir must be a non-empty string, got {docs_dir!r}")

    auto_commit = data.get("auto_commit", True)
    if not isinstance(auto_commit, bool):
        raise ConfigurationError(f"auto_commit must be a boolean, got {auto_commit!r}")

    return TandemSettings(
        chain=ChainConfig.from_mapping(chain_data),
        todos=_todo_options(data.get("todos")),
        docs_dir=docs_dir,
        auto_commit=auto_commit,
    )


def _apply_env_overrides(settings: TandemSettings) -> TandemSettings:
    raw = os.getenv("TANDEM_AUTO_COMMIT")
    if raw is None:
        return settings

    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return replace(settings, auto_commit=True)
    if value in _FALSE_VALUES:
        return replace(settings, auto_commit=False)
    logger.warning(f"Ignoring TANDEM_AUTO_COMMIT={raw!r}; expected true or false")
    return settings


def load_settings(project_root: Path | str = ".") -> TandemSettings:
    """Load ``tandem.yaml`` from ``project_root``.

    Returns:
        Settings from the file, or the defaults when it does not exist

    Raises:
        ConfigurationError: If the file is not valid YAML or has unknown keys
    """
    settings_file = Path(project_root) / SETTINGS_FILENAME
    if not settings_file.exists():
        logger.debug(f"No {SETTINGS_FILENAME} in {project_root}, using defaults")
        return _apply_env_overrides(TandemSettings())

    try:
        with open(settings_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
        raise ConfigurationError(f"Cannot read {settings_file}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"{settings_file} must contain a mapping at the top level")

    settings = settings_from_mapping(data)
    logger.info(
        f"Loaded settings from {settings_file}: variant={settings.chain.variant.value}, "
        f"auto_commit={settings.auto_commit}"
    )
    return _apply_env_overrides(settings)
