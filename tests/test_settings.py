"""Tests for tandem.yaml settings loading."""

import logging

import pytest

from tandem.exceptions import ConfigurationError
from tandem.settings import TandemSettings, load_settings, settings_from_mapping
from tandem.todos import TodoRuleOptions
from tandem.workflow import ChainConfig, WorkflowVariant


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv("TANDEM_AUTO_COMMIT", raising=False)


def _write_settings(tmp_path, text):
    (tmp_path / "tandem.yaml").write_text(text, encoding="utf-8")


class TestLoadSettings:
    """Test load_settings against files in a temporary project."""

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(tmp_path) == TandemSettings()

    def test_empty_file_gives_defaults(self, tmp_path):
        _write_settings(tmp_path, "")

        assert load_settings(tmp_path) == TandemSettings()

    def test_full_file(self, tmp_path):
        _write_settings(
            tmp_path,
            """
docs_dir: coordination
auto_commit: false
chain:
  variant: standard
  enableUserTesting: true
  uiFramework: vue
todos:
  capture_learnings: false
""",
        )

        settings = load_settings(tmp_path)

        assert settings.docs_dir == "coordination"
        assert settings.auto_commit is False
        assert settings.chain == ChainConfig(
            variant=WorkflowVariant.STANDARD, enable_user_testing=True, ui_framework="vue"
        )
        assert settings.todos == TodoRuleOptions(capture_learnings=False)

    def test_invalid_yaml(self, tmp_path):
        _write_settings(tmp_path, "chain: [unclosed")

        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_settings(tmp_path)

    def test_top_level_must_be_mapping(self, tmp_path):
        _write_settings(tmp_path, "- standard\n- frontend-driven\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_settings(tmp_path)

    def test_env_overrides_auto_commit(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TANDEM_AUTO_COMMIT", "false")

        assert load_settings(tmp_path).auto_commit is False

    def test_invalid_env_value_ignored(self, tmp_path, monkeypatch, caplog):
        monkeypatch.setenv("TANDEM_AUTO_COMMIT", "sometimes")

        with caplog.at_level(logging.WARNING):
            settings = load_settings(tmp_path)

        assert settings.auto_commit is True
        assert "TANDEM_AUTO_COMMIT" in caplog.text


class TestSettingsFromMapping:
    """Test validation of parsed settings."""

    @pytest.mark.parametrize(
        "data, message",
        [
            ({"deploy": True}, "Unknown settings"),
            ({"chain": ["standard"]}, "'chain' must be a mapping"),
            ({"chain": {"variant": "waterfall"}}, "Unknown workflow variant"),
            ({"todos": {"enforce_commit": "yes"}}, "must be a boolean"),
            ({"todos": {"auto_fix": True}}, "Unknown todo options"),
            ({"auto_commit": "yes"}, "auto_commit must be a boolean"),
            ({"docs_dir": ""}, "docs_dir must be a non-empty string"),
        ],
    )
    def test_invalid_settings(self, data, message):
        with pytest.raises(ConfigurationError, match=message):
            settings_from_mapping(data)

    def test_partial_chain_keeps_defaults(self):
        settings = settings_from_mapping({"chain": {"enablePrototyping": False}})

        assert settings.chain.variant == WorkflowVariant.FRONTEND_DRIVEN
        assert settings.chain.enable_prototyping is False
        assert settings.chain.ui_framework == "react"
