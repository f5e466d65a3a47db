"""Unit tests for configuration loading."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from agent_personas.config import DEFAULT_KNOWN_TOOLS, Config
from agent_personas.errors import ConfigError


class TestConfigDefaults:
    """Tests for default values."""

    def test_defaults_without_file(self, tmp_path):
        with patch.dict(os.environ, {}, clear=True):
            config = Config.load(tmp_path / "missing.yaml")
        assert config.corpus.corpus_dir == Path("agents")
        assert config.corpus.patterns == ["*.md"]
        assert config.corpus.strict is False
        assert config.lint.fail_on == "error"
        assert config.lint.known_tools == DEFAULT_KNOWN_TOOLS
        assert config.logging.log_level == "WARNING"


class TestConfigFile:
    """Tests for personas.yaml loading."""

    def test_yaml_values(self, tmp_path):
        path = tmp_path / "personas.yaml"
        path.write_text(
            "corpus:\n"
            "  corpus_dir: docs/agents\n"
            "  patterns: '*.markdown'\n"
            "lint:\n"
            "  disabled_rules: [PA011]\n"
            "  severity_overrides: {PA004: error}\n"
            "  fail_on: warning\n"
            "logging:\n"
            "  log_level: DEBUG\n",
            encoding="utf-8",
        )
        with patch.dict(os.environ, {}, clear=True):
            config = Config.load(path)

        assert config.corpus.corpus_dir == tmp_path / "docs" / "agents"
        assert config.corpus.patterns == ["*.markdown"]
        assert config.lint.disabled_rules == ["PA011"]
        assert config.lint.severity_overrides == {"PA004": "error"}
        assert config.lint.fail_on == "warning"
        assert config.logging.log_level == "DEBUG"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "personas.yaml"
        path.write_text("", encoding="utf-8")
        with patch.dict(os.environ, {}, clear=True):
            assert Config.load(path).lint.fail_on == "error"

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "personas.yaml"
        path.write_text("lint:\n  colour: red\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="lint.colour"):
            Config.load(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "personas.yaml"
        path.write_text("lint: [\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            Config.load(path)

    def test_invalid_severity(self, tmp_path):
        path = tmp_path / "personas.yaml"
        path.write_text("lint:\n  severity_overrides: {PA004: fatal}\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="fatal"):
            Config.load(path)

    @pytest.mark.parametrize("text,setting", [
        ("lint:\n  severity_overrides: [PA004]\n", "lint.severity_overrides"),
        ("logging:\n  log_level: 10\n", "logging.log_level"),
        ("corpus:\n  corpus_dir: null\n", "corpus.corpus_dir"),
        ("lint:\n  known_tools: Read\n", "lint.known_tools"),
        ("lint:\n  disabled_rules: [PA011, 3]\n", "lint.disabled_rules"),
        ("corpus:\n  strict: maybe\n", "corpus.strict"),
    ])
    def test_wrong_types_rejected(self, tmp_path, text, setting):
        """Test a value of the wrong type is a ConfigError naming the setting."""
        path = tmp_path / "personas.yaml"
        path.write_text(text, encoding="utf-8")
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigError, match=setting):
                Config.load(path)


class TestEnvOverrides:
    """Tests for environment variable overrides."""

    def test_env_wins_over_file(self, tmp_path):
        path = tmp_path / "personas.yaml"
        path.write_text("lint:\n  fail_on: info\n", encoding="utf-8")
        env = {
            "PERSONAS_CORPUS_DIR": "/srv/agents",
            "PERSONAS_STRICT": "true",
            "PERSONAS_FAIL_ON": "WARNING",
            "PERSONAS_LOG_LEVEL": "INFO",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.load(path)

        assert config.corpus.corpus_dir == Path("/srv/agents")
        assert config.corpus.strict is True
        assert config.lint.fail_on == "warning"
        assert config.logging.log_level == "INFO"

    def test_invalid_fail_on(self, tmp_path):
        with patch.dict(os.environ, {"PERSONAS_FAIL_ON": "sometimes"}, clear=True):
            with pytest.raises(ConfigError, match="fail_on"):
                Config.load(tmp_path / "missing.yaml")

    def test_to_dict(self, tmp_path):
        with patch.dict(os.environ, {}, clear=True):
            data = Config.load(tmp_path / "missing.yaml").to_dict()
        assert data["corpus"]["corpus_dir"] == "agents"
        assert data["lint"]["fail_on"] == "error"
        assert data["logging"]["log_level"] == "WARNING"
