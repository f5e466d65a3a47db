"""
Configuration management for the persona tooling.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
import yaml

from .errors import ConfigError

SEVERITIES = ("info", "warning", "error")

# Tools a Claude-style coding host exposes; mcp__* tools are always accepted.
DEFAULT_KNOWN_TOOLS = [
    "Bash",
    "Edit",
    "Glob",
    "Grep",
    "LS",
    "MultiEdit",
    "NotebookEdit",
    "NotebookRead",
    "Read",
    "Task",
    "TodoWrite",
    "WebFetch",
    "WebSearch",
    "Write",
]


@dataclass
class CorpusConfig:
    """Where the persona documents live."""
    corpus_dir: Path = field(default_factory=lambda: Path("agents"))
    patterns: List[str] = field(default_factory=lambda: ["*.md"])
    recursive: bool = True
    strict: bool = False  # raise on the first malformed document


@dataclass
class LintConfig:
    """Linter configuration."""
    known_tools: List[str] = field(default_factory=lambda: list(DEFAULT_KNOWN_TOOLS))
    disabled_rules: List[str] = field(default_factory=list)
    severity_overrides: Dict[str, str] = field(default_factory=dict)
    fail_on: str = "error"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    log_level: str = "WARNING"


@dataclass
class Config:
    """
    Main configuration class.

    Loads configuration from:
    1. Default values
    2. personas.yaml file (if exists)
    3. Environment variables (override)
    """

    corpus: CorpusConfig = field(default_factory=CorpusConfig)
    lint: LintConfig = field(default_factory=LintConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load configuration from file and environment."""
        config = cls()

        if config_path is None:
            config_path = Path("personas.yaml")
        config_path = Path(config_path)

        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                try:
                    yaml_config = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
            if yaml_config is not None and not isinstance(yaml_config, dict):
                raise ConfigError(f"{config_path} must contain a mapping")
            config._apply_yaml_config(yaml_config)

            # Relative corpus paths are taken from the config file's directory
            if not config.corpus.corpus_dir.is_absolute():
                config.corpus.corpus_dir = config_path.parent / config.corpus.corpus_dir

        config._apply_env_overrides()
        config.validate()
        return config

    def _apply_yaml_config(self, yaml_config: Optional[Dict[str, Any]]) -> None:
        """Apply configuration from YAML file."""
        if not yaml_config:
            return

        for section_name in ("corpus", "lint", "logging"):
            section = yaml_config.get(section_name)
            if section is None:
                continue
            if not isinstance(section, dict):
                raise ConfigError(f"'{section_name}' section must be a mapping")

            target = getattr(self, section_name)
            for key, value in section.items():
                if not hasattr(target, key):
                    raise ConfigError(f"Unknown setting: {section_name}.{key}")
                if key == "corpus_dir":
                    if not isinstance(value, str):
                        raise ConfigError(f"corpus.corpus_dir must be a path, got {value!r}")
                    value = Path(value)
                setattr(target, key, value)

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        if os.getenv("PERSONAS_CORPUS_DIR"):
            self.corpus.corpus_dir = Path(os.getenv("PERSONAS_CORPUS_DIR"))
        if os.getenv("PERSONAS_STRICT"):
            self.corpus.strict = os.getenv("PERSONAS_STRICT").lower() in ("1", "true", "yes", "on")

        if os.getenv("PERSONAS_FAIL_ON"):
            self.lint.fail_on = os.getenv("PERSONAS_FAIL_ON").lower()

        if os.getenv("PERSONAS_LOG_LEVEL"):
            self.logging.log_level = os.getenv("PERSONAS_LOG_LEVEL")

    def validate(self) -> None:
        """Raise ConfigError on values nothing downstream can use."""
        if not isinstance(self.corpus.corpus_dir, Path):
            raise ConfigError(f"corpus.corpus_dir must be a path, got {self.corpus.corpus_dir!r}")
        if isinstance(self.corpus.patterns, str):
            self.corpus.patterns = [self.corpus.patterns]
        for name in ("recursive", "strict"):
            if not isinstance(getattr(self.corpus, name), bool):
                raise ConfigError(f"corpus.{name} must be true or false")

        _check_str_list("corpus.patterns", self.corpus.patterns)
        _check_str_list("lint.known_tools", self.lint.known_tools)
        _check_str_list("lint.disabled_rules", self.lint.disabled_rules)
        if not isinstance(self.lint.severity_overrides, dict):
            raise ConfigError("lint.severity_overrides must be a mapping of rule code to severity")

        if self.lint.fail_on not in SEVERITIES:
            raise ConfigError(
                f"lint.fail_on must be one of {', '.join(SEVERITIES)}, got '{self.lint.fail_on}'"
            )
        for code, severity in self.lint.severity_overrides.items():
            if severity not in SEVERITIES:
                raise ConfigError(f"Invalid severity '{severity}' for rule {code}")
        if not isinstance(self.logging.log_level, str):
            raise ConfigError(f"logging.log_level must be a level name, got {self.logging.log_level!r}")
        if self.logging.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"Invalid log level: {self.logging.log_level}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "corpus": {
                "corpus_dir": str(self.corpus.corpus_dir),
                "patterns": list(self.corpus.patterns),
                "recursive": self.corpus.recursive,
                "strict": self.corpus.strict,
            },
            "lint": {
                "known_tools": list(self.lint.known_tools),
                "disabled_rules": list(self.lint.disabled_rules),
                "severity_overrides": dict(self.lint.severity_overrides),
                "fail_on": self.lint.fail_on,
            },
            "logging": {
                "log_level": self.logging.log_level,
            },
        }


def _check_str_list(name: str, value: Any) -> None:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{name} must be a list of strings, got {value!r}")
