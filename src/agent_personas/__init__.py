"""
Agent Personas - loader and linter for Markdown agent persona corpora.

A persona document is Markdown with YAML front-matter (name, description,
tools) describing one role for an LLM coding assistant. This package:
- Loads the corpus, including files that concatenate several documents
- Indexes personas by id in a read-only registry
- Extracts delegation tables and output templates from the body
- Lints the corpus (duplicate ids, dangling delegation targets, ...)
"""

__version__ = "0.1.0"

from .config import Config
from .errors import (
    ConfigError,
    FrontMatterError,
    PersonaError,
    PersonaLoadError,
    PersonaNotFound,
)
from .models import DelegationRule, Persona, SourceLocation
from .personas import LoadResult, PersonaLoader, PersonaRegistry
from .lint import Linter, LintReport

__all__ = [
    "Config",
    "PersonaError",
    "ConfigError",
    "FrontMatterError",
    "PersonaLoadError",
    "PersonaNotFound",
    "Persona",
    "DelegationRule",
    "SourceLocation",
    "PersonaLoader",
    "LoadResult",
    "PersonaRegistry",
    "Linter",
    "LintReport",
]
