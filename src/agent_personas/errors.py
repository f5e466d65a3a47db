"""
Exceptions raised by the persona tooling.

Library code raises these; the CLI turns them into a red error line and
a non-zero exit.
"""

from pathlib import Path


class PersonaError(Exception):
    """Base class for all persona tooling errors."""


class ConfigError(PersonaError):
    """Invalid configuration value."""


class FrontMatterError(PersonaError):
    """A document's YAML front-matter is missing or malformed."""


class PersonaLoadError(PersonaError):
    """A document in the corpus could not be turned into a Persona."""

    def __init__(self, path: Path, index: int, cause: Exception):
        self.path = Path(path)
        self.index = index
        self.cause = cause
        where = f"{self.path}" if index == 0 else f"{self.path} (document {index + 1})"
        super().__init__(f"{where}: {cause}")


class PersonaNotFound(PersonaError, KeyError):
    """Lookup of an unknown persona id."""

    def __init__(self, persona_id: str):
        self.persona_id = persona_id
        super().__init__(persona_id)

    def __str__(self) -> str:
        return f"Persona not found: {self.persona_id}"
