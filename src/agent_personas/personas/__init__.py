"""
Persona loading and lookup.

The loader turns the Markdown corpus into Persona objects; the registry
indexes them by id and answers delegation queries.
"""

from .loader import LoadResult, PersonaLoader, parse_document
from .registry import PersonaRegistry

__all__ = ["PersonaLoader", "LoadResult", "parse_document", "PersonaRegistry"]
