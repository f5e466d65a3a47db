"""
Persona Registry - id lookup and the delegation graph.

The registry is built once from loaded personas and never mutated. The
first persona seen for an id wins; later ones are kept aside as duplicates
so the linter can report them.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple
import logging

from ..errors import PersonaNotFound
from ..models import DelegationRule, Persona

logger = logging.getLogger(__name__)

Edge = Tuple[str, DelegationRule]


class PersonaRegistry:
    """Read-only mapping from persona id to Persona."""

    def __init__(self, personas: Dict[str, Persona], duplicates: Dict[str, List[Persona]]):
        self._personas = dict(sorted(personas.items()))
        self.duplicates = duplicates

    @classmethod
    def from_personas(cls, personas: Iterable[Persona]) -> "PersonaRegistry":
        by_id: Dict[str, Persona] = {}
        duplicates: Dict[str, List[Persona]] = {}

        for persona in personas:
            if persona.id in by_id:
                duplicates.setdefault(persona.id, []).append(persona)
                logger.warning(
                    f"Duplicate persona id '{persona.id}' at {persona.source}, "
                    f"keeping {by_id[persona.id].source}"
                )
                continue
            by_id[persona.id] = persona

        return cls(by_id, duplicates)

    def __getitem__(self, persona_id: str) -> Persona:
        try:
            return self._personas[persona_id]
        except KeyError:
            raise PersonaNotFound(persona_id) from None

    def __contains__(self, persona_id: object) -> bool:
        return persona_id in self._personas

    def __len__(self) -> int:
        return len(self._personas)

    def __iter__(self) -> Iterator[Persona]:
        return iter(self._personas.values())

    def get(self, persona_id: str) -> Optional[Persona]:
        """Look up a persona by id. Returns None if not found."""
        return self._personas.get(persona_id)

    def ids(self) -> List[str]:
        return list(self._personas)

    def with_tool(self, tool: str) -> List[Persona]:
        """Personas allowed to use `tool`, including those inheriting every tool."""
        return [p for p in self if p.allows_tool(tool)]

    def search(self, term: str) -> List[Persona]:
        """Case-insensitive substring match on id, name and summary."""
        needle = term.lower().strip()
        if not needle:
            return list(self)
        return [
            p for p in self
            if needle in p.id or needle in p.name.lower() or needle in p.summary.lower()
        ]

    def delegation_edges(self) -> List[Edge]:
        """All (source_id, rule) pairs, in id order then document order."""
        return [(p.id, rule) for p in self for rule in p.delegations]

    def delegates_of(self, persona_id: str) -> List[DelegationRule]:
        """Outgoing delegation rules of a persona."""
        return list(self[persona_id].delegations)

    def delegators_to(self, persona_id: str) -> List[Edge]:
        """Incoming delegation rules: who hands work to `persona_id`."""
        return [(source, rule) for source, rule in self.delegation_edges() if rule.target == persona_id]

    def unknown_targets(self) -> List[Edge]:
        """Delegation rules whose target is not a registered persona."""
        return [(source, rule) for source, rule in self.delegation_edges() if rule.target not in self]

    def summary(self, persona: Persona) -> Dict[str, object]:
        """Get summary of a persona for display."""
        return {
            "id": persona.id,
            "name": persona.name,
            "summary": persona.summary,
            "tools": "(all)" if persona.inherits_all_tools else ", ".join(sorted(persona.tools)),
            "examples": len(persona.examples),
            "delegates_to": [rule.target for rule in persona.delegations],
            "delegated_from": sorted({source for source, _ in self.delegators_to(persona.id)}),
            "has_output_template": persona.output_template is not None,
            "source": str(persona.source),
            "extra": dict(persona.extra),
        }
