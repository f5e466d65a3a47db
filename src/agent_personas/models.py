"""
Data classes for loaded personas.

Everything here is frozen: a persona is built once by the loader and never
changes afterwards.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class SourceLocation:
    """Where a persona document came from."""
    path: Path
    index: int = 0  # position inside a concatenated file
    line: int = 1   # 1-based line of the document start

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


@dataclass(frozen=True)
class DelegationRule:
    """A documented handoff: under `trigger`, hand the task to `target`."""
    trigger: str
    target: str
    note: str = ""

    def to_dict(self) -> Dict[str, str]:
        data = {"trigger": self.trigger, "target": self.target}
        if self.note:
            data["note"] = self.note
        return data


@dataclass(frozen=True)
class Persona:
    """
    A persona parsed from one corpus document.

    `id` is the normalised name and is what delegation rules refer to.
    """
    id: str
    name: str
    description: str
    summary: str
    tools: FrozenSet[str]
    inherits_all_tools: bool
    source: SourceLocation

    examples: Tuple[str, ...] = ()
    delegations: Tuple[DelegationRule, ...] = ()
    output_template: Optional[str] = None
    body: str = ""

    # Front-matter keys other than name/description/tools (model, color, ...)
    extra: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    def allows_tool(self, tool: str) -> bool:
        """Check whether the persona may use a tool."""
        return self.inherits_all_tools or tool in self.tools

    def delegates_to(self, target_id: str) -> bool:
        """Check whether any delegation rule points at `target_id`."""
        return any(rule.target == target_id for rule in self.delegations)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary for export."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "summary": self.summary,
            "tools": sorted(self.tools),
            "inherits_all_tools": self.inherits_all_tools,
            "examples": list(self.examples),
            "delegations": [rule.to_dict() for rule in self.delegations],
            "output_template": self.output_template,
            "extra": dict(self.extra),
            "source": {
                "path": str(self.source.path),
                "index": self.source.index,
                "line": self.source.line,
            },
        }
