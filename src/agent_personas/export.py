"""
Export the registry as JSON or YAML, and unpack concatenated corpus files.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .errors import PersonaError
from .models import Persona
from .personas import PersonaRegistry

logger = logging.getLogger(__name__)

FORMATS = ("json", "yaml")


def registry_to_dict(registry: PersonaRegistry) -> Dict[str, Any]:
    """Plain-data view of the registry."""
    return {
        "personas": [persona.to_dict() for persona in registry],
        "delegations": [
            {"source": source, **rule.to_dict()}
            for source, rule in registry.delegation_edges()
        ],
    }


def export_registry(registry: PersonaRegistry, fmt: str = "json") -> str:
    """Serialize the registry to `fmt`."""
    data = registry_to_dict(registry)
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False, default=str) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    raise PersonaError(f"Unknown export format: {fmt} (expected one of {', '.join(FORMATS)})")


def split_stem(persona: Persona) -> str:
    """File stem for a persona; fallback ids like "bundle#2" become "bundle-2"."""
    return persona.id.replace("#", "-")


def render_document(persona: Persona) -> str:
    """Re-emit a persona as a standalone Markdown document."""
    metadata: Dict[str, Any] = {
        "name": persona.name or split_stem(persona),
        "description": persona.description,
    }
    if not persona.inherits_all_tools:
        metadata["tools"] = ", ".join(sorted(persona.tools))
    metadata.update(persona.extra)

    front = yaml.safe_dump(metadata, sort_keys=False, allow_unicode=True, width=1000)
    body = persona.body if persona.body.startswith("\n") else "\n" + persona.body
    return f"---\n{front}---{body}"


def write_split(personas: List[Persona], out_dir: Path, overwrite: bool = False) -> List[Path]:
    """
    Write one `<id>.md` per persona into `out_dir`.

    Raises PersonaError if a target file exists and `overwrite` is off, or
    if two personas would land on the same file name.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    planned: Dict[Path, Persona] = {}
    for persona in personas:
        target = out_dir / f"{split_stem(persona)}.md"
        if target in planned:
            raise PersonaError(
                f"Both {planned[target].source} and {persona.source} map to {target.name}"
            )
        if target.exists() and not overwrite:
            raise PersonaError(f"Refusing to overwrite {target}")
        planned[target] = persona

    written = []
    for target, persona in planned.items():
        target.write_text(render_document(persona), encoding="utf-8")
        logger.debug(f"Wrote {target}")
        written.append(target)

    logger.info(f"Split {len(written)} personas into {out_dir}")
    return written
