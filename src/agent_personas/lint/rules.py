"""
Lint rules for the persona corpus.

Each rule is a function that receives the LintContext and yields
Findings. Rules are registered with their code and default severity in
RULES, in code order.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

from ..config import LintConfig
from ..models import Persona
from ..personas import LoadResult, PersonaRegistry

KEBAB_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


@dataclass(frozen=True)
class Finding:
    """One lint result."""
    code: str
    severity: str
    message: str
    path: Optional[Path] = None
    line: int = 0
    persona_id: str = ""

    def location(self) -> str:
        if self.path is None:
            return "<corpus>"
        return f"{self.path}:{self.line}" if self.line else str(self.path)


@dataclass
class LintContext:
    """What the rules look at."""
    result: LoadResult
    registry: PersonaRegistry
    config: LintConfig = field(default_factory=LintConfig)

    @property
    def personas(self) -> List[Persona]:
        return self.result.personas


@dataclass(frozen=True)
class Rule:
    code: str
    name: str
    severity: str
    check: Callable[[LintContext], Iterator[Finding]]
    description: str = ""


def _finding(code: str, persona: Persona, message: str) -> Finding:
    return Finding(
        code=code,
        severity="",
        message=message,
        path=persona.source.path,
        line=persona.source.line,
        persona_id=persona.id,
    )


def check_load_errors(ctx: LintContext) -> Iterator[Finding]:
    for failure in ctx.result.failures:
        yield Finding(
            code="PA001",
            severity="",
            message=str(failure.cause),
            path=failure.path,
        )


def check_missing_name(ctx: LintContext) -> Iterator[Finding]:
    for persona in ctx.personas:
        if not persona.name:
            yield _finding("PA002", persona, f"missing 'name' (using '{persona.id}')")


def check_missing_description(ctx: LintContext) -> Iterator[Finding]:
    for persona in ctx.personas:
        if not persona.description:
            yield _finding("PA003", persona, "missing 'description'")


def check_missing_tools(ctx: LintContext) -> Iterator[Finding]:
    for persona in ctx.personas:
        if persona.inherits_all_tools:
            yield _finding("PA004", persona, "no 'tools' list; persona inherits every tool")


def check_duplicate_ids(ctx: LintContext) -> Iterator[Finding]:
    for persona_id, dupes in ctx.registry.duplicates.items():
        first = ctx.registry[persona_id]
        for dupe in dupes:
            yield _finding(
                "PA005", dupe,
                f"duplicate persona id '{persona_id}' (first defined at {first.source})",
            )


def check_unknown_targets(ctx: LintContext) -> Iterator[Finding]:
    for persona in ctx.personas:
        for rule in persona.delegations:
            if rule.target not in ctx.registry:
                yield _finding(
                    "PA006", persona,
                    f"delegates to unknown persona '{rule.target}' (trigger: {rule.trigger})",
                )


def check_self_delegation(ctx: LintContext) -> Iterator[Finding]:
    for persona in ctx.personas:
        if persona.delegates_to(persona.id):
            yield _finding("PA007", persona, "delegates to itself")


def check_unknown_tools(ctx: LintContext) -> Iterator[Finding]:
    known = set(ctx.config.known_tools)
    if not known:
        return
    for persona in ctx.personas:
        for tool in sorted(persona.tools):
            if tool not in known and not tool.startswith("mcp__"):
                yield _finding("PA008", persona, f"unknown tool '{tool}'")


def check_filename_mismatch(ctx: LintContext) -> Iterator[Finding]:
    per_file: Dict[Path, int] = {}
    for persona in ctx.personas:
        per_file[persona.source.path] = per_file.get(persona.source.path, 0) + 1

    for persona in ctx.personas:
        if per_file[persona.source.path] > 1 or persona.source.index > 0 or not persona.name:
            continue
        stem = Path(persona.source.path).stem
        if stem != persona.id:
            yield _finding("PA009", persona, f"file name '{stem}' does not match id '{persona.id}'")


def check_id_format(ctx: LintContext) -> Iterator[Finding]:
    for persona in ctx.personas:
        if persona.name and not KEBAB_RE.match(persona.id):
            yield _finding("PA010", persona, f"id '{persona.id}' is not kebab-case")


def check_output_template(ctx: LintContext) -> Iterator[Finding]:
    for persona in ctx.personas:
        if persona.output_template is None:
            yield _finding("PA011", persona, "no output format section")


RULES: List[Rule] = [
    Rule("PA001", "load-error", "error", check_load_errors,
         "Document could not be parsed"),
    Rule("PA002", "missing-name", "error", check_missing_name,
         "Front-matter has no name"),
    Rule("PA003", "missing-description", "error", check_missing_description,
         "Front-matter has no description"),
    Rule("PA004", "missing-tools", "warning", check_missing_tools,
         "Front-matter has no tools list"),
    Rule("PA005", "duplicate-id", "error", check_duplicate_ids,
         "Two documents share a persona id"),
    Rule("PA006", "unknown-delegation-target", "error", check_unknown_targets,
         "Delegation target is not a defined persona"),
    Rule("PA007", "self-delegation", "warning", check_self_delegation,
         "Persona delegates to itself"),
    Rule("PA008", "unknown-tool", "warning", check_unknown_tools,
         "Tool is not in the known tool list"),
    Rule("PA009", "filename-mismatch", "warning", check_filename_mismatch,
         "File name differs from persona id"),
    Rule("PA010", "id-format", "warning", check_id_format,
         "Persona id is not kebab-case"),
    Rule("PA011", "missing-output-template", "info", check_output_template,
         "Body has no output format section"),
]

RULES_BY_CODE: Dict[str, Rule] = {rule.code: rule for rule in RULES}
