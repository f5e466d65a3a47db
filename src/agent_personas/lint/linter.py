"""
Linter - runs the corpus rules and collects a report.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional
import logging

from ..config import SEVERITIES, LintConfig
from ..personas import LoadResult, PersonaRegistry
from .rules import RULES, RULES_BY_CODE, Finding, LintContext

logger = logging.getLogger(__name__)

SEVERITY_RANK = {name: rank for rank, name in enumerate(SEVERITIES)}


@dataclass
class LintReport:
    """Findings from one lint run."""
    findings: List[Finding] = field(default_factory=list)
    personas_checked: int = 0

    def counts(self) -> Dict[str, int]:
        """Number of findings per severity."""
        counts = {severity: 0 for severity in SEVERITIES}
        for finding in self.findings:
            counts[finding.severity] += 1
        return counts

    def by_code(self, code: str) -> List[Finding]:
        return [f for f in self.findings if f.code == code]

    def failed(self, threshold: str = "error") -> bool:
        """True if any finding is at or above `threshold`."""
        floor = SEVERITY_RANK[threshold]
        return any(SEVERITY_RANK[f.severity] >= floor for f in self.findings)


class Linter:
    """
    Checks a loaded corpus against RULES.

    Disabled rules are skipped and per-rule severity overrides from the
    LintConfig replace the rule's default.
    """

    def __init__(self, config: Optional[LintConfig] = None):
        self.config = config or LintConfig()
        unknown = [c for c in self.config.disabled_rules if c not in RULES_BY_CODE]
        unknown += [c for c in self.config.severity_overrides if c not in RULES_BY_CODE]
        for code in unknown:
            logger.warning(f"Ignoring unknown lint rule in config: {code}")

    def run(self, result: LoadResult, registry: Optional[PersonaRegistry] = None) -> LintReport:
        """Lint a load result."""
        registry = registry or PersonaRegistry.from_personas(result.personas)
        ctx = LintContext(result=result, registry=registry, config=self.config)

        findings: List[Finding] = []
        for rule in RULES:
            if rule.code in self.config.disabled_rules:
                logger.debug(f"Skipping disabled rule {rule.code}")
                continue
            severity = self.config.severity_overrides.get(rule.code, rule.severity)
            for finding in rule.check(ctx):
                findings.append(replace(finding, severity=severity))

        findings.sort(key=lambda f: (str(f.path or ""), f.line, f.code))
        report = LintReport(findings=findings, personas_checked=len(result.personas))

        counts = report.counts()
        logger.info(
            f"Linted {report.personas_checked} personas: "
            f"{counts['error']} errors, {counts['warning']} warnings, {counts['info']} info"
        )
        return report
