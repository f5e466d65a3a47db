"""
Corpus linting.

- rules: the individual checks (PA001-PA011)
- linter: runs the rules with config-driven severities
"""

from .linter import LintReport, Linter
from .rules import RULES, RULES_BY_CODE, Finding, Rule

__all__ = ["Linter", "LintReport", "Finding", "Rule", "RULES", "RULES_BY_CODE"]
