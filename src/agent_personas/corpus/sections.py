"""
Markdown body parsing.

Pulls the two structured pieces out of a persona body:
- Delegation rules, from tables or arrow bullets under a delegation heading
- The output template, the section that describes the response format

Headings inside fenced code blocks are not headings; example snippets in
the corpus are full of ``# comments``.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from ..models import DelegationRule

HEADING_RE = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
FENCE_RE = re.compile(r"^\s*(```|~~~)")
ARROW_RE = re.compile(r"^\s*[-*+]\s+(.+?)\s*(?:→|->|=>)\s*(.+?)\s*$")
# Qualifiers after an arrow target: "(...)", " for ...", ": ...", " - ..."
TARGET_TAIL_RE = re.compile(r"\(|\s+for\s+|:|\s+-\s+")
TABLE_SEPARATOR_RE = re.compile(r"^\s*\|?\s*:?-{2,}:?\s*(\|\s*:?-{2,}:?\s*)*\|?\s*$")

DELEGATION_TITLE_RE = re.compile(r"delegat|hand-?off|when to (?:delegate|hand)", re.IGNORECASE)
TEMPLATE_TITLE_RE = re.compile(
    r"output\s+(?:format|template|structure)|report\s+format|response\s+format|deliverable",
    re.IGNORECASE,
)

# Checked in order: a "Handoff notes" column loses to a "Target" column.
TARGET_HEADER_KEYWORDS = ("target", "delegate", "agent", "persona", "specialist", "hand")
TRIGGER_HEADER_RE = re.compile(r"trigger|when|condition|situation|task|scenario", re.IGNORECASE)


@dataclass
class Section:
    """A heading and the text up to the next heading of any level."""
    level: int
    title: str
    text: str
    line: int  # 1-based, relative to the body


def iter_sections(body: str) -> Iterator[Section]:
    """Yield one Section per ATX heading, in document order."""
    current: Optional[Section] = None
    buffer: List[str] = []
    in_fence = False

    for lineno, line in enumerate(body.splitlines(), start=1):
        if FENCE_RE.match(line):
            in_fence = not in_fence
        elif not in_fence:
            match = HEADING_RE.match(line)
            if match:
                if current is not None:
                    current.text = "\n".join(buffer)
                    yield current
                current = Section(
                    level=len(match.group(1)),
                    title=match.group(2).strip(),
                    text="",
                    line=lineno,
                )
                buffer = []
                continue
        buffer.append(line)

    if current is not None:
        current.text = "\n".join(buffer)
        yield current


def normalize_id(value: str) -> str:
    """Turn a name or a table cell into a persona id."""
    value = re.sub(r"[`*@]", "", value).strip()
    value = re.sub(r"[\s_]+", "-", value)
    return value.strip("-").lower()


def extract_delegations(body: str) -> Tuple[DelegationRule, ...]:
    """Collect delegation rules from every delegation section."""
    rules: List[DelegationRule] = []
    for section in iter_sections(body):
        if DELEGATION_TITLE_RE.search(section.title):
            rules.extend(_section_rules(section.text))
    return tuple(rules)


def extract_output_template(body: str) -> Optional[str]:
    """Return the first output-format section, subsections included."""
    sections = list(iter_sections(body))
    for i, section in enumerate(sections):
        if not TEMPLATE_TITLE_RE.search(section.title):
            continue

        parts = [section.text]
        for sub in sections[i + 1:]:
            if sub.level <= section.level:
                break
            parts.append(f"{'#' * sub.level} {sub.title}\n{sub.text}")

        text = "\n".join(parts).strip("\n")
        return text if text.strip() else None
    return None


def _split_row(line: str) -> List[str]:
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|"):
        row = row[:-1]
    return [cell.strip() for cell in row.split("|")]


def _section_rules(text: str) -> List[DelegationRule]:
    """Table rows and arrow bullets of one section, in document order."""
    rules: List[DelegationRule] = []
    lines = text.splitlines()
    in_fence = False
    i = 0
    while i < len(lines):
        line = lines[i]
        if FENCE_RE.match(line):
            in_fence = not in_fence
            i += 1
            continue
        if in_fence:
            i += 1
            continue

        if "|" in line and i + 1 < len(lines) and TABLE_SEPARATOR_RE.match(lines[i + 1]):
            target_col, trigger_col = _pick_columns(_split_row(line))
            i += 2
            while i < len(lines) and "|" in lines[i] and lines[i].strip():
                rule = _row_rule(_split_row(lines[i]), target_col, trigger_col)
                if rule is not None:
                    rules.append(rule)
                i += 1
            continue

        rule = _arrow_rule(line)
        if rule is not None:
            rules.append(rule)
        i += 1
    return rules


def _arrow_rule(line: str) -> Optional[DelegationRule]:
    match = ARROW_RE.match(line)
    if not match:
        return None
    trigger = _clean_text(match.group(1))
    # "-> react-expert (for components)" keeps only the leading name
    target = normalize_id(TARGET_TAIL_RE.split(match.group(2), maxsplit=1)[0])
    if not trigger or not target:
        return None
    return DelegationRule(trigger=trigger, target=target)


def _pick_columns(header: List[str]) -> Tuple[int, int]:
    lowered = [cell.lower() for cell in header]
    target_col = next(
        (i for keyword in TARGET_HEADER_KEYWORDS
         for i, cell in enumerate(lowered) if keyword in cell),
        len(header) - 1,
    )
    trigger_col = next(
        (i for i, cell in enumerate(header)
         if i != target_col and TRIGGER_HEADER_RE.search(cell)),
        None,
    )
    if trigger_col is None:
        trigger_col = next((i for i in range(len(header)) if i != target_col), target_col)
    return target_col, trigger_col


def _row_rule(cells: List[str], target_col: int, trigger_col: int) -> Optional[DelegationRule]:
    if max(target_col, trigger_col) >= len(cells):
        return None

    trigger = _clean_text(cells[trigger_col])
    target = normalize_id(cells[target_col])
    if not trigger or not target or trigger_col == target_col:
        return None

    note = " | ".join(
        _clean_text(cell) for i, cell in enumerate(cells)
        if i not in (target_col, trigger_col) and cell.strip()
    )
    return DelegationRule(trigger=trigger, target=target, note=note)


def _clean_text(value: str) -> str:
    return " ".join(value.replace("**", "").split())
