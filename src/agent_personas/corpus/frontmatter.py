"""
YAML front-matter parsing for persona documents.

A document looks like::

    ---
    name: code-reviewer
    description: Use after any significant change ...
    tools: Read, Grep, Glob
    ---
    # Code Reviewer
    ...

The front-matter is parsed with PyYAML; the body is returned untouched.
"""

import re
from typing import Any, Dict, FrozenSet, List, Tuple

import yaml

from ..errors import FrontMatterError

DELIMITER = "---"

EXAMPLE_RE = re.compile(r"<example>(.*?)</example>", re.DOTALL | re.IGNORECASE)
# Some descriptions lead into their examples with "Examples:" and nothing else.
EXAMPLES_LEAD_RE = re.compile(r"\bexamples?\s*:\s*$", re.IGNORECASE)


def split_frontmatter(text: str) -> Tuple[Dict[str, Any], str, int]:
    """
    Separate the front-matter block from the body.
    
    Returns (metadata, body, body_line) where body_line is the 1-based
    line number, relative to the text, at which the body starts.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    
    lines = text.splitlines(keepends=True)
    first = 0
    while first < len(lines) and not lines[first].strip():
        first += 1
    
    if first >= len(lines) or lines[first].strip() != DELIMITER:
        raise FrontMatterError("document does not start with a '---' front-matter block")
    
    closing = None
    for i in range(first + 1, len(lines)):
        if lines[i].strip() == DELIMITER:
            closing = i
            break
    
    if closing is None:
        raise FrontMatterError("front-matter block is not closed with '---'")
    
    raw = "".join(lines[first + 1:closing])
    try:
        metadata = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise FrontMatterError(f"invalid YAML in front-matter: {e}") from e
    
    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise FrontMatterError(
            f"front-matter must be a mapping, got {type(metadata).__name__}"
        )
    
    body = "".join(lines[closing + 1:])
    return metadata, body, closing + 2


def parse_tools(value: Any) -> Tuple[FrozenSet[str], bool]:
    """
    Normalise the ``tools`` front-matter value.
    
    Returns (tools, inherits_all). A missing value means the persona
    inherits every tool the host offers.
    """
    if value is None:
        return frozenset(), True
    
    if isinstance(value, str):
        items: List[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        raise FrontMatterError(
            f"'tools' must be a string or a list, got {type(value).__name__}"
        )
    
    tools = set()
    for item in items:
        if not isinstance(item, str):
            raise FrontMatterError(f"tool names must be strings, got {item!r}")
        item = item.strip()
        if item:
            tools.add(item)
    return frozenset(tools), False


def extract_examples(description: str) -> Tuple[str, Tuple[str, ...]]:
    """Pull ``<example>`` blocks out of a description.
    
    Returns the summary (description without the examples, whitespace
    collapsed) and the example texts in order.
    """
    if not description:
        return "", ()
    
    examples = tuple(
        _collapse(m.group(1)) for m in EXAMPLE_RE.finditer(description)
    )
    remainder = EXAMPLE_RE.sub(" ", description)
    summary = _collapse(remainder.replace("\\n", "\n"))
    if examples:
        summary = EXAMPLES_LEAD_RE.sub("", summary).strip()
    return summary, tuple(e for e in examples if e)


def _collapse(text: str) -> str:
    return " ".join(text.replace("\\n", "\n").split())
