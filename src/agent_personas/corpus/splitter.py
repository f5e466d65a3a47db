"""
Splits concatenated corpus files into individual persona documents.

Some corpus files hold several persona documents joined by a separator
line such as ``<|RELATED_DOC_SEP-3f2a|>``. Each part is handed to the
front-matter parser on its own.
"""

import re
from typing import List, Tuple

SEPARATOR_RE = re.compile(r"^\s*<\|RELATED_DOC_SEP-[^|]*\|>\s*$")


def is_separator(line: str) -> bool:
    """True if the line is a document separator."""
    return bool(SEPARATOR_RE.match(line))


def split_documents(text: str) -> List[Tuple[str, int]]:
    """
    Split text on separator lines.
    
    Returns a list of (document_text, start_line) with 1-based start lines.
    Parts that are blank are dropped.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    
    documents: List[Tuple[str, int]] = []
    current: List[str] = []
    start_line = 1
    
    for lineno, line in enumerate(text.splitlines(keepends=True), start=1):
        if is_separator(line):
            _append_part(documents, current, start_line)
            current = []
            start_line = lineno + 1
            continue
        current.append(line)
    
    _append_part(documents, current, start_line)
    return documents


def _append_part(documents: List[Tuple[str, int]], lines: List[str], start_line: int) -> None:
    # Leading blank lines shift the document start so line numbers stay exact.
    while lines and not lines[0].strip():
        lines = lines[1:]
        start_line += 1
    part = "".join(lines)
    if part.strip():
        documents.append((part, start_line))
