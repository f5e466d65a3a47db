"""
Corpus parsing for persona documents.

- splitter: breaks concatenated files on RELATED_DOC_SEP lines
- frontmatter: YAML front-matter, tools, trigger examples
- sections: delegation tables and output templates in the Markdown body
"""

from .frontmatter import extract_examples, parse_tools, split_frontmatter
from .sections import (
    Section,
    extract_delegations,
    extract_output_template,
    iter_sections,
    normalize_id,
)
from .splitter import is_separator, split_documents

__all__ = [
    "split_frontmatter",
    "parse_tools",
    "extract_examples",
    "Section",
    "iter_sections",
    "extract_delegations",
    "extract_output_template",
    "normalize_id",
    "split_documents",
    "is_separator",
]
