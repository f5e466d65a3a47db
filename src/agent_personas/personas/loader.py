"""
Persona Loader - Reads the Markdown corpus into Persona objects.

Corpus directory structure:
agents/
├── code-reviewer.md          # one persona per file
├── backend/
│   └── django-api-developer.md
└── bundles/
    └── core.md               # several personas joined by RELATED_DOC_SEP lines

Each file is split into documents, each document's front-matter is parsed
with PyYAML, and the body is scanned for delegation rules and the output
template. Files are loaded once and cached.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
import logging

from ..corpus import (
    extract_delegations,
    extract_examples,
    extract_output_template,
    normalize_id,
    parse_tools,
    split_documents,
    split_frontmatter,
)
from ..errors import FrontMatterError, PersonaLoadError
from ..models import Persona, SourceLocation

logger = logging.getLogger(__name__)

KNOWN_KEYS = {"name", "description", "tools"}


@dataclass
class LoadResult:
    """Personas that loaded and documents that did not."""
    personas: List[Persona] = field(default_factory=list)
    failures: List[PersonaLoadError] = field(default_factory=list)
    files: List[Path] = field(default_factory=list)


def parse_document(text: str, source: SourceLocation) -> Persona:
    """
    Build a Persona from one document.

    Raises FrontMatterError when the front-matter is missing or malformed.
    """
    metadata, body, _ = split_frontmatter(text)

    name = _as_text(metadata.get("name"), "name")
    description = _as_text(metadata.get("description"), "description")
    tools, inherits_all = parse_tools(metadata.get("tools"))
    summary, examples = extract_examples(description)

    persona_id = normalize_id(name) if name else _fallback_id(source)

    return Persona(
        id=persona_id,
        name=name,
        description=description,
        summary=summary,
        tools=tools,
        inherits_all_tools=inherits_all,
        source=source,
        examples=examples,
        delegations=extract_delegations(body),
        output_template=extract_output_template(body),
        body=body,
        extra={k: v for k, v in metadata.items() if k not in KNOWN_KEYS},
    )


def _as_text(value: Any, key: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (str, int, float)):
        return str(value).strip()
    raise FrontMatterError(f"'{key}' must be a string, got {type(value).__name__}")


def _fallback_id(source: SourceLocation) -> str:
    stem = normalize_id(Path(source.path).stem)
    return stem if source.index == 0 else f"{stem}#{source.index}"


class PersonaLoader:
    """
    Loads personas from a directory of Markdown files.
    """

    def __init__(
        self,
        corpus_dir: Path,
        patterns: Sequence[str] = ("*.md",),
        recursive: bool = True,
    ):
        self.corpus_dir = Path(corpus_dir)
        self.patterns = tuple(patterns)
        self.recursive = recursive
        self._loaded_files: Dict[Path, List[Persona]] = {}

    def list_files(self) -> List[Path]:
        """List corpus files matching the configured patterns."""
        if not self.corpus_dir.is_dir():
            return []

        found = set()
        for pattern in self.patterns:
            matches = self.corpus_dir.rglob(pattern) if self.recursive else self.corpus_dir.glob(pattern)
            found.update(p for p in matches if p.is_file())
        return sorted(found)

    def load_file(self, path: Path) -> List[Persona]:
        """
        Load every persona document in a file.

        Raises PersonaLoadError for the first document that fails to parse.
        """
        path = Path(path)
        if path in self._loaded_files:
            return self._loaded_files[path]

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersonaLoadError(path, 0, e) from e

        personas = []
        for index, (document, start_line) in enumerate(split_documents(text)):
            source = SourceLocation(path=path, index=index, line=start_line)
            try:
                personas.append(parse_document(document, source))
            except FrontMatterError as e:
                raise PersonaLoadError(path, index, e) from e

        self._loaded_files[path] = personas
        logger.debug(f"Loaded {len(personas)} persona(s) from {path}")
        return personas

    def load_all(self, strict: bool = False) -> LoadResult:
        """
        Load the whole corpus.

        Non-strict mode logs each failing document, keeps the good ones from
        the same file, and carries on. Strict mode raises on the first failure.
        """
        result = LoadResult()

        for path in self.list_files():
            result.files.append(path)
            if strict:
                result.personas.extend(self.load_file(path))
                continue
            try:
                result.personas.extend(self.load_file(path))
            except PersonaLoadError:
                personas, failures = self._load_file_lenient(path)
                result.personas.extend(personas)
                result.failures.extend(failures)

        logger.info(
            f"Loaded corpus: {self.corpus_dir} "
            f"({len(result.personas)} personas, {len(result.failures)} failures)"
        )
        return result

    def _load_file_lenient(self, path: Path):
        """Parse a file document by document, collecting failures."""
        personas: List[Persona] = []
        failures: List[PersonaLoadError] = []

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            error = PersonaLoadError(path, 0, e)
            logger.warning(f"Skipping {error}")
            return personas, [error]

        for index, (document, start_line) in enumerate(split_documents(text)):
            source = SourceLocation(path=path, index=index, line=start_line)
            try:
                personas.append(parse_document(document, source))
            except FrontMatterError as e:
                error = PersonaLoadError(path, index, e)
                logger.warning(f"Skipping {error}")
                failures.append(error)

        return personas, failures

    def clear_cache(self) -> None:
        """Forget loaded files so the next load re-reads the disk."""
        self._loaded_files.clear()

    def get_corpus_summary(self, result: Optional[LoadResult] = None) -> Dict[str, Any]:
        """Get summary of the loaded corpus."""
        result = result or self.load_all()
        return {
            "corpus_dir": str(self.corpus_dir),
            "files": len(result.files),
            "personas": len(result.personas),
            "failures": len(result.failures),
            "delegations": sum(len(p.delegations) for p in result.personas),
            "with_output_template": sum(1 for p in result.personas if p.output_template),
        }
