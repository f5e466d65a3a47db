"""Shared fixtures for persona corpus tests."""

import textwrap
from pathlib import Path

import pytest

SAMPLE_CORPUS = Path(__file__).resolve().parent.parent / "agents"


def make_document(name=None, description="Does things.", tools="Read, Grep", body="# Title\n", **extra):
    """Build a persona document with optional front-matter keys."""
    lines = ["---"]
    if name is not None:
        lines.append(f"name: {name}")
    if description is not None:
        lines.append(f"description: {description}")
    if tools is not None:
        lines.append(f"tools: {tools}")
    for key, value in extra.items():
        lines.append(f"{key}: {value}")
    lines.append("---")
    return "\n".join(lines) + "\n" + textwrap.dedent(body)


@pytest.fixture
def write_persona(tmp_path):
    """Write a document into the tmp corpus and return its path."""
    def _write(filename, text):
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def sample_corpus():
    return SAMPLE_CORPUS
