"""
Shared pytest fixtures and configuration for ConceptForge tests.

This file is automatically discovered by pytest and provides fixtures
that can be used across all test files.

Fixture Organization
--------------------
- **temp_dir**: Temporary directory for file operations
- **mitochondria_***: The biology passage used throughout the suite, its
  tagger vocabulary and a corpus built from it
- **scripted_llm**: LLM client with canned definitions
- **reset_logging**: Restores the global log configuration
"""

import tempfile
from pathlib import Path
from typing import Generator, List

import pytest

from conceptforge.enrichment.tagging import TagKind
from conceptforge.study.models import Flashcard, NoteChunk, SourceDocument
from tests.fixtures.fakes import FakeTagger, ScriptedLLM

MITOCHONDRIA_TEXT = (
    "Mitochondria produces ATP. The mitochondria is a process that powers "
    "the cell. The cell contains a nucleus and uses ATP."
)


# ============================================================================
# Path and Directory Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# Corpus Fixtures
# ============================================================================


@pytest.fixture
def mitochondria_text() -> str:
    return MITOCHONDRIA_TEXT


@pytest.fixture
def mitochondria_tagger() -> FakeTagger:
    """Tagger output for MITOCHONDRIA_TEXT.

    "Mitochondria" is reported both as an organization name and as a noun
    at its single occurrence; "ATP" is an organization name twice.
    """
    return FakeTagger(
        {
            "Mitochondria": [TagKind.ORGANIZATION_NAME, TagKind.NOUN],
            "mitochondria": [TagKind.NOUN],
            "ATP": [TagKind.ORGANIZATION_NAME],
            "cell": [TagKind.NOUN],
            "nucleus": [TagKind.NOUN],
            "process": [TagKind.NOUN],
        }
    )


@pytest.fixture
def mitochondria_documents() -> List[SourceDocument]:
    """Two-chunk document with one related flashcard."""
    chunks = [
        NoteChunk(text="Mitochondria produces ATP.", chunk_index=0),
        NoteChunk(
            text="The mitochondria is a process that powers the cell. "
            "The cell contains a nucleus and uses ATP.",
            chunk_index=1,
        ),
    ]
    cards = [
        Flashcard(question="What does the cell contain?", answer="A nucleus"),
        Flashcard(question="What is glucose?", answer="A sugar"),
    ]
    return [
        SourceDocument(file_name="biology.md", chunks=chunks, generated_cards=cards)
    ]


# ============================================================================
# LLM Fixtures
# ============================================================================


@pytest.fixture
def scripted_llm() -> ScriptedLLM:
    """LLM proposing one valid and one unknown-endpoint relationship."""
    return ScriptedLLM(
        relationships=(
            "Mitochondria | produces | ATP | 0.9\n"
            "Ghost | haunts | Mitochondria | 0.5"
        )
    )


# ============================================================================
# Logging Fixtures
# ============================================================================


@pytest.fixture
def reset_logging() -> Generator[None, None, None]:
    """Restore default log configuration after the test."""
    yield
    from conceptforge.core.logging import configure_logging

    configure_logging(level="INFO")
