"""Study corpus records.

Source documents arrive from the host application already split into
note chunks, optionally with flashcards generated from them. Concept maps
are built over this corpus: chunk text feeds entity extraction and
definitions, and chunk/flashcard ids are linked to the concepts they
mention.
"""

from __future__ import annotations

import json
import re
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from conceptforge.core.logging import get_logger

logger = get_logger(__name__)

# Paragraph boundary: one or more blank lines
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")

MAX_FLASHCARDS_PER_FILE = 10_000


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class NoteChunk:
    """A fragment of source text."""

    text: str
    chunk_index: int = 0
    id: str = field(default_factory=_new_id)
    page_number: Optional[int] = None

    def mentions(self, term: str) -> bool:
        """Case-insensitive containment check."""
        return term.casefold() in self.text.casefold()


@dataclass
class Flashcard:
    """A question/answer study card linked to source material."""

    question: str
    answer: str
    id: str = field(default_factory=_new_id)
    tags: List[str] = field(default_factory=list)

    def mentions(self, term: str) -> bool:
        """True if the question or the answer contains term (any case)."""
        key = term.casefold()
        return key in self.question.casefold() or key in self.answer.casefold()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Flashcard":
        """Build from a ``{question, answer, tags?, id?}`` mapping."""
        card = cls(
            question=str(data.get("question", "")),
            answer=str(data.get("answer", "")),
            tags=[str(t) for t in data.get("tags", [])],
        )
        if data.get("id"):
            card.id = str(data["id"])
        return card


@dataclass
class SourceDocument:
    """A processed study document and the records derived from it."""

    file_name: str
    id: str = field(default_factory=_new_id)
    chunks: List[NoteChunk] = field(default_factory=list)
    generated_cards: List[Flashcard] = field(default_factory=list)

    @property
    def text(self) -> str:
        """All chunk text, separated by blank lines."""
        return "\n\n".join(chunk.text for chunk in self.chunks)

    @classmethod
    def from_text(cls, file_name: str, text: str) -> "SourceDocument":
        """Split text into paragraph chunks.

        Args:
            file_name: Display name of the document
            text: Raw document text

        Returns:
            SourceDocument with one chunk per non-empty paragraph
        """
        paragraphs = [p.strip() for p in _PARAGRAPH_SPLIT.split(text) if p.strip()]
        chunks = [NoteChunk(text=p, chunk_index=i) for i, p in enumerate(paragraphs)]
        return cls(file_name=file_name, chunks=chunks)


def iter_chunks(
    documents: List[SourceDocument],
) -> Iterator[Tuple[NoteChunk, SourceDocument]]:
    """Yield (chunk, owning document) pairs in corpus order."""
    for document in documents:
        for chunk in document.chunks:
            yield chunk, document


def iter_flashcards(documents: List[SourceDocument]) -> Iterator[Flashcard]:
    """Yield every flashcard of every document in corpus order."""
    for document in documents:
        yield from document.generated_cards


def load_document(path: Path) -> SourceDocument:
    """Read a UTF-8 text or markdown file as a SourceDocument."""
    text = path.read_text(encoding="utf-8")
    document = SourceDocument.from_text(path.name, text)
    logger.debug("Loaded document", file=path.name, chunks=len(document.chunks))
    return document


def load_flashcards(path: Path) -> List[Flashcard]:
    """Read flashcards from a JSON list of ``{question, answer, tags}`` objects.

    Raises:
        ValueError: If the file is not a JSON list
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of flashcards")

    cards = [
        Flashcard.from_dict(item)
        for item in data[:MAX_FLASHCARDS_PER_FILE]
        if isinstance(item, dict)
    ]
    logger.debug("Loaded flashcards", file=path.name, count=len(cards))
    return cards
