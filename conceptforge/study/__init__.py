"""Study corpus package.

Records the concept-map pipeline reads from:
- SourceDocument: a processed document with its chunks and flashcards
- NoteChunk: a paragraph-sized fragment of source text
- Flashcard: a question/answer card generated from the document
"""

from __future__ import annotations

from conceptforge.study.models import (
    Flashcard,
    NoteChunk,
    SourceDocument,
    iter_chunks,
    iter_flashcards,
    load_document,
    load_flashcards,
)

__all__ = [
    "Flashcard",
    "NoteChunk",
    "SourceDocument",
    "iter_chunks",
    "iter_flashcards",
    "load_document",
    "load_flashcards",
]
