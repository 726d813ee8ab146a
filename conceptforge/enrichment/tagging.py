"""Text tagging for concept extraction.

Provides the tagging capability the EntityExtractor consumes: spans tagged
as person, place or organization names, and spans tagged as nouns.

The TextTagger protocol keeps the extractor independent of the NLP
library. SpacyTagger is the production implementation; tests substitute a
fake that returns fixed spans.

spaCy label mapping:
- PERSON -> person-name
- GPE, LOC, FAC -> place-name
- ORG -> organization-name
- token POS NOUN or PROPN -> noun
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, List, Protocol, runtime_checkable

from conceptforge.core.exceptions import TaggingError
from conceptforge.core.logging import get_logger

logger = get_logger(__name__)


class TagKind(str, Enum):
    """Tags the concept pipeline distinguishes."""

    PERSON_NAME = "person-name"
    PLACE_NAME = "place-name"
    ORGANIZATION_NAME = "organization-name"
    NOUN = "noun"
    OTHER = "other"

    @property
    def is_name(self) -> bool:
        """True for the three named-entity tags."""
        return self in NAME_TAGS


NAME_TAGS = frozenset(
    {TagKind.PERSON_NAME, TagKind.PLACE_NAME, TagKind.ORGANIZATION_NAME}
)


@dataclass(frozen=True)
class TaggedSpan:
    """A tagged slice of the source text.

    Attributes:
        text: Surface string (text[start:end])
        start: Character offset where the span starts
        end: Character offset where the span ends
        tag: Assigned tag
    """

    text: str
    start: int
    end: int
    tag: TagKind


@runtime_checkable
class TextTagger(Protocol):
    """The text-tagging capability."""

    def tag(self, text: str) -> List[TaggedSpan]:
        """Tag names and nouns in text, in document order."""
        ...

    def tag_at(self, text: str, offset: int) -> TagKind:
        """Tag of the single token covering offset."""
        ...


@lru_cache(maxsize=4)
def _load_spacy_model(model_name: str = "en_core_web_sm") -> Any:
    """Load spaCy model with caching.

    Raises:
        TaggingError: If spaCy or the model is not installed
    """
    import spacy

    try:
        return spacy.load(model_name)
    except OSError as e:
        raise TaggingError(
            f"spaCy model '{model_name}' not found. "
            f"Install with: python -m spacy download {model_name}"
        ) from e


class SpacyTagger:
    """TextTagger backed by a spaCy pipeline."""

    ENTITY_LABELS: Dict[str, TagKind] = {
        "PERSON": TagKind.PERSON_NAME,
        "GPE": TagKind.PLACE_NAME,
        "LOC": TagKind.PLACE_NAME,
        "FAC": TagKind.PLACE_NAME,
        "ORG": TagKind.ORGANIZATION_NAME,
    }
    NOUN_POS = frozenset({"NOUN", "PROPN"})

    def __init__(self, model_name: str = "en_core_web_sm") -> None:
        """Initialize tagger.

        Args:
            model_name: spaCy model to use (loaded on first use)
        """
        self.model_name = model_name
        self._nlp: Any = None
        self._last_text: str = ""
        self._last_doc: Any = None

    @property
    def nlp(self) -> Any:
        """Lazy-load spaCy model."""
        if self._nlp is None:
            self._nlp = _load_spacy_model(self.model_name)
        return self._nlp

    def _parse(self, text: str) -> Any:
        """Run the pipeline, reusing the last parse for repeated text."""
        if self._last_doc is None or text != self._last_text:
            try:
                self._last_doc = self.nlp(text)
            except TaggingError:
                raise
            except Exception as e:
                raise TaggingError(f"spaCy failed to tag text: {e}") from e
            self._last_text = text
        return self._last_doc

    def tag(self, text: str) -> List[TaggedSpan]:
        """Tag names (joined multi-word spans) and noun tokens.

        Rule #4: Function <60 lines
        """
        if not text:
            return []

        doc = self._parse(text)
        spans: List[TaggedSpan] = []

        for ent in doc.ents:
            kind = self.ENTITY_LABELS.get(ent.label_)
            if kind is not None:
                spans.append(TaggedSpan(ent.text, ent.start_char, ent.end_char, kind))

        for token in doc:
            if token.pos_ in self.NOUN_POS:
                end = token.idx + len(token.text)
                spans.append(TaggedSpan(token.text, token.idx, end, TagKind.NOUN))

        spans.sort(key=lambda s: (s.start, s.tag != TagKind.NOUN))
        logger.debug("Tagged text", chars=len(text), spans=len(spans))
        return spans

    def tag_at(self, text: str, offset: int) -> TagKind:
        """Tag of the token covering offset (names take precedence)."""
        if not text or not 0 <= offset < len(text):
            return TagKind.OTHER

        doc = self._parse(text)
        for ent in doc.ents:
            if ent.start_char <= offset < ent.end_char:
                kind = self.ENTITY_LABELS.get(ent.label_)
                if kind is not None:
                    return kind

        for token in doc:
            if token.idx <= offset < token.idx + len(token.text):
                return TagKind.NOUN if token.pos_ in self.NOUN_POS else TagKind.OTHER

        return TagKind.OTHER
