"""
Concept-map generation configuration.

Limits for entity extraction, definition prompts and relationship
inference, plus the canvas settings used by the force-directed layout.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ConceptMapConfig:
    """Entity extraction and prompt limits."""

    max_concepts: int = 30  # Node cap; also bounds the O(n^2) layout cost
    min_frequency: int = 2  # A single mention is noise, not a concept
    min_noun_length: int = 4  # Nouns of 3 characters or fewer are ignored
    excerpts_per_concept: int = 3
    excerpt_max_chars: int = 400
    context_max_chars: int = 800
    definition_max_tokens: int = 100
    relationship_text_chars: int = 2000
    relationship_max_tokens: int = 400
    max_concurrent_definitions: int = 4


@dataclass
class LayoutConfig:
    """Force-directed layout settings."""

    width: float = 1000.0
    height: float = 1000.0
    iterations: int = 50
    seed: Optional[int] = None  # None keeps layouts non-reproducible


@dataclass
class NLPConfig:
    """Text tagging settings."""

    spacy_model: str = "en_core_web_sm"
