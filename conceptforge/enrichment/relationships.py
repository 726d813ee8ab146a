"""
Relationship inference between extracted concepts.

A single completion request proposes typed, weighted relationships between
the extracted entities. The response is line-oriented:

    SOURCE | RELATION | TARGET | STRENGTH

parse_relationships() filters it line by line. Malformed lines, unknown
endpoints and short rows are dropped, never raised; a bad strength value
falls back to 0.5. The parser produces no nodes: an endpoint must match an
entity that was already extracted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from conceptforge.conceptmap.models import Entity
from conceptforge.core.config.concept_map import ConceptMapConfig
from conceptforge.core.logging import get_logger
from conceptforge.llm.base import CompletionService

logger = get_logger(__name__)

DEFAULT_STRENGTH = 0.5
FIELD_SEPARATOR = "|"

RELATIONSHIP_PROMPT = """Identify relationships between these concepts: {names}

Based on this text:
{text}

Format each relationship on its own line as:
SOURCE | RELATION | TARGET | STRENGTH

STRENGTH is a number between 0 and 1. Only use concepts from the list above."""


@dataclass
class Relationship:
    """A proposed directed relationship between two entity names."""

    source: str
    target: str
    type: str
    strength: float = DEFAULT_STRENGTH

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "strength": self.strength,
        }


def _parse_strength(raw: str) -> float:
    """Parse a strength field; unparsable or non-finite values give 0.5."""
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_STRENGTH
    if not math.isfinite(value):
        return DEFAULT_STRENGTH
    return value


def parse_relationships(
    response: str, entities: Sequence[Entity]
) -> List[Relationship]:
    """Parse a completion response into relationships.

    Args:
        response: Raw completion text
        entities: Known entities; endpoints must match one of their names

    Returns:
        Accepted relationships in response order. Endpoint names are
        rewritten to the entity's own spelling.
    """
    canonical: Dict[str, str] = {}
    for entity in entities:
        canonical.setdefault(entity.name.casefold(), entity.name)

    accepted: List[Relationship] = []
    discarded = 0
    for line in response.splitlines():
        if FIELD_SEPARATOR not in line:
            continue

        parts = [part.strip() for part in line.split(FIELD_SEPARATOR)]
        if len(parts) < 4:
            discarded += 1
            continue

        source = canonical.get(parts[0].casefold())
        target = canonical.get(parts[2].casefold())
        if source is None or target is None:
            discarded += 1
            continue

        accepted.append(
            Relationship(
                source=source,
                target=target,
                type=parts[1],
                strength=_parse_strength(parts[3]),
            )
        )

    if discarded:
        logger.debug(
            "Discarded relationship lines", discarded=discarded, kept=len(accepted)
        )
    return accepted


class RelationshipInferencer:
    """Propose relationships between entities with one completion call."""

    def __init__(
        self,
        completion: CompletionService,
        config: Optional[ConceptMapConfig] = None,
    ) -> None:
        self.completion = completion
        self.config = config or ConceptMapConfig()

    def build_prompt(self, entities: Sequence[Entity], text: str) -> str:
        """Build the relationship prompt."""
        names = ", ".join(entity.name for entity in entities)
        excerpt = text[: self.config.relationship_text_chars]
        return RELATIONSHIP_PROMPT.format(names=names, text=excerpt)

    async def infer_relationships(
        self, entities: Sequence[Entity], text: str
    ) -> List[Relationship]:
        """Infer relationships between entities from the source text.

        Args:
            entities: Extracted entities
            text: Full source text (truncated for the prompt)

        Returns:
            Accepted relationships in response order

        Raises:
            LLMError: If the completion fails
        """
        prompt = self.build_prompt(entities, text)
        response = await self.completion.complete(
            prompt, max_tokens=self.config.relationship_max_tokens
        )
        relationships = parse_relationships(response, entities)
        logger.debug(
            "Inferred relationships",
            entities=len(entities),
            relationships=len(relationships),
        )
        return relationships
