"""Concept node construction.

Each extracted entity becomes one ConceptNode. The builder gathers the
chunks that mention the entity, asks the completion service for a short
definition grounded in the first few of them, and links the node to every
mentioning chunk and flashcard.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from conceptforge.conceptmap.models import ConceptNode, Entity
from conceptforge.core.config.concept_map import ConceptMapConfig
from conceptforge.core.logging import get_logger
from conceptforge.llm.base import CompletionService
from conceptforge.study.models import SourceDocument, iter_chunks, iter_flashcards

logger = get_logger(__name__)

DEFINITION_PROMPT = """Define '{name}' in 1-2 sentences based on this context:

{context}

Definition:"""


class ConceptNodeBuilder:
    """Build ConceptNodes from entities and the study corpus."""

    def __init__(
        self,
        completion: CompletionService,
        config: Optional[ConceptMapConfig] = None,
    ) -> None:
        self.completion = completion
        self.config = config or ConceptMapConfig()

    def build_context(self, excerpts: Sequence[str]) -> str:
        """Join excerpts with blank lines, capped at context_max_chars."""
        trimmed = [text[: self.config.excerpt_max_chars] for text in excerpts]
        return "\n\n".join(trimmed)[: self.config.context_max_chars]

    async def build_node(
        self, entity: Entity, documents: Sequence[SourceDocument]
    ) -> ConceptNode:
        """Create the node for one entity.

        Args:
            entity: Extracted entity
            documents: Study corpus

        Returns:
            ConceptNode with definition and related chunk/flashcard ids

        Raises:
            LLMError: If the definition request fails
        """
        chunk_ids: List[str] = []
        excerpts: List[str] = []
        for chunk, _document in iter_chunks(list(documents)):
            if not chunk.mentions(entity.name):
                continue
            chunk_ids.append(chunk.id)
            if len(excerpts) < self.config.excerpts_per_concept:
                excerpts.append(chunk.text)

        flashcard_ids = {
            card.id for card in iter_flashcards(list(documents)) if card.mentions(entity.name)
        }

        if excerpts:
            prompt = DEFINITION_PROMPT.format(
                name=entity.name, context=self.build_context(excerpts)
            )
            response = await self.completion.complete(
                prompt, max_tokens=self.config.definition_max_tokens
            )
            definition = response.strip()
        else:
            # No supporting text
            definition = entity.name

        logger.debug(
            "Built concept node",
            concept=entity.name,
            chunks=len(chunk_ids),
            flashcards=len(flashcard_ids),
        )
        return ConceptNode(
            name=entity.name,
            entity_type=entity.type,
            definition=definition,
            related_chunk_ids=set(chunk_ids),
            related_flashcard_ids=flashcard_ids,
        )
