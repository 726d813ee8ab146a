"""
Concept map generation pipeline.

ConceptMapBuilder orchestrates the components that turn a study corpus
into a laid-out ConceptMap.

Architecture Context
--------------------
    documents ──→ concatenate chunk text
                        │
                        ↓
               ┌──────────────────┐
               │ EntityExtractor  │  extract     (sync, tagger)
               └────────┬─────────┘
                        ↓
               ┌──────────────────┐
               │ConceptNodeBuilder│  define      (async, N completions,
               └────────┬─────────┘               bounded concurrency)
                        ↓
             ┌──────────────────────┐
             │RelationshipInferencer│  relate     (async, 1 completion)
             └──────────┬───────────┘
                        ↓
               ┌──────────────────┐
               │ ImportanceScorer │  score       (sync)
               └────────┬─────────┘
                        ↓
               ┌──────────────────┐
               │   LayoutEngine   │  layout      (sync, numpy)
               └────────┬─────────┘
                        ↓
                   ConceptMap (validated)

Failure Semantics
-----------------
Tagging and completion failures propagate out of generate_concept_map();
no partial map is returned and nothing is retried. Malformed relationship
lines and relationships naming unknown concepts are dropped silently.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Sequence

from conceptforge.conceptmap.importance import ImportanceScorer
from conceptforge.conceptmap.layout import LayoutEngine
from conceptforge.conceptmap.models import ConceptEdge, ConceptMap, ConceptNode, Entity
from conceptforge.conceptmap.nodes import ConceptNodeBuilder
from conceptforge.core.config import Config, ConceptMapConfig, LayoutConfig
from conceptforge.core.logging import PipelineLogger, get_logger
from conceptforge.enrichment.entities import EntityExtractor
from conceptforge.enrichment.relationships import Relationship, RelationshipInferencer
from conceptforge.enrichment.tagging import SpacyTagger, TextTagger
from conceptforge.llm.base import CompletionService
from conceptforge.study.models import SourceDocument, iter_chunks

logger = get_logger(__name__)

CHUNK_SEPARATOR = "\n\n"


def unique_by_name(entities: Sequence[Entity]) -> List[Entity]:
    """Drop entities whose name repeats an earlier one, ignoring case."""
    seen: set[str] = set()
    unique: List[Entity] = []
    for entity in entities:
        key = entity.name.casefold()
        if key in seen:
            continue
        seen.add(key)
        unique.append(entity)
    return unique


class ConceptMapBuilder:
    """Generate concept maps from study documents.

    Usage:
        builder = ConceptMapBuilder.from_config(config)
        concept_map = await builder.generate_concept_map("Biology", documents)
    """

    def __init__(
        self,
        tagger: TextTagger,
        completion: CompletionService,
        config: Optional[ConceptMapConfig] = None,
        layout_config: Optional[LayoutConfig] = None,
    ) -> None:
        self.config = config or ConceptMapConfig()
        self.layout_config = layout_config or LayoutConfig()
        self.extractor = EntityExtractor(tagger, self.config)
        self.node_builder = ConceptNodeBuilder(completion, self.config)
        self.inferencer = RelationshipInferencer(completion, self.config)
        self.scorer = ImportanceScorer()
        self.layout_engine = LayoutEngine()

    @classmethod
    def from_config(
        cls, config: Config, provider: Optional[str] = None
    ) -> "ConceptMapBuilder":
        """Build with a spaCy tagger and the configured LLM provider."""
        from conceptforge.llm.factory import get_llm_client

        return cls(
            tagger=SpacyTagger(config.nlp.spacy_model),
            completion=get_llm_client(config, provider),
            config=config.concept_map,
            layout_config=config.layout,
        )

    async def generate_concept_map(
        self, title: str, documents: Sequence[SourceDocument]
    ) -> ConceptMap:
        """Generate a concept map from documents.

        Args:
            title: Map title
            documents: Study corpus

        Returns:
            Validated ConceptMap (empty when no concept recurs)

        Raises:
            TaggingError: If text tagging fails
            LLMError: If a completion request fails
        """
        plog = PipelineLogger(title)
        concept_map = ConceptMap(
            title=title, source_document_ids=[doc.id for doc in documents]
        )

        try:
            plog.start_stage("extract")
            text = "".join(
                chunk.text + CHUNK_SEPARATOR for chunk, _ in iter_chunks(list(documents))
            )
            ranked = unique_by_name(self.extractor.rank(text))
            entities = ranked[: self.config.max_concepts]
            plog.log_progress("Entities extracted", count=len(entities))

            if entities:
                plog.start_stage("define")
                concept_map.nodes = await self._build_nodes(entities, documents)

                plog.start_stage("relate")
                relationships = await self.inferencer.infer_relationships(entities, text)
                concept_map.edges = self._build_edges(concept_map.nodes, relationships)

            plog.start_stage("score")
            self.scorer.score(concept_map)

            plog.start_stage("layout")
            self.layout_engine.layout(
                concept_map,
                width=self.layout_config.width,
                height=self.layout_config.height,
                iterations=self.layout_config.iterations,
                seed=self.layout_config.seed,
            )

            concept_map.validate(max_nodes=self.config.max_concepts)
        except Exception as e:
            plog.finish(success=False, error=str(e))
            raise

        plog.finish(
            success=True, nodes=len(concept_map.nodes), edges=len(concept_map.edges)
        )
        return concept_map

    async def _build_nodes(
        self, entities: Sequence[Entity], documents: Sequence[SourceDocument]
    ) -> List[ConceptNode]:
        """Build nodes concurrently; results keep entity rank order."""
        semaphore = asyncio.Semaphore(self.config.max_concurrent_definitions)

        async def build(entity: Entity) -> ConceptNode:
            async with semaphore:
                return await self.node_builder.build_node(entity, documents)

        return list(await asyncio.gather(*(build(entity) for entity in entities)))

    def _build_edges(
        self, nodes: Sequence[ConceptNode], relationships: Sequence[Relationship]
    ) -> List[ConceptEdge]:
        """Create edges for relationships whose endpoints are both nodes."""
        by_name: Dict[str, ConceptNode] = {node.name.casefold(): node for node in nodes}
        edges: List[ConceptEdge] = []
        for rel in relationships:
            source = by_name.get(rel.source.casefold())
            target = by_name.get(rel.target.casefold())
            if source is None or target is None:
                continue
            edges.append(
                ConceptEdge(
                    source_node_id=source.id,
                    target_node_id=target.id,
                    relationship_type=rel.type,
                    strength=rel.strength,
                )
            )

        dropped = len(relationships) - len(edges)
        if dropped:
            logger.debug("Dropped relationships without nodes", dropped=dropped)
        return edges
