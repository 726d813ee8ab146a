"""
Concept map package.

Data model and the sync/async stages that produce a ConceptMap:

- models: ConceptMap, ConceptNode, ConceptEdge, Entity, EntityType
- nodes: ConceptNodeBuilder (definitions and evidence links)
- importance: ImportanceScorer
- layout: LayoutEngine (force-directed, numpy)
- builder: ConceptMapBuilder (the end-to-end pipeline)

The builder depends on the enrichment package, which in turn depends on
these models, so it is imported from ``conceptforge.conceptmap.builder``
rather than re-exported here.
"""

from conceptforge.conceptmap.importance import ImportanceScorer
from conceptforge.conceptmap.layout import LayoutEngine
from conceptforge.conceptmap.models import (
    MAX_CONCEPT_NODES,
    ConceptEdge,
    ConceptMap,
    ConceptNode,
    Entity,
    EntityType,
)
from conceptforge.conceptmap.nodes import ConceptNodeBuilder

__all__ = [
    "MAX_CONCEPT_NODES",
    "ConceptEdge",
    "ConceptMap",
    "ConceptNode",
    "ConceptNodeBuilder",
    "Entity",
    "EntityType",
    "ImportanceScorer",
    "LayoutEngine",
]
