"""
Enrichment Module for Concept Extraction.

Turns study text into the raw material of a concept map: ranked entities
and the relationships proposed between them.

Architecture Position
---------------------
    CLI (outermost)
      └── ConceptMapBuilder
            └── **Enrichment** (you are here)
                  └── Core (innermost)

Components
----------
**Tagging** (TextTagger / SpacyTagger - in tagging.py)
    Named-entity and noun spans from spaCy.

**Entities** (EntityExtractor - in entities.py)
    Frequency-ranked concept candidates with an inferred EntityType.

**Relationships** (RelationshipInferencer - in relationships.py)
    One completion call proposing SOURCE | RELATION | TARGET | STRENGTH
    lines, filtered by parse_relationships().
"""

from conceptforge.enrichment.entities import EntityExtractor, classify
from conceptforge.enrichment.relationships import (
    Relationship,
    RelationshipInferencer,
    parse_relationships,
)
from conceptforge.enrichment.tagging import (
    SpacyTagger,
    TaggedSpan,
    TagKind,
    TextTagger,
)

__all__ = [
    "EntityExtractor",
    "Relationship",
    "RelationshipInferencer",
    "SpacyTagger",
    "TagKind",
    "TaggedSpan",
    "TextTagger",
    "classify",
    "parse_relationships",
]
