"""
Concept candidate extraction.

Turns raw study text into a ranked list of Entity records: the distinct
names and nouns that recur often enough to be worth a node in the
concept map.

Pipeline
--------
    text ──→ TextTagger.tag() ──→ count per surface string
                                      │
                                      ↓
                        frequency floor (>= min_frequency)
                                      │
                                      ↓
                        classify (decision table below)
                                      │
                                      ↓
                 rank by (-frequency, first offset); extract() caps at max_concepts

Counting
--------
Surface strings are counted case-sensitively. Named-entity hits always
count; noun hits count only when the noun is at least min_noun_length
characters long. Both kinds of hit share one counter, so a name that the
tagger also reports as a noun is counted once per report.

Classification
--------------
    dominant name tag covers >= half the hits  →  Person / Place / Organization
    ends in -tion, -sis, -ment                 →  Process
    ends in -ology, -graphy                    →  Field
    otherwise                                  →  Concept
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from conceptforge.conceptmap.models import Entity, EntityType
from conceptforge.core.config.concept_map import ConceptMapConfig
from conceptforge.core.logging import get_logger
from conceptforge.enrichment.tagging import TagKind, TaggedSpan, TextTagger

logger = get_logger(__name__)

NAME_TAG_TYPES: Dict[TagKind, EntityType] = {
    TagKind.PERSON_NAME: EntityType.PERSON,
    TagKind.PLACE_NAME: EntityType.PLACE,
    TagKind.ORGANIZATION_NAME: EntityType.ORGANIZATION,
}

SUFFIX_RULES: Tuple[Tuple[Tuple[str, ...], EntityType], ...] = (
    (("tion", "sis", "ment"), EntityType.PROCESS),
    (("ology", "graphy"), EntityType.FIELD),
)


@dataclass
class _Tally:
    """Occurrence record for one surface string."""

    first_offset: int
    count: int = 0
    name_tags: Counter = field(default_factory=Counter)


def classify(name: str, total: int, name_tags: Counter) -> EntityType:
    """Pick an EntityType for a surface string.

    The most frequent name tag decides the type when it covers at least
    half of the hits, so a tie between name and noun hits goes to the
    name tag. Otherwise the suffix rules apply, then Concept.

    Args:
        name: Surface string
        total: All counted hits for the string
        name_tags: Hits per named-entity tag

    Returns:
        Inferred EntityType
    """
    if name_tags:
        tag, hits = name_tags.most_common(1)[0]
        if hits * 2 >= total:
            return NAME_TAG_TYPES[tag]

    lowered = name.lower()
    for suffixes, entity_type in SUFFIX_RULES:
        if lowered.endswith(suffixes):
            return entity_type
    return EntityType.CONCEPT


class EntityExtractor:
    """Extract ranked concept candidates from text."""

    def __init__(
        self, tagger: TextTagger, config: Optional[ConceptMapConfig] = None
    ) -> None:
        self.tagger = tagger
        self.config = config or ConceptMapConfig()

    def extract(self, text: str) -> List[Entity]:
        """Extract entities from text.

        Deterministic given identical text and tagger output.

        Args:
            text: Source text (may be empty)

        Returns:
            Entities in rank order, at most config.max_concepts

        Raises:
            TaggingError: If the tagger fails
        """
        return self.rank(text)[: self.config.max_concepts]

    def rank(self, text: str) -> List[Entity]:
        """Every entity meeting the frequency floor, in rank order, uncapped."""
        if not text or not text.strip():
            return []

        tallies = self._count(self.tagger.tag(text))
        entities = [
            Entity(
                name=name,
                type=classify(name, tally.count, tally.name_tags),
                frequency=tally.count,
                first_offset=tally.first_offset,
            )
            for name, tally in tallies.items()
            if tally.count >= self.config.min_frequency
        ]
        entities.sort(key=lambda e: (-e.frequency, e.first_offset))

        logger.debug(
            "Ranked entities",
            candidates=len(tallies),
            frequent=len(entities),
        )
        return entities

    def _count(self, spans: List[TaggedSpan]) -> Dict[str, _Tally]:
        """Tally counted hits per surface string."""
        tallies: Dict[str, _Tally] = {}
        for span in spans:
            if span.tag in NAME_TAG_TYPES:
                is_name = True
            elif span.tag == TagKind.NOUN:
                if len(span.text) < self.config.min_noun_length:
                    continue
                is_name = False
            else:
                continue

            tally = tallies.get(span.text)
            if tally is None:
                tally = tallies[span.text] = _Tally(first_offset=span.start)
            tally.first_offset = min(tally.first_offset, span.start)
            tally.count += 1
            if is_name:
                tally.name_tags[span.tag] += 1
        return tallies
