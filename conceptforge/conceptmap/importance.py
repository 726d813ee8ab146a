"""Node importance scoring.

    importance = (min(1, connections / 5) + min(1, related / 10)) / 2

connections counts edges touching the node; related counts linked
flashcards plus linked chunks. Both halves saturate, so the score always
lies in [0, 1].
"""

from conceptforge.conceptmap.models import ConceptMap, clamp_unit
from conceptforge.core.logging import get_logger

logger = get_logger(__name__)

CONNECTION_SATURATION = 5
RELATED_SATURATION = 10


class ImportanceScorer:
    """Assign importance to every node of a concept map."""

    def score(self, concept_map: ConceptMap) -> None:
        """Set node.importance in place."""
        for node in concept_map.nodes:
            connections = concept_map.connection_count(node.id)
            connection_score = min(1.0, connections / CONNECTION_SATURATION)
            related_score = min(1.0, node.related_count / RELATED_SATURATION)
            node.importance = clamp_unit((connection_score + related_score) / 2)

        logger.debug("Scored importance", nodes=len(concept_map.nodes))
