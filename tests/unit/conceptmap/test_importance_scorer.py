"""Tests for ImportanceScorer."""

import pytest

from conceptforge.conceptmap.importance import ImportanceScorer
from conceptforge.conceptmap.models import ConceptEdge, ConceptMap, ConceptNode, EntityType


def _node(name: str, chunks: int = 0, cards: int = 0) -> ConceptNode:
    return ConceptNode(
        name=name,
        entity_type=EntityType.CONCEPT,
        definition=name,
        related_chunk_ids={f"{name}-c{i}" for i in range(chunks)},
        related_flashcard_ids={f"{name}-f{i}" for i in range(cards)},
    )


class TestImportanceScorer:
    """Tests for the importance formula."""

    def test_isolated_node_without_evidence(self):
        node = _node("a")
        concept_map = ConceptMap(title="t", nodes=[node])

        ImportanceScorer().score(concept_map)

        assert node.importance == 0.0

    def test_formula(self):
        """Two connections and three related items: (0.4 + 0.3) / 2."""
        hub = _node("hub", chunks=2, cards=1)
        b, c = _node("b"), _node("c")
        concept_map = ConceptMap(
            title="t",
            nodes=[hub, b, c],
            edges=[ConceptEdge(hub.id, b.id, "x"), ConceptEdge(c.id, hub.id, "y")],
        )

        ImportanceScorer().score(concept_map)

        assert hub.importance == pytest.approx(0.35)
        assert b.importance == pytest.approx(0.1)

    def test_saturates_at_one(self):
        hub = _node("hub", chunks=20, cards=5)
        others = [_node(f"n{i}") for i in range(8)]
        concept_map = ConceptMap(
            title="t",
            nodes=[hub] + others,
            edges=[ConceptEdge(hub.id, o.id, "x") for o in others],
        )

        ImportanceScorer().score(concept_map)

        assert hub.importance == 1.0

    def test_scores_in_unit_range(self):
        nodes = [_node(f"n{i}", chunks=i, cards=i % 3) for i in range(12)]
        edges = [
            ConceptEdge(nodes[i].id, nodes[j].id, "x")
            for i in range(12)
            for j in range(12)
            if i < j and (i + j) % 3 == 0
        ]
        concept_map = ConceptMap(title="t", nodes=nodes, edges=edges)

        ImportanceScorer().score(concept_map)

        assert all(0.0 <= n.importance <= 1.0 for n in nodes)

    def test_empty_map(self):
        concept_map = ConceptMap(title="t")

        ImportanceScorer().score(concept_map)

        assert concept_map.nodes == []
