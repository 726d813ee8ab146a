"""Concept map exporters for visualization.

Converts a ConceptMap to D3-compatible JSON (positions from the layout
engine, size from importance, colour from entity type) or to a Mermaid
diagram for embedding in markdown notes."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from conceptforge.conceptmap.models import ConceptMap, EntityType
from conceptforge.core.logging import get_logger

logger = get_logger(__name__)
MAX_LABEL_LENGTH = 50
MAX_DEFINITION_LENGTH = 500

JSON_SUFFIXES = frozenset({".json"})
MERMAID_SUFFIXES = frozenset({".md", ".mmd"})

ENTITY_COLORS: Dict[EntityType, str] = {
    EntityType.PERSON: "#4e79a7",  # Blue
    EntityType.PLACE: "#59a14f",  # Green
    EntityType.ORGANIZATION: "#f28e2c",  # Orange
    EntityType.PROCESS: "#e15759",  # Red
    EntityType.FIELD: "#af7aa1",  # Purple
    EntityType.CONCEPT: "#76b7b2",  # Teal
}


@dataclass
class GraphNode:
    """A positioned node in D3 form."""

    id: str
    label: str
    entity_type: EntityType
    x: float = 0.0
    y: float = 0.0
    size: float = 1.0
    importance: float = 0.0
    definition: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def color(self) -> str:
        return ENTITY_COLORS[self.entity_type]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to D3-compatible dict."""
        return {
            "id": self.id,
            "label": self.label[:MAX_LABEL_LENGTH],
            "type": self.entity_type.value,
            "x": self.x,
            "y": self.y,
            "size": self.size,
            "importance": self.importance,
            "color": self.color,
            "definition": self.definition[:MAX_DEFINITION_LENGTH],
            "metadata": self.metadata,
        }


@dataclass
class GraphEdge:
    """A directed, labelled link in D3 form."""

    source: str
    target: str
    label: str = ""
    weight: float = 0.5

    def to_dict(self) -> Dict[str, Any]:
        """Convert to D3-compatible dict."""
        return {
            "source": self.source,
            "target": self.target,
            "label": self.label[:MAX_LABEL_LENGTH],
            "weight": self.weight,
        }


class ConceptMapExporter:
    """Exports concept maps to visualization formats."""

    def to_d3_json(self, concept_map: ConceptMap) -> Dict[str, Any]:
        """Convert to a D3-compatible ``{nodes, links, metadata}`` structure.

        Args:
            concept_map: Generated concept map

        Returns:
            JSON-ready dictionary
        """
        nodes = [
            GraphNode(
                id=node.id,
                label=node.name,
                entity_type=node.entity_type,
                x=node.layout_x,
                y=node.layout_y,
                size=1.0 + node.importance * 0.5,
                importance=node.importance,
                definition=node.definition,
                metadata={
                    "flashcards": len(node.related_flashcard_ids),
                    "chunks": len(node.related_chunk_ids),
                    "connections": concept_map.connection_count(node.id),
                },
            )
            for node in concept_map.nodes
        ]
        links = [
            GraphEdge(
                source=edge.source_node_id,
                target=edge.target_node_id,
                label=edge.relationship_type,
                weight=edge.strength,
            )
            for edge in concept_map.edges
        ]
        return {
            "nodes": [n.to_dict() for n in nodes],
            "links": [e.to_dict() for e in links],
            "metadata": {
                "id": concept_map.id,
                "title": concept_map.title,
                "createdAt": concept_map.created_at.isoformat(),
                "sourceDocumentIds": list(concept_map.source_document_ids),
                "nodeCount": len(nodes),
                "linkCount": len(links),
            },
        }

    def to_json(self, concept_map: ConceptMap) -> str:
        """Export to a JSON string."""
        return json.dumps(self.to_d3_json(concept_map), indent=2)

    def to_mermaid(self, concept_map: ConceptMap) -> str:
        """Generate a Mermaid flowchart.

        Rule #4: Function <60 lines

        Returns:
            Mermaid diagram source (``graph LR``)
        """
        if concept_map.is_empty:
            return "graph LR\n    A[No concepts found]"

        lines = ["graph LR"]
        node_ids: Dict[str, str] = {}
        for i, node in enumerate(concept_map.nodes):
            node_id = f"N{i}"
            node_ids[node.id] = node_id
            lines.append(f'    {node_id}["{_mermaid_text(node.name)}"]')

        for edge in concept_map.edges:
            source = node_ids.get(edge.source_node_id)
            target = node_ids.get(edge.target_node_id)
            if source is None or target is None:
                continue
            label = _mermaid_text(edge.relationship_type)
            if label:
                lines.append(f'    {source} -->|"{label}"| {target}')
            else:
                lines.append(f"    {source} --> {target}")

        return "\n".join(lines)

    @staticmethod
    def check_format(output_path: Path) -> str:
        """Return the lower-cased suffix of a supported output path.

        Raises:
            ValueError: If the suffix is not supported
        """
        suffix = output_path.suffix.lower()
        if suffix not in JSON_SUFFIXES | MERMAID_SUFFIXES:
            raise ValueError(
                f"Unsupported export format '{suffix}'. Use .json, .md or .mmd"
            )
        return suffix

    def export(self, concept_map: ConceptMap, output_path: Path) -> Path:
        """Write the map to a file, choosing the format by suffix.

        ``.json`` writes D3 JSON; ``.md`` writes a fenced Mermaid block;
        ``.mmd`` writes raw Mermaid source.

        Raises:
            ValueError: If the suffix is not supported
        """
        suffix = self.check_format(output_path)
        if suffix in JSON_SUFFIXES:
            content = self.to_json(concept_map)
        elif suffix == ".md":
            content = f"# {concept_map.title}\n\n```mermaid\n{self.to_mermaid(concept_map)}\n```\n"
        else:
            content = self.to_mermaid(concept_map) + "\n"

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        logger.info("Concept map exported", path=str(output_path), format=suffix)
        return output_path


def _mermaid_text(text: str) -> str:
    """Make text safe inside a quoted Mermaid label."""
    return text.replace('"', "'").replace("\n", " ")[:MAX_LABEL_LENGTH]
