"""Concept map data model.

The concept map is a root aggregate: it owns its nodes and edges, and
edges refer to nodes by id rather than by reference. This keeps the
structure free of reference cycles and makes referential integrity a
simple set-membership check (see ConceptMap.validate).

    ConceptMap
    ├── nodes: List[ConceptNode]   # rank order (descending frequency)
    └── edges: List[ConceptEdge]   # source_node_id / target_node_id

Entity is the extraction-time record that each ConceptNode is built from;
it is never stored on the map.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from conceptforge.core.exceptions import ConceptMapValidationError

MAX_CONCEPT_NODES = 30


class EntityType(str, Enum):
    """Closed set of concept categories."""

    PERSON = "Person"
    PLACE = "Place"
    ORGANIZATION = "Organization"
    PROCESS = "Process"
    FIELD = "Field"
    CONCEPT = "Concept"


def clamp_unit(value: float) -> float:
    """Clamp a value to [0, 1]."""
    return max(0.0, min(1.0, value))


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Entity:
    """A candidate concept found in source text.

    Attributes:
        name: Surface string as it appears in the text
        type: Inferred category
        frequency: Occurrence count (always >= 2 once extracted)
        first_offset: Character offset of the first occurrence
    """

    name: str
    type: EntityType
    frequency: int
    first_offset: int = 0


@dataclass
class ConceptNode:
    """A named vertex in the concept map.

    name and definition are fixed at creation. importance is set by the
    ImportanceScorer and layout_x/layout_y by the LayoutEngine.
    """

    name: str
    entity_type: EntityType
    definition: str
    id: str = field(default_factory=_new_id)
    related_flashcard_ids: Set[str] = field(default_factory=set)
    related_chunk_ids: Set[str] = field(default_factory=set)
    importance: float = 0.5
    layout_x: float = 0.0
    layout_y: float = 0.0

    @property
    def related_count(self) -> int:
        """Supporting evidence volume: flashcards plus chunks."""
        return len(self.related_flashcard_ids) + len(self.related_chunk_ids)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "entity_type": self.entity_type.value,
            "definition": self.definition,
            "related_flashcard_ids": sorted(self.related_flashcard_ids),
            "related_chunk_ids": sorted(self.related_chunk_ids),
            "importance": self.importance,
            "layout_x": self.layout_x,
            "layout_y": self.layout_y,
        }


@dataclass(frozen=True)
class ConceptEdge:
    """A directed, typed, weighted relationship between two nodes."""

    source_node_id: str
    target_node_id: str
    relationship_type: str
    strength: float = 0.5
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        strength = self.strength
        if not isinstance(strength, (int, float)) or math.isnan(strength):
            strength = 0.5
        # frozen dataclass: bypass __setattr__ for normalisation
        object.__setattr__(self, "strength", clamp_unit(float(strength)))

    def touches(self, node_id: str) -> bool:
        """True if node_id is either endpoint."""
        return self.source_node_id == node_id or self.target_node_id == node_id

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "source_node_id": self.source_node_id,
            "target_node_id": self.target_node_id,
            "relationship_type": self.relationship_type,
            "strength": self.strength,
        }


@dataclass
class ConceptMap:
    """Root aggregate of a generated knowledge map."""

    title: str
    source_document_ids: List[str] = field(default_factory=list)
    nodes: List[ConceptNode] = field(default_factory=list)
    edges: List[ConceptEdge] = field(default_factory=list)
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def get_node(self, node_id: str) -> Optional[ConceptNode]:
        """Look up a node by id."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def find_node(self, name: str) -> Optional[ConceptNode]:
        """Look up a node by name, ignoring case."""
        key = name.casefold()
        for node in self.nodes:
            if node.name.casefold() == key:
                return node
        return None

    def connection_count(self, node_id: str) -> int:
        """Number of edges where node_id is source or target."""
        return sum(1 for edge in self.edges if edge.touches(node_id))

    def validate(self, max_nodes: int = MAX_CONCEPT_NODES) -> None:
        """Check structural invariants.

        Raises:
            ConceptMapValidationError: Listing every violated invariant
        """
        problems: List[str] = []

        if len(self.nodes) > max_nodes:
            problems.append(f"{len(self.nodes)} nodes exceeds cap of {max_nodes}")

        node_ids: Set[str] = set()
        names: Set[str] = set()
        for node in self.nodes:
            key = node.name.casefold()
            if key in names:
                problems.append(f"duplicate node name '{node.name}'")
            names.add(key)
            node_ids.add(node.id)
            if not 0.0 <= node.importance <= 1.0:
                problems.append(f"importance of '{node.name}' out of range")

        for edge in self.edges:
            if edge.source_node_id not in node_ids:
                problems.append(f"edge {edge.id} has unknown source")
            if edge.target_node_id not in node_ids:
                problems.append(f"edge {edge.id} has unknown target")

        if problems:
            raise ConceptMapValidationError(
                f"Concept map '{self.title}' is invalid: {'; '.join(problems)}",
                problems=problems,
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "created_at": self.created_at.isoformat(),
            "source_document_ids": list(self.source_document_ids),
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }
