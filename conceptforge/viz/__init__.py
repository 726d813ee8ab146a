"""Visualization exports for concept maps."""

from conceptforge.viz.graph_export import (
    ENTITY_COLORS,
    ConceptMapExporter,
    GraphEdge,
    GraphNode,
)

__all__ = ["ENTITY_COLORS", "ConceptMapExporter", "GraphEdge", "GraphNode"]
