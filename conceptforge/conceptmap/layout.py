"""
Force-directed layout for concept maps.

Fruchterman-Reingold style spring embedding with fixed constants:

    repulsion  (every pair)   10000 / d^2        pushes apart
    attraction (every edge)   (d / 100) * strength   pulls together
    step                      position += force * 0.1
    bounds                    clamp to [50, w-50] x [50, h-50]

Positions live in one (n, 2) numpy array indexed by node rank; edges are
resolved to index pairs once. Each iteration computes all forces into a
separate buffer and applies them after the full sweep, so the result does
not depend on node visiting order. Coincident pairs (d == 0) contribute
no force.

Cost is O(iterations * n^2). The node cap keeps n <= 30.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

import numpy as np

from conceptforge.conceptmap.models import ConceptMap
from conceptforge.core.logging import get_logger

logger = get_logger(__name__)

REPULSION_CONSTANT = 10000.0
ATTRACTION_DISTANCE = 100.0
STEP_SIZE = 0.1
INITIAL_MARGIN = 100.0
BOUNDS_MARGIN = 50.0


def _span(extent: float, margin: float) -> Tuple[float, float]:
    """Interval [margin, extent - margin], collapsed to the midpoint if empty."""
    low, high = margin, extent - margin
    if low > high:
        low = high = extent / 2
    return low, high


class LayoutEngine:
    """Assign layout_x / layout_y to every node of a concept map."""

    def layout(
        self,
        concept_map: ConceptMap,
        width: float = 1000.0,
        height: float = 1000.0,
        iterations: int = 50,
        seed: Optional[int] = None,
    ) -> None:
        """Run the force simulation in place.

        Args:
            concept_map: Map whose nodes receive coordinates
            width: Canvas width
            height: Canvas height
            iterations: Number of simulation steps
            seed: Seed for the initial placement (None = non-reproducible)
        """
        n = len(concept_map.nodes)
        if n == 0:
            return

        rng = np.random.default_rng(seed)
        x_init, y_init = _span(width, INITIAL_MARGIN), _span(height, INITIAL_MARGIN)
        positions = rng.uniform(
            low=(x_init[0], y_init[0]), high=(x_init[1], y_init[1]), size=(n, 2)
        )

        x_bounds, y_bounds = _span(width, BOUNDS_MARGIN), _span(height, BOUNDS_MARGIN)
        lower = np.array([x_bounds[0], y_bounds[0]])
        upper = np.array([x_bounds[1], y_bounds[1]])

        sources, targets, strengths = self._edge_arrays(concept_map)
        forces = np.zeros_like(positions)

        for _ in range(iterations):
            forces.fill(0.0)
            self._add_repulsion(positions, forces)
            self._add_attraction(positions, forces, sources, targets, strengths)
            positions += forces * STEP_SIZE
            np.clip(positions, lower, upper, out=positions)

        for node, (x, y) in zip(concept_map.nodes, positions):
            node.layout_x = float(x)
            node.layout_y = float(y)

        logger.debug(
            "Layout complete", nodes=n, edges=len(sources), iterations=iterations
        )

    def _edge_arrays(
        self, concept_map: ConceptMap
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Resolve edges to (source index, target index, strength) arrays."""
        index: Dict[str, int] = {
            node.id: i for i, node in enumerate(concept_map.nodes)
        }
        sources, targets, strengths = [], [], []
        for edge in concept_map.edges:
            src = index.get(edge.source_node_id)
            tgt = index.get(edge.target_node_id)
            if src is None or tgt is None:
                continue
            sources.append(src)
            targets.append(tgt)
            strengths.append(edge.strength)

        return (
            np.array(sources, dtype=np.intp),
            np.array(targets, dtype=np.intp),
            np.array(strengths, dtype=float),
        )

    @staticmethod
    def _add_repulsion(positions: np.ndarray, forces: np.ndarray) -> None:
        """Accumulate pairwise repulsion into forces."""
        # delta[i, j] points from node i to node j
        delta = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
        distance = np.sqrt(np.sum(delta * delta, axis=-1))
        apart = distance > 0
        scale = np.zeros_like(distance)
        scale[apart] = REPULSION_CONSTANT / distance[apart] ** 3
        forces -= np.sum(delta * scale[:, :, np.newaxis], axis=1)

    @staticmethod
    def _add_attraction(
        positions: np.ndarray,
        forces: np.ndarray,
        sources: np.ndarray,
        targets: np.ndarray,
        strengths: np.ndarray,
    ) -> None:
        """Accumulate spring attraction along edges into forces."""
        if sources.size == 0:
            return
        delta = positions[targets] - positions[sources]
        distance = np.sqrt(np.sum(delta * delta, axis=-1))
        # (delta / d) * (d / 100) * strength, zero for coincident endpoints
        pull = np.where(
            (distance > 0)[:, np.newaxis],
            delta * (strengths / ATTRACTION_DISTANCE)[:, np.newaxis],
            0.0,
        )
        np.add.at(forces, sources, pull)
        np.subtract.at(forces, targets, pull)
