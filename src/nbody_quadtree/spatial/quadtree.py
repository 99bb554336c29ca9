"""
Quadtree implementation for Barnes-Hut gravity approximation.

The quadtree recursively subdivides 2D space into quadrants, enabling
O(n log n) approximate n-body force calculations. Nodes live in a flat
arena and refer to their children by index; the tree is rebuilt from
scratch every simulation step.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Hashable, Iterator, List, Optional, Sequence, Tuple

from ..gravity import point_mass_force
from .region import Region

if TYPE_CHECKING:
    from ..config import SimConfig

# Squared distance below which two bodies are folded into one leaf
MERGE_DISTANCE_SQ = 1e-4

# Distance floor used by the acceptance criterion
MIN_DISTANCE = 1e-4

# Subdivision depth after which new bodies are merged into the leaf they reach
MAX_DEPTH = 64

# Smallest internal region reported for visualization
MIN_GIZMO_NODE_SIZE = 2.0


class NodeKind(IntEnum):
    """Shape of a quadtree node."""

    EMPTY = 0
    LEAF = 1
    INTERNAL = 2


@dataclass
class QuadTreeNode:
    """
    A node in the quadtree arena.

    Attributes:
        bounds: Region covered by this node
        center_of_mass_x/y: Center of mass of bodies in this subtree
        mass: Total mass of bodies in this subtree
        kind: EMPTY, LEAF or INTERNAL
        body_id: Identifier of the body held by a leaf
        position_x/y: Position of the body held by a leaf (the weighted
            center once bodies have merged, always equal to center of mass)
        children: Arena indices of the four quadrants [UL, UR, LL, LR] if internal
    """

    bounds: Region

    # Aggregated properties
    center_of_mass_x: float = 0.0
    center_of_mass_y: float = 0.0
    mass: float = 0.0

    # Content
    kind: NodeKind = NodeKind.EMPTY
    body_id: Optional[Hashable] = None
    position_x: float = 0.0
    position_y: float = 0.0
    children: Optional[List[Optional[int]]] = None

    def is_empty(self) -> bool:
        """True if this node contains no bodies."""
        return self.kind == NodeKind.EMPTY

    def is_leaf(self) -> bool:
        """True if this node holds exactly one (possibly merged) body."""
        return self.kind == NodeKind.LEAF

    def is_internal(self) -> bool:
        """True if this node has been subdivided."""
        return self.kind == NodeKind.INTERNAL


class QuadTree:
    """
    Barnes-Hut quadtree for approximate gravity calculations.

    For distant clusters, the algorithm treats the cluster as a single body
    at its center of mass, reducing complexity from O(n^2) to O(n log n).
    Mass and center of mass are folded into every ancestor as each body is
    inserted, so the tree is ready for force queries as soon as the last
    insert returns.

    Usage:
        tree = QuadTree(Region(0, 0, 1000, 1000))
        for body in bodies:
            tree.insert(body.index, body.x, body.y, body.mass)

        fx, fy = tree.calculate_force(body.index, body.x, body.y, config)

    The theta parameter of the config controls the accuracy/speed tradeoff:
    - theta = 0: Exact calculation (no approximation)
    - theta = 0.5: Good balance (default)
    - theta = 1.0: Fast but less accurate
    """

    def __init__(self, bounds: Optional[Region] = None) -> None:
        """
        Initialize quadtree.

        Args:
            bounds: Root region. If None, the tree has no root until reset().
        """
        self.nodes: List[QuadTreeNode] = []
        self.root: Optional[int] = None
        self.body_count = 0
        self.merge_count = 0
        if bounds is not None:
            self.reset(bounds)

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def bounds(self) -> Optional[Region]:
        """Region covered by the root, or None before the first reset."""
        if self.root is None:
            return None
        return self.nodes[self.root].bounds

    def reset(self, bounds: Region) -> None:
        """Clear the arena and start over with a single empty root."""
        self.nodes.clear()
        self.root = len(self.nodes)
        self.nodes.append(QuadTreeNode(bounds))
        self.body_count = 0
        self.merge_count = 0

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def insert(self, body_id: Hashable, x: float, y: float, mass: float) -> None:
        """Insert a body into the quadtree. Does nothing before reset()."""
        if self.root is None:
            return
        self._insert_into(self.root, body_id, x, y, mass, 0)
        self.body_count += 1

    def _insert_into(
        self,
        index: int,
        body_id: Hashable,
        x: float,
        y: float,
        mass: float,
        depth: int,
    ) -> None:
        """Recursively insert body into subtree rooted at nodes[index]."""
        node = self.nodes[index]

        if node.kind == NodeKind.EMPTY:
            node.kind = NodeKind.LEAF
            node.body_id = body_id
            node.position_x = x
            node.position_y = y
            node.mass = mass
            node.center_of_mass_x = x
            node.center_of_mass_y = y
            return

        if node.kind == NodeKind.LEAF:
            dx = node.center_of_mass_x - x
            dy = node.center_of_mass_y - y
            if dx * dx + dy * dy < MERGE_DISTANCE_SQ or depth >= MAX_DEPTH:
                # Same location: keep the leaf, fold the new mass in
                self._fold(node, x, y, mass)
                node.position_x = node.center_of_mass_x
                node.position_y = node.center_of_mass_y
                self.merge_count += 1
                return

            existing_id = node.body_id
            existing_x = node.center_of_mass_x
            existing_y = node.center_of_mass_y
            existing_mass = node.mass

            children = self._subdivide(index)
            node.kind = NodeKind.INTERNAL
            node.children = children
            node.body_id = None

            bounds = node.bounds
            self._insert_into_child(
                children, bounds.classify(existing_x, existing_y),
                existing_id, existing_x, existing_y, existing_mass, depth,
            )
            self._insert_into_child(
                children, bounds.classify(x, y), body_id, x, y, mass, depth
            )

            # Aggregate now holds the existing leaf; fold in the new body
            self._fold(node, x, y, mass)
            return

        assert node.children is not None
        self._insert_into_child(
            node.children, node.bounds.classify(x, y), body_id, x, y, mass, depth
        )
        self._fold(node, x, y, mass)

    def _insert_into_child(
        self,
        children: List[Optional[int]],
        quadrant: int,
        body_id: Hashable,
        x: float,
        y: float,
        mass: float,
        depth: int,
    ) -> None:
        """Insert body into one of the pre-allocated children."""
        child = children[quadrant]
        assert child is not None, "internal node without allocated quadrant"
        self._insert_into(child, body_id, x, y, mass, depth + 1)

    def _subdivide(self, index: int) -> List[Optional[int]]:
        """Allocate four empty children for nodes[index] and return their indices."""
        bounds = self.nodes[index].bounds
        children: List[Optional[int]] = []
        for quadrant in range(4):
            children.append(len(self.nodes))
            self.nodes.append(QuadTreeNode(bounds.sub_region(quadrant)))
        return children

    @staticmethod
    def _fold(node: QuadTreeNode, x: float, y: float, mass: float) -> None:
        """Add a point mass to a node's aggregate mass and center of mass."""
        total_mass = node.mass + mass
        node.center_of_mass_x = (node.center_of_mass_x * node.mass + x * mass) / total_mass
        node.center_of_mass_y = (node.center_of_mass_y * node.mass + y * mass) / total_mass
        node.mass = total_mass

    # -------------------------------------------------------------------------
    # Force evaluation
    # -------------------------------------------------------------------------

    def calculate_force(
        self,
        target_id: Hashable,
        x: float,
        y: float,
        config: SimConfig,
    ) -> Tuple[float, float]:
        """
        Calculate approximate gravitational pull at (x, y).

        Uses Barnes-Hut approximation: if a cluster is sufficiently far away
        (width/distance < theta), treat it as a single mass at its center of
        mass. The leaf holding ``target_id`` contributes nothing.

        Args:
            target_id: Body to exclude (the body the force acts on)
            x, y: Query position
            config: Supplies g, theta and softening

        Returns:
            (fx, fy) pointing toward attracting mass. Divide by the target's
            mass to get its acceleration.
        """
        if self.root is None:
            return 0.0, 0.0
        return self._calculate_force(
            self.root, target_id, x, y, config.g, config.theta, config.softening
        )

    def _calculate_force(
        self,
        index: int,
        target_id: Hashable,
        x: float,
        y: float,
        g: float,
        theta: float,
        softening: float,
    ) -> Tuple[float, float]:
        """Recursively calculate force contribution from nodes[index]."""
        node = self.nodes[index]

        if node.kind == NodeKind.EMPTY:
            return 0.0, 0.0

        dx = node.center_of_mass_x - x
        dy = node.center_of_mass_y - y

        if node.kind == NodeKind.LEAF:
            if node.body_id == target_id:
                return 0.0, 0.0
            # Direct body-body interaction
            return point_mass_force(dx, dy, node.mass, g, softening)

        dist = max(math.sqrt(dx * dx + dy * dy), MIN_DISTANCE)

        # Barnes-Hut criterion: s/d < theta
        if node.bounds.width / dist < theta:
            force = g * node.mass / (dist * dist + softening * softening)
            return dx / dist * force, dy / dist * force

        # Node is too close - recurse into children
        fx, fy = 0.0, 0.0
        assert node.children is not None
        for child in node.children:
            if child is not None:
                cfx, cfy = self._calculate_force(
                    child, target_id, x, y, g, theta, softening
                )
                fx += cfx
                fy += cfy
        return fx, fy

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    def internal_regions(self, min_size: float = MIN_GIZMO_NODE_SIZE) -> Iterator[Region]:
        """
        Yield the regions of internal nodes, for drawing the subdivision.

        Args:
            min_size: Skip regions whose larger side is below this size
                (their descendants are still visited)
        """
        if self.root is None:
            return
        stack = [self.root]
        while stack:
            node = self.nodes[stack.pop()]
            if node.kind != NodeKind.INTERNAL or node.children is None:
                continue
            if max(node.bounds.width, node.bounds.height) >= min_size:
                yield node.bounds
            stack.extend(child for child in node.children if child is not None)

    @classmethod
    def from_bodies(
        cls,
        bodies: Sequence[Any],
        padding: float = 0.1,
        default_bounds: Optional[Region] = None,
    ) -> QuadTree:
        """
        Build a quadtree from objects with index, x, y and mass attributes.

        Args:
            bodies: Bodies to insert (index falls back to list position)
            padding: Relative padding of the square root region
            default_bounds: Root region used when there are no bodies

        Returns:
            QuadTree with all bodies inserted
        """
        if not bodies:
            return cls(default_bounds if default_bounds is not None else Region(0, 0, 1, 1))

        bounds = Region.enclosing(
            min(b.x for b in bodies),
            min(b.y for b in bodies),
            max(b.x for b in bodies),
            max(b.y for b in bodies),
            padding=padding,
        )
        tree = cls(bounds)
        for i, body in enumerate(bodies):
            idx = body.index if getattr(body, "index", None) is not None else i
            tree.insert(idx, body.x, body.y, getattr(body, "mass", 1.0))
        return tree


__all__ = [
    "MAX_DEPTH",
    "MERGE_DISTANCE_SQ",
    "MIN_DISTANCE",
    "MIN_GIZMO_NODE_SIZE",
    "NodeKind",
    "QuadTree",
    "QuadTreeNode",
]
