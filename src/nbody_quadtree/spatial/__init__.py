"""
Spatial data structures for efficient force calculations.

Provides the region type and the arena-backed quadtree used for
Barnes-Hut O(n log n) gravity approximation.
"""

from .quadtree import NodeKind, QuadTree, QuadTreeNode
from .region import Region

__all__ = ["NodeKind", "QuadTree", "QuadTreeNode", "Region"]
