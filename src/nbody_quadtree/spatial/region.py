"""
Axis-aligned regions used to partition space in the quadtree.

Quadrants are numbered with y growing upward:
    0 = upper-left, 1 = upper-right, 2 = lower-left, 3 = lower-right
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..validation import validate_region_size

# (x sign, y sign) of each quadrant's center offset
QUADRANT_SIGNS: Tuple[Tuple[int, int], ...] = ((-1, 1), (1, 1), (-1, -1), (1, -1))


@dataclass(frozen=True)
class Region:
    """
    Axis-aligned rectangle, square in practice.

    Attributes:
        x, y: Center of the region
        width, height: Full extent of the region
    """

    x: float
    y: float
    width: float
    height: float

    def classify(self, x: float, y: float) -> int:
        """
        Get quadrant index for a point.

        Points on the center lines fall on the left/lower side.

        Returns:
            0=upper-left, 1=upper-right, 2=lower-left, 3=lower-right
        """
        right = x > self.x
        top = y > self.y
        return (0 if top else 2) + (1 if right else 0)

    def sub_region(self, quadrant: int) -> Region:
        """
        Get the quarter-size region covering a quadrant.

        Raises:
            ValueError: If quadrant is not in 0..3
        """
        if not 0 <= quadrant < 4:
            raise ValueError(f"quadrant must be in 0..3, got {quadrant}")
        sx, sy = QUADRANT_SIGNS[quadrant]
        half_w = self.width / 2
        half_h = self.height / 2
        return Region(
            self.x + sx * half_w / 2,
            self.y + sy * half_h / 2,
            half_w,
            half_h,
        )

    def contains(self, x: float, y: float) -> bool:
        """Check if point (x, y) is within this region (edges included)."""
        return abs(x - self.x) <= self.width / 2 and abs(y - self.y) <= self.height / 2

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) of the region."""
        hw = self.width / 2
        hh = self.height / 2
        return (self.x - hw, self.y - hh, self.x + hw, self.y + hh)

    @classmethod
    def square(cls, x: float, y: float, size: float) -> Region:
        """Build a square region, validating its size."""
        width, height = validate_region_size(size, size)
        return cls(float(x), float(y), width, height)

    @classmethod
    def enclosing(
        cls,
        min_x: float,
        min_y: float,
        max_x: float,
        max_y: float,
        padding: float = 0.1,
        min_size: float = 1.0,
    ) -> Region:
        """
        Build the square region used as a tree root.

        Each side of the bounding box is floored at ``min_size`` so that a
        single body (or a set of coincident bodies) still gets a usable
        region. The larger side is then expanded by ``padding``.

        Args:
            min_x, min_y, max_x, max_y: Bounding box of the bodies
            padding: Relative expansion of the larger side
            min_size: Lower bound on each side before padding

        Returns:
            Square region centered on the bounding box
        """
        width = max(max_x - min_x, min_size)
        height = max(max_y - min_y, min_size)
        size = max(width, height) * (1.0 + padding)
        return cls.square((min_x + max_x) / 2, (min_y + max_y) / 2, size)


__all__ = ["QUADRANT_SIGNS", "Region"]
