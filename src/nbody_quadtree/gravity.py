"""
Softened Newtonian gravity kernel and direct-summation reference.

The Barnes-Hut tree and the direct O(n^2) path share the same kernel:

    dist_sq = |delta|^2 + softening^2
    force   = delta / sqrt(dist_sq) * g * m / dist_sq

where ``m`` is the mass of the attracting body. Dividing by the target's
own mass gives the acceleration the simulations integrate.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Sequence, Tuple

import numpy as np

if TYPE_CHECKING:
    from .config import SimConfig


def point_mass_force(
    dx: float,
    dy: float,
    mass: float,
    g: float,
    softening: float,
) -> Tuple[float, float]:
    """
    Pull toward a point mass at offset (dx, dy).

    Args:
        dx, dy: Offset from the query position to the attracting mass
        mass: Attracting mass
        g: Gravitational constant
        softening: Softening length

    Returns:
        (fx, fy); zero if the softened distance is zero
    """
    dist_sq = dx * dx + dy * dy + softening * softening
    if dist_sq == 0.0:
        return 0.0, 0.0
    dist = math.sqrt(dist_sq)
    force = g * mass / dist_sq
    return dx / dist * force, dy / dist * force


def direct_force(
    target: int,
    xs: Sequence[float],
    ys: Sequence[float],
    masses: Sequence[float],
    config: SimConfig,
) -> Tuple[float, float]:
    """
    Exact pairwise force on body ``target``, excluding itself.

    Time Complexity: O(n)
    """
    x, y = xs[target], ys[target]
    fx, fy = 0.0, 0.0
    for i in range(len(xs)):
        if i == target:
            continue
        cfx, cfy = point_mass_force(xs[i] - x, ys[i] - y, masses[i], config.g, config.softening)
        fx += cfx
        fy += cfy
    return fx, fy


def direct_forces(
    xs: np.ndarray,
    ys: np.ndarray,
    masses: np.ndarray,
    config: SimConfig,
) -> np.ndarray:
    """
    Exact pairwise forces on every body.

    Args:
        xs, ys: Positions, shape (n,)
        masses: Masses, shape (n,)
        config: Supplies g and softening

    Returns:
        Array of shape (n, 2) with (fx, fy) per body

    Time Complexity: O(n^2) time and memory
    """
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    masses = np.asarray(masses, dtype=np.float64)
    n = xs.shape[0]
    forces = np.zeros((n, 2), dtype=np.float64)
    if n < 2:
        return forces

    # dx[i, j] points from body i to body j
    dx = xs[np.newaxis, :] - xs[:, np.newaxis]
    dy = ys[np.newaxis, :] - ys[:, np.newaxis]
    dist_sq = dx * dx + dy * dy + config.softening * config.softening

    with np.errstate(divide="ignore", invalid="ignore"):
        scale = config.g * masses[np.newaxis, :] / (dist_sq * np.sqrt(dist_sq))
    scale[~np.isfinite(scale)] = 0.0
    np.fill_diagonal(scale, 0.0)

    forces[:, 0] = np.sum(dx * scale, axis=1)
    forces[:, 1] = np.sum(dy * scale, axis=1)
    return forces


__all__ = ["direct_force", "direct_forces", "point_mass_force"]
